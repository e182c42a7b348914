"""
Unit tests for the RSA-OAEP key service.

Tests:
- Key generation parameters
- SPKI / PKCS#8 export and import
- Encryption roundtrip and the 190-byte bound
- Wrong key rejection
"""

import os
import pytest

from cryptography.hazmat.primitives.asymmetric import rsa, ec

from relayvault.core_crypto.codec import encode, decode
from relayvault.core_crypto.errors import (
    KeyFormatError, PayloadTooLargeError, DecryptionError
)
from relayvault.keys.rsa_keys import (
    KeyPair, generate_rsa_key_pair, export_pub_key, export_prv_key,
    import_pub_key, import_prv_key, max_plaintext_size,
    rsa_encrypt, rsa_decrypt,
)
from relayvault.keys.symmetric import create_random_symmetric_key, export_sym_key


@pytest.fixture(scope="module")
def key_pair():
    return generate_rsa_key_pair()


@pytest.fixture(scope="module")
def other_key_pair():
    return generate_rsa_key_pair()


class TestKeyGeneration:
    """Tests for RSA key pair generation."""

    def test_generate_keypair(self, key_pair):
        """Key pair should be 2048-bit RSA with e = 65537."""
        assert isinstance(key_pair.private_key, rsa.RSAPrivateKey)
        assert isinstance(key_pair.public_key, rsa.RSAPublicKey)
        assert key_pair.public_key.key_size == 2048
        assert key_pair.public_key.public_numbers().e == 65537

    def test_independent_pairs(self, key_pair, other_key_pair):
        """Each call should produce a different key."""
        assert key_pair.public_text() != other_key_pair.public_text()

    def test_config_override(self):
        """RSA_CONFIG entries can be overridden per call."""
        kp = KeyPair.generate(key_size=1024)
        assert kp.public_key.key_size == 1024

    def test_max_plaintext_size(self, key_pair):
        """RSA-2048 with SHA-256 OAEP carries at most 190 bytes."""
        assert max_plaintext_size(key_pair.public_key) == 190


class TestKeyExport:
    """Tests for exporting and importing keys."""

    def test_public_roundtrip(self, key_pair):
        text = export_pub_key(key_pair.public_key)
        imported = import_pub_key(text)
        assert export_pub_key(imported) == text

    def test_private_roundtrip(self, key_pair):
        text = export_prv_key(key_pair.private_key)
        imported = import_prv_key(text)
        assert export_prv_key(imported) == text

    def test_export_private_none(self):
        """Exporting a missing private key gives None, not an error."""
        assert export_prv_key(None) is None

    def test_public_only_pair(self, key_pair):
        pair = KeyPair(key_pair.public_key, None)
        assert pair.private_text() is None

    def test_public_text_is_spki_der(self, key_pair):
        """Exported public key is Base64 DER (starts with a SEQUENCE tag)."""
        der = decode(key_pair.public_text())
        assert der[0] == 0x30

    def test_imported_public_key_cannot_decrypt(self, key_pair):
        """Imported public keys are encrypt-only."""
        imported = import_pub_key(key_pair.public_text())
        assert not hasattr(imported, "decrypt")

    def test_imported_private_key_decrypts(self, key_pair):
        """Imported private key decrypts what the original public key encrypted."""
        imported = import_prv_key(key_pair.private_text())
        message = encode(b"short secret")
        ciphertext = rsa_encrypt(message, key_pair.public_text())
        assert rsa_decrypt(ciphertext, imported) == message

    def test_garbage_public_key_rejected(self):
        with pytest.raises(KeyFormatError):
            import_pub_key(encode(b"not a key"))

    def test_malformed_base64_public_key_rejected(self):
        with pytest.raises(KeyFormatError):
            import_pub_key("%%%")

    def test_private_key_text_rejected_as_public(self, key_pair):
        with pytest.raises(KeyFormatError):
            import_pub_key(key_pair.private_text())

    def test_public_key_text_rejected_as_private(self, key_pair):
        with pytest.raises(KeyFormatError):
            import_prv_key(key_pair.public_text())

    def test_non_rsa_key_rejected(self):
        """An EC key in SPKI form is the wrong algorithm."""
        from cryptography.hazmat.primitives import serialization
        ec_key = ec.generate_private_key(ec.SECP256R1())
        der = ec_key.public_key().public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo
        )
        with pytest.raises(KeyFormatError):
            import_pub_key(encode(der))


class TestRSAEncryption:
    """Tests for rsa_encrypt / rsa_decrypt."""

    def test_encrypt_decrypt(self, key_pair):
        message = encode(b"Hello, relay!")
        ciphertext = rsa_encrypt(message, key_pair.public_text())
        assert rsa_decrypt(ciphertext, key_pair.private_key) == message

    def test_decrypt_with_private_key_text(self, key_pair):
        message = encode(b"token")
        ciphertext = rsa_encrypt(message, key_pair.public_text())
        assert rsa_decrypt(ciphertext, key_pair.private_text()) == message

    def test_empty_plaintext(self, key_pair):
        ciphertext = rsa_encrypt("", key_pair.public_text())
        assert rsa_decrypt(ciphertext, key_pair.private_key) == ""

    def test_max_size_plaintext(self, key_pair):
        """Exactly 190 bytes should work."""
        message = encode(os.urandom(190))
        ciphertext = rsa_encrypt(message, key_pair.public_text())
        assert rsa_decrypt(ciphertext, key_pair.private_key) == message

    def test_oversized_plaintext_rejected(self, key_pair):
        """191 bytes should raise PayloadTooLargeError."""
        with pytest.raises(PayloadTooLargeError) as exc_info:
            rsa_encrypt(encode(os.urandom(191)), key_pair.public_text())
        assert exc_info.value.limit == 190
        assert exc_info.value.size == 191

    def test_ciphertext_is_randomized(self, key_pair):
        """OAEP is randomized: same plaintext, different ciphertexts."""
        message = encode(b"same")
        c1 = rsa_encrypt(message, key_pair.public_text())
        c2 = rsa_encrypt(message, key_pair.public_text())
        assert c1 != c2

    def test_ciphertext_length(self, key_pair):
        ciphertext = rsa_encrypt(encode(b"x"), key_pair.public_text())
        assert len(decode(ciphertext)) == 256

    def test_wrapped_symmetric_key(self, key_pair):
        """An exported AES key can be encrypted as-is."""
        sym_text = export_sym_key(create_random_symmetric_key())
        ciphertext = rsa_encrypt(sym_text, key_pair.public_text())
        assert rsa_decrypt(ciphertext, key_pair.private_key) == sym_text

    def test_wrong_key_rejected(self, key_pair, other_key_pair):
        ciphertext = rsa_encrypt(encode(b"secret"), key_pair.public_text())
        with pytest.raises(DecryptionError):
            rsa_decrypt(ciphertext, other_key_pair.private_key)

    def test_malformed_ciphertext_rejected(self, key_pair):
        with pytest.raises(DecryptionError):
            rsa_decrypt("not base64!", key_pair.private_key)

    def test_invalid_public_key_rejected(self):
        with pytest.raises(KeyFormatError):
            rsa_encrypt(encode(b"data"), encode(b"junk"))

    def test_non_canonical_ciphertext_rejected(self, key_pair):
        """A text differing only in the unused bits before '==' is not accepted."""
        ciphertext = rsa_encrypt(encode(b"secret"), key_pair.public_text())
        assert ciphertext.endswith("==")
        last = ciphertext[-3]
        alphabet = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
        swapped = alphabet[alphabet.index(last) ^ 1]
        with pytest.raises(DecryptionError):
            rsa_decrypt(ciphertext[:-3] + swapped + "==", key_pair.private_key)
