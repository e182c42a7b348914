"""
Asymmetric Key Service

RSA-OAEP key pairs for small secrets (symmetric keys, tokens):
- 2048-bit keys, public exponent 65537
- OAEP padding with SHA-256 (MGF1 also SHA-256)
- Public keys exported as SubjectPublicKeyInfo DER, private keys as
  PKCS#8 DER, both wrapped in Base64 text

Plaintext limit:
    key_size_bytes - 2 * hash_len - 2   (190 bytes for RSA-2048/SHA-256)

Data passed to rsa_encrypt() and returned by rsa_decrypt() is Base64
text of the raw bytes, so an exported symmetric key can be encrypted
as-is.
"""

from dataclasses import dataclass
from typing import Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa, padding
from cryptography.hazmat.backends import default_backend

from ..core_crypto.codec import encode, decode
from ..core_crypto.errors import (
    DecodingError,
    DecryptionError,
    KeyFormatError,
    PayloadTooLargeError,
)


# RSA configuration
# - key_size: modulus length in bits
# - public_exponent: fixed explicitly, never left to a library default
RSA_CONFIG = {
    'key_size': 2048,
    'public_exponent': 65537,
}

OAEP_HASH = hashes.SHA256
HASH_SIZE = 32  # SHA-256 digest length


def _oaep() -> padding.OAEP:
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=OAEP_HASH()),
        algorithm=OAEP_HASH(),
        label=None
    )


@dataclass
class KeyPair:
    """RSA key pair container."""
    public_key: rsa.RSAPublicKey
    private_key: Optional[rsa.RSAPrivateKey]

    @classmethod
    def generate(cls, **kwargs) -> 'KeyPair':
        """
        Generate a new RSA key pair.

        Args:
            **kwargs: Override RSA_CONFIG entries (key_size, public_exponent)
        """
        config = RSA_CONFIG.copy()
        config.update(kwargs)

        private_key = rsa.generate_private_key(
            public_exponent=config['public_exponent'],
            key_size=config['key_size'],
            backend=default_backend()
        )
        return cls(private_key.public_key(), private_key)

    def public_text(self) -> str:
        """Public key as Base64 SubjectPublicKeyInfo."""
        return export_pub_key(self.public_key)

    def private_text(self) -> Optional[str]:
        """Private key as Base64 PKCS#8, or None for a public-only pair."""
        return export_prv_key(self.private_key)


def generate_rsa_key_pair() -> KeyPair:
    """Generate a fresh 2048-bit RSA-OAEP key pair."""
    return KeyPair.generate()


def export_pub_key(key: rsa.RSAPublicKey) -> str:
    """
    Export a public key to Base64 text.

    Args:
        key: RSA public key

    Returns:
        Base64 of the SubjectPublicKeyInfo DER structure
    """
    der = key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    )
    return encode(der)


def export_prv_key(key: Optional[rsa.RSAPrivateKey]) -> Optional[str]:
    """
    Export a private key to Base64 text.

    Args:
        key: RSA private key, or None

    Returns:
        Base64 of the PKCS#8 DER structure, or None when key is None
    """
    if key is None:
        return None
    der = key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    )
    return encode(der)


def import_pub_key(str_key: str) -> rsa.RSAPublicKey:
    """
    Import a Base64 SubjectPublicKeyInfo public key.

    The returned key can only encrypt.

    Raises:
        KeyFormatError: If the text is not an RSA public key
    """
    try:
        key = serialization.load_der_public_key(decode(str_key), backend=default_backend())
    except (DecodingError, ValueError, UnsupportedAlgorithm) as exc:
        raise KeyFormatError("Invalid RSA public key") from exc

    if not isinstance(key, rsa.RSAPublicKey):
        raise KeyFormatError(f"Expected RSA public key, got {type(key).__name__}")
    return key


def import_prv_key(str_key: str) -> rsa.RSAPrivateKey:
    """
    Import a Base64 PKCS#8 private key.

    The returned key is used for decryption only.

    Raises:
        KeyFormatError: If the text is not an RSA private key
    """
    try:
        key = serialization.load_der_private_key(
            decode(str_key),
            password=None,
            backend=default_backend()
        )
    except (DecodingError, ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyFormatError("Invalid RSA private key") from exc

    if not isinstance(key, rsa.RSAPrivateKey):
        raise KeyFormatError(f"Expected RSA private key, got {type(key).__name__}")
    return key


def max_plaintext_size(key: Union[rsa.RSAPublicKey, rsa.RSAPrivateKey]) -> int:
    """Largest plaintext in bytes that RSA-OAEP/SHA-256 accepts for key."""
    return key.key_size // 8 - 2 * HASH_SIZE - 2


def rsa_encrypt(b64_data: str, str_public_key: str) -> str:
    """
    Encrypt data for the holder of a public key.

    Args:
        b64_data: Base64 text of the plaintext bytes
        str_public_key: Recipient's exported public key

    Returns:
        Base64 ciphertext

    Raises:
        PayloadTooLargeError: If plaintext exceeds max_plaintext_size()
        KeyFormatError: If the public key cannot be imported
        DecodingError: If b64_data is not valid Base64
    """
    public_key = import_pub_key(str_public_key)
    data = decode(b64_data)

    # Check the bound up front instead of relying on the OAEP failure
    limit = max_plaintext_size(public_key)
    if len(data) > limit:
        raise PayloadTooLargeError(len(data), limit)

    return encode(public_key.encrypt(data, _oaep()))


def rsa_decrypt(data: str, private_key: Union[rsa.RSAPrivateKey, str]) -> str:
    """
    Decrypt a ciphertext produced by rsa_encrypt().

    Args:
        data: Base64 ciphertext
        private_key: RSA private key (or its exported text)

    Returns:
        Base64 text of the plaintext bytes

    Raises:
        DecryptionError: On wrong key, tampering or malformed ciphertext
    """
    if isinstance(private_key, str):
        private_key = import_prv_key(private_key)

    try:
        ciphertext = decode(data)
        plaintext = private_key.decrypt(ciphertext, _oaep())
    except ValueError:
        raise DecryptionError() from None

    return encode(plaintext)
