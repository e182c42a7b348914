"""
Symmetric Key Service

AES-256-CBC encryption for payloads of any size.

Ciphertext format (Base64 text of):
    [iv (16 bytes) | cbc ciphertext | hmac tag (32 bytes)]

Security features:
- Fresh random IV on every call, never cached or reused
- Encrypt-then-MAC: HMAC-SHA256 over iv || cbc ciphertext
- Tag verified in constant time BEFORE unpadding (no padding oracle)
- Encryption and MAC sub-keys derived from the 256-bit key with HKDF
"""

import hmac
import hashlib
import secrets
from dataclasses import dataclass, field
from typing import Tuple, Union

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.backends import default_backend

from ..core_crypto.codec import encode, decode
from ..core_crypto.errors import DecryptionError, InvalidPlaintextError, KeyFormatError


# Constants
AES_KEY_SIZE = 32       # 256 bits
IV_SIZE = 16            # AES block size
BLOCK_BITS = 128        # PKCS#7 padding unit
TAG_SIZE = 32           # HMAC-SHA256
SUBKEY_INFO = b"relayvault-sym-v1"

# Shortest valid buffer: IV, one padded block, tag
MIN_CIPHERTEXT_SIZE = IV_SIZE + BLOCK_BITS // 8 + TAG_SIZE


@dataclass(frozen=True)
class SymmetricKey:
    """256-bit AES key. The raw bytes never appear in repr()."""
    raw: bytes = field(repr=False)

    def __post_init__(self):
        if not isinstance(self.raw, bytes) or len(self.raw) != AES_KEY_SIZE:
            raise KeyFormatError(f"Symmetric key must be {AES_KEY_SIZE} bytes")

    @classmethod
    def generate(cls) -> 'SymmetricKey':
        return cls(secrets.token_bytes(AES_KEY_SIZE))

    def subkeys(self) -> Tuple[bytes, bytes]:
        """Derive (encryption_key, mac_key) with HKDF-SHA256."""
        hkdf = HKDF(
            algorithm=hashes.SHA256(),
            length=2 * AES_KEY_SIZE,
            salt=None,
            info=SUBKEY_INFO,
            backend=default_backend()
        )
        material = hkdf.derive(self.raw)
        return material[:AES_KEY_SIZE], material[AES_KEY_SIZE:]


def create_random_symmetric_key() -> SymmetricKey:
    """Generate a fresh random AES-256 key."""
    return SymmetricKey.generate()


def export_sym_key(key: SymmetricKey) -> str:
    """Export a symmetric key as Base64 of its 32 raw bytes."""
    return encode(key.raw)


def import_sym_key(str_key: str) -> SymmetricKey:
    """
    Import a Base64 symmetric key.

    Raises:
        KeyFormatError: If the text is not Base64 of exactly 32 bytes
    """
    try:
        raw = decode(str_key)
    except ValueError as exc:
        raise KeyFormatError("Invalid symmetric key") from exc
    return SymmetricKey(raw)


def generate_iv() -> bytes:
    """
    Generate a random IV for AES-CBC.

    CRITICAL: Drawn fresh for every message!
    """
    return secrets.token_bytes(IV_SIZE)


def _compute_tag(mac_key: bytes, data: bytes) -> bytes:
    return hmac.new(mac_key, data, hashlib.sha256).digest()


def _as_key(key: Union[SymmetricKey, str]) -> SymmetricKey:
    if isinstance(key, str):
        return import_sym_key(key)
    return key


def sym_encrypt(key: Union[SymmetricKey, str], data: str) -> str:
    """
    Encrypt a text message with AES-256-CBC.

    Args:
        key: Symmetric key (or its exported text)
        data: Plaintext string, any length

    Returns:
        Base64 of iv || ciphertext || tag

    Raises:
        InvalidPlaintextError: If data cannot be encoded as UTF-8
    """
    key = _as_key(key)
    enc_key, mac_key = key.subkeys()
    iv = generate_iv()

    try:
        raw = data.encode('utf-8')
    except UnicodeEncodeError:
        raise InvalidPlaintextError("Plaintext is not valid UTF-8 text") from None

    padder = padding.PKCS7(BLOCK_BITS).padder()
    padded = padder.update(raw) + padder.finalize()

    encryptor = Cipher(algorithms.AES(enc_key), modes.CBC(iv), backend=default_backend()).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()

    body = iv + ciphertext
    return encode(body + _compute_tag(mac_key, body))


def sym_decrypt(str_key: Union[str, SymmetricKey], encrypted_data: str) -> str:
    """
    Decrypt a message produced by sym_encrypt().

    Args:
        str_key: Exported symmetric key (or a SymmetricKey)
        encrypted_data: Base64 of iv || ciphertext || tag

    Returns:
        Plaintext string

    Raises:
        KeyFormatError: If the key text is malformed
        DecryptionError: On wrong key, tampering or malformed ciphertext
    """
    key = _as_key(str_key)

    try:
        buffer = decode(encrypted_data)
    except ValueError:
        raise DecryptionError() from None

    body_len = len(buffer) - IV_SIZE - TAG_SIZE
    if len(buffer) < MIN_CIPHERTEXT_SIZE or body_len % (BLOCK_BITS // 8):
        raise DecryptionError()

    body, tag = buffer[:-TAG_SIZE], buffer[-TAG_SIZE:]
    iv, ciphertext = body[:IV_SIZE], body[IV_SIZE:]

    enc_key, mac_key = key.subkeys()
    if not hmac.compare_digest(_compute_tag(mac_key, body), tag):
        raise DecryptionError()

    try:
        decryptor = Cipher(algorithms.AES(enc_key), modes.CBC(iv), backend=default_backend()).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()

        unpadder = padding.PKCS7(BLOCK_BITS).unpadder()
        plaintext = unpadder.update(padded) + unpadder.finalize()
        return plaintext.decode('utf-8')
    except ValueError:
        raise DecryptionError() from None
