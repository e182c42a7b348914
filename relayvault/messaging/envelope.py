"""
Sealed Envelope Module

Envelope encryption built on the two key services:
1. Generate a fresh AES-256 key for this message only
2. Encrypt the payload with it (sym_encrypt)
3. Encrypt the exported AES key with the recipient's RSA key (rsa_encrypt)

Envelope Format (Base64 text of):
    [version (1) | key_len (2) | encrypted_key | ct_len (4) | ciphertext]

Only the recipient's private key can recover the AES key, and the AES
key is never reused across envelopes.
"""

import struct
from dataclasses import dataclass
from typing import Optional, Union

from cryptography.hazmat.primitives.asymmetric import rsa

from ..core_crypto.codec import encode, decode
from ..core_crypto.errors import DecodingError, DecryptionError, KeyFormatError
from ..integration.event_logger import EventLogger
from ..keys.rsa_keys import rsa_encrypt, rsa_decrypt
from ..keys.symmetric import (
    create_random_symmetric_key,
    export_sym_key,
    sym_encrypt,
    sym_decrypt,
)


# Constants
ENVELOPE_VERSION = 0x01
_HEADER = struct.Struct('>BH')   # version, encrypted key length
_CT_LEN = struct.Struct('>I')    # ciphertext length


@dataclass(frozen=True)
class SealedEnvelope:
    """
    Container for the two halves of a sealed message.

    Both fields are Base64 text as produced by the key services.
    """
    encrypted_key: str    # rsa_encrypt(export_sym_key(k), recipient)
    ciphertext: str       # sym_encrypt(k, plaintext)

    def to_bytes(self) -> bytes:
        """Serialize with length prefixes."""
        key_bytes = decode(self.encrypted_key)
        ct_bytes = decode(self.ciphertext)
        return (
            _HEADER.pack(ENVELOPE_VERSION, len(key_bytes)) +
            key_bytes +
            _CT_LEN.pack(len(ct_bytes)) +
            ct_bytes
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> 'SealedEnvelope':
        """
        Deserialize from bytes.

        Raises:
            DecodingError: On unknown version or inconsistent lengths
        """
        offset = 0

        if len(data) < _HEADER.size:
            raise DecodingError("Envelope too short")
        version, key_len = _HEADER.unpack_from(data, offset)
        offset += _HEADER.size
        if version != ENVELOPE_VERSION:
            raise DecodingError(f"Unsupported envelope version {version}")

        key_bytes = data[offset:offset + key_len]
        offset += key_len

        if len(key_bytes) != key_len or len(data) < offset + _CT_LEN.size:
            raise DecodingError("Truncated envelope")
        (ct_len,) = _CT_LEN.unpack_from(data, offset)
        offset += _CT_LEN.size

        ct_bytes = data[offset:]
        if len(ct_bytes) != ct_len:
            raise DecodingError("Envelope length mismatch")

        return cls(encode(key_bytes), encode(ct_bytes))

    def to_text(self) -> str:
        """Serialize to a single Base64 string."""
        return encode(self.to_bytes())

    @classmethod
    def from_text(cls, text: str) -> 'SealedEnvelope':
        """Deserialize from a Base64 string."""
        return cls.from_bytes(decode(text))


def seal_envelope(plaintext: str, recipient_public_key: str,
                  event_logger: Optional[EventLogger] = None) -> SealedEnvelope:
    """
    Encrypt a message of any length for a recipient.

    Args:
        plaintext: Message to encrypt
        recipient_public_key: Recipient's exported RSA public key
        event_logger: Optional audit log that records the seal

    Returns:
        SealedEnvelope holding the wrapped key and the ciphertext
    """
    sym_key = create_random_symmetric_key()
    ciphertext = sym_encrypt(sym_key, plaintext)
    encrypted_key = rsa_encrypt(export_sym_key(sym_key), recipient_public_key)

    if event_logger is not None:
        event_logger.log_envelope_sealed(recipient_public_key, len(plaintext))
    return SealedEnvelope(encrypted_key, ciphertext)


def open_envelope(envelope: Union[SealedEnvelope, str],
                  private_key: Union[rsa.RSAPrivateKey, str],
                  event_logger: Optional[EventLogger] = None) -> str:
    """
    Decrypt a sealed envelope.

    Args:
        envelope: SealedEnvelope or its to_text() form
        private_key: Recipient's RSA private key (or its exported text)
        event_logger: Optional audit log that records success or failure

    Returns:
        Original plaintext

    Raises:
        DecodingError: If the envelope text is malformed
        DecryptionError: If either layer fails to decrypt
    """
    try:
        plaintext = _open(envelope, private_key)
    except (DecodingError, DecryptionError):
        if event_logger is not None:
            event_logger.log_envelope_opened(success=False)
        raise

    if event_logger is not None:
        event_logger.log_envelope_opened(success=True)
    return plaintext


def _open(envelope: Union[SealedEnvelope, str],
          private_key: Union[rsa.RSAPrivateKey, str]) -> str:
    if isinstance(envelope, str):
        envelope = SealedEnvelope.from_text(envelope)

    sym_key_text = rsa_decrypt(envelope.encrypted_key, private_key)
    try:
        return sym_decrypt(sym_key_text, envelope.ciphertext)
    except KeyFormatError:
        raise DecryptionError() from None
