# Core Cryptography Module
"""
Core building blocks shared by every other module:
- Base64 binary/text codec
- Typed error hierarchy
"""

from .errors import (
    CryptoError,
    DecodingError,
    KeyFormatError,
    PayloadTooLargeError,
    DecryptionError,
    InvalidPlaintextError,
)

from .codec import encode, decode

__all__ = [
    'CryptoError',
    'DecodingError',
    'KeyFormatError',
    'PayloadTooLargeError',
    'DecryptionError',
    'InvalidPlaintextError',
    'encode',
    'decode',
]
