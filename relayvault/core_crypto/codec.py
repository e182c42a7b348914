"""
Binary/Text Codec

Reversible conversion between raw bytes and Base64 text (RFC 4648,
standard alphabet with '=' padding). Every key export, ciphertext and
envelope in the package goes through this module.

decode() is strict: anything outside the alphabet, with broken padding
or with non-zero unused bits raises DecodingError instead of being
silently skipped, so every byte string has exactly one accepted text.
"""

import base64
import binascii

from .errors import DecodingError


def encode(data: bytes) -> str:
    """
    Encode bytes as Base64 text.

    Args:
        data: Raw bytes (may be empty)

    Returns:
        ASCII Base64 string
    """
    return base64.b64encode(bytes(data)).decode('ascii')


def decode(text: str) -> bytes:
    """
    Decode Base64 text back to bytes.

    Args:
        text: Base64 string produced by encode()

    Returns:
        Raw bytes

    Raises:
        DecodingError: If text is not a str or is not valid Base64
    """
    if not isinstance(text, str):
        raise DecodingError(f"Expected str, got {type(text).__name__}")
    try:
        data = base64.b64decode(text.encode('ascii'), validate=True)
    except (binascii.Error, UnicodeEncodeError):
        raise DecodingError("Malformed Base64 text") from None

    # Only the canonical encoding is accepted: non-zero bits before the
    # padding would let two texts decode to the same bytes
    if encode(data) != text:
        raise DecodingError("Non-canonical Base64 text")
    return data
