"""
Error types raised by the crypto layer.

All errors derive from ValueError so callers that already guard bad
input with ``except ValueError`` keep working.
"""


class CryptoError(ValueError):
    """Base class for codec and key service failures."""


class DecodingError(CryptoError):
    """Text given to the codec is not valid Base64."""


class KeyFormatError(CryptoError):
    """Imported key text is not the expected key structure."""


class PayloadTooLargeError(CryptoError):
    """Plaintext exceeds what RSA-OAEP can carry for the key."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Plaintext is {size} bytes, limit is {limit} bytes")
        self.size = size
        self.limit = limit


# Single message for every cause (wrong key, corruption, bad padding)
DECRYPTION_FAILED = "Decryption failed"


class DecryptionError(CryptoError):
    """Ciphertext could not be decrypted under the given key."""

    def __init__(self, message: str = DECRYPTION_FAILED):
        super().__init__(message)


class InvalidPlaintextError(CryptoError):
    """Plaintext string cannot be encoded as UTF-8 (e.g. lone surrogates)."""
