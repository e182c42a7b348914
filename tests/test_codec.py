"""
Unit tests for the Base64 codec.
"""

import os
import pytest

from relayvault.core_crypto.codec import encode, decode
from relayvault.core_crypto.errors import DecodingError, CryptoError


class TestCodec:
    """Tests for encode/decode."""

    def test_roundtrip_random_bytes(self):
        """decode(encode(b)) should return b for assorted lengths."""
        for length in (0, 1, 2, 3, 15, 16, 17, 255, 4096):
            data = os.urandom(length)
            assert decode(encode(data)) == data

    def test_empty(self):
        """Empty input encodes to the empty string."""
        assert encode(b"") == ""
        assert decode("") == b""

    def test_known_vector(self):
        """Standard Base64 alphabet with padding."""
        assert encode(b"hello") == "aGVsbG8="
        assert decode("aGVsbG8=") == b"hello"

    def test_accepts_bytearray(self):
        assert encode(bytearray(b"\x00\xff")) == "AP8="

    def test_invalid_character_rejected(self):
        """Characters outside the alphabet should fail."""
        with pytest.raises(DecodingError):
            decode("aGVs*G8=")

    def test_bad_padding_rejected(self):
        with pytest.raises(DecodingError):
            decode("aGVsbG8")

    def test_non_ascii_rejected(self):
        with pytest.raises(DecodingError):
            decode("aGVsbG8é")

    def test_non_string_rejected(self):
        with pytest.raises(DecodingError):
            decode(b"aGVsbG8=")

    def test_error_hierarchy(self):
        """DecodingError is a CryptoError and a ValueError."""
        with pytest.raises(ValueError):
            decode("!!!!")
        assert issubclass(DecodingError, CryptoError)

    def test_non_canonical_padding_bits_rejected(self):
        """Unused bits before '=' must be zero; otherwise two texts share one decoding."""
        assert encode(b"A") == "QQ=="
        assert encode(b"AB") == "QUI="
        for text in ("QR==", "QUJ=", "aGVsbG9="):
            with pytest.raises(DecodingError):
                decode(text)

    def test_every_canonical_text_roundtrips(self):
        """Whatever decode() accepts, encode() reproduces exactly."""
        for length in range(1, 7):
            text = encode(os.urandom(length))
            assert encode(decode(text)) == text
