# Secure Messaging Module
"""
Envelope encryption for relay payloads:
- Fresh AES-256 key per message
- AES key wrapped with the recipient's RSA-OAEP public key

Envelope format: [version | key_len | encrypted_key | ct_len | ciphertext]
"""

from .envelope import (
    SealedEnvelope,
    ENVELOPE_VERSION,
    seal_envelope,
    open_envelope,
)

__all__ = [
    'SealedEnvelope',
    'ENVELOPE_VERSION',
    'seal_envelope',
    'open_envelope',
]
