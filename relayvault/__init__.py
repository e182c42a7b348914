# RelayVault
"""
Cryptographic primitives for a peer-to-peer relay overlay:
- Base64 binary/text codec
- RSA-OAEP key service (bounded payloads, key transport)
- AES-256-CBC key service (bulk payloads)
- Sealed envelopes combining both
- Node registry with unique ids and public keys
"""

__version__ = "0.1.0"
