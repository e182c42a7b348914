# Key Services Module
"""
Key services including:
- RSA-OAEP (2048-bit, SHA-256) for small secrets - rsa_keys.py
- AES-256-CBC with HMAC-SHA256 for bulk payloads - symmetric.py

Key formats (Base64 text):
- Public keys: SubjectPublicKeyInfo DER
- Private keys: PKCS#8 DER
- Symmetric keys: 32 raw bytes
"""

from .rsa_keys import (
    KeyPair,
    RSA_CONFIG,
    generate_rsa_key_pair,
    export_pub_key,
    export_prv_key,
    import_pub_key,
    import_prv_key,
    max_plaintext_size,
    rsa_encrypt,
    rsa_decrypt,
)

from .symmetric import (
    SymmetricKey,
    create_random_symmetric_key,
    export_sym_key,
    import_sym_key,
    sym_encrypt,
    sym_decrypt,
    generate_iv,
)

__all__ = [
    # RSA
    'KeyPair',
    'RSA_CONFIG',
    'generate_rsa_key_pair',
    'export_pub_key',
    'export_prv_key',
    'import_pub_key',
    'import_prv_key',
    'max_plaintext_size',
    'rsa_encrypt',
    'rsa_decrypt',
    # Symmetric
    'SymmetricKey',
    'create_random_symmetric_key',
    'export_sym_key',
    'import_sym_key',
    'sym_encrypt',
    'sym_decrypt',
    'generate_iv',
]
