"""
Async wrappers for the key services and envelopes.

Each coroutine runs the CPU-bound work in a worker thread with
asyncio.to_thread, so the event loop keeps serving other tasks and
independent calls can run concurrently. Calls share no mutable state.
"""

import asyncio
from typing import Optional, Union

from cryptography.hazmat.primitives.asymmetric import rsa

from .integration.event_logger import EventLogger
from .keys import rsa_keys, symmetric
from .keys.rsa_keys import KeyPair
from .keys.symmetric import SymmetricKey
from .messaging import envelope
from .messaging.envelope import SealedEnvelope


# RSA

async def generate_rsa_key_pair() -> KeyPair:
    return await asyncio.to_thread(rsa_keys.generate_rsa_key_pair)


async def export_pub_key(key: rsa.RSAPublicKey) -> str:
    return await asyncio.to_thread(rsa_keys.export_pub_key, key)


async def export_prv_key(key: Optional[rsa.RSAPrivateKey]) -> Optional[str]:
    return await asyncio.to_thread(rsa_keys.export_prv_key, key)


async def import_pub_key(str_key: str) -> rsa.RSAPublicKey:
    return await asyncio.to_thread(rsa_keys.import_pub_key, str_key)


async def import_prv_key(str_key: str) -> rsa.RSAPrivateKey:
    return await asyncio.to_thread(rsa_keys.import_prv_key, str_key)


async def rsa_encrypt(b64_data: str, str_public_key: str) -> str:
    return await asyncio.to_thread(rsa_keys.rsa_encrypt, b64_data, str_public_key)


async def rsa_decrypt(data: str, private_key: Union[rsa.RSAPrivateKey, str]) -> str:
    return await asyncio.to_thread(rsa_keys.rsa_decrypt, data, private_key)


# Symmetric

async def create_random_symmetric_key() -> SymmetricKey:
    return await asyncio.to_thread(symmetric.create_random_symmetric_key)


async def export_sym_key(key: SymmetricKey) -> str:
    return await asyncio.to_thread(symmetric.export_sym_key, key)


async def import_sym_key(str_key: str) -> SymmetricKey:
    return await asyncio.to_thread(symmetric.import_sym_key, str_key)


async def sym_encrypt(key: Union[SymmetricKey, str], data: str) -> str:
    return await asyncio.to_thread(symmetric.sym_encrypt, key, data)


async def sym_decrypt(str_key: Union[str, SymmetricKey], encrypted_data: str) -> str:
    return await asyncio.to_thread(symmetric.sym_decrypt, str_key, encrypted_data)


# Envelopes

async def seal_envelope(plaintext: str, recipient_public_key: str,
                        event_logger: Optional[EventLogger] = None) -> SealedEnvelope:
    return await asyncio.to_thread(envelope.seal_envelope, plaintext, recipient_public_key, event_logger)


async def open_envelope(sealed: Union[SealedEnvelope, str],
                        private_key: Union[rsa.RSAPrivateKey, str],
                        event_logger: Optional[EventLogger] = None) -> str:
    return await asyncio.to_thread(envelope.open_envelope, sealed, private_key, event_logger)
