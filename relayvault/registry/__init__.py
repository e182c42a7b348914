# Registry Module
"""
Relay node directory including:
- Append-only store with unique ids and unique public keys - node_store.py
- Framework-independent request handlers - service.py

Registration conflicts are ordinary outcomes (409), not exceptions.
"""

from .node_store import (
    Node,
    RegistrationOutcome,
    NodeBackend,
    InMemoryNodeBackend,
    NodeRegistry,
)

from .service import (
    ServiceResponse,
    RegistryService,
)

__all__ = [
    'Node',
    'RegistrationOutcome',
    'NodeBackend',
    'InMemoryNodeBackend',
    'NodeRegistry',
    'ServiceResponse',
    'RegistryService',
]
