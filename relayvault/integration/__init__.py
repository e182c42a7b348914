# Integration Module
"""
Audit logging for registry and envelope events.

Public keys are recorded only as SHA-256 fingerprints.
"""

from .event_logger import (
    EventType,
    SecurityEvent,
    EventLogger,
    get_key_fingerprint,
    create_event_logger,
)

__all__ = [
    'EventType',
    'SecurityEvent',
    'EventLogger',
    'get_key_fingerprint',
    'create_event_logger',
]
