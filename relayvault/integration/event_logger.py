"""
Event Logger Module

Security audit trail for the relay registry and envelope operations.

Features:
- Node registration / rejection events
- Envelope seal / open events
- Privacy-preserving key fingerprints (SHA-256), never raw keys
- Callback hooks for external sinks
- Every event mirrored to the standard logging module

Events are kept in memory for the lifetime of the process.
"""

import json
import hashlib
import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any, Callable


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

EVENT_VERSION = "1.0"
FINGERPRINT_LENGTH = 16  # hex chars kept from the SHA-256 digest


# ============================================================================
# Privacy Functions
# ============================================================================

def get_key_fingerprint(pub_key: str) -> str:
    """
    Compute a short fingerprint of an exported public key.

    Args:
        pub_key: Base64 public key text

    Returns:
        First 16 hex characters of SHA-256(pub_key)
    """
    return hashlib.sha256(pub_key.encode('utf-8')).hexdigest()[:FINGERPRINT_LENGTH]


# ============================================================================
# Event Types
# ============================================================================

class EventType(Enum):
    """Types of security events that can be logged."""

    # Registry events
    NODE_REGISTERED = "node_registered"
    NODE_REJECTED = "node_rejected"
    INVALID_REQUEST = "invalid_request"

    # Envelope events
    ENVELOPE_SEALED = "envelope_sealed"
    ENVELOPE_OPENED = "envelope_opened"
    DECRYPTION_FAILED = "decryption_failed"

    # System events
    SYSTEM_START = "system_start"


# Events that indicate a rejected or failed operation
_WARNING_EVENTS = {
    EventType.NODE_REJECTED,
    EventType.INVALID_REQUEST,
    EventType.DECRYPTION_FAILED,
}


# ============================================================================
# Event Structure
# ============================================================================

@dataclass
class SecurityEvent:
    """A single audit record. Keys appear only as fingerprints."""
    event_type: EventType
    timestamp: int
    node_id: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def to_record(self) -> str:
        """Serialize to compact JSON."""
        return json.dumps({
            'version': EVENT_VERSION,
            'type': self.event_type.value,
            'node': self.node_id,
            'time': self.timestamp,
            'iso_time': datetime.fromtimestamp(self.timestamp).isoformat(),
            'details': self.details,
        }, separators=(',', ':'))

    @classmethod
    def from_record(cls, record: str) -> 'SecurityEvent':
        data = json.loads(record)
        return cls(
            event_type=EventType(data['type']),
            timestamp=data['time'],
            node_id=data.get('node'),
            details=data.get('details', {}),
        )

    def __str__(self) -> str:
        dt = datetime.fromtimestamp(self.timestamp)
        node = f"node:{self.node_id}" if self.node_id is not None else "node:-"
        return f"[{dt.strftime('%Y-%m-%d %H:%M:%S')}] {self.event_type.value} | {node}"


# ============================================================================
# Event Logger
# ============================================================================

class EventLogger:
    """
    In-memory security audit log.

    Thread-safe: the registry service records events from concurrent
    request handlers.
    """

    def __init__(self, name: str = "relayvault"):
        self._name = name
        self._events: List[SecurityEvent] = []
        self._callbacks: List[Callable[[SecurityEvent], None]] = []
        self._lock = threading.Lock()

        self._add_event(SecurityEvent(
            event_type=EventType.SYSTEM_START,
            timestamp=int(time.time()),
            details={'service': name},
        ))

    def _add_event(self, event: SecurityEvent) -> None:
        with self._lock:
            self._events.append(event)
            callbacks = list(self._callbacks)

        level = logging.WARNING if event.event_type in _WARNING_EVENTS else logging.INFO
        logger.log(level, "%s %s", event, event.details or "")

        for callback in callbacks:
            try:
                callback(event)
            except Exception:
                logger.exception("Audit callback %r failed", callback)

    def add_callback(self, callback: Callable[[SecurityEvent], None]) -> None:
        """Add a callback to be notified of new events."""
        with self._lock:
            self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[SecurityEvent], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    # ========================================================================
    # Registry Events
    # ========================================================================

    def log_registration(self, node_id: int, pub_key: str, success: bool) -> SecurityEvent:
        """
        Log a registration decision.

        Args:
            node_id: Requested node id
            pub_key: Exported public key (only its fingerprint is stored)
            success: Whether the node was admitted
        """
        event = SecurityEvent(
            event_type=EventType.NODE_REGISTERED if success else EventType.NODE_REJECTED,
            timestamp=int(time.time()),
            node_id=node_id,
            details={'key': get_key_fingerprint(pub_key)},
        )
        self._add_event(event)
        return event

    def log_invalid_request(self, route: str, reason: str) -> SecurityEvent:
        """Log a malformed request."""
        event = SecurityEvent(
            event_type=EventType.INVALID_REQUEST,
            timestamp=int(time.time()),
            details={'route': route, 'reason': reason},
        )
        self._add_event(event)
        return event

    # ========================================================================
    # Envelope Events
    # ========================================================================

    def log_envelope_sealed(self, recipient_key: str, size: int) -> SecurityEvent:
        """Log an envelope sealed for a recipient."""
        event = SecurityEvent(
            event_type=EventType.ENVELOPE_SEALED,
            timestamp=int(time.time()),
            details={'to': get_key_fingerprint(recipient_key), 'size': size},
        )
        self._add_event(event)
        return event

    def log_envelope_opened(self, success: bool = True) -> SecurityEvent:
        event = SecurityEvent(
            event_type=EventType.ENVELOPE_OPENED if success else EventType.DECRYPTION_FAILED,
            timestamp=int(time.time()),
        )
        self._add_event(event)
        return event

    # ========================================================================
    # Retrieval
    # ========================================================================

    def get_all_events(self) -> List[SecurityEvent]:
        """Snapshot of all events in the order they were logged."""
        with self._lock:
            return list(self._events)

    def get_events_by_type(self, event_type: EventType) -> List[SecurityEvent]:
        return [e for e in self.get_all_events() if e.event_type == event_type]

    def get_node_events(self, node_id: int) -> List[SecurityEvent]:
        return [e for e in self.get_all_events() if e.node_id == node_id]

    def get_recent_events(self, count: int = 10) -> List[SecurityEvent]:
        events = self.get_all_events()
        return events[-count:] if len(events) > count else events

    def export_log(self) -> str:
        """Export the audit log as a JSON array of records."""
        return json.dumps([json.loads(e.to_record()) for e in self.get_all_events()])

    def print_audit_log(self, last_n: Optional[int] = None) -> None:
        """Print the audit log in a readable format."""
        events = self.get_all_events()
        if last_n:
            events = events[-last_n:]

        print("\n" + "=" * 70)
        print("SECURITY AUDIT LOG")
        print("=" * 70)

        for event in events:
            print(event)
            for k, v in event.details.items():
                print(f"    {k}: {v}")

        print("=" * 70)
        print(f"Total events: {len(self.get_all_events())}")
        print("=" * 70)


def create_event_logger(name: str = "relayvault") -> EventLogger:
    """Create a new event logger."""
    return EventLogger(name)
