"""
Node Registry Store

Directory of relay nodes and their published RSA public keys.

Invariant:
    node ids are pairwise distinct AND public keys are pairwise distinct

Entries are append-only: there is no update or delete. The duplicate
check and the append run under one lock, so concurrent registrations
can never admit two colliding entries.
"""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Set, Any


@dataclass(frozen=True)
class Node:
    """A registered relay node."""
    node_id: int
    pub_key: str    # Base64 SubjectPublicKeyInfo

    def to_dict(self) -> Dict[str, Any]:
        """Wire form used by the registry service."""
        return {'nodeId': self.node_id, 'pubKey': self.pub_key}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Node':
        return cls(node_id=data['nodeId'], pub_key=data['pubKey'])


class RegistrationOutcome(Enum):
    """Result of NodeRegistry.register()."""
    REGISTERED = "registered"
    ALREADY_REGISTERED = "already_registered"


class NodeBackend(ABC):
    """
    Storage behind a NodeRegistry.

    Implementations need not be thread-safe; NodeRegistry serializes
    every call.
    """

    @abstractmethod
    def has_node_id(self, node_id: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    def has_pub_key(self, pub_key: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def append(self, node: Node) -> None:
        """Store a node. Only called after both membership checks passed."""
        raise NotImplementedError

    @abstractmethod
    def nodes(self) -> List[Node]:
        """All nodes in insertion order."""
        raise NotImplementedError

    def get(self, node_id: int) -> Optional[Node]:
        for node in self.nodes():
            if node.node_id == node_id:
                return node
        return None


class InMemoryNodeBackend(NodeBackend):
    """Insertion-ordered list with an id index and a key set."""

    def __init__(self):
        self._nodes: List[Node] = []
        self._by_id: Dict[int, Node] = {}
        self._keys: Set[str] = set()

    def has_node_id(self, node_id: int) -> bool:
        return node_id in self._by_id

    def has_pub_key(self, pub_key: str) -> bool:
        return pub_key in self._keys

    def append(self, node: Node) -> None:
        self._nodes.append(node)
        self._by_id[node.node_id] = node
        self._keys.add(node.pub_key)

    def nodes(self) -> List[Node]:
        return list(self._nodes)

    def get(self, node_id: int) -> Optional[Node]:
        return self._by_id.get(node_id)


class NodeRegistry:
    """
    Append-only node directory with unique ids and unique keys.

    Example:
        >>> registry = NodeRegistry()
        >>> registry.register(1, "A")
        <RegistrationOutcome.REGISTERED: 'registered'>
        >>> registry.register(2, "A")
        <RegistrationOutcome.ALREADY_REGISTERED: 'already_registered'>
    """

    def __init__(self, backend: Optional[NodeBackend] = None):
        """
        Args:
            backend: Storage to use (defaults to InMemoryNodeBackend)
        """
        self._backend = backend if backend is not None else InMemoryNodeBackend()
        self._lock = threading.Lock()

    def register(self, node_id: int, pub_key: str) -> RegistrationOutcome:
        """
        Admit a node unless its id or its key is already present.

        A collision on either field is reported the same way and leaves
        the registry unchanged.

        Args:
            node_id: Integer node identifier
            pub_key: Exported public key text

        Returns:
            REGISTERED or ALREADY_REGISTERED

        Raises:
            TypeError: If node_id is not an int or pub_key is not a str
        """
        if isinstance(node_id, bool) or not isinstance(node_id, int):
            raise TypeError("node_id must be an int")
        if not isinstance(pub_key, str):
            raise TypeError("pub_key must be a str")

        with self._lock:
            if self._backend.has_node_id(node_id) or self._backend.has_pub_key(pub_key):
                return RegistrationOutcome.ALREADY_REGISTERED
            self._backend.append(Node(node_id, pub_key))
            return RegistrationOutcome.REGISTERED

    def list_nodes(self) -> List[Node]:
        """Current nodes in insertion order (a copy)."""
        with self._lock:
            return list(self._backend.nodes())

    def get_node(self, node_id: int) -> Optional[Node]:
        """Look up a node by id."""
        with self._lock:
            return self._backend.get(node_id)

    def __len__(self) -> int:
        return len(self.list_nodes())
