"""
Registry Service

Request handlers for the node registry, independent of any HTTP
framework. Each handler returns a ServiceResponse that an adapter can
turn into a real HTTP response.

Routes:
    POST /registerNode     {nodeId, pubKey} -> 201 registered | 409 conflict
    GET  /status           -> 200 "live"
    GET  /getNodeRegistry  -> 200 {nodes: [{nodeId, pubKey}, ...]}
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from .node_store import NodeRegistry, RegistrationOutcome
from ..integration.event_logger import EventLogger


# Status codes
HTTP_OK = 200
HTTP_CREATED = 201
HTTP_BAD_REQUEST = 400
HTTP_NOT_FOUND = 404
HTTP_METHOD_NOT_ALLOWED = 405
HTTP_CONFLICT = 409

REGISTER_ROUTE = "/registerNode"
STATUS_ROUTE = "/status"
NODE_REGISTRY_ROUTE = "/getNodeRegistry"


@dataclass(frozen=True)
class ServiceResponse:
    """Status code plus JSON-serializable body."""
    status: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def _error(status: int, message: str) -> ServiceResponse:
    return ServiceResponse(status, {'result': 'error', 'message': message})


def _parse_registration(payload: Any) -> Tuple[Optional[int], Optional[str], Optional[str]]:
    """Returns (node_id, pub_key, error)."""
    if not isinstance(payload, dict):
        return None, None, "Body must be a JSON object"

    node_id = payload.get('nodeId')
    pub_key = payload.get('pubKey')

    if isinstance(node_id, bool) or not isinstance(node_id, int):
        return None, None, "nodeId must be an integer"
    if not isinstance(pub_key, str) or not pub_key:
        return None, None, "pubKey must be a non-empty string"
    return node_id, pub_key, None


class RegistryService:
    """
    Node registry exposed through request/response handlers.

    Example:
        >>> service = RegistryService()
        >>> service.register_node({'nodeId': 1, 'pubKey': 'A'}).status
        201
        >>> service.register_node({'nodeId': 1, 'pubKey': 'B'}).status
        409
    """

    def __init__(self, registry: Optional[NodeRegistry] = None,
                 event_logger: Optional[EventLogger] = None):
        """
        Args:
            registry: Store to serve (a fresh in-memory one if None)
            event_logger: Audit log (a fresh one if None)
        """
        self._registry = registry if registry is not None else NodeRegistry()
        self._events = event_logger if event_logger is not None else EventLogger("registry")
        self._routes: Dict[str, Tuple[str, Callable[..., ServiceResponse]]] = {
            REGISTER_ROUTE: ("POST", self.register_node),
            STATUS_ROUTE: ("GET", lambda _payload=None: self.status()),
            NODE_REGISTRY_ROUTE: ("GET", lambda _payload=None: self.get_node_registry()),
        }

    @property
    def registry(self) -> NodeRegistry:
        return self._registry

    @property
    def event_logger(self) -> EventLogger:
        return self._events

    def register_node(self, payload: Any) -> ServiceResponse:
        """
        Register a node from a request body.

        Returns:
            201 on success, 409 if the id or key is taken, 400 on bad input
        """
        node_id, pub_key, error = _parse_registration(payload)
        if error:
            self._events.log_invalid_request(REGISTER_ROUTE, error)
            return _error(HTTP_BAD_REQUEST, error)

        outcome = self._registry.register(node_id, pub_key)
        self._events.log_registration(node_id, pub_key, outcome is RegistrationOutcome.REGISTERED)

        if outcome is RegistrationOutcome.REGISTERED:
            return ServiceResponse(HTTP_CREATED, {
                'result': outcome.value,
                'message': 'Node registered successfully.',
                'nodeId': node_id,
            })
        return ServiceResponse(HTTP_CONFLICT, {
            'result': outcome.value,
            'message': 'Node already registered or public key in use.',
            'nodeId': node_id,
        })

    def status(self) -> ServiceResponse:
        """Liveness probe."""
        return ServiceResponse(HTTP_OK, "live")

    def get_node_registry(self) -> ServiceResponse:
        """All registered nodes in registration order."""
        return ServiceResponse(HTTP_OK, {
            'nodes': [node.to_dict() for node in self._registry.list_nodes()]
        })

    def handle(self, method: str, path: str, payload: Any = None) -> ServiceResponse:
        """
        Dispatch a request to its handler.

        Args:
            method: HTTP method
            path: Request path
            payload: Decoded JSON body, if any
        """
        route = self._routes.get(path)
        if route is None:
            return _error(HTTP_NOT_FOUND, f"Unknown route {path}")

        expected_method, handler = route
        if method.upper() != expected_method:
            return _error(HTTP_METHOD_NOT_ALLOWED, f"{path} only accepts {expected_method}")

        return handler(payload)
