"""Request and outcome types that flow through the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from customerio_async.exceptions import CustomerIOError

TRACKING = "tracking"
API = "api"

ENDPOINT_CLASSES: frozenset[str] = frozenset({TRACKING, API})
METHODS: frozenset[str] = frozenset({"GET", "POST", "PUT", "DELETE"})

# Methods that send an empty body (rather than none) when no payload is given.
_BODY_METHODS: frozenset[str] = frozenset({"POST", "PUT"})


@dataclass(frozen=True)
class RequestContext:
    """The ``{method, path, body}`` triple attached to every classified error."""

    method: str
    path: str
    body: Any = None


@dataclass(frozen=True)
class Request:
    """A single logical API call, created per dispatch and never mutated."""

    method: str
    endpoint_class: str
    path: str
    body: Any = None

    def __post_init__(self) -> None:
        method = self.method.upper()
        if method not in METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method!r}")
        if self.endpoint_class not in ENDPOINT_CLASSES:
            raise ValueError(f"Unknown endpoint class: {self.endpoint_class!r}")
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "path", self.path.lstrip("/"))

    @property
    def sends_body(self) -> bool:
        """True when the outgoing HTTP request carries a body field."""
        return self.body is not None or self.method in _BODY_METHODS

    @property
    def context(self) -> RequestContext:
        return RequestContext(method=self.method, path=self.path, body=self.body)


@dataclass(frozen=True)
class Outcome:
    """Result of one dispatched request: a decoded payload or a classified error."""

    payload: Any = None
    error: CustomerIOError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """Return the payload, raising the classified error if there is one."""
        if self.error is not None:
            raise self.error
        return self.payload
