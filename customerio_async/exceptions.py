"""Exception hierarchy for the Customer.io client."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from customerio_async.models import RequestContext

SOURCE = "customerio"


class ErrorKind(str, Enum):
    """Closed set of error kinds produced by response classification."""

    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_API_KEY = "INVALID_API_KEY"
    INTERNAL_SERVER_ERR = "INTERNAL_SERVER_ERR"
    UNEXPECTED_HTTP_CODE = "UNEXPECTED_HTTP_CODE"
    UNEXPECTED_RESPONSE_FORMAT = "UNEXPECTED_RESPONSE_FORMAT"


class ConfigurationError(ValueError):
    """Raised at client construction when required settings are missing."""


class CustomerIOError(Exception):
    """Base exception for every classified Customer.io API error.

    Transport failures (``httpx.TransportError``) are never wrapped in this
    type; they reach the caller unchanged.
    """

    kind: ErrorKind

    def __init__(
        self,
        context: RequestContext,
        *,
        status_code: int | None = None,
        detail: str = "",
        response: httpx.Response | None = None,
    ) -> None:
        self.source = SOURCE
        self.context = context
        self.status_code = status_code
        self.detail = detail
        self.response = response
        message = f"{self.kind.value}: {context.method} {context.path}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class ResourceNotFoundError(CustomerIOError):
    """Raised on 404 responses."""

    kind = ErrorKind.RESOURCE_NOT_FOUND


class InvalidRequestError(CustomerIOError):
    """Raised on 400 responses."""

    kind = ErrorKind.INVALID_REQUEST


class InvalidAPIKeyError(CustomerIOError):
    """Raised on 401 responses."""

    kind = ErrorKind.INVALID_API_KEY


class InternalServerError(CustomerIOError):
    """Raised on 500, 502, 503 or 504 responses."""

    kind = ErrorKind.INTERNAL_SERVER_ERR


class UnexpectedHTTPCodeError(CustomerIOError):
    """Raised on any other non-2xx response; ``detail`` holds the status line."""

    kind = ErrorKind.UNEXPECTED_HTTP_CODE


class UnexpectedResponseFormatError(CustomerIOError):
    """Raised when a 2xx response body is not valid UTF-8 JSON."""

    kind = ErrorKind.UNEXPECTED_RESPONSE_FORMAT

    def __init__(
        self,
        context: RequestContext,
        *,
        cause: Exception,
        status_code: int | None = None,
        response: httpx.Response | None = None,
    ) -> None:
        self.cause = cause
        super().__init__(
            context,
            status_code=status_code,
            detail=str(cause),
            response=response,
        )
