"""Async Customer.io client with per-endpoint rate limiting."""

from __future__ import annotations

from customerio_async.client import CustomerIOClient
from customerio_async.customer import Customer
from customerio_async.exceptions import (
    ConfigurationError,
    CustomerIOError,
    ErrorKind,
    InternalServerError,
    InvalidAPIKeyError,
    InvalidRequestError,
    ResourceNotFoundError,
    UnexpectedHTTPCodeError,
    UnexpectedResponseFormatError,
)
from customerio_async.models import Outcome, Request, RequestContext
from customerio_async.services.rate_limiter import RefillPolicy, TokenBucketRateLimiter
from customerio_async.trigger import Trigger

__version__ = "0.1.0"

__all__ = [
    "CustomerIOClient",
    "Customer",
    "Trigger",
    "TokenBucketRateLimiter",
    "RefillPolicy",
    "Request",
    "RequestContext",
    "Outcome",
    "ErrorKind",
    "CustomerIOError",
    "ConfigurationError",
    "ResourceNotFoundError",
    "InvalidRequestError",
    "InvalidAPIKeyError",
    "InternalServerError",
    "UnexpectedHTTPCodeError",
    "UnexpectedResponseFormatError",
]
