"""Maps raw HTTP responses onto decoded payloads or classified errors."""

from __future__ import annotations

import json

import httpx

from customerio_async.exceptions import (
    CustomerIOError,
    InternalServerError,
    InvalidAPIKeyError,
    InvalidRequestError,
    ResourceNotFoundError,
    UnexpectedHTTPCodeError,
    UnexpectedResponseFormatError,
)
from customerio_async.models import Outcome, Request

# Maps HTTP status codes to exception classes.
_STATUS_MAP: dict[int, type[CustomerIOError]] = {
    400: InvalidRequestError,
    401: InvalidAPIKeyError,
    404: ResourceNotFoundError,
    500: InternalServerError,
    502: InternalServerError,
    503: InternalServerError,
    504: InternalServerError,
}


def _parse_detail(response: httpx.Response) -> str:
    """Extract an error message from a JSON error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        for key in ("meta", "error", "detail"):
            value = body.get(key)
            if isinstance(value, dict):
                value = value.get("error") or value.get("errors")
            if value:
                return str(value)
    return response.text


def decode_json(content: bytes) -> object:
    """Decode a UTF-8 JSON document; raises ``ValueError`` on malformed input."""
    return json.loads(content.decode("utf-8"))


def encode_json(data: object) -> bytes:
    """Encode *data* as UTF-8 JSON for a request body."""
    return json.dumps(data, ensure_ascii=False).encode("utf-8")


def classify(request: Request, response: httpx.Response) -> Outcome:
    """Classify *response* to *request*.

    Non-2xx statuses become the matching :class:`CustomerIOError`; a 2xx body
    that fails to decode becomes :class:`UnexpectedResponseFormatError`.
    Classification is pure: the same inputs always yield the same kind and
    context.
    """
    context = request.context
    code = response.status_code

    if not response.is_success:
        exc_cls = _STATUS_MAP.get(code)
        if exc_cls is None:
            status_line = f"{code} {response.reason_phrase}".rstrip()
            return Outcome(
                error=UnexpectedHTTPCodeError(
                    context,
                    status_code=code,
                    detail=status_line,
                    response=response,
                )
            )
        return Outcome(
            error=exc_cls(
                context,
                status_code=code,
                detail=_parse_detail(response),
                response=response,
            )
        )

    try:
        payload = decode_json(response.content)
    except ValueError as exc:
        return Outcome(
            error=UnexpectedResponseFormatError(
                context,
                cause=exc,
                status_code=code,
                response=response,
            )
        )
    return Outcome(payload=payload)
