"""Correlation IDs for dispatched API calls, carried in a contextvar."""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

request_id_var: ContextVar[str] = ContextVar("customerio_request_id", default="")


def get_request_id() -> str:
    return request_id_var.get()


@contextmanager
def bind_request_id(request_id: str | None = None) -> Iterator[str]:
    """Tag everything logged inside the block with one dispatch's ID.

    A fresh 32-character hex ID is generated unless *request_id* is given.
    The previous value is restored on exit.
    """
    rid = request_id or uuid.uuid4().hex
    token = request_id_var.set(rid)
    try:
        yield rid
    finally:
        request_id_var.reset(token)
