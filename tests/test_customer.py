"""Tests for Customer — tracking API calls for one person."""

from __future__ import annotations

import json

import httpx
import pytest
from pydantic import ValidationError

from customerio_async import Customer, CustomerIOClient


@pytest.fixture
async def recorded():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"{}")

    async with CustomerIOClient("site", "key", _transport=httpx.MockTransport(handler)) as c:
        yield c, seen


def _body(request: httpx.Request):
    return json.loads(request.content) if request.content else None


async def test_set_attributes(recorded):
    c, seen = recorded
    customer = c.new_customer(
        id="42", email="ada@example.com", created_at=1700000000,
        attributes={"plan": "pro", "first_name": "Ada"},
    )
    await customer.set_attributes()
    req = seen[0]
    assert req.method == "PUT"
    assert req.url.path == "/api/v1/customers/42"
    assert _body(req) == {
        "plan": "pro",
        "first_name": "Ada",
        "email": "ada@example.com",
        "created_at": 1700000000,
    }


async def test_set_attributes_omits_unset_fields(recorded):
    c, seen = recorded
    await c.new_customer(id=7).set_attributes()
    assert _body(seen[0]) == {}
    assert seen[0].url.path == "/api/v1/customers/7"


async def test_remove(recorded):
    c, seen = recorded
    await c.new_customer(id="42").remove()
    assert seen[0].method == "DELETE"
    assert seen[0].url.path == "/api/v1/customers/42"
    assert seen[0].content == b""


async def test_emit_event(recorded):
    c, seen = recorded
    await c.new_customer(id="42").emit_event("purchase", {"price": 23.45})
    assert seen[0].url.path == "/api/v1/customers/42/events"
    assert _body(seen[0]) == {"name": "purchase", "data": {"price": 23.45}}


async def test_emit_event_requires_name(recorded):
    c, seen = recorded
    with pytest.raises(ValueError):
        await c.new_customer(id="42").emit_event("")
    assert seen == []


async def test_add_device(recorded):
    c, seen = recorded
    await c.new_customer(id="42").add_device("tok-1", "ios", last_used=1700000000)
    assert seen[0].method == "PUT"
    assert seen[0].url.path == "/api/v1/customers/42/devices"
    assert _body(seen[0]) == {
        "device": {"id": "tok-1", "platform": "ios", "last_used": 1700000000},
    }


async def test_add_device_rejects_unknown_platform(recorded):
    c, _ = recorded
    with pytest.raises(ValueError):
        await c.new_customer(id="42").add_device("tok-1", "windows")


async def test_delete_device(recorded):
    c, seen = recorded
    await c.new_customer(id="42").delete_device("tok-1")
    assert seen[0].method == "DELETE"
    assert seen[0].url.path == "/api/v1/customers/42/devices/tok-1"


async def test_suppress_and_unsuppress_send_empty_post(recorded):
    c, seen = recorded
    customer = c.new_customer(id="42")
    await customer.suppress()
    await customer.unsuppress()
    assert [r.url.path for r in seen] == [
        "/api/v1/customers/42/suppress",
        "/api/v1/customers/42/unsuppress",
    ]
    assert all(r.content == b"" for r in seen)
    assert all(r.headers["content-type"] == "application/json" for r in seen)


def test_id_required():
    with pytest.raises(ValidationError):
        Customer(api_client=None)


def test_unknown_fields_rejected():
    with pytest.raises(ValidationError):
        Customer(api_client=None, id="1", nickname="x")


def test_client_not_serialized():
    customer = Customer(api_client=object(), id="1", email="a@b.c")
    assert "api_client" not in customer.model_dump()
