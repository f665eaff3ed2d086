"""Async client for the Customer.io Tracking and Regular APIs."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from customerio_async.config import API_END_POINT, TRACKING_END_POINT, USER_AGENT, Settings
from customerio_async.config import settings as default_settings
from customerio_async.customer import Customer
from customerio_async.dispatcher import RequestDispatcher
from customerio_async.exceptions import ConfigurationError
from customerio_async.logging_config import setup_logging
from customerio_async.models import API, TRACKING
from customerio_async.services.metrics import MetricsCollector
from customerio_async.services.rate_limiter import RefillPolicy, TokenBucketRateLimiter
from customerio_async.trigger import Trigger

logger = logging.getLogger(__name__)


class CustomerIOClient:
    """Async client for Customer.io (backed by ``httpx.AsyncClient``).

    Customer.io exposes two APIs, each with its own base URL and request
    budget:

    * the Tracking API (``tracking_request``), used to identify customers
      and track their behaviour;
    * the Regular API (``api_request``), used for API-triggered broadcasts.

    Both entry points return the decoded JSON payload or raise a
    :class:`~customerio_async.exceptions.CustomerIOError` subclass.
    """

    def __init__(
        self,
        site_id: str | None,
        api_key: str | None,
        *,
        tracking_url: str = TRACKING_END_POINT,
        api_url: str = API_END_POINT,
        tracking_rate_limit: int = 30,
        api_rate_limit: int = 10,
        rate_limit_interval: float = 1.0,
        rate_limit_policy: RefillPolicy | str = RefillPolicy.ROLLING,
        timeout: float = 60.0,
        max_connections: int = 4,
        user_agent: str = USER_AGENT,
        metrics: MetricsCollector | None = None,
        _transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        for name, value in (("site_id", site_id), ("api_key", api_key)):
            if not value:
                raise ConfigurationError(f"Missing required argument: {name}")
        self._site_id = site_id
        self._api_key = api_key

        kwargs: dict[str, Any] = {
            "auth": httpx.BasicAuth(site_id, api_key),
            "headers": {"User-Agent": user_agent},
            "timeout": timeout,
            "limits": httpx.Limits(max_connections=max_connections),
            "follow_redirects": True,
        }
        if _transport is not None:
            kwargs["transport"] = _transport
        self._client = httpx.AsyncClient(**kwargs)

        self._tracking_limiter = TokenBucketRateLimiter(
            tracking_rate_limit, rate_limit_interval, rate_limit_policy,
        )
        self._api_limiter = TokenBucketRateLimiter(
            api_rate_limit, rate_limit_interval, rate_limit_policy,
        )
        self._dispatcher = RequestDispatcher(
            self._client,
            base_urls={TRACKING: tracking_url, API: api_url},
            limiters={TRACKING: self._tracking_limiter, API: self._api_limiter},
            metrics=metrics,
        )
        logger.debug(
            "Customer.io client ready (tracking %d/%ss, api %d/%ss, %s refill)",
            tracking_rate_limit, rate_limit_interval,
            api_rate_limit, rate_limit_interval,
            self._tracking_limiter.policy.value,
        )

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, **overrides: Any,
    ) -> CustomerIOClient:
        """Build a client from :class:`Settings` (``CUSTOMERIO_*`` env vars).

        Also applies the logging level and format from the settings to the
        package logger.
        """
        s = settings or default_settings
        kwargs: dict[str, Any] = {
            "tracking_url": s.tracking_url,
            "api_url": s.api_url,
            "tracking_rate_limit": s.tracking_rate_limit,
            "api_rate_limit": s.api_rate_limit,
            "rate_limit_interval": s.rate_limit_interval,
            "rate_limit_policy": s.rate_limit_policy,
            "timeout": s.timeout,
            "max_connections": s.max_connections,
            "user_agent": s.user_agent,
        }
        kwargs.update(overrides)
        site_id = kwargs.pop("site_id", s.site_id)
        api_key = kwargs.pop("api_key", s.api_key)
        setup_logging(s.log_level, s.log_format)
        return cls(site_id, api_key, **kwargs)

    # -- context manager -----------------------------------------------------

    async def __aenter__(self) -> CustomerIOClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    # -- accessors -----------------------------------------------------------

    @property
    def site_id(self) -> str:
        return self._site_id

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def tracking_limiter(self) -> TokenBucketRateLimiter:
        return self._tracking_limiter

    @property
    def api_limiter(self) -> TokenBucketRateLimiter:
        return self._api_limiter

    @property
    def dispatcher(self) -> RequestDispatcher:
        return self._dispatcher

    # -- endpoint classes ----------------------------------------------------

    async def tracking_request(self, method: str, path: str, body: Any = None) -> Any:
        """Send a request to the Tracking API."""
        outcome = await self._dispatcher.dispatch(TRACKING, method, path, body)
        return outcome.unwrap()

    async def api_request(self, method: str, path: str, body: Any = None) -> Any:
        """Send a request to the Regular API."""
        outcome = await self._dispatcher.dispatch(API, method, path, body)
        return outcome.unwrap()

    # -- domain helpers ------------------------------------------------------

    def new_customer(self, **fields: Any) -> Customer:
        return Customer(api_client=self, **fields)

    def new_trigger(self, **fields: Any) -> Trigger:
        return Trigger(api_client=self, **fields)

    async def find_trigger(self, campaign_id: int | str, trigger_id: int | str) -> Trigger:
        return await Trigger.find(self, campaign_id, trigger_id)

    async def emit_event(self, name: str, data: dict[str, Any] | None = None, **extra: Any) -> Any:
        """Track an anonymous event (not tied to a customer)."""
        if not name:
            raise ValueError("Missing required attribute: name")
        body: dict[str, Any] = {"name": name, **extra}
        if data is not None:
            body["data"] = data
        return await self.tracking_request("POST", "events", body)

    async def add_to_segment(self, segment_id: int | str, customer_ids: list[str]) -> Any:
        """Add people to a manual segment."""
        _check_segment_args(segment_id, customer_ids)
        return await self.tracking_request(
            "POST", f"segments/{segment_id}/add_customers", {"ids": customer_ids},
        )

    async def remove_from_segment(self, segment_id: int | str, customer_ids: list[str]) -> Any:
        """Remove people from a manual segment."""
        _check_segment_args(segment_id, customer_ids)
        return await self.tracking_request(
            "POST", f"segments/{segment_id}/remove_customers", {"ids": customer_ids},
        )


def _check_segment_args(segment_id: Any, customer_ids: Any) -> None:
    if not segment_id:
        raise ValueError("Missing required attribute: segment_id")
    if not isinstance(customer_ids, list):
        raise ValueError("Invalid value for customer_ids")
