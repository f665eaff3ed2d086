"""Routes API calls through per-endpoint-class admission control and classification."""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping

import httpx

from customerio_async.classifier import classify, encode_json
from customerio_async.models import Outcome, Request
from customerio_async.services.metrics import (
    SUCCESS,
    TRANSPORT_FAILURE,
    MetricsCollector,
)
from customerio_async.services.metrics import metrics as default_metrics
from customerio_async.services.rate_limiter import TokenBucketRateLimiter
from customerio_async.services.request_context import bind_request_id

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json"}


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


class RequestDispatcher:
    """Sends requests for each endpoint class through that class's limiter.

    Every request is admitted exactly once, sent once and classified once.
    Nothing is retried: classified errors come back inside the
    :class:`Outcome` and request errors raised by httpx
    (``httpx.RequestError``) propagate unchanged.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        base_urls: Mapping[str, str],
        limiters: Mapping[str, TokenBucketRateLimiter],
        metrics: MetricsCollector | None = None,
    ) -> None:
        if set(base_urls) != set(limiters):
            raise ValueError("base_urls and limiters must cover the same endpoint classes")
        self._http = http_client
        self._base_urls = {k: v.rstrip("/") for k, v in base_urls.items()}
        self._limiters = dict(limiters)
        self._metrics = metrics if metrics is not None else default_metrics

    def limiter(self, endpoint_class: str) -> TokenBucketRateLimiter:
        return self._limiters[endpoint_class]

    def url_for(self, request: Request) -> str:
        return f"{self._base_urls[request.endpoint_class]}/{request.path}"

    async def dispatch(
        self,
        endpoint_class: str,
        method: str,
        path: str,
        body: Any = None,
    ) -> Outcome:
        request = Request(method=method, endpoint_class=endpoint_class, path=path, body=body)
        if endpoint_class not in self._limiters:
            raise ValueError(f"No limiter configured for endpoint class {endpoint_class!r}")

        with bind_request_id():
            self._metrics.inc_dispatched(endpoint_class)
            logger.debug("Pending %s %s (%s)", request.method, request.path, endpoint_class)

            start = time.perf_counter()
            await self._limiters[endpoint_class].acquire()
            self._metrics.record_admission_wait(_elapsed_ms(start))
            logger.debug("Admitted %s %s", request.method, request.path)

            response = await self._send(request)

            outcome = classify(request, response)
            if outcome.ok:
                self._metrics.inc_outcome(SUCCESS)
                logger.debug("Succeeded %s %s", request.method, request.path)
            else:
                self._metrics.inc_outcome(outcome.error.kind.value)
                logger.warning(
                    "Customer.io %s %s failed: %s",
                    request.method, request.path, outcome.error,
                )
            return outcome

    async def _send(self, request: Request) -> httpx.Response:
        kwargs: dict[str, Any] = {}
        if request.sends_body:
            kwargs["content"] = b"" if request.body is None else encode_json(request.body)
            kwargs["headers"] = _JSON_HEADERS

        start = time.perf_counter()
        try:
            response = await self._http.request(request.method, self.url_for(request), **kwargs)
        except httpx.RequestError:
            self._metrics.inc_outcome(TRANSPORT_FAILURE)
            logger.warning(
                "Transport failure on %s %s", request.method, request.path, exc_info=True,
            )
            raise
        finally:
            self._metrics.record_round_trip(_elapsed_ms(start))
        logger.debug(
            "Sent %s %s -> %d", request.method, request.path, response.status_code,
        )
        return response
