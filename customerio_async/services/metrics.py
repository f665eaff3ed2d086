"""In-memory counters and latency samples for dispatched API calls."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field

SUCCESS = "SUCCESS"
TRANSPORT_FAILURE = "TRANSPORT_FAILURE"


def _percentiles(samples: list[float]) -> dict[str, float]:
    if not samples:
        return {"p50": 0.0, "p90": 0.0, "p95": 0.0, "p99": 0.0}
    s = sorted(samples)
    n = len(s)
    return {
        "p50": round(s[int(n * 0.50)], 2),
        "p90": round(s[int(min(n * 0.90, n - 1))], 2),
        "p95": round(s[int(min(n * 0.95, n - 1))], 2),
        "p99": round(s[int(min(n * 0.99, n - 1))], 2),
    }


@dataclass
class MetricsCollector:
    """Dispatch counters plus admission-wait and round-trip latencies.

    Outcomes are keyed by ``SUCCESS``, ``TRANSPORT_FAILURE`` or an
    ``ErrorKind`` value.  Each latency list is bounded at
    ``_MAX_LATENCY_SAMPLES``; when exceeded it keeps only the most-recent half.
    """

    _MAX_LATENCY_SAMPLES: int = field(default=10_000, repr=False)

    total_dispatched: int = field(default=0, init=False)
    by_endpoint_class: dict[str, int] = field(default_factory=dict, init=False)
    by_outcome: dict[str, int] = field(default_factory=dict, init=False)

    # Latency samples (milliseconds)
    _admission_waits: list[float] = field(default_factory=list, init=False, repr=False)
    _round_trips: list[float] = field(default_factory=list, init=False, repr=False)

    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _start_time: float = field(default_factory=time.monotonic, init=False, repr=False)

    # -- Counters ----------------------------------------------------------

    def inc_dispatched(self, endpoint_class: str) -> None:
        with self._lock:
            self.total_dispatched += 1
            self.by_endpoint_class[endpoint_class] = (
                self.by_endpoint_class.get(endpoint_class, 0) + 1
            )

    def inc_outcome(self, outcome: str) -> None:
        with self._lock:
            self.by_outcome[outcome] = self.by_outcome.get(outcome, 0) + 1

    @property
    def transport_failures(self) -> int:
        return self.by_outcome.get(TRANSPORT_FAILURE, 0)

    # -- Latency -----------------------------------------------------------

    def record_admission_wait(self, ms: float) -> None:
        with self._lock:
            self._admission_waits = self._bounded(self._admission_waits, ms)

    def record_round_trip(self, ms: float) -> None:
        with self._lock:
            self._round_trips = self._bounded(self._round_trips, ms)

    def _bounded(self, samples: list[float], ms: float) -> list[float]:
        samples.append(ms)
        if len(samples) > self._MAX_LATENCY_SAMPLES:
            return samples[-(self._MAX_LATENCY_SAMPLES // 2):]
        return samples

    # -- Snapshot / reset --------------------------------------------------

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "uptime_seconds": round(time.monotonic() - self._start_time, 2),
                "total_dispatched": self.total_dispatched,
                "by_endpoint_class": dict(self.by_endpoint_class),
                "by_outcome": dict(self.by_outcome),
                "latency_ms": {
                    "admission_wait": _percentiles(self._admission_waits),
                    "round_trip": _percentiles(self._round_trips),
                },
            }

    def reset(self) -> None:
        with self._lock:
            self.total_dispatched = 0
            self.by_endpoint_class.clear()
            self.by_outcome.clear()
            self._admission_waits.clear()
            self._round_trips.clear()
            self._start_time = time.monotonic()


# Module-level default shared by clients that don't pass their own collector
metrics = MetricsCollector()
