from __future__ import annotations

from typing import Any, Dict, Optional

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    generate_latest,
)
from core.logging import get_logger

logger = get_logger("monitoring.prometheus_exporter")

# Registry dedicato (non quello globale di prometheus_client)
_REGISTRY = CollectorRegistry()

POLL_CYCLES_TOTAL = Counter("live_poll_cycles_total", "Cicli di poll applicati", registry=_REGISTRY)
POLL_FAILURES_TOTAL = Counter("live_poll_failures_total", "Cicli di poll falliti", registry=_REGISTRY)
POLL_CANCELLED_TOTAL = Counter(
    "live_poll_cancelled_total", "Cicli superati da un ciclo successivo o da shutdown", registry=_REGISTRY
)
LIVE_FIXTURES = Gauge("live_fixtures", "Fixture live nell'ultimo snapshot", registry=_REGISTRY)
FETCH_LATENCY_MS = Gauge("live_fetch_latency_ms", "Ultima latenza fetch in ms", registry=_REGISTRY)
LAST_SUCCESS_TS = Gauge("live_last_success_timestamp", "Epoch dell'ultimo poll riuscito", registry=_REGISTRY)


def _set_latency(stats: Optional[Dict[str, Any]]) -> None:
    latency = (stats or {}).get("latency_ms")
    if isinstance(latency, (int, float)):
        FETCH_LATENCY_MS.set(latency)


def record_poll_success(fixtures_count: int, stats: Optional[Dict[str, Any]] = None) -> None:
    POLL_CYCLES_TOTAL.inc()
    LIVE_FIXTURES.set(fixtures_count)
    LAST_SUCCESS_TS.set_to_current_time()
    _set_latency(stats)


def record_poll_failure(stats: Optional[Dict[str, Any]] = None) -> None:
    POLL_CYCLES_TOTAL.inc()
    POLL_FAILURES_TOTAL.inc()
    _set_latency(stats)


def record_poll_cancelled() -> None:
    POLL_CANCELLED_TOTAL.inc()


def generate_prometheus_text() -> bytes:
    return generate_latest(_REGISTRY)


__all__ = [
    "record_poll_success",
    "record_poll_failure",
    "record_poll_cancelled",
    "generate_prometheus_text",
    "_REGISTRY",
]
