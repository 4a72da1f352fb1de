from monitoring.prometheus_exporter import (
    _REGISTRY,
    generate_prometheus_text,
    record_poll_cancelled,
    record_poll_failure,
    record_poll_success,
)


def _value(name: str) -> float:
    return _REGISTRY.get_sample_value(name) or 0.0


def test_record_poll_outcomes():
    cycles = _value("live_poll_cycles_total")
    failures = _value("live_poll_failures_total")
    cancelled = _value("live_poll_cancelled_total")

    record_poll_success(4, {"latency_ms": 120.5, "last_status": 200})
    assert _value("live_fixtures") == 4
    assert _value("live_fetch_latency_ms") == 120.5

    record_poll_failure({"latency_ms": 33.0, "last_status": 500})
    record_poll_failure(None)
    record_poll_cancelled()

    assert _value("live_poll_cycles_total") == cycles + 3
    assert _value("live_poll_failures_total") == failures + 2
    assert _value("live_poll_cancelled_total") == cancelled + 1
    assert _value("live_fetch_latency_ms") == 33.0
    # Il gauge fixtures non cambia sui fallimenti
    assert _value("live_fixtures") == 4


def test_generate_text():
    output = generate_prometheus_text().decode("utf-8")
    assert "live_poll_cycles_total" in output
    assert "live_fixtures" in output
    assert "live_last_success_timestamp" in output
