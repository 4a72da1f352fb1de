import asyncio
import time

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from core.derive import derive_fixture_metrics
from live.poller import LivePoller
from providers.sportmonks.base import LiveFixturesProviderBase
from providers.sportmonks.exceptions import UpstreamHTTPError

FIXTURE = {
    "id": 11,
    "participants": [
        {"name": "Napoli", "meta": {"location": "home"}},
        {"name": "Juventus", "meta": {"location": "away"}},
    ],
    "periods": [{"is_current": True, "minute": 80}],
    "trends": [
        {"type_id": 44, "value": 30, "period": {"number": 1}},
        {"type_id": 44, "value": 41, "period": {"number": 2}},
        {"type_id": 34, "value": 6},
    ],
}


class FakeProvider(LiveFixturesProviderBase):
    def __init__(self, result):
        self.result = result
        self.closed = False

    async def fetch_live_fixtures(self):
        if isinstance(self.result, Exception):
            raise self.result
        return self.result

    async def aclose(self):
        self.closed = True


@pytest.fixture
def ready_poller():
    poller = LivePoller(FakeProvider((derive_fixture_metrics(FIXTURE),)), interval_ms=3000)
    asyncio.run(poller.poll_once())
    return poller


def test_health(ready_poller):
    client = TestClient(create_app(ready_poller, autostart=False))
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["phase"] == "ready"
    assert body["poller_running"] is False


def test_live_snapshot(ready_poller):
    client = TestClient(create_app(ready_poller, autostart=False))
    r = client.get("/live")
    assert r.status_code == 200
    body = r.json()
    assert body["loading"] is False
    assert body["error"] is None
    assert body["count"] == 1
    item = body["fixtures"][0]
    assert item["id"] == "11"
    assert item["minute_display"] == 80
    assert item["corners"] == 6
    assert item["dangerous_attacks"] == {"first_half": 30, "second_half": 41}
    assert item["delta"] == 11


def test_live_table(ready_poller):
    client = TestClient(create_app(ready_poller, autostart=False))
    r = client.get("/live/table")
    assert r.status_code == 200
    body = r.json()
    assert body["banner"] == "ok"
    assert body["rows"][0]["match"] == "Napoli vs Juventus"
    assert body["rows"][0]["time"] == "80'"
    assert body["rows"][0]["trend"] == "up"


def test_live_table_error_banner():
    poller = LivePoller(FakeProvider(UpstreamHTTPError(401)), interval_ms=3000)
    asyncio.run(poller.poll_once())
    client = TestClient(create_app(poller, autostart=False))
    body = client.get("/live/table").json()
    assert body["banner"] == "error"
    assert body["message"] == "Error: HTTP 401"
    assert body["rows"] == []


def test_live_without_poller_is_503():
    client = TestClient(create_app(None, autostart=False))
    assert client.get("/live").status_code == 503


def test_prometheus_metrics_endpoint(ready_poller):
    client = TestClient(create_app(ready_poller, autostart=False))
    r = client.get("/metrics")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/plain")
    assert "live_poll_cycles_total" in r.text


def test_lifespan_starts_and_stops_poller():
    provider = FakeProvider((derive_fixture_metrics(FIXTURE),))
    poller = LivePoller(provider, interval_ms=10)
    with TestClient(create_app(poller)) as client:
        time.sleep(0.05)
        assert client.get("/health").json()["poller_running"] is True
        assert client.get("/live").json()["count"] == 1
    assert poller.state.phase.value == "stopped"
    assert provider.closed
