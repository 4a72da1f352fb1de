import asyncio

import httpx
import pytest

from providers.sportmonks.exceptions import InvalidPayloadError, TransientAPIError, UpstreamHTTPError
from providers.sportmonks.http_client import LIVESCORES_INPLAY_PATH, SportmonksHttpClient


pytestmark = pytest.mark.usefixtures("sportmonks_token")


def _client(handler) -> SportmonksHttpClient:
    return SportmonksHttpClient(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def test_livescores_request_shape() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": []})

    async def scenario():
        client = _client(handler)
        try:
            return await client.get_livescores_inplay()
        finally:
            await client.aclose()

    out = asyncio.run(scenario())
    assert out == {"data": []}
    req = seen[0]
    assert req.method == "GET"
    assert req.url.path == "/v3" + LIVESCORES_INPLAY_PATH
    assert req.headers["accept"] == "application/json"
    assert req.headers["cache-control"] == "no-cache"
    params = req.url.params
    assert params["api_token"] == "DUMMY"
    assert params["include"] == "periods;scores;trends;participants;statistics"
    assert params["filters"].startswith("fixtureStatisticTypes:34,42,43,44")
    assert ";trendTypes:34," in params["filters"]
    assert params["timezone"] == "Europe/London"
    assert params["populate"] == "400"


def test_non_2xx_raises_http_status_message() -> None:
    client = _client(lambda request: httpx.Response(503, text="down"))
    with pytest.raises(UpstreamHTTPError) as exc:
        asyncio.run(client.get_livescores_inplay())
    assert str(exc.value) == "HTTP 503"
    assert exc.value.status_code == 503
    assert client.get_stats()["last_status"] == 503


def test_invalid_json_raises() -> None:
    client = _client(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(InvalidPayloadError):
        asyncio.run(client.get_livescores_inplay())


def test_network_error_raises_transient() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    client = _client(handler)
    with pytest.raises(TransientAPIError) as exc:
        asyncio.run(client.get_livescores_inplay())
    assert "ConnectError" in str(exc.value)
    stats = client.get_stats()
    assert stats["last_status"] is None
    assert stats["latency_ms"] >= 0.0
