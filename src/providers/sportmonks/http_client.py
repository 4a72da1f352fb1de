from __future__ import annotations

import time
from typing import Any, Dict, Optional

import httpx

from core.config import Settings, get_settings
from core.constants import LIVESCORES_INCLUDES
from core.logging import get_logger
from .exceptions import InvalidPayloadError, TransientAPIError, UpstreamHTTPError

log = get_logger(__name__)

LIVESCORES_INPLAY_PATH = "/football/livescores/inplay"

_HEADERS = {
    "Accept": "application/json",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


def build_livescores_params(settings: Settings) -> Dict[str, Any]:
    type_ids = ",".join(str(t) for t in settings.sportmonks_type_filters)
    return {
        "api_token": settings.sportmonks_api_token,
        "include": ";".join(LIVESCORES_INCLUDES),
        "filters": f"fixtureStatisticTypes:{type_ids};trendTypes:{type_ids}",
        "timezone": settings.sportmonks_timezone,
        "populate": settings.sportmonks_populate,
    }


class SportmonksHttpClient:
    """
    Client HTTP asincrono (httpx) per SportMonks v3.

    Nessun retry interno: il retry è il prossimo tick del poller.
    Nessun timeout per richiesta: la richiesta in volo viene cancellata
    quando parte il ciclo successivo.

    Telemetria dell'ultima chiamata:
      - _last_latency_ms: durata in millisecondi (successo o errore)
      - _last_status: ultimo HTTP status ricevuto (None se nessuna risposta)
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None) -> None:
        self._settings = get_settings()
        self._client = client or httpx.AsyncClient(timeout=None)
        self._base = self._settings.sportmonks_base_url

        self._last_latency_ms: float = 0.0
        self._last_status: Optional[int] = None

    async def api_get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = self._base + path
        # Il token non finisce nei log
        safe_params = {k: v for k, v in (params or {}).items() if k != "api_token"}
        log.debug("sportmonks GET %s params=%s", path, safe_params)

        self._last_latency_ms = 0.0
        self._last_status = None
        start = time.perf_counter()
        try:
            resp = await self._client.get(url, params=params, headers=_HEADERS)
        except httpx.RequestError as e:
            self._last_latency_ms = (time.perf_counter() - start) * 1000
            log.warning("Errore rete %s dopo %.1fms: %s", path, self._last_latency_ms, e)
            raise TransientAPIError(f"Errore di rete: {e.__class__.__name__}") from e

        self._last_latency_ms = (time.perf_counter() - start) * 1000
        self._last_status = resp.status_code

        if not 200 <= resp.status_code < 300:
            log.warning(
                "Status %s %s (%.1fms) body=%s",
                resp.status_code,
                path,
                self._last_latency_ms,
                resp.text[:300],
            )
            raise UpstreamHTTPError(resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise InvalidPayloadError(f"Risposta non valida (non JSON) status={resp.status_code}") from e

        log.debug("OK %s %s %.1fms", path, resp.status_code, self._last_latency_ms)
        return data

    async def get_livescores_inplay(self) -> Any:
        return await self.api_get(LIVESCORES_INPLAY_PATH, params=build_livescores_params(self._settings))

    def get_stats(self) -> Dict[str, Any]:
        return {
            "latency_ms": round(self._last_latency_ms, 2),
            "last_status": self._last_status,
        }

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = [
    "SportmonksHttpClient",
    "build_livescores_params",
    "LIVESCORES_INPLAY_PATH",
]
