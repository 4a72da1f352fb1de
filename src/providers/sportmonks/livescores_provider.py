from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from core.derive import derive_fixture_metrics
from core.logging import get_logger
from core.models import FixtureMetrics
from .base import LiveFixturesProviderBase
from .http_client import SportmonksHttpClient

log = get_logger(__name__)


def fixtures_from_payload(payload: Any) -> List[Any]:
    """Envelope { data: [...] }: senza lista 'data' -> nessuna fixture (non è un errore)."""
    if isinstance(payload, dict) and "data" not in payload:
        # Nessuna partita in corso: SportMonks risponde solo con 'message'
        log.debug("Envelope senza 'data': nessuna fixture live")
        return []
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, list):
        log.warning("Formato inatteso: 'data' non è una lista")
        return []
    return data


class LivescoresProvider(LiveFixturesProviderBase):
    """
    Provider livescores/inplay.
    - Usa SportmonksHttpClient (httpx async)
    - Deriva le metriche per fixture
    - Nessuna persistenza
    """

    def __init__(self, client: Optional[SportmonksHttpClient] = None) -> None:
        self._client = client or SportmonksHttpClient()
        self._last_raw: Any = None

    async def fetch_live_fixtures(self) -> Tuple[FixtureMetrics, ...]:
        raw = await self._client.get_livescores_inplay()
        self._last_raw = raw
        return tuple(derive_fixture_metrics(item) for item in fixtures_from_payload(raw))

    def get_last_stats(self) -> Dict[str, Any]:
        return self._client.get_stats()

    def get_last_raw(self) -> Any:
        return self._last_raw

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = ["LivescoresProvider", "fixtures_from_payload"]
