from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Tuple

from core.models import FixtureMetrics


class LiveFixturesProviderBase(ABC):
    """
    Interfaccia astratta per una sorgente di fixture live.

    Le implementazioni ritornano le metriche già derivate per ogni fixture
    in gioco e sollevano eccezioni solo per errori di trasporto/parsing.
    """

    @abstractmethod
    async def fetch_live_fixtures(self) -> Tuple[FixtureMetrics, ...]:
        raise NotImplementedError

    def get_last_stats(self) -> Dict[str, Any]:
        return {}

    async def aclose(self) -> None:
        return None
