from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional, Tuple, Union

Number = Union[int, float]
RawFixture = Any  # record SportMonks non validato


class TeamNames(NamedTuple):
    home: str
    away: str


@dataclass(frozen=True)
class NormalizedTrend:
    type_id: Optional[int]
    value: Number = 0
    period_number: Optional[int] = None


@dataclass(frozen=True)
class DangerousAttacks:
    first_half: Number = 0
    second_half: Number = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"first_half": self.first_half, "second_half": self.second_half}


@dataclass(frozen=True)
class FixtureMetrics:
    id: str
    home_name: str
    away_name: str
    minute_display: Union[Number, str]
    corners: Number
    dangerous_attacks: DangerousAttacks
    delta: Number

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "home_name": self.home_name,
            "away_name": self.away_name,
            "minute_display": self.minute_display,
            "corners": self.corners,
            "dangerous_attacks": self.dangerous_attacks.to_dict(),
            "delta": self.delta,
        }


class PollerPhase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"
    STOPPED = "stopped"


@dataclass(frozen=True)
class LiveState:
    """
    Snapshot dello stato live. Mai modificato in place: ogni transizione
    del poller produce una nuova istanza (dataclasses.replace).
    """

    loading: bool = True
    error: Optional[str] = None
    fixtures: Tuple[FixtureMetrics, ...] = field(default_factory=tuple)
    phase: PollerPhase = PollerPhase.IDLE
    cycle: int = 0
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "loading": self.loading,
            "error": self.error,
            "phase": self.phase.value,
            "cycle": self.cycle,
            "updated_at": self.updated_at,
            "count": len(self.fixtures),
            "fixtures": [f.to_dict() for f in self.fixtures],
        }


__all__ = [
    "Number",
    "RawFixture",
    "TeamNames",
    "NormalizedTrend",
    "DangerousAttacks",
    "FixtureMetrics",
    "PollerPhase",
    "LiveState",
]
