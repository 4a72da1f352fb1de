"""
Estrattori difensivi per i record fixture SportMonks v3.

Lo schema upstream cambia tra versioni ed endpoint: ogni campo logico viene
risolto da una lista ORDINATA di percorsi candidati. Vince il primo candidato
presente e coercibile al tipo atteso; se nessuno risolve si usa il default
documentato. Nessuna funzione di questo modulo solleva eccezioni.

Catene di fallback (parte del contratto):

  minuto          periods[is_current is True].minute
                  -> periods[state == "live"].minute
                  -> time.minute -> scores.minute
                  -> state.short_name -> time.status -> "-"
  nomi squadre    participants[meta.location | location == home/away]
                  .name -> .short_code -> "Home" / "Away"
  trend           type_id -> type.id -> trend_type_id
                  value -> data -> count (default 0)
                  period.number -> period_number -> "1"/"2" in period.name
  statistiche     type_id -> type.id
                  value -> data.value (default 0)
                  period.number -> period_number
"""
from __future__ import annotations

import math
from typing import Any, Callable, List, Optional, Sequence, Tuple

from core.constants import AWAY_PLACEHOLDER, HOME_PLACEHOLDER, MINUTE_PLACEHOLDER
from core.models import Number, NormalizedTrend, RawFixture, TeamNames

Path = Tuple[str, ...]

_MINUTE_PATHS: Tuple[Path, ...] = (("time", "minute"), ("scores", "minute"))
_STATUS_LABEL_PATHS: Tuple[Path, ...] = (("state", "short_name"), ("time", "status"))

_LOCATION_PATHS: Tuple[Path, ...] = (("meta", "location"), ("location",))
_TEAM_NAME_PATHS: Tuple[Path, ...] = (("name",), ("short_code",))

_TREND_TYPE_PATHS: Tuple[Path, ...] = (("type_id",), ("type", "id"), ("trend_type_id",))
_TREND_VALUE_PATHS: Tuple[Path, ...] = (("value",), ("data",), ("count",))
_PERIOD_NUMBER_PATHS: Tuple[Path, ...] = (("period", "number"), ("period_number",))
_PERIOD_NAME_PATH: Path = ("period", "name")

_STAT_TYPE_PATHS: Tuple[Path, ...] = (("type_id",), ("type", "id"))
_STAT_VALUE_PATHS: Tuple[Path, ...] = (("value",), ("data", "value"))


# ---------------------------------------------------------------------------
# Coercizione
# ---------------------------------------------------------------------------


def _finite_int(value: int) -> Optional[int]:
    # int Python illimitati: fuori dal range float non sono sommabili a un float
    try:
        return value if math.isfinite(float(value)) else None
    except OverflowError:
        return None


def as_number(value: Any) -> Optional[Number]:
    """Numero finito da int/float/stringa numerica, altrimenti None (bool esclusi)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return _finite_int(value)
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return _finite_int(int(text))
        except ValueError:
            pass
        try:
            parsed = float(text)
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


def safe_num(value: Any, default: Number = 0) -> Number:
    parsed = as_number(value)
    return default if parsed is None else parsed


def as_int(value: Any) -> Optional[int]:
    parsed = as_number(value)
    if parsed is None:
        return None
    if isinstance(parsed, float):
        return int(parsed) if parsed.is_integer() else None
    return parsed


def _non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


# ---------------------------------------------------------------------------
# Accesso ai percorsi
# ---------------------------------------------------------------------------


def dig(obj: Any, path: Sequence[str]) -> Any:
    for key in path:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def first_of(obj: Any, paths: Sequence[Path], coerce: Callable[[Any], Any]) -> Any:
    for path in paths:
        value = coerce(dig(obj, path))
        if value is not None:
            return value
    return None


def embedded_list(fixture: RawFixture, key: str) -> List[Any]:
    """Relazione inclusa: accetta sia fixture[key]["data"] sia fixture[key] lista."""
    container = dig(fixture, (key,))
    if isinstance(container, dict):
        container = container.get("data")
    return container if isinstance(container, list) else []


# ---------------------------------------------------------------------------
# Estrattori
# ---------------------------------------------------------------------------


def _active_period(periods: List[Any]) -> Optional[dict]:
    for p in periods:
        if isinstance(p, dict) and p.get("is_current") is True:
            return p
    for p in periods:
        if isinstance(p, dict) and p.get("state") == "live":
            return p
    return None


def extract_minute(fixture: RawFixture) -> Number | str:
    active = _active_period(embedded_list(fixture, "periods"))
    if active is not None:
        minute = as_number(active.get("minute"))
        if minute is not None:
            return minute

    minute = first_of(fixture, _MINUTE_PATHS, as_number)
    if minute is not None:
        return minute

    label = first_of(fixture, _STATUS_LABEL_PATHS, _non_empty_str)
    return label if label is not None else MINUTE_PLACEHOLDER


def _participant_at(participants: List[Any], location: str) -> Optional[dict]:
    for p in participants:
        if isinstance(p, dict) and first_of(p, _LOCATION_PATHS, _non_empty_str) == location:
            return p
    return None


def extract_team_names(fixture: RawFixture) -> TeamNames:
    participants = embedded_list(fixture, "participants")
    home = _participant_at(participants, "home")
    away = _participant_at(participants, "away")
    home_name = first_of(home, _TEAM_NAME_PATHS, _non_empty_str) or HOME_PLACEHOLDER
    away_name = first_of(away, _TEAM_NAME_PATHS, _non_empty_str) or AWAY_PLACEHOLDER
    return TeamNames(home=home_name, away=away_name)


def _period_from_name(raw: dict) -> Optional[int]:
    name = dig(raw, _PERIOD_NAME_PATH)
    if not isinstance(name, str):
        return None
    if "1" in name:
        return 1
    if "2" in name:
        return 2
    return None


def _normalize_trend(raw: dict) -> NormalizedTrend:
    period = first_of(raw, _PERIOD_NUMBER_PATHS, as_int)
    if period is None:
        period = _period_from_name(raw)
    return NormalizedTrend(
        type_id=first_of(raw, _TREND_TYPE_PATHS, as_int),
        value=safe_num(first_of(raw, _TREND_VALUE_PATHS, as_number)),
        period_number=period,
    )


def _normalize_statistic(raw: dict) -> NormalizedTrend:
    return NormalizedTrend(
        type_id=first_of(raw, _STAT_TYPE_PATHS, as_int),
        value=safe_num(first_of(raw, _STAT_VALUE_PATHS, as_number)),
        period_number=first_of(raw, _PERIOD_NUMBER_PATHS, as_int),
    )


def extract_trends(fixture: RawFixture) -> List[NormalizedTrend]:
    return [_normalize_trend(t) for t in embedded_list(fixture, "trends") if isinstance(t, dict)]


def extract_statistics(fixture: RawFixture) -> List[NormalizedTrend]:
    # Solo period number esplicito: il match sul nome vale per i trend
    return [_normalize_statistic(s) for s in embedded_list(fixture, "statistics") if isinstance(s, dict)]


__all__ = [
    "as_number",
    "safe_num",
    "as_int",
    "dig",
    "first_of",
    "embedded_list",
    "extract_minute",
    "extract_team_names",
    "extract_trends",
    "extract_statistics",
]
