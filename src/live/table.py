from __future__ import annotations

from typing import Any, Dict, List, Literal

from core.models import FixtureMetrics, LiveState, Number

Trend = Literal["up", "down", "flat"]

COLUMNS = ["Match", "Time", "Corners", "D.Attack 1HT", "D.Attack 2HT", "Delta D.Attack"]

BANNER_MESSAGES = {
    "loading": "Loading live data…",
    "empty": "No live fixtures found.",
}


def _plain(value: Number) -> Number:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def format_minute(minute: Number | str) -> str:
    """67 -> "67'"; le etichette di stato (HT, FT, "-") restano invariate."""
    if isinstance(minute, bool):
        return str(minute)
    if isinstance(minute, (int, float)):
        return f"{_plain(minute)}'"
    return str(minute)


def delta_trend(delta: Number) -> Trend:
    if delta > 0:
        return "up"
    if delta < 0:
        return "down"
    return "flat"


def build_row(metrics: FixtureMetrics) -> Dict[str, Any]:
    attacks = metrics.dangerous_attacks
    return {
        "id": metrics.id,
        "match": f"{metrics.home_name} vs {metrics.away_name}",
        "home": metrics.home_name,
        "away": metrics.away_name,
        "time": format_minute(metrics.minute_display),
        "corners": _plain(metrics.corners),
        "da_first_half": _plain(attacks.first_half),
        "da_second_half": _plain(attacks.second_half),
        "delta": _plain(metrics.delta),
        "trend": delta_trend(metrics.delta),
    }


def build_table(state: LiveState) -> Dict[str, Any]:
    """
    Modello di presentazione della tabella live.

    banner:
      loading  nessun ciclo ancora completato
      error    ultimo ciclo fallito, righe dell'ultimo snapshot buono mantenute
      empty    nessun errore, nessuna fixture in gioco
      ok       righe presenti
    """
    rows: List[Dict[str, Any]] = [build_row(m) for m in state.fixtures]
    if state.loading and state.error is None:
        banner, message = "loading", BANNER_MESSAGES["loading"]
    elif state.error is not None:
        banner, message = "error", f"Error: {state.error}"
    elif not rows:
        banner, message = "empty", BANNER_MESSAGES["empty"]
    else:
        banner, message = "ok", None
    return {
        "banner": banner,
        "message": message,
        "phase": state.phase.value,
        "updated_at": state.updated_at,
        "columns": COLUMNS,
        "rows": rows,
    }


__all__ = ["format_minute", "delta_trend", "build_row", "build_table", "COLUMNS"]
