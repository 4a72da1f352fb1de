from __future__ import annotations

import random
from typing import Optional

from core.constants import CORNERS_TYPE_ID, DANGEROUS_ATTACKS_TYPE_ID
from core.extractors import (
    dig,
    extract_minute,
    extract_statistics,
    extract_team_names,
    extract_trends,
)
from core.models import DangerousAttacks, FixtureMetrics, RawFixture
from core.trends import finite_or_zero, is_first_half, is_second_half, sum_by_type


def derive_corners(fixture: RawFixture) -> int | float:
    """Corner totali (type 34), sommati su entrambi i tempi."""
    return sum_by_type(extract_trends(fixture), CORNERS_TYPE_ID)


def derive_dangerous_attacks(fixture: RawFixture) -> DangerousAttacks:
    """
    Attacchi pericolosi (type 44) per tempo.

    Percorso primario: trends, period assente attribuito al primo tempo.
    Se entrambe le somme sono zero: fallback sulle statistiche per tempo
    (solo period number esplicito 1 / 2).
    """
    trends = extract_trends(fixture)
    first = sum_by_type(trends, DANGEROUS_ATTACKS_TYPE_ID, is_first_half)
    second = sum_by_type(trends, DANGEROUS_ATTACKS_TYPE_ID, is_second_half)
    if first or second:
        return DangerousAttacks(first_half=first, second_half=second)

    stats = extract_statistics(fixture)
    return DangerousAttacks(
        first_half=sum_by_type(stats, DANGEROUS_ATTACKS_TYPE_ID, lambda s: s.period_number == 1),
        second_half=sum_by_type(stats, DANGEROUS_ATTACKS_TYPE_ID, lambda s: s.period_number == 2),
    )


def _own_id(fixture: RawFixture) -> Optional[str]:
    raw = dig(fixture, ("id",))
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int) and raw:
        return str(raw)
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return None


def fixture_identity(fixture: RawFixture) -> str:
    """
    Id della fixture. Senza id proprio si sintetizza league-season-random:
    NON stabile tra due poll.
    """
    own = _own_id(fixture)
    if own is not None:
        return own
    league = dig(fixture, ("league_id",)) or "x"
    season = dig(fixture, ("season_id",)) or "y"
    return f"{league}-{season}-{random.random()}"


def derive_fixture_metrics(fixture: RawFixture) -> FixtureMetrics:
    names = extract_team_names(fixture)
    attacks = derive_dangerous_attacks(fixture)
    return FixtureMetrics(
        id=fixture_identity(fixture),
        home_name=names.home,
        away_name=names.away,
        minute_display=extract_minute(fixture),
        corners=derive_corners(fixture),
        dangerous_attacks=attacks,
        delta=finite_or_zero(attacks.second_half - attacks.first_half),
    )


__all__ = [
    "derive_corners",
    "derive_dangerous_attacks",
    "fixture_identity",
    "derive_fixture_metrics",
]
