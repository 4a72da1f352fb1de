from __future__ import annotations

import math
from typing import Any, Callable, Optional

from core.models import Number, NormalizedTrend

TrendPredicate = Callable[[NormalizedTrend], bool]


def finite_or_zero(value: Number) -> Number:
    """Totali fuori dal range float (inf, NaN, int enormi) valgono 0."""
    try:
        return value if math.isfinite(float(value)) else 0
    except OverflowError:
        return 0


def sum_by_type(
    trends: Any,
    type_id: int,
    predicate: Optional[TrendPredicate] = None,
) -> Number:
    """
    Somma i value dei trend con type_id richiesto che soddisfano il predicato.
    Input vuoto o non sequenza -> 0. Funzione totale, non solleva, e il
    risultato è sempre finito.
    """
    if not isinstance(trends, (list, tuple)):
        return 0
    total: Number = 0
    for t in trends:
        if not isinstance(t, NormalizedTrend) or t.type_id != type_id:
            continue
        if predicate is not None and not predicate(t):
            continue
        try:
            total += t.value
        except OverflowError:
            # int oltre il range float sommato a un float: valore scartato
            continue
    return finite_or_zero(total)


def is_first_half(trend: NormalizedTrend) -> bool:
    # Period assente = primo tempo (alcuni provider taggano solo dal secondo)
    return trend.period_number in (None, 0, 1)


def is_second_half(trend: NormalizedTrend) -> bool:
    return trend.period_number == 2


__all__ = ["sum_by_type", "finite_or_zero", "is_first_half", "is_second_half", "TrendPredicate"]
