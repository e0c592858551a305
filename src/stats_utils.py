"""
Numeric helpers shared by the aggregators.

All averages go through ``mean`` and ``round_half_up`` so payloads are
byte-stable regardless of input order.
"""
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional


def round_half_up(value: float, places: int = 1) -> float:
    """Round half away from zero to a fixed number of decimal places"""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def mean(values: Iterable[float]) -> Optional[float]:
    """Arithmetic mean using an exact running sum, None for no values"""
    values = list(values)
    if not values:
        return None
    return math.fsum(values) / len(values)


def rounded_mean(values: Iterable[float], places: int = 1) -> float:
    """Mean rounded half-up; 0.0 when there is nothing to average"""
    result = mean(values)
    if result is None:
        return 0.0
    return round_half_up(result, places)
