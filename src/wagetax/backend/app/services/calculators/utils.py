"""Rounding helpers shared by the calculator modules.

Each legal rounding step has its own helper: the tariff and its inputs are
floored to whole euros, monetary outputs are rounded half-up.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext

_CENT = Decimal("0.01")
_EURO = Decimal("1")


def floor_currency(value: float) -> int:
    """Truncate ``value`` downward to whole euros."""

    return math.floor(value)


def round_down_to_multiple(value: float, granularity: int) -> int:
    """Round ``value`` down to the nearest multiple of ``granularity``."""

    return math.floor(value / granularity) * granularity


def _quantize_half_up(value: float, exponent: Decimal) -> float:
    number = Decimal(repr(value))
    with localcontext() as context:
        # quantize fails once the result needs more digits than the precision
        context.prec = max(context.prec, number.adjusted() + 4)
        return float(number.quantize(exponent, rounding=ROUND_HALF_UP))


def round_currency(value: float) -> float:
    """Round monetary amounts half-up to two decimals."""

    return _quantize_half_up(value, _CENT)


def round_whole(value: float) -> float:
    """Round monetary amounts half-up to whole euros."""

    return _quantize_half_up(value, _EURO)


def percentage_of(part: float, whole: float) -> float:
    """Return ``part`` as a percentage of ``whole``; zero when ``whole`` is zero."""

    return (part / whole) * 100 if whole > 0 else 0.0
