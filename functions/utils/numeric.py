"""Numeric helpers shared by the analysis services."""

import math


def ieee_divide(numerator: float, denominator: float) -> float:
    """Divide, yielding inf/nan on a zero denominator instead of raising.

    Mirrors IEEE 754 float division: x/0 is +/-inf, 0/0 is nan.
    """
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves upward (``Math.round`` semantics), not to even."""
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def plain_number(value: float) -> str:
    """Render a number the way it was supplied: ``52`` not ``52.0``, ``9.1`` as is."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
