"""Canonical number formatting for BlockPlane.

Every surface (API payloads, insight text, CSV, PDF) turns scores and
amounts into text through these functions, so the same value always
renders as the same string. ``format_cpi`` is the only path from a CPI
number to display text.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from numbers import Real
from typing import Any, Optional

PLACEHOLDER = "—"

# kg at or above which carbon is shown in metric tons
CARBON_TON_THRESHOLD_KG = 1000.0

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "CAD": "CA$",
    "AUD": "A$",
}


def _finite(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool) or not isinstance(value, Real):
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def _to_fixed(number: float, decimals: int) -> Decimal:
    """Round half away from zero on the exact binary value of ``number``."""
    return Decimal(number).quantize(Decimal(10) ** -decimals, rounding=ROUND_HALF_UP)


def format_number(value: Any, decimals: int = 2, placeholder: str = PLACEHOLDER) -> str:
    """Fixed-decimal rendering, or the placeholder for missing/non-finite input."""
    number = _finite(value)
    if number is None:
        return placeholder
    return f"{_to_fixed(number, decimals):.{decimals}f}"


def format_cpi(value: Any, placeholder: str = PLACEHOLDER) -> str:
    """Format a Cost-Performance Index.

    Args:
        value: CPI value; None, NaN and infinities count as missing.
        placeholder: Text for a missing value. ``"—"`` for UI and PDF,
            ``""`` for CSV cells.

    Returns:
        The value with exactly two decimals, or the placeholder.
    """
    return format_number(value, 2, placeholder)


def format_currency(amount: Any, currency: str = "USD", placeholder: str = PLACEHOLDER) -> str:
    """Format an amount as currency, e.g. ``-$1,234.50``."""
    number = _finite(amount)
    if number is None:
        return placeholder
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    rounded = _to_fixed(abs(number), 2)
    sign = "-" if number < 0 and rounded != 0 else ""
    return f"{sign}{symbol}{rounded:,.2f}"


def format_carbon(kg_co2: Any, placeholder: str = PLACEHOLDER) -> str:
    """Format a carbon mass, switching to metric tons at 1000 kg."""
    number = _finite(kg_co2)
    if number is None:
        return placeholder
    if number >= CARBON_TON_THRESHOLD_KG:
        return f"{format_number(number / 1000, 2)} tons CO₂e"
    return f"{format_number(number, 2)} kg CO₂e"


def format_percent(value: Any, placeholder: str = PLACEHOLDER) -> str:
    """Format a signed percentage with one decimal; positives get an explicit ``+``."""
    number = _finite(value)
    if number is None:
        return placeholder
    sign = "+" if number > 0 else ""
    return f"{sign}{format_number(number, 1)}%"
