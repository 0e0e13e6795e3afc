"""
Currency helpers.

``format_price`` is the single formatter behind every ``*_display`` field.
Amounts are quantised with ``Decimal`` and ``ROUND_HALF_UP`` so that a raw
``10.005`` displays as ``$10.01`` regardless of binary float artefacts.
"""

from __future__ import annotations

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from .coercion import to_optional_float

CENT = Decimal("0.01")
QUARTER = Decimal("0.25")
THREE_QUARTERS = Decimal("0.75")

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "ZWL": "ZWL ",
}


def _to_decimal(amount: Any) -> Optional[Decimal]:
    number = to_optional_float(amount)
    if number is None:
        return None
    try:
        return Decimal(str(number))
    except InvalidOperation:
        return None


def currency_symbol(currency: str = "USD") -> str:
    code = (currency or "USD").upper()
    return CURRENCY_SYMBOLS.get(code, f"{code} ")


def round_cents(amount: Any) -> float:
    """Round to 2 decimal places, half-up at the cent boundary."""
    value = _to_decimal(amount)
    if value is None:
        return 0.0
    return float(value.quantize(CENT, rounding=ROUND_HALF_UP))


def format_price(amount: Any, currency: str = "USD") -> str:
    """``12.5 -> "$12.50"``; non-numeric amounts render as ``"N/A"``."""
    value = _to_decimal(amount)
    if value is None:
        return "N/A"
    return f"{currency_symbol(currency)}{value.quantize(CENT, rounding=ROUND_HALF_UP):f}"


def round_to_nearest_half_dollar(amount: Any) -> float:
    """
    Round a raw computed price to a chargeable amount.

    Buckets on the unrounded cents component:  ``< 25`` rounds down to the whole
    dollar, ``25 <= cents < 75`` rounds to ``.50`` and ``>= 75`` rounds up to the next
    dollar.  ``None`` and non-numeric input give ``0``.
    """
    value = _to_decimal(amount)
    if value is None:
        return 0.0

    dollars = value.to_integral_value(rounding=ROUND_FLOOR)
    fraction = value - dollars

    if fraction < QUARTER:
        rounded = dollars
    elif fraction < THREE_QUARTERS:
        rounded = dollars + Decimal("0.5")
    else:
        rounded = dollars + 1
    return float(rounded.quantize(CENT))
