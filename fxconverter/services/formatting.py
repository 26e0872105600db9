from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

_CENTS = Decimal("0.01")
_RATE_QUANTUM = Decimal("0.000001")
_MIN_RATE_DIGITS = 4


def format_amount(value: Decimal | float) -> str:
    """Two fraction digits with thousands grouping, e.g. ``1,234.50``."""
    quantized = Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP)
    return f"{quantized:,.2f}"


def format_rate(rate: Decimal | float) -> str:
    """Between four and six fraction digits, no grouping."""
    quantized = Decimal(str(rate)).quantize(_RATE_QUANTUM, rounding=ROUND_HALF_UP)
    whole, _, fraction = f"{quantized:f}".partition(".")
    fraction = fraction.rstrip("0").ljust(_MIN_RATE_DIGITS, "0")
    return f"{whole}.{fraction}"


def format_rate_line(from_currency: str, to_currency: str, rate: Decimal | float) -> str:
    return f"1 {from_currency} = {format_rate(rate)} {to_currency}"
