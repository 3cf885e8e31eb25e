from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ..core.constants import MONEY_PLACES

_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def to_decimal(value, default: Decimal | None = None) -> Decimal:
    """Convert document numbers to Decimal without binary float artifacts.

    `None` and empty strings map to `default` (or raise if no default given).
    """

    if value is None or value == "":
        if default is None:
            raise ValueError("empty number")
        return default
    if isinstance(value, Decimal) and value.is_finite():
        return value
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"not a number: {value!r}")
    if not number.is_finite():
        raise ValueError(f"not a finite number: {value!r}")
    return number


def money(value) -> Decimal:
    return to_decimal(value, Decimal("0"))


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def sanitize_numeric(raw: str | None) -> Decimal:
    """Strip currency symbols, thousands separators etc. before parsing.

    `"AED 1,500.50"` -> `Decimal("1500.50")`; unparsable input becomes 0.
    """

    cleaned = _NON_NUMERIC.sub("", raw or "")
    if cleaned in ("", "-", ".", "-."):
        return Decimal("0")
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return Decimal("0")
