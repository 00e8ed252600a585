# shopadmin/pricing.py
from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from .errors import ValidationError


# Maximum price: $9,999,999.99 (999,999,999 cents)
MAX_PRICE_CENTS = 999_999_999

_CENT = Decimal("0.01")

# ASCII digits only; Decimal() would also take "1_5" and non-Latin digits
_PLAIN_DECIMAL = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)")
_PLAIN_INTEGER = re.compile(r"[+-]?[0-9]+")
_EXPONENT = re.compile(r"[+-]?[0-9]+(\.[0-9]*)?[eE][+-]?[0-9]+")


def to_cents(value, field: str = "price") -> int:
    """
    Convert a UI-facing price to integer minor units.

    - "2.43" -> 243, "1,5" -> 150 (comma accepted as decimal separator)
    - ints/Decimals are treated as major units like strings
    - blank, non-numeric, NaN and Infinity raise ValidationError
    - rounds half-up to the nearest cent
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"Invalid {field}.")

    if isinstance(value, float):
        # repr() gives the shortest round-tripping text, avoiding binary drift
        raw = repr(value)
    else:
        raw = str(value).strip().replace(",", ".")
        if isinstance(value, str) and not _PLAIN_DECIMAL.fullmatch(raw):
            raise ValidationError(f"Invalid {field}.")

    if not raw:
        raise ValidationError(f"Invalid {field}.")

    try:
        amount = Decimal(raw)
    except InvalidOperation:
        raise ValidationError(f"Invalid {field}.")

    if not amount.is_finite():
        raise ValidationError(f"Invalid {field}.")

    cents = int((amount * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    if abs(cents) > MAX_PRICE_CENTS:
        raise ValidationError(f"{field} cannot exceed {display_price(MAX_PRICE_CENTS)}")
    return cents


def coerce_cents(value, field: str = "price_cents") -> int:
    """
    Accept an already-converted minor-unit amount.

    Strict like the backend: ints or plain digit strings only, no decimals or
    scientific notation.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{field} must be an integer")
        if _EXPONENT.fullmatch(stripped):
            raise ValidationError(f"{field} must be a plain integer (scientific notation not allowed)")
        if "." in stripped or "," in stripped:
            raise ValidationError(f"{field} must be an integer (no decimals)")
        if not _PLAIN_INTEGER.fullmatch(stripped):
            raise ValidationError(f"{field} must be an integer")
        return int(stripped)
    if isinstance(value, float):
        raise ValidationError(f"{field} must be an integer, not a decimal")
    raise ValidationError(f"{field} must be an integer")


def display_price(cents) -> str:
    """243 -> "2.43". Exact: goes through Decimal, never float."""
    if cents is None or cents == "":
        return "0.00"
    try:
        amount = Decimal(str(cents)) / 100
    except InvalidOperation:
        return str(cents)
    return str(amount.quantize(_CENT, rounding=ROUND_HALF_UP))


def format_price_input(value) -> str:
    """Normalize what a user typed to two decimals; leave unparseable text alone."""
    if value is None or str(value).strip() == "":
        return ""
    try:
        return display_price(to_cents(value))
    except ValidationError:
        return str(value)
