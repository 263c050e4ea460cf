### app/utils/general.py

# Standard library imports
import random
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

TWO_PLACES = Decimal("0.01")


def split_name(full_name: Optional[str]):
    parts = (full_name or "").strip().split()
    first_name = parts[0] if len(parts) > 0 else None
    middle_name = " ".join(parts[1:-1]) if len(parts) > 2 else None
    last_name = parts[-1] if len(parts) > 1 else None
    return first_name, middle_name, last_name


def random_reference(prefix: str) -> str:
    """Human readable reference such as TRIP-4821 or INV-1093"""
    return f"{prefix}-{random.randint(1000, 9999)}"


def to_money(value) -> Decimal:
    """Quantize to two decimal places, half up"""
    return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def fill_if_missing(value: Optional[str], placeholder: str) -> str:
    if value is None or not str(value).strip():
        return placeholder
    return value
