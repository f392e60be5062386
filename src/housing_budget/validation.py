"""Input-validation boundary for form values.

Raw strings from options or prompts are parsed here; every failure raises
InputError naming the field, before anything reaches a calculator.
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional

from .config import (
    MAX_AGE, MAX_FAMILY_SIZE, MAX_INTEREST_RATE_PCT, MAX_LOAN_YEARS, MAX_ROOMS,
    MAX_SALARY_INCREASE_PCT, MIN_AGE, MIN_MONTHLY_INCOME, ZERO,
)
from .models import InputError

# field → (label, minimum, maximum)
FIELD_LIMITS: dict[str, tuple[str, Decimal, Optional[Decimal]]] = {
    "monthly_income": ("Monthly income", MIN_MONTHLY_INCOME, None),
    "monthly_obligations": ("Monthly obligations", ZERO, None),
    "age": ("Age", Decimal(MIN_AGE), Decimal(MAX_AGE)),
    "salary_increase": ("Expected salary increase", ZERO, MAX_SALARY_INCREASE_PCT),
    "interest_rate": ("Interest rate", ZERO, MAX_INTEREST_RATE_PCT),
    "family_size": ("Family size", Decimal(1), Decimal(MAX_FAMILY_SIZE)),
    "rooms": ("Required rooms", Decimal(1), Decimal(MAX_ROOMS)),
    "loan_years": ("Loan term", Decimal(1), Decimal(MAX_LOAN_YEARS)),
    "down_payment": ("Down payment", ZERO, None),
}


def _check_range(field: str, value: Decimal) -> None:
    label, low, high = FIELD_LIMITS[field]
    if value < low:
        raise InputError(field, f"{label} must be at least {low}.")
    if high is not None and value > high:
        raise InputError(field, f"{label} must be at most {high}.")


def parse_decimal(field: str, raw: str) -> Decimal:
    """Parse *raw* as a number for *field* and check the field's limits.

    Accepts ',' as a decimal separator and ignores spaces.
    """
    label = FIELD_LIMITS[field][0]
    text = raw.strip().replace(" ", "").replace(",", ".")
    try:
        value = Decimal(text)
    except InvalidOperation:
        raise InputError(field, f"{label} must be a number, got '{raw}'.") from None
    if not value.is_finite():
        raise InputError(field, f"{label} must be a number, got '{raw}'.")
    _check_range(field, value)
    return value


def parse_int(field: str, raw: str) -> int:
    label = FIELD_LIMITS[field][0]
    try:
        value = int(raw.strip())
    except ValueError:
        raise InputError(field, f"{label} must be a whole number, got '{raw}'.") from None
    _check_range(field, Decimal(value))
    return value
