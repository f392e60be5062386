"""Core annuity formulas shared by every calculator.

All monetary values use decimal.Decimal.
Rates are annual percentages (4.0 means 4 %), terms are whole years.
Rounding: ROUND_HALF_UP to 2 decimal places for final outputs via round_money,
full precision for all intermediate steps.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from .config import CENT, UNIT, ZERO

_MONTHS_PER_YEAR = 12
_PCT_PER_MONTH = Decimal(1200)


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def round_whole(value: Decimal) -> Decimal:
    return value.quantize(UNIT, rounding=ROUND_HALF_UP)


def monthly_rate(annual_rate_pct: Decimal) -> Decimal:
    return Decimal(annual_rate_pct) / _PCT_PER_MONTH


def _check_term(term_years: int) -> int:
    if term_years <= 0:
        raise ValueError("term_years must be > 0")
    return term_years * _MONTHS_PER_YEAR


def monthly_payment(
    loan_amount: Decimal,
    annual_rate_pct: Decimal,
    term_years: int,
) -> Decimal:
    """Return the fixed monthly installment for a fully amortizing loan.

    Uses the standard reducing-balance formula:
        M = P * r * (1 + r)^n / ((1 + r)^n - 1)

    Special case: if the rate is zero, M = P / n.
    """
    n = _check_term(term_years)
    if loan_amount < ZERO:
        raise ValueError("loan_amount must be >= 0")

    r = monthly_rate(annual_rate_pct)
    if r == ZERO:
        return loan_amount / Decimal(n)

    factor = (1 + r) ** n
    return loan_amount * r * factor / (factor - 1)


def max_loan_for_payment(
    payment: Decimal,
    annual_rate_pct: Decimal,
    term_years: int,
) -> Decimal:
    """Invert monthly_payment: the largest principal *payment* can service.

        P = M * (1 - (1 + r)^-n) / r

    With a zero rate this is simply M * n.
    """
    n = _check_term(term_years)
    if payment < ZERO:
        raise ValueError("payment must be >= 0")

    r = monthly_rate(annual_rate_pct)
    if r == ZERO:
        return payment * Decimal(n)

    return payment * (1 - (1 + r) ** -n) / r
