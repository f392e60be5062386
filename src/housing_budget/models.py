"""Household inputs, financing terms and the structured log types.

Derivation steps and reasons are recorded as codes plus values; turning them
into sentences is the job of narration.py.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

from .config import (
    DEFAULT_INTEREST_RATE_PCT, DEFAULT_LOAN_YEARS, DEFAULT_SALARY_INCREASE_PCT,
    MAX_AGE, MAX_LOAN_YEARS, MIN_AGE, ZERO,
)

# ── Derivation step codes ─────────────────────────────────────────────────────

STEP_NET_INCOME = "net_income"
STEP_MAX_MONTHLY_PAYMENT = "max_monthly_payment"
STEP_LOAN_TERM = "loan_term"
STEP_INTEREST_RATE = "interest_rate"
STEP_LOAN_AMOUNT = "loan_amount"
STEP_DOWN_PAYMENT = "down_payment"
STEP_TOTAL_BUDGET = "total_budget"
STEP_RETIREMENT_ADJUSTMENT = "retirement_adjustment"
STEP_NO_MORTGAGE_BUDGET = "no_mortgage_budget"
STEP_AFFORDABILITY_RATIO = "affordability_ratio"
STEP_MONTHLY_SAVINGS = "monthly_savings"
STEP_CASH_BUDGET = "cash_budget"
STEP_OWN_DOWN_PAYMENT = "own_down_payment"
STEP_ASSUMED_DOWN_PAYMENT = "assumed_down_payment"

# ── Reason codes ──────────────────────────────────────────────────────────────

# property matching
REASON_NO_DATA = "no_data"
REASON_NO_MATCH = "no_match"
REASON_NEAR_WORK = "near_work"
REASON_FAMILY_FIT = "family_fit"
REASON_DISTRICT_OUTLOOK = "district_outlook"
REASON_SAFETY_MARGIN = "safety_margin"
REASON_DOWNGRADED = "downgraded"
# buy vs rent
REASON_SHORT_HORIZON = "short_horizon"
REASON_NEAR_RETIREMENT_RENT = "near_retirement_rent"
REASON_HIGH_INFLATION = "high_inflation"
REASON_MODERATE_INFLATION = "moderate_inflation"
REASON_STRONG_CAPACITY = "strong_capacity"
REASON_HIGH_RATIO_RENT = "high_ratio_rent"
REASON_NO_INCOME_RENT = "no_income_rent"
REASON_LARGE_DOWN_PAYMENT_RENT = "large_down_payment_rent"
REASON_REQUIRED_DOWN_PAYMENT = "required_down_payment"
REASON_PAYMENT_WITHIN_BUDGET = "payment_within_budget"
REASON_NO_PROPERTY_RENT = "no_property_rent"
# tier search
REASON_VILLA_LARGE_FAMILY = "villa_large_family"
REASON_VILLA_BUDGET = "villa_budget"
REASON_DUPLEX_FAMILY = "duplex_family"
REASON_DUPLEX_SPACE = "duplex_space"
REASON_APARTMENT_SMALL_FAMILY = "apartment_small_family"
REASON_APARTMENT_ECONOMY = "apartment_economy"
REASON_LAND_INVESTMENT = "land_investment"
REASON_RENT_FLEXIBILITY = "rent_flexibility"
REASON_IMPROVE_FINANCES = "improve_finances"


class InputError(ValueError):
    """Raised at the input boundary; *field* names the offending input."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


@dataclass(frozen=True)
class DerivationStep:
    code: str
    value: Decimal


@dataclass(frozen=True)
class Reason:
    code: str
    params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def of(cls, code: str, **params: Any) -> "Reason":
        return cls(code=code, params=params)


@dataclass(frozen=True)
class HouseholdProfile:
    monthly_income: Decimal
    monthly_obligations: Decimal
    age: int
    family_size: int = 1
    required_rooms: int = 1
    expected_salary_increase_pct: Decimal = DEFAULT_SALARY_INCREASE_PCT

    def __post_init__(self) -> None:
        if self.monthly_income <= ZERO:
            raise InputError("monthly_income", "Monthly income must be > 0.")
        if self.monthly_obligations < ZERO:
            raise InputError("monthly_obligations", "Monthly obligations cannot be negative.")
        if not MIN_AGE <= self.age <= MAX_AGE:
            raise InputError("age", f"Age must be between {MIN_AGE} and {MAX_AGE}.")
        if self.family_size < 1:
            raise InputError("family_size", "Family size must be at least 1.")
        if self.required_rooms < 1:
            raise InputError("required_rooms", "Required rooms must be at least 1.")
        if self.expected_salary_increase_pct < ZERO:
            raise InputError(
                "expected_salary_increase_pct", "Expected salary increase cannot be negative."
            )


@dataclass(frozen=True)
class FinancingTerms:
    annual_interest_rate_pct: Decimal = DEFAULT_INTEREST_RATE_PCT
    loan_term_years: int = DEFAULT_LOAN_YEARS
    down_payment_amount: Optional[Decimal] = None  # None means 'no own down payment'

    def __post_init__(self) -> None:
        if self.annual_interest_rate_pct < ZERO:
            raise InputError("interest_rate", "Interest rate cannot be negative.")
        if not 1 <= self.loan_term_years <= MAX_LOAN_YEARS:
            raise InputError(
                "loan_years", f"Loan term must be between 1 and {MAX_LOAN_YEARS} years."
            )
        if self.down_payment_amount is not None and self.down_payment_amount < ZERO:
            raise InputError("down_payment", "Down payment cannot be negative.")
