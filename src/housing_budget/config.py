"""Application-wide constants and configuration defaults.

All tuneable thresholds live here so there is a single place to adjust them.
Core functions take an optional AffordabilityPolicy; its defaults are the
constants below.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

# ── Type aliases ──────────────────────────────────────────────────────────────

Tier = Literal["budget", "heritage", "standard", "premium", "luxury"]
PropertyType = Literal["apartment", "duplex", "villa", "land"]
FinancingType = Literal["cash", "mortgage"]
Ownership = Literal["buy", "rent"]

TIER_ORDER: tuple[str, ...] = ("budget", "heritage", "standard", "premium", "luxury")

# ── Household / retirement ────────────────────────────────────────────────────

RETIREMENT_AGE: int = 65
POST_RETIREMENT_RATIO = Decimal("0.6")
DEFAULT_SALARY_INCREASE_PCT = Decimal("3")

# ── Mortgage capacity ─────────────────────────────────────────────────────────

DEFAULT_INTEREST_RATE_PCT = Decimal("4.0")
MAX_PAYMENT_RATIO = Decimal("0.35")       # share of net income a lender accepts
MAX_LOAN_TERM_YEARS: int = 25
LOAN_TERM_BUFFER_YEARS: int = 5           # a loan may run this far past retirement
DOWN_PAYMENT_RATIO = Decimal("0.20")
NEAR_RETIREMENT_YEARS: int = 15
NEAR_RETIREMENT_BASE_FACTOR = Decimal("0.95")
NEAR_RETIREMENT_STEP = Decimal("0.01")
NEAR_RETIREMENT_FLOOR = Decimal("0.8")
NO_MORTGAGE_INCOME_YEARS: int = 5

# ── Buy vs rent ───────────────────────────────────────────────────────────────

SHORT_HORIZON_AGE: int = 50
FORCE_RENT_YEARS: int = 10
HIGH_INFLATION_RATE = Decimal("0.05")
RENT_RATIO_THRESHOLD = Decimal("0.45")    # above → rent
STRONG_BUY_RATIO = Decimal("0.30")        # below → strong capacity
RENT_DOWN_PAYMENT_RATIO = Decimal("0.50") # required down payment above → rent

# ── Property matching ─────────────────────────────────────────────────────────

VILLA_FAMILY_SIZE: int = 6
VILLA_ROOMS: int = 4
VILLA_MIN_SIZE: int = 300
DUPLEX_FAMILY_SIZE: int = 4
DUPLEX_ROOMS: int = 3
DUPLEX_MIN_SIZE: int = 220
APARTMENT_BASE_SIZE: int = 90
APARTMENT_SIZE_PER_ROOM: int = 30

NEAR_WORK_POINTS = Decimal("60")
DEMAND_WEIGHT = Decimal("2.5")
GROWTH_WEIGHT = Decimal("1.5")
RENTAL_YIELD = Decimal("0.05")
SAFETY_MARGIN_RATIO = Decimal("0.9")

# ── Quick estimator ───────────────────────────────────────────────────────────

CASH_SAVING_YEARS: int = 4
DEFAULT_LOAN_YEARS: int = 25
DEFAULT_OWN_DOWN_PAYMENT_RATIO = Decimal("0.10")  # of the loan, when none is given
RENT_BUDGET_RATIO = Decimal("0.30")

# ── Form limits (input-validation boundary) ───────────────────────────────────

MIN_MONTHLY_INCOME = Decimal("1000")
MIN_AGE: int = 18
MAX_AGE: int = 90
MAX_SALARY_INCREASE_PCT = Decimal("20")
MAX_INTEREST_RATE_PCT = Decimal("15")
MAX_FAMILY_SIZE: int = 20
MAX_ROOMS: int = 10
MAX_LOAN_YEARS: int = 30

# ── Numeric convenience ───────────────────────────────────────────────────────

ZERO = Decimal("0")
CENT = Decimal("0.01")
UNIT = Decimal("1")

DATE_API_ENV = "HOUSING_BUDGET_DATE_API"
DEFAULT_DATE_API = "https://api.aladhan.com/v1"


@dataclass(frozen=True)
class AffordabilityPolicy:
    """Every heuristic threshold the calculators apply, overridable as a unit."""
    retirement_age: int = RETIREMENT_AGE
    post_retirement_ratio: Decimal = POST_RETIREMENT_RATIO
    max_payment_ratio: Decimal = MAX_PAYMENT_RATIO
    max_loan_term_years: int = MAX_LOAN_TERM_YEARS
    loan_term_buffer_years: int = LOAN_TERM_BUFFER_YEARS
    down_payment_ratio: Decimal = DOWN_PAYMENT_RATIO
    near_retirement_years: int = NEAR_RETIREMENT_YEARS
    near_retirement_base_factor: Decimal = NEAR_RETIREMENT_BASE_FACTOR
    near_retirement_step: Decimal = NEAR_RETIREMENT_STEP
    near_retirement_floor: Decimal = NEAR_RETIREMENT_FLOOR
    no_mortgage_income_years: int = NO_MORTGAGE_INCOME_YEARS
    short_horizon_age: int = SHORT_HORIZON_AGE
    force_rent_years: int = FORCE_RENT_YEARS
    high_inflation_rate: Decimal = HIGH_INFLATION_RATE
    rent_ratio_threshold: Decimal = RENT_RATIO_THRESHOLD
    strong_buy_ratio: Decimal = STRONG_BUY_RATIO
    rent_down_payment_ratio: Decimal = RENT_DOWN_PAYMENT_RATIO
    rental_yield: Decimal = RENTAL_YIELD
    safety_margin_ratio: Decimal = SAFETY_MARGIN_RATIO
    cash_saving_years: int = CASH_SAVING_YEARS
    own_down_payment_ratio: Decimal = DEFAULT_OWN_DOWN_PAYMENT_RATIO
    rent_budget_ratio: Decimal = RENT_BUDGET_RATIO


DEFAULT_POLICY = AffordabilityPolicy()
