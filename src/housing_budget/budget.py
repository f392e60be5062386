"""Maximum purchase budget from mortgage capacity.

Inverts the affordability ceiling (a share of net income) and the annuity
formula to find the largest loan, then grosses it up by the assumed down
payment. Each intermediate figure is recorded as a DerivationStep so the
result can be explained line by line.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from .calculator import max_loan_for_payment, round_money
from .config import (
    DEFAULT_INTEREST_RATE_PCT, DEFAULT_POLICY, DEFAULT_SALARY_INCREASE_PCT, ZERO,
    AffordabilityPolicy,
)
from .income import project_retirement
from .models import (
    STEP_AFFORDABILITY_RATIO, STEP_DOWN_PAYMENT, STEP_INTEREST_RATE, STEP_LOAN_AMOUNT,
    STEP_LOAN_TERM, STEP_MAX_MONTHLY_PAYMENT, STEP_NO_MORTGAGE_BUDGET,
    STEP_RETIREMENT_ADJUSTMENT, STEP_TOTAL_BUDGET, DerivationStep,
)

_RATIO_PLACES = Decimal("0.0001")


@dataclass(frozen=True)
class BudgetResult:
    max_budget: Decimal
    monthly_payment: Decimal
    down_payment: Decimal
    loan_amount: Decimal
    loan_term_years: int
    affordability_ratio: Decimal
    affordable: bool                       # False when there is no disposable income
    derivation_steps: tuple[DerivationStep, ...]

    def step_value(self, code: str) -> Optional[Decimal]:
        for step in self.derivation_steps:
            if step.code == code:
                return step.value
        return None


def loan_term_for(years_until_retirement: int, policy: Optional[AffordabilityPolicy] = None) -> int:
    """Loan term in years, shortened as retirement approaches."""
    policy = policy or DEFAULT_POLICY
    return min(policy.max_loan_term_years, years_until_retirement + policy.loan_term_buffer_years)


def retirement_reduction_factor(
    years_until_retirement: int, policy: Optional[AffordabilityPolicy] = None
) -> Optional[Decimal]:
    """Budget multiplier for buyers close to retirement, or None when not applicable."""
    policy = policy or DEFAULT_POLICY
    if years_until_retirement >= policy.near_retirement_years:
        return None
    shortfall = policy.near_retirement_years - years_until_retirement
    factor = policy.near_retirement_base_factor - shortfall * policy.near_retirement_step
    return max(policy.near_retirement_floor, factor)


def solve_budget(
    net_income: Decimal,
    age: int,
    salary_increase_pct: Decimal = DEFAULT_SALARY_INCREASE_PCT,
    interest_rate_pct: Decimal = DEFAULT_INTEREST_RATE_PCT,
    policy: Optional[AffordabilityPolicy] = None,
) -> BudgetResult:
    """Compute the maximum property budget for a household.

    With no loan term left (retirement reached and no buffer) the mortgage
    formula is skipped and the budget falls back to a few years of net income.
    """
    policy = policy or DEFAULT_POLICY
    steps: list[DerivationStep] = []

    retirement = project_retirement(age, net_income, salary_increase_pct, policy)
    years = retirement.years_until_retirement

    max_monthly_payment = net_income * policy.max_payment_ratio
    steps.append(DerivationStep(STEP_MAX_MONTHLY_PAYMENT, round_money(max_monthly_payment)))

    loan_term = loan_term_for(years, policy)
    steps.append(DerivationStep(STEP_LOAN_TERM, Decimal(loan_term)))

    monthly_payment = ZERO
    loan_amount = ZERO
    down_payment = ZERO

    if loan_term > 0:
        loan_amount = max_loan_for_payment(max_monthly_payment, interest_rate_pct, loan_term)
        total_budget = loan_amount / (1 - policy.down_payment_ratio)
        down_payment = total_budget * policy.down_payment_ratio
        max_budget = total_budget
        monthly_payment = max_monthly_payment

        steps.append(DerivationStep(STEP_INTEREST_RATE, Decimal(interest_rate_pct)))
        steps.append(DerivationStep(STEP_LOAN_AMOUNT, round_money(loan_amount)))
        steps.append(DerivationStep(STEP_DOWN_PAYMENT, round_money(down_payment)))
        steps.append(DerivationStep(STEP_TOTAL_BUDGET, round_money(max_budget)))

        factor = retirement_reduction_factor(years, policy)
        if factor is not None:
            max_budget = max_budget * factor
            steps.append(DerivationStep(STEP_RETIREMENT_ADJUSTMENT, round_money(max_budget)))
    else:
        max_budget = net_income * 12 * policy.no_mortgage_income_years
        steps.append(DerivationStep(STEP_NO_MORTGAGE_BUDGET, round_money(max_budget)))

    affordable = net_income > ZERO
    if affordable:
        ratio = (monthly_payment / net_income).quantize(_RATIO_PLACES, rounding=ROUND_HALF_UP)
    else:
        ratio = ZERO
    steps.append(DerivationStep(STEP_AFFORDABILITY_RATIO, ratio))

    return BudgetResult(
        max_budget=round_money(max_budget),
        monthly_payment=round_money(monthly_payment),
        down_payment=round_money(down_payment),
        loan_amount=round_money(loan_amount),
        loan_term_years=loan_term,
        affordability_ratio=ratio,
        affordable=affordable,
        derivation_steps=tuple(steps),
    )
