"""Buy-vs-rent decision and the end-to-end planning pipeline.

Decision rules, applied in order over a default of "buy":
1. short horizon  → note; too few working years left forces rent.
2. city inflation → favour-buy note, or a both-viable note.
3. ratio          → above the rent threshold forces rent; below the strong
                    threshold adds a capacity note.
4. mortgage check → if the 80 % loan overshoots the payment cap, shrink the
                    loan and raise the down payment; a down payment above
                    half the budget forces rent.

`analyze` also turns the decision to rent when no property in the city fits
the budget and a rental fallback was found.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .budget import BudgetResult, loan_term_for, solve_budget
from .calculator import max_loan_for_payment, monthly_payment, round_money
from .catalog import CityCatalog
from .config import DEFAULT_INTEREST_RATE_PCT, DEFAULT_POLICY, ZERO, AffordabilityPolicy, Ownership
from .income import RetirementProjection, analyze_income, project_retirement
from .matcher import NO_MATCH, PropertyMatch, match_property
from .models import (
    REASON_HIGH_INFLATION, REASON_HIGH_RATIO_RENT, REASON_LARGE_DOWN_PAYMENT_RENT,
    REASON_MODERATE_INFLATION, REASON_NEAR_RETIREMENT_RENT, REASON_NO_INCOME_RENT,
    REASON_NO_PROPERTY_RENT, REASON_PAYMENT_WITHIN_BUDGET, REASON_REQUIRED_DOWN_PAYMENT,
    REASON_SHORT_HORIZON, REASON_STRONG_CAPACITY, HouseholdProfile, Reason,
)
from .quick import TierOption, rental_fallback

logger = logging.getLogger(__name__)

BUY = "buy"
RENT = "rent"


@dataclass(frozen=True)
class OwnershipDecision:
    recommended: Ownership
    financing_option: str     # mortgage / rent
    monthly_payment: Decimal
    loan_amount: Decimal
    loan_term_years: int
    down_payment: Decimal
    reasons: tuple[Reason, ...]


@dataclass(frozen=True)
class AffordabilityReport:
    profile: HouseholdProfile
    city: str
    work_location: str
    net_income: Decimal
    retirement: RetirementProjection
    budget: BudgetResult
    match: PropertyMatch
    decision: OwnershipDecision
    fallback: Optional[TierOption] = None

    @property
    def is_affordable(self) -> bool:
        return self.match.found and self.match.price <= self.budget.max_budget


def _rent(reasons: list[Reason]) -> OwnershipDecision:
    return OwnershipDecision(
        recommended=RENT,
        financing_option=RENT,
        monthly_payment=ZERO,
        loan_amount=ZERO,
        loan_term_years=0,
        down_payment=ZERO,
        reasons=tuple(reasons),
    )


def compose_decision(
    age: int,
    years_until_retirement: int,
    net_income: Decimal,
    budget: BudgetResult,
    inflation_rate: Optional[Decimal],
    interest_rate_pct: Decimal = DEFAULT_INTEREST_RATE_PCT,
    policy: Optional[AffordabilityPolicy] = None,
) -> OwnershipDecision:
    """Apply the buy-vs-rent rules to a solved budget.

    *inflation_rate* is None for cities missing from the catalog; the
    inflation note is then skipped.
    """
    policy = policy or DEFAULT_POLICY
    reasons: list[Reason] = []
    force_rent = False

    if age > policy.short_horizon_age or years_until_retirement < policy.near_retirement_years:
        reasons.append(Reason.of(REASON_SHORT_HORIZON, years=years_until_retirement))
        if years_until_retirement < policy.force_rent_years:
            reasons.append(Reason.of(REASON_NEAR_RETIREMENT_RENT, years=years_until_retirement))
            force_rent = True

    if inflation_rate is not None:
        if inflation_rate > policy.high_inflation_rate:
            reasons.append(Reason.of(REASON_HIGH_INFLATION, rate=inflation_rate))
        else:
            reasons.append(Reason.of(REASON_MODERATE_INFLATION, rate=inflation_rate))

    ratio = budget.affordability_ratio
    if not budget.affordable:
        reasons.append(Reason.of(REASON_NO_INCOME_RENT))
        force_rent = True
    elif ratio > policy.rent_ratio_threshold:
        reasons.append(Reason.of(REASON_HIGH_RATIO_RENT, ratio=ratio))
        force_rent = True
    elif ratio < policy.strong_buy_ratio:
        reasons.append(Reason.of(REASON_STRONG_CAPACITY, ratio=ratio))

    if force_rent:
        logger.debug("Decision: rent (%d years to retirement, ratio %s)", years_until_retirement, ratio)
        return _rent(reasons)

    term = loan_term_for(years_until_retirement, policy)
    total = budget.max_budget
    down = total * policy.down_payment_ratio
    loan = total - down
    payment = monthly_payment(loan, interest_rate_pct, term)
    cap = net_income * policy.max_payment_ratio

    if round_money(payment) > round_money(cap):
        loan = max_loan_for_payment(cap, interest_rate_pct, term)
        down = total - loan
        payment = cap
        if down > total * policy.rent_down_payment_ratio:
            reasons.append(Reason.of(REASON_LARGE_DOWN_PAYMENT_RENT, down_payment=round_money(down)))
            logger.debug("Decision: rent (down payment %s of budget %s)", down, total)
            return _rent(reasons)
        reasons.append(Reason.of(REASON_REQUIRED_DOWN_PAYMENT, down_payment=round_money(down)))
    else:
        reasons.append(Reason.of(REASON_PAYMENT_WITHIN_BUDGET, payment=round_money(payment)))

    logger.debug("Decision: buy with %s loan over %d years", round_money(loan), term)
    return OwnershipDecision(
        recommended=BUY,
        financing_option="mortgage",
        monthly_payment=round_money(payment),
        loan_amount=round_money(loan),
        loan_term_years=term,
        down_payment=round_money(down),
        reasons=tuple(reasons),
    )


def analyze(
    profile: HouseholdProfile,
    city: str,
    work_location: str,
    catalog: CityCatalog,
    interest_rate_pct: Decimal = DEFAULT_INTEREST_RATE_PCT,
    policy: Optional[AffordabilityPolicy] = None,
) -> AffordabilityReport:
    """Run income → retirement → budget → match → decision for one household."""
    policy = policy or DEFAULT_POLICY
    net_income = analyze_income(profile.monthly_income, profile.monthly_obligations)
    retirement = project_retirement(
        profile.age, net_income, profile.expected_salary_increase_pct, policy
    )
    budget = solve_budget(
        net_income, profile.age, profile.expected_salary_increase_pct, interest_rate_pct, policy
    )
    match = match_property(
        catalog, city, work_location, budget.max_budget,
        profile.family_size, profile.required_rooms, policy,
    )

    city_profile = catalog.get(city)
    inflation = city_profile.market.inflation_rate if city_profile is not None else None
    decision = compose_decision(
        profile.age, retirement.years_until_retirement, net_income, budget,
        inflation, interest_rate_pct, policy,
    )

    fallback = None
    if not match.found:
        fallback = rental_fallback(catalog, city, work_location, net_income, policy)
        logger.debug("No property match (%s); fallback %s", match.status, fallback)
        if match.status == NO_MATCH and fallback is not None:
            decision = _rent(list(decision.reasons) + [Reason.of(REASON_NO_PROPERTY_RENT)])

    return AffordabilityReport(
        profile=profile,
        city=city,
        work_location=work_location,
        net_income=round_money(net_income),
        retirement=retirement,
        budget=budget,
        match=match,
        decision=decision,
        fallback=fallback,
    )
