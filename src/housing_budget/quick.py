"""Quick estimator: form-style budget plus a tier-based neighbourhood search.

Budget:
- cash      → a share of net income saved for a fixed number of years.
- mortgage  → largest loan serviceable at the payment ceiling, plus the
              buyer's own down payment (or an assumed share of the loan).

Search, over the region's neighbourhoods from cheapest tier upwards:
1. buy  — villa, duplex, apartment, land: first flat price within budget.
2. rent — apartment, duplex, villa: first rent within the rent ceiling.
3. the cheapest apartment to rent, flagged as not affordable.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .calculator import max_loan_for_payment, round_money
from .catalog import CityCatalog, CityProfile, Neighborhood
from .config import (
    DEFAULT_POLICY, TIER_ORDER, ZERO, AffordabilityPolicy, FinancingType, Ownership, PropertyType,
    Tier,
)
from .income import analyze_income
from .models import (
    REASON_APARTMENT_ECONOMY, REASON_APARTMENT_SMALL_FAMILY, REASON_DUPLEX_FAMILY,
    REASON_DUPLEX_SPACE, REASON_IMPROVE_FINANCES, REASON_LAND_INVESTMENT, REASON_NO_DATA,
    REASON_RENT_FLEXIBILITY, REASON_VILLA_BUDGET, REASON_VILLA_LARGE_FAMILY,
    STEP_ASSUMED_DOWN_PAYMENT, STEP_CASH_BUDGET, STEP_LOAN_AMOUNT, STEP_MAX_MONTHLY_PAYMENT,
    STEP_MONTHLY_SAVINGS, STEP_NET_INCOME, STEP_OWN_DOWN_PAYMENT, STEP_TOTAL_BUDGET,
    DerivationStep, FinancingTerms, Reason,
)

logger = logging.getLogger(__name__)

_BUY_ORDER = ("villa", "duplex", "apartment", "land")
_RENT_ORDER = ("apartment", "duplex", "villa")


@dataclass(frozen=True)
class QuickBudget:
    financing_type: FinancingType
    net_income: Decimal
    max_budget: Decimal
    monthly_payment: Decimal
    loan_amount: Decimal
    down_payment: Decimal
    derivation_steps: tuple[DerivationStep, ...]


@dataclass(frozen=True)
class TierOption:
    action: Ownership
    property_type: PropertyType
    neighborhood: str
    tier: Tier
    price: Decimal
    size: int
    rent: Decimal
    affordable: bool
    reasons: tuple[Reason, ...]


@dataclass(frozen=True)
class QuickEstimate:
    city: str
    region: str
    budget: QuickBudget
    option: Optional[TierOption]
    reasons: tuple[Reason, ...] = ()

    @property
    def is_rent_only(self) -> bool:
        return self.option is None or self.option.action == "rent"


def default_required_rooms(family_size: int) -> int:
    if family_size <= 2:
        return 1
    if family_size <= 4:
        return 2
    if family_size <= 6:
        return 3
    return 4


def suggest_rooms(family_size: int) -> tuple[int, int]:
    """(bedrooms, bathrooms) for a household of *family_size*."""
    if family_size <= 2:
        return 1, 1
    if family_size <= 4:
        return 2, 2
    if family_size <= 6:
        return 3, 2
    if family_size <= 8:
        return 4, 3
    return 5, 3


def quick_budget(
    net_income: Decimal,
    financing_type: FinancingType,
    terms: Optional[FinancingTerms] = None,
    policy: Optional[AffordabilityPolicy] = None,
) -> QuickBudget:
    if financing_type not in ("cash", "mortgage"):
        raise ValueError(f"Unknown financing type '{financing_type}'. Use 'cash' or 'mortgage'.")
    policy = policy or DEFAULT_POLICY
    terms = terms or FinancingTerms()
    steps = [DerivationStep(STEP_NET_INCOME, round_money(net_income))]

    if financing_type == "cash":
        monthly_savings = net_income * policy.max_payment_ratio
        budget = monthly_savings * 12 * policy.cash_saving_years
        steps.append(DerivationStep(STEP_MONTHLY_SAVINGS, round_money(monthly_savings)))
        steps.append(DerivationStep(STEP_CASH_BUDGET, round_money(budget)))
        return QuickBudget(
            financing_type=financing_type,
            net_income=net_income,
            max_budget=round_money(budget),
            monthly_payment=ZERO,
            loan_amount=ZERO,
            down_payment=ZERO,
            derivation_steps=tuple(steps),
        )

    payment = net_income * policy.max_payment_ratio
    loan = max_loan_for_payment(payment, terms.annual_interest_rate_pct, terms.loan_term_years)
    steps.append(DerivationStep(STEP_MAX_MONTHLY_PAYMENT, round_money(payment)))
    steps.append(DerivationStep(STEP_LOAN_AMOUNT, round_money(loan)))

    if terms.down_payment_amount:
        down = terms.down_payment_amount
        steps.append(DerivationStep(STEP_OWN_DOWN_PAYMENT, round_money(down)))
    else:
        down = loan * policy.own_down_payment_ratio
        steps.append(DerivationStep(STEP_ASSUMED_DOWN_PAYMENT, round_money(down)))

    budget = loan + down
    steps.append(DerivationStep(STEP_TOTAL_BUDGET, round_money(budget)))

    return QuickBudget(
        financing_type=financing_type,
        net_income=net_income,
        max_budget=round_money(budget),
        monthly_payment=round_money(payment),
        loan_amount=round_money(loan),
        down_payment=round_money(down),
        derivation_steps=tuple(steps),
    )


def sorted_neighborhoods(city: CityProfile, region: str) -> list[Neighborhood]:
    """Neighbourhoods of *region*, cheapest tier first (stable within a tier)."""
    return sorted(city.neighborhoods(region), key=lambda n: TIER_ORDER.index(n.tier))


def _buy_reason(property_type: str, family_size: int) -> Reason:
    if property_type == "villa":
        code = REASON_VILLA_LARGE_FAMILY if family_size >= 6 else REASON_VILLA_BUDGET
    elif property_type == "duplex":
        code = REASON_DUPLEX_FAMILY if family_size >= 4 else REASON_DUPLEX_SPACE
    elif property_type == "apartment":
        code = REASON_APARTMENT_SMALL_FAMILY if family_size <= 3 else REASON_APARTMENT_ECONOMY
    else:
        code = REASON_LAND_INVESTMENT
    return Reason.of(code, family_size=family_size)


def _buy_option(
    city: CityProfile, neighborhoods: list[Neighborhood], budget: Decimal, family_size: int
) -> Optional[TierOption]:
    for property_type in _BUY_ORDER:
        for hood in neighborhoods:
            price = city.tier_price(property_type, hood.tier)
            if price is not None and price.price <= budget:
                return TierOption(
                    action="buy",
                    property_type=property_type,
                    neighborhood=hood.name,
                    tier=hood.tier,
                    price=price.price,
                    size=price.size,
                    rent=price.rent,
                    affordable=True,
                    reasons=(_buy_reason(property_type, family_size),),
                )
    return None


def rental_fallback(
    catalog: CityCatalog,
    city: str,
    region: str,
    net_income: Decimal,
    policy: Optional[AffordabilityPolicy] = None,
) -> Optional[TierOption]:
    """Best rental within the rent ceiling, else the cheapest apartment to rent.

    Returns None when the city or region has no neighbourhood data.
    """
    policy = policy or DEFAULT_POLICY
    profile = catalog.get(city)
    if profile is None:
        return None
    neighborhoods = sorted_neighborhoods(profile, region)
    if not neighborhoods:
        return None

    ceiling = net_income * policy.rent_budget_ratio
    for property_type in _RENT_ORDER:
        for hood in neighborhoods:
            price = profile.tier_price(property_type, hood.tier)
            if price is not None and ZERO < price.rent <= ceiling:
                return TierOption(
                    action="rent",
                    property_type=property_type,
                    neighborhood=hood.name,
                    tier=hood.tier,
                    price=price.price,
                    size=price.size,
                    rent=price.rent,
                    affordable=False,
                    reasons=(Reason.of(REASON_RENT_FLEXIBILITY),),
                )

    cheapest = neighborhoods[0]
    price = profile.tier_price("apartment", cheapest.tier)
    if price is None:
        return None
    logger.debug("Nothing within rent ceiling %s; suggesting %s", ceiling, cheapest.name)
    return TierOption(
        action="rent",
        property_type="apartment",
        neighborhood=cheapest.name,
        tier=cheapest.tier,
        price=price.price,
        size=price.size,
        rent=price.rent,
        affordable=False,
        reasons=(Reason.of(REASON_IMPROVE_FINANCES),),
    )


def find_tier_option(
    catalog: CityCatalog,
    city: str,
    region: str,
    budget: Decimal,
    net_income: Decimal,
    family_size: int,
    policy: Optional[AffordabilityPolicy] = None,
) -> Optional[TierOption]:
    profile = catalog.get(city)
    if profile is None:
        return None
    option = _buy_option(profile, sorted_neighborhoods(profile, region), budget, family_size)
    if option is not None:
        return option
    return rental_fallback(catalog, city, region, net_income, policy)


def quick_estimate(
    catalog: CityCatalog,
    monthly_income: Decimal,
    monthly_obligations: Decimal,
    financing_type: FinancingType,
    city: str,
    region: str,
    family_size: int,
    terms: Optional[FinancingTerms] = None,
    policy: Optional[AffordabilityPolicy] = None,
) -> QuickEstimate:
    net_income = analyze_income(monthly_income, monthly_obligations)
    budget = quick_budget(net_income, financing_type, terms, policy)
    option = find_tier_option(
        catalog, city, region, budget.max_budget, net_income, family_size, policy
    )
    reasons: tuple[Reason, ...] = ()
    if option is None:
        reasons = (Reason.of(REASON_NO_DATA, city=city),)
    return QuickEstimate(city=city, region=region, budget=budget, option=option, reasons=reasons)
