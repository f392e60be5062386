"""Unit tests for advisor.py — buy-vs-rent rules and the planning pipeline."""
from decimal import Decimal

import pytest

from housing_budget.advisor import BUY, RENT, analyze, compose_decision
from housing_budget.budget import BudgetResult
from housing_budget.calculator import max_loan_for_payment, round_money
from housing_budget.catalog import load_catalog
from housing_budget.matcher import NO_DATA
from housing_budget.models import (
    REASON_HIGH_INFLATION, REASON_HIGH_RATIO_RENT, REASON_IMPROVE_FINANCES,
    REASON_LARGE_DOWN_PAYMENT_RENT, REASON_MODERATE_INFLATION, REASON_NEAR_RETIREMENT_RENT,
    REASON_NO_INCOME_RENT, REASON_NO_PROPERTY_RENT, REASON_PAYMENT_WITHIN_BUDGET,
    REASON_REQUIRED_DOWN_PAYMENT, REASON_SHORT_HORIZON, REASON_STRONG_CAPACITY, HouseholdProfile,
)

ZERO = Decimal("0")
RIYADH = "الرياض"


def _budget(ratio="0.35", max_budget="1000000", affordable=True) -> BudgetResult:
    return BudgetResult(
        max_budget=Decimal(max_budget),
        monthly_payment=ZERO,
        down_payment=ZERO,
        loan_amount=ZERO,
        loan_term_years=25,
        affordability_ratio=Decimal(ratio),
        affordable=affordable,
        derivation_steps=(),
    )


def _decide(net="18000", age=30, years=35, inflation="0.05", **budget_kwargs):
    return compose_decision(
        age=age,
        years_until_retirement=years,
        net_income=Decimal(net),
        budget=_budget(**budget_kwargs),
        inflation_rate=Decimal(inflation) if inflation is not None else None,
    )


def _codes(decision):
    return [reason.code for reason in decision.reasons]


def _profile(**kwargs) -> HouseholdProfile:
    defaults = dict(
        monthly_income=Decimal("20000"),
        monthly_obligations=Decimal("2000"),
        age=30,
    )
    defaults.update(kwargs)
    return HouseholdProfile(**defaults)


class TestComposeDecision:
    def test_payment_within_budget(self):
        decision = _decide(net="30000", ratio="0.35")
        assert decision.recommended == BUY
        assert decision.financing_option == "mortgage"
        assert decision.loan_term_years == 25
        assert decision.down_payment == Decimal("200000.00")
        assert decision.loan_amount == Decimal("800000.00")
        assert _codes(decision) == [REASON_MODERATE_INFLATION, REASON_PAYMENT_WITHIN_BUDGET]

    def test_short_horizon_forces_rent(self):
        decision = _decide(age=63, years=2)
        assert decision.recommended == RENT
        assert decision.monthly_payment == ZERO
        assert _codes(decision)[:2] == [REASON_SHORT_HORIZON, REASON_NEAR_RETIREMENT_RENT]

    def test_short_horizon_note_only(self):
        decision = _decide(net="30000", age=55, years=10)
        assert decision.recommended == BUY
        assert REASON_SHORT_HORIZON in _codes(decision)
        assert REASON_NEAR_RETIREMENT_RENT not in _codes(decision)
        assert decision.loan_term_years == 15

    def test_high_inflation_note(self):
        decision = _decide(net="30000", inflation="0.06")
        assert REASON_HIGH_INFLATION in _codes(decision)

    def test_unknown_city_skips_inflation_note(self):
        decision = _decide(net="30000", inflation=None)
        assert REASON_HIGH_INFLATION not in _codes(decision)
        assert REASON_MODERATE_INFLATION not in _codes(decision)

    def test_high_ratio_forces_rent(self):
        decision = _decide(ratio="0.46")
        assert decision.recommended == RENT
        assert REASON_HIGH_RATIO_RENT in _codes(decision)

    def test_strong_capacity_note(self):
        decision = _decide(net="30000", ratio="0.20")
        assert decision.recommended == BUY
        assert REASON_STRONG_CAPACITY in _codes(decision)

    def test_unaffordable_budget_forces_rent(self):
        decision = _decide(net="0", ratio="0", max_budget="0", affordable=False)
        assert decision.recommended == RENT
        assert REASON_NO_INCOME_RENT in _codes(decision)

    def test_required_down_payment(self):
        decision = _decide(net="8000")
        cap_loan = max_loan_for_payment(Decimal("2800"), Decimal("4.0"), 25)
        assert decision.recommended == BUY
        assert decision.monthly_payment == Decimal("2800.00")
        assert decision.loan_amount == round_money(cap_loan)
        assert decision.down_payment == round_money(Decimal("1000000") - cap_loan)
        assert REASON_REQUIRED_DOWN_PAYMENT in _codes(decision)

    def test_large_down_payment_forces_rent(self):
        decision = _decide(net="5000")
        assert decision.recommended == RENT
        assert REASON_LARGE_DOWN_PAYMENT_RENT in _codes(decision)


class TestAnalyze:
    @pytest.fixture(scope="class")
    def catalog(self):
        return load_catalog()

    def test_reference_scenario(self, catalog):
        report = analyze(_profile(), RIYADH, "شمال الرياض", catalog, Decimal("4"))
        assert report.net_income == Decimal("18000.00")
        assert report.budget.monthly_payment == Decimal("6300.00")
        assert report.budget.loan_term_years == 25
        assert report.budget.affordability_ratio == Decimal("0.35")
        assert report.budget.max_budget > ZERO
        assert report.match.found
        assert report.is_affordable
        assert report.decision.recommended == BUY
        assert report.fallback is None

    def test_age_63_recommends_rent(self, catalog):
        report = analyze(_profile(age=63), RIYADH, "شمال الرياض", catalog)
        assert report.retirement.years_until_retirement == 2
        assert report.budget.loan_term_years == 7
        assert report.decision.recommended == RENT

    def test_unknown_city(self, catalog):
        report = analyze(_profile(), "مدينة غير موجودة", "", catalog)
        assert report.match.status == NO_DATA
        assert report.fallback is None
        assert not report.is_affordable

    def test_no_match_gets_cheapest_fallback(self, catalog):
        profile = _profile(monthly_income=Decimal("3000"), monthly_obligations=ZERO)
        report = analyze(profile, RIYADH, "جنوب الرياض", catalog)
        assert not report.match.found
        assert report.fallback is not None
        assert report.fallback.action == "rent"
        assert report.fallback.neighborhood == "النسيم"
        assert report.fallback.reasons[0].code == REASON_IMPROVE_FINANCES
        assert report.decision.recommended == RENT
        assert report.decision.loan_amount == ZERO
        assert report.decision.reasons[-1].code == REASON_NO_PROPERTY_RENT
