"""Unit tests for validation.py and the model constructors."""
from decimal import Decimal

import pytest

from housing_budget.models import FinancingTerms, HouseholdProfile, InputError
from housing_budget.validation import parse_decimal, parse_int


class TestParseDecimal:
    def test_accepts_comma_and_spaces(self):
        assert parse_decimal("monthly_income", " 12 500,50 ") == Decimal("12500.50")

    def test_non_numeric(self):
        with pytest.raises(InputError, match="Monthly income must be a number") as exc_info:
            parse_decimal("monthly_income", "abc")
        assert exc_info.value.field == "monthly_income"

    def test_nan_rejected(self):
        with pytest.raises(InputError, match="must be a number"):
            parse_decimal("interest_rate", "NaN")

    @pytest.mark.parametrize("field,raw,message", [
        ("monthly_income", "999", "at least 1000"),
        ("monthly_obligations", "-1", "at least 0"),
        ("salary_increase", "21", "at most 20"),
        ("interest_rate", "15.5", "at most 15"),
        ("down_payment", "-100", "at least 0"),
    ])
    def test_limits(self, field, raw, message):
        with pytest.raises(InputError, match=message) as exc_info:
            parse_decimal(field, raw)
        assert exc_info.value.field == field

    def test_bounds_are_inclusive(self):
        assert parse_decimal("monthly_income", "1000") == Decimal("1000")
        assert parse_decimal("interest_rate", "15") == Decimal("15")


class TestParseInt:
    @pytest.mark.parametrize("field,raw,expected", [
        ("age", "18", 18), ("age", "90", 90), ("family_size", "20", 20),
        ("rooms", "10", 10), ("loan_years", "1", 1),
    ])
    def test_valid(self, field, raw, expected):
        assert parse_int(field, raw) == expected

    @pytest.mark.parametrize("field,raw", [
        ("age", "17"), ("age", "91"), ("family_size", "0"), ("family_size", "21"),
        ("rooms", "11"), ("loan_years", "31"), ("loan_years", "0"),
    ])
    def test_out_of_range(self, field, raw):
        with pytest.raises(InputError) as exc_info:
            parse_int(field, raw)
        assert exc_info.value.field == field

    def test_not_whole(self):
        with pytest.raises(InputError, match="Age must be a whole number"):
            parse_int("age", "30.5")


class TestHouseholdProfile:
    def _profile(self, **kwargs):
        defaults = dict(monthly_income=Decimal("10000"), monthly_obligations=Decimal("0"), age=30)
        defaults.update(kwargs)
        return HouseholdProfile(**defaults)

    @pytest.mark.parametrize("kwargs,field", [
        (dict(monthly_income=Decimal("0")), "monthly_income"),
        (dict(monthly_obligations=Decimal("-1")), "monthly_obligations"),
        (dict(age=17), "age"),
        (dict(age=91), "age"),
        (dict(family_size=0), "family_size"),
        (dict(required_rooms=0), "required_rooms"),
    ])
    def test_invariants(self, kwargs, field):
        with pytest.raises(InputError) as exc_info:
            self._profile(**kwargs)
        assert exc_info.value.field == field

    def test_input_error_is_value_error(self):
        with pytest.raises(ValueError):
            self._profile(age=10)


class TestFinancingTerms:
    def test_defaults(self):
        terms = FinancingTerms()
        assert terms.annual_interest_rate_pct == Decimal("4.0")
        assert terms.loan_term_years == 25
        assert terms.down_payment_amount is None

    @pytest.mark.parametrize("kwargs,field", [
        (dict(annual_interest_rate_pct=Decimal("-1")), "interest_rate"),
        (dict(loan_term_years=31), "loan_years"),
        (dict(loan_term_years=0), "loan_years"),
        (dict(down_payment_amount=Decimal("-5")), "down_payment"),
    ])
    def test_invariants(self, kwargs, field):
        with pytest.raises(InputError) as exc_info:
            FinancingTerms(**kwargs)
        assert exc_info.value.field == field
