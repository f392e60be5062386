"""Integration tests for the CLI — full pipeline from options to rendered output."""
import pytest
from click.testing import CliRunner

from housing_budget import cli
from housing_budget.cli import main

_PLAN_ARGS = [
    "plan", "--income", "20000", "--obligations", "2000", "--age", "30",
    "--city", "riyadh", "--work-location", "شمال الرياض", "--no-date",
]


@pytest.fixture
def runner():
    return CliRunner()


class TestPlanCommand:
    def test_full_options(self, runner):
        result = runner.invoke(main, _PLAN_ARGS, input="exit\n")
        assert result.exit_code == 0, result.output
        assert "Housing Budget Advisor" in result.output
        assert "Recommendation: BUY" in result.output
        assert "Goodbye." in result.output

    def test_near_retirement_recommends_rent(self, runner):
        args = [a if a != "30" else "63" for a in _PLAN_ARGS]
        result = runner.invoke(main, args, input="exit\n")
        assert result.exit_code == 0, result.output
        assert "Recommendation: RENT" in result.output

    def test_prompts_for_missing_values(self, runner):
        result = runner.invoke(
            main, ["plan", "--no-date"],
            input="20000\n2000\n30\nriyadh\nشمال الرياض\nexit\n",
        )
        assert result.exit_code == 0, result.output
        assert "Recommendation: BUY" in result.output

    def test_reprompts_on_bad_value(self, runner):
        result = runner.invoke(
            main, ["plan", "--no-date", "--obligations", "0", "--age", "30", "--city", "riyadh",
                   "--work-location", "شمال الرياض"],
            input="abc\n500\n20000\nexit\n",
        )
        assert result.exit_code == 0, result.output
        assert "Monthly income must be a number" in result.output
        assert "Monthly income must be at least 1000" in result.output

    def test_invalid_option_exits(self, runner):
        result = runner.invoke(main, ["plan", "--income", "abc", "--no-date"])
        assert result.exit_code == 1
        assert "Invalid value for --income" in result.output

    def test_steps_and_reasons(self, runner):
        result = runner.invoke(main, _PLAN_ARGS, input="steps\nreasons\nexit\n")
        assert result.exit_code == 0, result.output
        assert "Loan term: 25 years" in result.output
        assert "Close to your work in" in result.output

    def test_update_age(self, runner):
        result = runner.invoke(main, _PLAN_ARGS, input="update\nage\n63\nexit\n")
        assert result.exit_code == 0, result.output
        assert "Recommendation: BUY" in result.output
        assert "Recommendation: RENT" in result.output

    def test_unknown_update_field(self, runner):
        result = runner.invoke(main, _PLAN_ARGS, input="update\ncolour\nexit\n")
        assert result.exit_code == 0, result.output
        assert "Unknown field 'colour'" in result.output

    def test_unknown_city(self, runner):
        args = ["plan", "--income", "20000", "--obligations", "0", "--age", "30",
                "--city", "nowhere", "--no-date"]
        result = runner.invoke(main, args, input="exit\n")
        assert result.exit_code == 0, result.output
        assert "No market data available for nowhere" in result.output

    def test_end_of_input(self, runner):
        result = runner.invoke(main, _PLAN_ARGS, input="")
        assert result.exit_code == 0, result.output
        assert "Session ended." in result.output

    def test_date_failure_is_silent(self, runner, monkeypatch):
        def failing():
            raise cli.FetchError("offline")

        monkeypatch.setattr(cli, "fetch_today", failing)
        args = [a for a in _PLAN_ARGS if a != "--no-date"]
        result = runner.invoke(main, args, input="exit\n")
        assert result.exit_code == 0, result.output
        assert "offline" not in result.output


class TestQuickCommand:
    def test_cash_estimate(self, runner):
        result = runner.invoke(main, [
            "quick", "--income", "15000", "--obligations", "1000", "--financing", "cash",
            "--city", "riyadh", "--region", "جنوب الرياض", "--family-size", "3",
        ])
        assert result.exit_code == 0, result.output
        assert "235,200 SAR" in result.output
        assert "Buy:" in result.output
        assert "suggested 2 bedroom(s), 2 bathroom(s)" in result.output

    def test_mortgage_with_down_payment(self, runner):
        result = runner.invoke(main, [
            "quick", "--income", "20000", "--down-payment", "150000", "--rate", "5",
            "--loan-years", "20", "--city", "riyadh", "--region", "جنوب الرياض",
        ])
        assert result.exit_code == 0, result.output
        assert "Your down payment: 150,000 SAR" in result.output

    def test_prompts_for_region(self, runner):
        result = runner.invoke(
            main, ["quick", "--income", "15000", "--city", "jeddah"],
            input="nowhere\nشمال جدة\n",
        )
        assert result.exit_code == 0, result.output
        assert "Unknown region 'nowhere'" in result.output

    def test_unknown_city(self, runner):
        result = runner.invoke(main, ["quick", "--income", "15000", "--city", "nowhere"])
        assert result.exit_code == 0, result.output
        assert "No market data available for nowhere" in result.output

    def test_invalid_loan_years(self, runner):
        result = runner.invoke(main, [
            "quick", "--income", "15000", "--loan-years", "40", "--city", "riyadh",
            "--region", "جنوب الرياض",
        ])
        assert result.exit_code == 1
        assert "Loan term must be at most 30" in result.output


class TestCitiesCommand:
    def test_lists_catalog(self, runner):
        result = runner.invoke(main, ["cities"])
        assert result.exit_code == 0, result.output
        for alias in ("riyadh", "jeddah", "makkah", "madinah", "dammam"):
            assert alias in result.output
