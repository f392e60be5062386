"""Render derivation steps and reasons as text.

Pure formatting over the structured results; nothing here feeds back into
a calculation.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from .models import (
    REASON_APARTMENT_ECONOMY, REASON_APARTMENT_SMALL_FAMILY, REASON_DISTRICT_OUTLOOK,
    REASON_DOWNGRADED, REASON_DUPLEX_FAMILY, REASON_DUPLEX_SPACE, REASON_FAMILY_FIT,
    REASON_HIGH_INFLATION, REASON_HIGH_RATIO_RENT, REASON_IMPROVE_FINANCES,
    REASON_LAND_INVESTMENT, REASON_LARGE_DOWN_PAYMENT_RENT, REASON_MODERATE_INFLATION,
    REASON_NEAR_RETIREMENT_RENT, REASON_NEAR_WORK, REASON_NO_DATA, REASON_NO_INCOME_RENT,
    REASON_NO_MATCH, REASON_NO_PROPERTY_RENT, REASON_PAYMENT_WITHIN_BUDGET,
    REASON_RENT_FLEXIBILITY, REASON_REQUIRED_DOWN_PAYMENT, REASON_SAFETY_MARGIN, REASON_SHORT_HORIZON,
    REASON_STRONG_CAPACITY, REASON_VILLA_BUDGET, REASON_VILLA_LARGE_FAMILY,
    STEP_AFFORDABILITY_RATIO, STEP_ASSUMED_DOWN_PAYMENT, STEP_CASH_BUDGET, STEP_DOWN_PAYMENT,
    STEP_INTEREST_RATE, STEP_LOAN_AMOUNT, STEP_LOAN_TERM, STEP_MAX_MONTHLY_PAYMENT,
    STEP_MONTHLY_SAVINGS, STEP_NET_INCOME, STEP_NO_MORTGAGE_BUDGET, STEP_OWN_DOWN_PAYMENT,
    STEP_RETIREMENT_ADJUSTMENT, STEP_TOTAL_BUDGET, DerivationStep, Reason,
)

CURRENCY = "SAR"

_HIGH_BURDEN = Decimal("0.40")
_ACCEPTABLE = Decimal("0.35")

_PROPERTY_NAMES = {
    "apartment": "an apartment",
    "duplex": "a duplex",
    "villa": "a villa",
    "land": "a plot of land",
}


def format_money(value: Decimal) -> str:
    return f"{value:,.0f} {CURRENCY}"


def format_pct(ratio: Decimal, places: int = 1) -> str:
    """0.35 → '35.0%'."""
    return f"{ratio * 100:.{places}f}%"


def affordability_band(ratio: Decimal) -> str:
    if ratio > _HIGH_BURDEN:
        return "high burden"
    if ratio > _ACCEPTABLE:
        return "acceptable"
    return "ideal"


# ── Derivation steps ──────────────────────────────────────────────────────────

_STEP_TEMPLATES = {
    STEP_NET_INCOME: "Net monthly income: {money}",
    STEP_MAX_MONTHLY_PAYMENT: "Maximum monthly payment (35% of net income): {money}",
    STEP_LOAN_TERM: "Loan term: {whole} years",
    STEP_INTEREST_RATE: "Annual interest rate: {raw}%",
    STEP_LOAN_AMOUNT: "Maximum loan amount: {money}",
    STEP_DOWN_PAYMENT: "Down payment (20% of the price): {money}",
    STEP_TOTAL_BUDGET: "Total property budget: {money}",
    STEP_RETIREMENT_ADJUSTMENT: "Budget adjusted for approaching retirement: {money}",
    STEP_NO_MORTGAGE_BUDGET: "Budget without a mortgage (five years of net income): {money}",
    STEP_AFFORDABILITY_RATIO: "Payment-to-income ratio: {pct}",
    STEP_MONTHLY_SAVINGS: "Monthly savings (35% of net income): {money}",
    STEP_CASH_BUDGET: "Cash budget after four years of saving: {money}",
    STEP_OWN_DOWN_PAYMENT: "Your down payment: {money}",
    STEP_ASSUMED_DOWN_PAYMENT: "Assumed down payment (10% of the loan): {money}",
}


def describe_step(step: DerivationStep) -> str:
    template = _STEP_TEMPLATES.get(step.code)
    if template is None:
        return f"{step.code}: {step.value}"
    return template.format(
        money=format_money(step.value),
        pct=format_pct(step.value),
        whole=int(step.value),
        raw=step.value,
    )


def describe_steps(steps: Iterable[DerivationStep]) -> list[str]:
    return [describe_step(step) for step in steps]


# ── Reasons ───────────────────────────────────────────────────────────────────

def _property(kind: str) -> str:
    return _PROPERTY_NAMES.get(kind, kind)


def describe_reason(reason: Reason) -> str:
    p = reason.params
    code = reason.code

    if code == REASON_NO_DATA:
        return f"No market data available for {p.get('city', 'this city')}."
    if code == REASON_NO_MATCH:
        return "No property fits the budget, even after relaxing the type and room count."
    if code == REASON_NEAR_WORK:
        return f"Close to your work in {p['region']}."
    if code == REASON_FAMILY_FIT:
        return f"Suits a family of {p['family_size']} needing {p['rooms']} room(s)."
    if code == REASON_DISTRICT_OUTLOOK:
        return (
            f"{p['district']} has demand {p['demand']}/10 "
            f"and growth potential {p['growth']}/10."
        )
    if code == REASON_SAFETY_MARGIN:
        return "The price leaves a safety margin of at least 10% of the budget."
    if code == REASON_DOWNGRADED:
        return (
            f"Relaxed from {_property(p['requested_type'])} with {p['requested_rooms']} room(s) "
            f"to {_property(p['property_type'])} with {p['rooms']} room(s) to stay within budget."
        )

    if code == REASON_SHORT_HORIZON:
        return f"Only {p['years']} working years remain, which shortens the loan horizon."
    if code == REASON_NEAR_RETIREMENT_RENT:
        return "Retirement is less than ten years away; renting is the safer choice."
    if code == REASON_HIGH_INFLATION:
        return f"Property prices rise {format_pct(p['rate'])} a year here, which favours buying early."
    if code == REASON_MODERATE_INFLATION:
        return f"Price growth of {format_pct(p['rate'])} a year keeps both buying and renting viable."
    if code == REASON_STRONG_CAPACITY:
        return f"A payment ratio of {format_pct(p['ratio'])} shows strong capacity to buy."
    if code == REASON_HIGH_RATIO_RENT:
        return f"A payment ratio of {format_pct(p['ratio'])} is too high; renting is recommended."
    if code == REASON_NO_INCOME_RENT:
        return "No income is left after obligations; renting is recommended."
    if code == REASON_LARGE_DOWN_PAYMENT_RENT:
        return (
            f"Buying would need a down payment of {format_money(p['down_payment'])}, "
            "more than half the budget; renting is recommended."
        )
    if code == REASON_REQUIRED_DOWN_PAYMENT:
        return f"A down payment of {format_money(p['down_payment'])} keeps the payment affordable."
    if code == REASON_PAYMENT_WITHIN_BUDGET:
        return f"The monthly payment of {format_money(p['payment'])} fits your income."
    if code == REASON_NO_PROPERTY_RENT:
        return "No property in this city fits the budget; renting is recommended for now."

    if code == REASON_VILLA_LARGE_FAMILY:
        return "A villa gives a large family room to grow."
    if code == REASON_VILLA_BUDGET:
        return "Your budget stretches to a villa."
    if code == REASON_DUPLEX_FAMILY:
        return "A duplex suits a mid-sized family."
    if code == REASON_DUPLEX_SPACE:
        return "A duplex offers extra space at a moderate price."
    if code == REASON_APARTMENT_SMALL_FAMILY:
        return "An apartment suits a small household."
    if code == REASON_APARTMENT_ECONOMY:
        return "An apartment is the economical choice for this budget."
    if code == REASON_LAND_INVESTMENT:
        return "A plot of land is a long-term investment to build on later."
    if code == REASON_RENT_FLEXIBILITY:
        return "Renting keeps flexibility while you build savings."
    if code == REASON_IMPROVE_FINANCES:
        return (
            "Nothing fits the current budget; this is the cheapest option. "
            "Consider reducing obligations or increasing savings."
        )

    return code


def describe_reasons(reasons: Iterable[Reason]) -> list[str]:
    return [describe_reason(reason) for reason in reasons]
