"""Command-line interface: click group with plan / quick / cities commands.

plan:
  1. Collect mandatory fields (from options or interactive prompt).
  2. Run the full pipeline and display budget, match and decision.
  3. Enter the action loop (steps, reasons, update, exit).

quick:
  One-shot form estimate (cash or mortgage) with a tier-based suggestion.

cities:
  List the catalog: cities, work regions and detailed districts.
"""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional, TypeVar

import click
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .advisor import BUY, AffordabilityReport, analyze
from .catalog import CityCatalog, load_catalog
from .config import DEFAULT_INTEREST_RATE_PCT, DEFAULT_LOAN_YEARS, DEFAULT_SALARY_INCREASE_PCT
from .fetcher import FetchError, fetch_today
from .models import FinancingTerms, HouseholdProfile, InputError
from .narration import (
    affordability_band, describe_reasons, describe_steps, format_money, format_pct,
)
from .quick import QuickEstimate, TierOption, default_required_rooms, quick_estimate, suggest_rooms
from .validation import parse_decimal, parse_int

console = Console()
err_console = Console(stderr=True, style="bold red")

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


# ──────────────────────────────────────────────────────────────────────────────
# Input helpers
# ──────────────────────────────────────────────────────────────────────────────

def _option_value(raw: Optional[str], field: str, option: str, parser: Callable[[str, str], T]) -> Optional[T]:
    """Parse an option value; invalid values end the command with status 1."""
    if raw is None:
        return None
    try:
        return parser(field, raw)
    except InputError as exc:
        err_console.print(f"Invalid value for --{option}: {exc.message}")
        sys.exit(1)


def _prompt_value(prompt: str, field: str, parser: Callable[[str, str], T]) -> T:
    while True:
        raw = console.input(f"[bold]{prompt}[/bold] ").strip()
        try:
            return parser(field, raw)
        except InputError as exc:
            err_console.print(f"  {exc.message}")


def _prompt_city(catalog: CityCatalog) -> str:
    console.print("  Cities: " + ", ".join(f"{c.name} ({c.alias})" for c in catalog))
    while True:
        raw = console.input("[bold]City:[/bold] ").strip()
        profile = catalog.get(raw)
        if profile is not None:
            return profile.name
        err_console.print(f"  Unknown city '{raw}'.")


def _prompt_region(regions: list[str], label: str) -> str:
    console.print(f"  {label}s: " + ", ".join(regions))
    while True:
        raw = console.input(f"[bold]{label}:[/bold] ").strip()
        if raw in regions:
            return raw
        err_console.print(f"  Unknown {label.lower()} '{raw}'.")


def _resolve_city(catalog: CityCatalog, city: Optional[str]) -> str:
    if city is None:
        return _prompt_city(catalog)
    profile = catalog.get(city)
    # unknown cities pass through; the calculators report them as no-data
    return profile.name if profile is not None else city


def _resolve_region(catalog: CityCatalog, city: str, region: Optional[str], label: str) -> str:
    if region is not None:
        return region
    profile = catalog.get(city)
    if profile is None or not profile.regions:
        return ""
    return _prompt_region(list(profile.regions), label)


# ──────────────────────────────────────────────────────────────────────────────
# Result display
# ──────────────────────────────────────────────────────────────────────────────

def _show_date(no_date: bool) -> None:
    if no_date:
        return
    try:
        today = fetch_today()
    except FetchError as exc:
        logger.debug("Date unavailable: %s", exc)
        return
    console.print(f"[dim]{today.gregorian} · {today.hijri} ({today.hijri_month})[/dim]")


def display_report(report: AffordabilityReport) -> None:
    budget = report.budget

    console.print()
    console.print(Panel(
        f"[bold green]Housing Budget[/bold green] — {report.city}"
        + (f" / {report.work_location}" if report.work_location else ""),
        expand=False,
    ))

    t = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    t.add_column("Field", style="cyan")
    t.add_column("Value", justify="right")
    t.add_row("Net monthly income", format_money(report.net_income))
    t.add_row("Years until retirement", str(report.retirement.years_until_retirement))
    t.add_row("Maximum budget", format_money(budget.max_budget))
    t.add_row("Monthly payment", format_money(budget.monthly_payment))
    t.add_row("Loan amount", format_money(budget.loan_amount))
    t.add_row("Down payment", format_money(budget.down_payment))
    t.add_row("Loan term", f"{budget.loan_term_years} years")
    t.add_row(
        "Payment ratio",
        f"{format_pct(budget.affordability_ratio)} ({affordability_band(budget.affordability_ratio)})",
    )
    console.print(t)

    display_match(report)
    display_decision(report)


def display_match(report: AffordabilityReport) -> None:
    match = report.match
    if match.found:
        t = Table(title="Suggested Property", box=box.SIMPLE, show_header=False, padding=(0, 2))
        t.add_column("Field", style="cyan")
        t.add_column("Value", justify="right")
        t.add_row("District", f"{match.district} ({match.tier})")
        t.add_row("Type", match.property_type)
        t.add_row("Size", f"{match.size} m²")
        t.add_row("Price", format_money(match.price))
        t.add_row("Estimated rent", f"{format_money(match.monthly_rent)} / month")
        console.print(t)
    else:
        for line in describe_reasons(match.reasons):
            console.print(f"[yellow]{line}[/yellow]")
    if report.fallback is not None:
        display_option(report.fallback)


def display_option(option: TierOption) -> None:
    verb = "Buy" if option.action == "buy" else "Rent"
    figure = format_money(option.price) if option.action == "buy" else f"{format_money(option.rent)} / month"
    console.print(
        f"[bold]{verb}:[/bold] {option.property_type} in {option.neighborhood} "
        f"({option.tier}, {option.size} m²) — {figure}"
    )
    for line in describe_reasons(option.reasons):
        console.print(f"  • {line}")


def display_decision(report: AffordabilityReport) -> None:
    decision = report.decision
    if decision.recommended == BUY:
        headline = (
            f"[bold green]Recommendation: BUY[/bold green] — mortgage of "
            f"{format_money(decision.loan_amount)} over {decision.loan_term_years} years, "
            f"{format_money(decision.monthly_payment)} / month, "
            f"down payment {format_money(decision.down_payment)}"
        )
    else:
        headline = "[bold yellow]Recommendation: RENT[/bold yellow]"
    console.print(Panel(headline, expand=False))


def display_steps(report: AffordabilityReport) -> None:
    for i, line in enumerate(describe_steps(report.budget.derivation_steps), start=1):
        console.print(f"  {i}. {line}")


def display_reasons(report: AffordabilityReport) -> None:
    for line in describe_reasons(report.match.reasons + report.decision.reasons):
        console.print(f"  • {line}")


def display_quick(estimate: QuickEstimate, family_size: int, rooms: int) -> None:
    budget = estimate.budget
    console.print()
    console.print(Panel(
        f"[bold green]Quick Estimate[/bold green] — {budget.financing_type} — "
        f"{estimate.city} / {estimate.region}",
        expand=False,
    ))
    for i, line in enumerate(describe_steps(budget.derivation_steps), start=1):
        console.print(f"  {i}. {line}")

    bedrooms, bathrooms = suggest_rooms(family_size)
    console.print(
        f"  Rooms: {rooms} required · suggested {bedrooms} bedroom(s), {bathrooms} bathroom(s)"
    )

    if estimate.option is None:
        for line in describe_reasons(estimate.reasons):
            console.print(f"[yellow]{line}[/yellow]")
        return
    display_option(estimate.option)


# ──────────────────────────────────────────────────────────────────────────────
# plan: inputs, runner and action loop
# ──────────────────────────────────────────────────────────────────────────────

@dataclass
class PlanInputs:
    monthly_income: Decimal
    monthly_obligations: Decimal
    age: int
    city: str
    work_location: str = ""
    family_size: int = 1
    required_rooms: Optional[int] = None    # None → derived from family size
    salary_increase_pct: Decimal = DEFAULT_SALARY_INCREASE_PCT
    interest_rate_pct: Decimal = DEFAULT_INTEREST_RATE_PCT

    def to_profile(self) -> HouseholdProfile:
        rooms = self.required_rooms or default_required_rooms(self.family_size)
        return HouseholdProfile(
            monthly_income=self.monthly_income,
            monthly_obligations=self.monthly_obligations,
            age=self.age,
            family_size=self.family_size,
            required_rooms=rooms,
            expected_salary_increase_pct=self.salary_increase_pct,
        )


def run_plan(inputs: PlanInputs, catalog: CityCatalog) -> Optional[AffordabilityReport]:
    """Build the profile and run the pipeline. Prints errors and returns None on failure."""
    try:
        profile = inputs.to_profile()
    except InputError as exc:
        err_console.print(f"Input error ({exc.field}): {exc.message}")
        return None
    report = analyze(profile, inputs.city, inputs.work_location, catalog, inputs.interest_rate_pct)
    display_report(report)
    return report


_UPDATABLE_FIELDS = (
    "income", "obligations", "age", "family_size", "rooms",
    "salary_increase", "rate", "city", "work_location",
)


def _apply_update(field: str, inputs: PlanInputs, catalog: CityCatalog) -> None:
    try:
        if field == "income":
            inputs.monthly_income = _prompt_value("New monthly income:", "monthly_income", parse_decimal)
        elif field == "obligations":
            inputs.monthly_obligations = _prompt_value(
                "New monthly obligations:", "monthly_obligations", parse_decimal
            )
        elif field == "age":
            inputs.age = _prompt_value("New age:", "age", parse_int)
        elif field == "family_size":
            inputs.family_size = _prompt_value("New family size:", "family_size", parse_int)
        elif field == "rooms":
            inputs.required_rooms = _prompt_value("New required rooms:", "rooms", parse_int)
        elif field == "salary_increase":
            inputs.salary_increase_pct = _prompt_value(
                "New expected salary increase (% per year):", "salary_increase", parse_decimal
            )
        elif field == "rate":
            inputs.interest_rate_pct = _prompt_value(
                "New interest rate (% per year):", "interest_rate", parse_decimal
            )
        elif field == "city":
            inputs.city = _prompt_city(catalog)
            inputs.work_location = _resolve_region(catalog, inputs.city, None, "Work location")
        elif field == "work_location":
            inputs.work_location = _resolve_region(catalog, inputs.city, None, "Work location")
    except (KeyboardInterrupt, EOFError):
        console.print("\n  Update cancelled.")


def interactive_loop(inputs: PlanInputs, catalog: CityCatalog) -> None:
    report = run_plan(inputs, catalog)

    while True:
        console.print()
        console.print(
            "[bold]Actions:[/bold] "
            "[cyan]steps[/cyan] · [cyan]reasons[/cyan] · [cyan]update[/cyan] · [cyan]exit[/cyan]"
        )
        action = console.input("[bold]> [/bold]").strip().lower()

        if action in ("exit", "quit", "q"):
            console.print("Goodbye.")
            break

        elif action == "steps":
            if report:
                display_steps(report)
            else:
                err_console.print("No result available yet.")

        elif action == "reasons":
            if report:
                display_reasons(report)
            else:
                err_console.print("No result available yet.")

        elif action == "update":
            console.print(f"  Fields: {', '.join(_UPDATABLE_FIELDS)}")
            field = console.input("[bold]Field to update: [/bold]").strip().lower()
            if field not in _UPDATABLE_FIELDS:
                err_console.print(f"  Unknown field '{field}'.")
                continue
            _apply_update(field, inputs, catalog)
            report = run_plan(inputs, catalog)

        else:
            err_console.print(f"  Unknown action '{action}'.")


# ──────────────────────────────────────────────────────────────────────────────
# Click entry points
# ──────────────────────────────────────────────────────────────────────────────

@click.group()
def main() -> None:
    """Saudi housing budget and buy-vs-rent advisor."""


@main.command()
@click.option("--income", type=str, default=None, help="Gross monthly income (SAR)")
@click.option("--obligations", type=str, default=None, help="Fixed monthly obligations (SAR)")
@click.option("--age", type=str, default=None, help="Age in years")
@click.option("--family-size", type=str, default="1", show_default=True)
@click.option("--rooms", type=str, default=None, help="Required rooms (default: from family size)")
@click.option("--salary-increase", type=str, default=None,
              help=f"Expected yearly salary increase in % (default: {DEFAULT_SALARY_INCREASE_PCT})")
@click.option("--rate", type=str, default=None,
              help=f"Mortgage interest rate in % (default: {DEFAULT_INTEREST_RATE_PCT})")
@click.option("--city", type=str, default=None, help="City name (Arabic or English alias)")
@click.option("--work-location", type=str, default=None, help="Work region within the city")
@click.option("--no-date", is_flag=True, default=False, help="Skip the online calendar date lookup")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug logging")
def plan(
    income: Optional[str],
    obligations: Optional[str],
    age: Optional[str],
    family_size: str,
    rooms: Optional[str],
    salary_increase: Optional[str],
    rate: Optional[str],
    city: Optional[str],
    work_location: Optional[str],
    no_date: bool,
    verbose: bool,
) -> None:
    """Full affordability plan with property match and buy/rent advice."""
    _configure_logging(verbose)
    console.print(Panel("[bold blue]Housing Budget Advisor[/bold blue]", expand=False))
    _show_date(no_date)

    catalog = load_catalog()
    try:
        inc = _option_value(income, "monthly_income", "income", parse_decimal)
        if inc is None:
            inc = _prompt_value("Monthly income?", "monthly_income", parse_decimal)

        obl = _option_value(obligations, "monthly_obligations", "obligations", parse_decimal)
        if obl is None:
            obl = _prompt_value("Monthly obligations?", "monthly_obligations", parse_decimal)

        years = _option_value(age, "age", "age", parse_int)
        if years is None:
            years = _prompt_value("Age?", "age", parse_int)

        inputs = PlanInputs(
            monthly_income=inc,
            monthly_obligations=obl,
            age=years,
            city="",
            family_size=_option_value(family_size, "family_size", "family-size", parse_int) or 1,
            required_rooms=_option_value(rooms, "rooms", "rooms", parse_int),
            salary_increase_pct=_option_value(
                salary_increase, "salary_increase", "salary-increase", parse_decimal
            ) if salary_increase is not None else DEFAULT_SALARY_INCREASE_PCT,
            interest_rate_pct=_option_value(
                rate, "interest_rate", "rate", parse_decimal
            ) if rate is not None else DEFAULT_INTEREST_RATE_PCT,
        )
        inputs.city = _resolve_city(catalog, city)
        inputs.work_location = _resolve_region(catalog, inputs.city, work_location, "Work location")

        interactive_loop(inputs, catalog)
    except (KeyboardInterrupt, EOFError):
        console.print("\nSession ended.")


@main.command()
@click.option("--income", type=str, default=None, help="Gross monthly income (SAR)")
@click.option("--obligations", type=str, default="0", show_default=True, help="Fixed monthly obligations (SAR)")
@click.option("--financing", type=click.Choice(["cash", "mortgage"]), default="mortgage", show_default=True)
@click.option("--rate", type=str, default=None,
              help=f"Mortgage interest rate in % (default: {DEFAULT_INTEREST_RATE_PCT})")
@click.option("--loan-years", type=str, default=None, help=f"Loan term in years (default: {DEFAULT_LOAN_YEARS})")
@click.option("--down-payment", type=str, default=None, help="Own down payment (default: 10% of the loan)")
@click.option("--city", type=str, default=None, help="City name (Arabic or English alias)")
@click.option("--region", type=str, default=None, help="Region within the city")
@click.option("--family-size", type=str, default="1", show_default=True)
@click.option("--rooms", type=str, default=None, help="Required rooms (default: from family size)")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug logging")
def quick(
    income: Optional[str],
    obligations: str,
    financing: str,
    rate: Optional[str],
    loan_years: Optional[str],
    down_payment: Optional[str],
    city: Optional[str],
    region: Optional[str],
    family_size: str,
    rooms: Optional[str],
    verbose: bool,
) -> None:
    """One-shot budget estimate with a neighbourhood suggestion."""
    _configure_logging(verbose)
    catalog = load_catalog()
    try:
        inc = _option_value(income, "monthly_income", "income", parse_decimal)
        if inc is None:
            inc = _prompt_value("Monthly income?", "monthly_income", parse_decimal)
        obl = _option_value(obligations, "monthly_obligations", "obligations", parse_decimal)
        family = _option_value(family_size, "family_size", "family-size", parse_int) or 1
        required = _option_value(rooms, "rooms", "rooms", parse_int) or default_required_rooms(family)

        terms = FinancingTerms(
            annual_interest_rate_pct=_option_value(rate, "interest_rate", "rate", parse_decimal)
            if rate is not None else DEFAULT_INTEREST_RATE_PCT,
            loan_term_years=_option_value(loan_years, "loan_years", "loan-years", parse_int)
            or DEFAULT_LOAN_YEARS,
            down_payment_amount=_option_value(down_payment, "down_payment", "down-payment", parse_decimal),
        )

        city_name = _resolve_city(catalog, city)
        region_name = _resolve_region(catalog, city_name, region, "Region")
    except (KeyboardInterrupt, EOFError):
        console.print("\nSession ended.")
        return

    estimate = quick_estimate(
        catalog, inc, obl, financing, city_name, region_name, family, terms
    )
    display_quick(estimate, family, required)


@main.command()
def cities() -> None:
    """List catalog cities, their regions and detailed districts."""
    catalog = load_catalog()
    t = Table(title="Cities", box=box.SIMPLE, show_header=True, padding=(0, 2))
    t.add_column("City", style="cyan")
    t.add_column("Alias", no_wrap=True)
    t.add_column("Inflation", justify="right")
    t.add_column("Regions")
    t.add_column("Districts")
    for profile in catalog:
        t.add_row(
            profile.name,
            profile.alias,
            format_pct(profile.market.inflation_rate),
            ", ".join(profile.regions),
            ", ".join(d.name for d in profile.districts),
        )
    console.print(t)
