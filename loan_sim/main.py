"""Command-line interface for the loan simulator.

This module uses the ``click`` library to implement a multi-command
interface. Users can compute an EMI, solve for a missing loan term, run the
loan/SIP simulation, compare surplus allocation strategies and view rate, tax
and balance-transfer insights. Simulation results can be printed to the
terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Optional

import click

from .config import DEFAULT_INPUTS, INCOME_SLABS
from .data_models import SimulationInput, SimulationOutput
from .engine import resolve_emi, run_simulation
from .formatter import (
    aggregate_yearly,
    format_compact_inr,
    format_inr,
    print_schedule,
    print_strategies,
    print_summary,
)
from .insights import compare_balance_transfers, estimate_tax_savings, rate_insight
from .optimizer import generate_optimization_strategies
from .utils import parse_amount, parse_percent
from .validation import resolve_inputs

SOLVE_FIELDS = {"emi": "monthly_emi", "tenure": "tenure_years", "rate": "interest_rate"}


def _amount(ctx, param, value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def _percent(ctx, param, value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        return parse_percent(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def loan_options(func):
    """Attach the scenario options shared by the simulation commands."""
    options = [
        click.option("--principal", "-p", "principal", required=True, callback=_amount, help="Loan amount (e.g. 30L, 3000000)"),
        click.option("--rate", "-r", "rate", callback=_percent, help="Annual interest rate (percent)"),
        click.option("--tenure", "-t", "tenure", type=float, help="Loan tenure in years"),
        click.option("--emi", "-e", "emi", callback=_amount, help="Monthly EMI; derived when omitted"),
        click.option("--prepayment", "prepayment", callback=_amount, help="Extra prepayment made every 12th month"),
        click.option("--sip", "sip", callback=_amount, help="Monthly SIP amount"),
        click.option("--sip-return", "sip_return", callback=_percent, help="Expected annual SIP return (percent)"),
        click.option("--inflation", "inflation", callback=_percent, help="Annual inflation (percent)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_inputs_from_options(
    principal: float,
    rate: Optional[float],
    tenure: Optional[float],
    emi: Optional[float],
    prepayment: Optional[float],
    sip: Optional[float],
    sip_return: Optional[float],
    inflation: Optional[float],
) -> SimulationInput:
    """Build a :class:`SimulationInput`, taking omitted values from the defaults.

    An omitted rate or tenure is left at 0 so that it can be solved for.
    """

    def pick(value, default):
        return default if value is None else value

    return SimulationInput(
        principal=principal,
        interest_rate=pick(rate, 0.0),
        tenure_years=pick(tenure, 0.0),
        monthly_emi=pick(emi, 0.0),
        extra_annual_prepayment=pick(prepayment, DEFAULT_INPUTS.extra_annual_prepayment),
        monthly_sip=pick(sip, DEFAULT_INPUTS.monthly_sip),
        sip_return_rate=pick(sip_return, DEFAULT_INPUTS.sip_return_rate),
        inflation_rate=pick(inflation, DEFAULT_INPUTS.inflation_rate),
    )


def _require_simulation(inputs: SimulationInput) -> SimulationOutput:
    results = run_simulation(inputs)
    if results is None:
        raise click.ClickException(
            "Cannot simulate these inputs: check that principal, rate and tenure are valid "
            "and that the EMI covers the first month's interest."
        )
    return results


def export_to_json(path: Path, inputs: SimulationInput, results: SimulationOutput) -> None:
    """Export inputs, summary, chart series and schedule to a JSON file."""
    data = {"inputs": inputs.to_dict(), **results.to_dict()}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, results: SimulationOutput) -> None:
    """Export the month-indexed chart series and base schedule to a CSV file."""
    header = [
        "Month",
        "Base_Loan_Balance",
        "Prepayment_Loan_Balance",
        "SIP_Nominal_Corpus",
        "SIP_Real_Corpus",
        "Principal_Paid",
        "Interest_Paid",
        "Total_Interest",
    ]
    rows_by_month = {row.month: row for row in results.amortization_data}
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for point in results.chart_data:
            row = rows_by_month.get(point.month)
            writer.writerow(
                [
                    point.month,
                    point.base_loan_balance,
                    point.prepayment_loan_balance,
                    point.sip_nominal_corpus,
                    point.sip_real_corpus,
                    row.principal_paid if row else 0.0,
                    row.interest_paid if row else 0.0,
                    row.total_interest if row else 0.0,
                ]
            )


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging verbosity",
)
def cli(log_level: str) -> None:
    """Simulate a home loan alongside a monthly SIP."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@click.option("--principal", "-p", "principal", required=True, callback=_amount, help="Loan amount")
@click.option("--rate", "-r", "rate", required=True, callback=_percent, help="Annual interest rate (percent)")
@click.option("--tenure", "-t", "tenure", required=True, type=float, help="Loan tenure in years")
def emi(principal: float, rate: float, tenure: float) -> None:
    """Compute the monthly EMI for a loan."""
    inputs = SimulationInput(principal=principal, interest_rate=rate, tenure_years=tenure)
    resolution = resolve_inputs(inputs, "monthly_emi")
    if not resolution.ok:
        raise click.ClickException(" ".join(resolution.errors.values()))
    value = resolution.inputs.monthly_emi
    click.echo(f"Monthly EMI: {format_inr(value)} ({value:.2f})")


@cli.command()
@click.option(
    "--solve-for",
    "solve_for",
    required=True,
    type=click.Choice(sorted(SOLVE_FIELDS)),
    help="Which loan term to calculate from the other two",
)
@loan_options
def solve(solve_for: str, **options) -> None:
    """Solve for the EMI, tenure or interest rate given the other two."""
    inputs = build_inputs_from_options(**options)
    field_name = SOLVE_FIELDS[solve_for]
    resolution = resolve_inputs(inputs, field_name)
    if resolution.errors:
        for name, message in resolution.errors.items():
            click.echo(f"{name}: {message}", err=True)
        raise click.ClickException("Could not solve with these inputs")
    solved = resolution.inputs
    click.echo(f"Monthly EMI   : {format_inr(solved.monthly_emi)} ({solved.monthly_emi:.2f})")
    click.echo(f"Tenure        : {solved.tenure_years:.2f} years")
    click.echo(f"Interest rate : {solved.interest_rate:.2f}%")


@cli.command()
@loan_options
@click.option("--yearly", is_flag=True, help="Show the schedule aggregated by year")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def simulate(yearly: bool, output: Optional[str], **options) -> None:
    """Simulate the loan with and without prepayment next to the SIP."""
    inputs = build_inputs_from_options(**options)
    results = _require_simulation(inputs)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, inputs, results)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, results)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Simulation exported to {path}")
        return

    print_summary(results.summary, resolve_emi(inputs))
    if yearly:
        print_schedule(aggregate_yearly(results.amortization_data))
        return
    max_rows = 120
    rows = results.amortization_data
    if len(rows) > max_rows:
        click.echo(f"Schedule has {len(rows)} rows; showing first {max_rows} rows.")
        rows = rows[:max_rows]
    print_schedule(rows)


@cli.command()
@loan_options
@click.option("--surplus", "surplus", required=True, callback=_amount, help="Annual surplus to allocate")
def optimize(surplus: float, **options) -> None:
    """Compare prepaying, splitting and investing an annual surplus."""
    inputs = build_inputs_from_options(**options)
    _require_simulation(inputs)
    strategies = generate_optimization_strategies(inputs, surplus)
    if not strategies:
        raise click.BadParameter("Surplus must be positive", param_hint="--surplus")
    print_strategies(strategies)


@cli.command()
@loan_options
@click.option(
    "--slab",
    "slab",
    type=click.Choice([s["id"] for s in INCOME_SLABS]),
    default=INCOME_SLABS[-1]["id"],
    help="Annual income slab for the tax estimate",
)
def insights(slab: str, **options) -> None:
    """Show rate, tax and balance-transfer insights for a loan."""
    for name in ("rate", "tenure"):
        if options[name] is None:
            raise click.UsageError(f"Missing option '--{name}'.")
    inputs = build_inputs_from_options(**options)
    insight = rate_insight(inputs.interest_rate)
    if insight:
        click.echo(f"[{insight['type']}] {insight['message']}")

    tax = estimate_tax_savings(inputs.principal, inputs.interest_rate, slab)
    click.echo(f"First-year interest  : {format_inr(tax['annual_interest'])}")
    click.echo(f"Deductible (24(b))   : {format_inr(tax['deductible_interest'])}")
    click.echo(f"Potential tax saved  : {format_inr(tax['potential_savings'])}")

    offers = compare_balance_transfers(inputs)
    if not offers:
        click.echo("No balance transfer offer beats your current loan.")
    for offer in offers:
        click.echo(
            f"{offer['name']:12s} {offer['interest_rate']:.2f}%  EMI {format_inr(offer['new_emi'])}  "
            f"fee {format_inr(offer['processing_fee'])}  saves {format_compact_inr(offer['total_savings'])}"
        )


if __name__ == "__main__":
    cli()
