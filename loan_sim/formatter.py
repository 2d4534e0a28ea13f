"""Output helpers for the loan simulator.

This module renders amounts in Indian rupee notation (lakh/crore digit
grouping), folds the monthly amortization ledger into yearly buckets and
prints summaries, schedules and strategies in a tabular text format using
built-in printing only.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Union

from .data_models import AmortizationDataPoint, OptimizationStrategy, SimulationSummary, YearlyDataPoint

RUPEE = "₹"
LAKH = 100_000
CRORE = 10_000_000

Row = Union[AmortizationDataPoint, YearlyDataPoint]


def _group_indian(digits: str) -> str:
    """Insert commas the Indian way: last three digits, then pairs."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs) + "," + tail


def format_inr(value: float) -> str:
    """Format ``value`` as whole rupees, e.g. ``₹1,00,00,000``."""
    sign = "-" if value < 0 else ""
    return f"{sign}{RUPEE}{_group_indian(f'{abs(value):.0f}')}"


def format_compact_inr(value: float) -> str:
    """Format large amounts in lakh (L) or crore (Cr) units, e.g. ``₹1.25 Cr``."""
    magnitude = abs(value)
    if magnitude >= CRORE:
        return f"{RUPEE}{value / CRORE:.2f} Cr"
    if magnitude >= LAKH:
        return f"{RUPEE}{value / LAKH:.2f} L"
    return format_inr(value)


def format_tenure(months: float) -> str:
    if months <= 0:
        return "0 Yrs"
    return f"{months / 12:.1f} Yrs"


def aggregate_yearly(amortization_data: Sequence[AmortizationDataPoint]) -> List[YearlyDataPoint]:
    """Fold monthly rows into 12-month buckets.

    Principal and interest are summed; the cumulative interest and ending
    balance are taken from the last month of each bucket. A trailing partial
    year becomes its own bucket.
    """
    yearly: List[YearlyDataPoint] = []
    for start in range(0, len(amortization_data), 12):
        chunk = amortization_data[start : start + 12]
        last = chunk[-1]
        yearly.append(
            YearlyDataPoint(
                year=start // 12 + 1,
                principal_paid=sum(row.principal_paid for row in chunk),
                interest_paid=sum(row.interest_paid for row in chunk),
                total_interest=last.total_interest,
                ending_balance=last.ending_balance,
            )
        )
    return yearly


def print_summary(summary: SimulationSummary, emi: float) -> None:
    """Print the comparative summary of a simulation."""
    print("Summary")
    print("-" * 72)
    print(f"Monthly EMI              : {format_inr(emi)}")
    print(f"Interest (no prepayment) : {format_inr(summary.total_interest_paid_base)}")
    print(f"Interest (prepayment)    : {format_inr(summary.total_interest_paid_with_prepayment)}")
    print(f"Interest saved           : {format_compact_inr(summary.interest_saved)}")
    print(f"Tenure reduced           : {format_tenure(summary.tenure_reduced_months)}")
    print(f"Final SIP corpus         : {format_compact_inr(summary.final_sip_corpus_nominal)}")
    print(f"Final SIP corpus (real)  : {format_compact_inr(summary.final_sip_corpus_real)}")
    if summary.loan_free_month is not None:
        print(f"Loan-free month          : {summary.loan_free_month} ({format_tenure(summary.loan_free_month)})")
    else:
        print("Loan-free month          : not reached")
    print("-" * 72)


def print_schedule(rows: Iterable[Row]) -> None:
    """Print monthly or yearly amortization rows as a simple table."""
    rows = list(rows)
    yearly = bool(rows) and isinstance(rows[0], YearlyDataPoint)
    headers = ["Year" if yearly else "Month", "Principal", "Interest", "TotalInterest", "EndBal"]
    print("\t".join(headers))
    for row in rows:
        period = row.year if yearly else row.month
        print(
            "\t".join(
                [
                    str(period),
                    f"{row.principal_paid:.2f}",
                    f"{row.interest_paid:.2f}",
                    f"{row.total_interest:.2f}",
                    f"{row.ending_balance:.2f}",
                ]
            )
        )


def print_strategies(strategies: Sequence[OptimizationStrategy]) -> None:
    """Print the optimizer's strategies side by side with their key results."""
    print("Strategies")
    print("=" * 72)
    print(f"{'Strategy':20s} {'Risk':>12s} {'Prepay/yr':>12s} {'SIP/mo':>10s} {'Saved':>14s}")
    for s in strategies:
        print(
            f"{s.name:20s} {s.risk_level:>12s} "
            f"{s.inputs['extra_annual_prepayment']:12.0f} {s.inputs['monthly_sip']:10.0f} "
            f"{s.results.interest_saved:14.2f}"
        )
    print("=" * 72)
    for s in strategies:
        free = s.results.loan_free_month
        print(
            f"{s.name}: corpus {format_compact_inr(s.results.final_sip_corpus_nominal)}, "
            f"tenure reduced {format_tenure(s.results.tenure_reduced_months)}, "
            f"loan-free {'month ' + str(free) if free is not None else 'not reached'}"
        )
