"""Core simulation engine for the loan simulator.

This module steps a loan forward month by month under a fixed EMI (with and
without an annual lump-sum prepayment), projects a monthly SIP under compound
growth and inflation, and combines the tracks into one month-indexed series
with a comparative summary.

Everything here is a pure function of its arguments. Bad inputs are reported
by returning ``None`` from :func:`run_simulation`, never by raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .config import AMORTIZATION_CEILING_FACTOR
from .data_models import (
    AmortizationDataPoint,
    ChartDataPoint,
    SimulationInput,
    SimulationOutput,
    SimulationSummary,
)
from .solver import calculate_emi, is_solved, monthly_rate

logger = logging.getLogger(__name__)


@dataclass
class AmortizationTrack:
    """Result of one amortization run.

    ``balances`` starts with the opening principal at month 0 and has one
    entry per elapsed month after that, floored at zero.
    """

    balances: List[float] = field(default_factory=list)
    rows: List[AmortizationDataPoint] = field(default_factory=list)
    total_interest: float = 0.0
    months: int = 0


@dataclass
class InvestmentTrack:
    """Nominal and inflation-deflated corpus, month 0 included."""

    nominal: List[float] = field(default_factory=list)
    real: List[float] = field(default_factory=list)

    @property
    def final_nominal(self) -> float:
        return self.nominal[-1] if self.nominal else 0.0

    @property
    def final_real(self) -> float:
        return self.real[-1] if self.real else 0.0


def resolve_emi(inputs: SimulationInput) -> float:
    """Return the explicit EMI, or derive it when ``monthly_emi`` is 0."""
    if inputs.monthly_emi > 0:
        return inputs.monthly_emi
    return calculate_emi(inputs.principal, inputs.interest_rate, inputs.tenure_years)


def amortize(
    principal: float,
    rate_per_month: float,
    emi: float,
    max_months: float,
    annual_prepayment: float = 0.0,
) -> AmortizationTrack:
    """Step a loan balance forward until it is repaid or ``max_months`` pass.

    Each month interest accrues on the outstanding balance, the EMI pays that
    interest and the rest reduces principal. When ``annual_prepayment`` is set
    it is subtracted after the regular payment on every 12th month.
    """
    track = AmortizationTrack(balances=[principal])
    balance = principal
    month = 0
    while balance > 0 and month < max_months:
        month += 1
        interest_paid = balance * rate_per_month
        principal_paid = emi - interest_paid
        balance -= principal_paid
        if annual_prepayment and month % 12 == 0:
            balance -= annual_prepayment
        track.total_interest += interest_paid
        ending_balance = max(0.0, balance)
        track.balances.append(ending_balance)
        track.rows.append(
            AmortizationDataPoint(
                month=month,
                principal_paid=principal_paid,
                interest_paid=interest_paid,
                ending_balance=ending_balance,
                total_interest=track.total_interest,
            )
        )
    if balance > 0:
        logger.warning(
            "Amortization stopped at the %s month ceiling with %.2f outstanding", month, balance
        )
    track.months = month
    return track


def project_sip(
    monthly_contribution: float,
    monthly_sip_rate: float,
    monthly_inflation_rate: float,
    horizon_months: int,
) -> InvestmentTrack:
    """Compound a monthly contribution over ``horizon_months``.

    The real corpus is deflated every month on the compounded value, so
    inflation erodes it continuously rather than once at the end.
    """
    track = InvestmentTrack(nominal=[0.0], real=[0.0])
    nominal = 0.0
    real = 0.0
    for _ in range(horizon_months):
        nominal = (nominal + monthly_contribution) * (1 + monthly_sip_rate)
        real = ((real + monthly_contribution) * (1 + monthly_sip_rate)) / (1 + monthly_inflation_rate)
        track.nominal.append(nominal)
        track.real.append(real)
    return track


def _value_at(series: Sequence[float], index: int) -> float:
    return series[index] if index < len(series) else 0.0


def build_chart_data(
    base: AmortizationTrack,
    prepayment: AmortizationTrack,
    investment: InvestmentTrack,
    horizon_months: int,
) -> List[ChartDataPoint]:
    """Merge the three tracks into one record per month, 0..horizon."""
    return [
        ChartDataPoint(
            month=month,
            base_loan_balance=_value_at(base.balances, month),
            prepayment_loan_balance=_value_at(prepayment.balances, month),
            sip_nominal_corpus=_value_at(investment.nominal, month),
            sip_real_corpus=_value_at(investment.real, month),
        )
        for month in range(horizon_months + 1)
    ]


def find_loan_free_month(chart_data: Sequence[ChartDataPoint]) -> Optional[int]:
    """Return the first month the nominal corpus covers the prepayment-track balance.

    Months where the loan is already repaid do not count.
    """
    for point in chart_data:
        if point.prepayment_loan_balance > 0 and point.sip_nominal_corpus >= point.prepayment_loan_balance:
            return point.month
    return None


def run_simulation(inputs: SimulationInput) -> Optional[SimulationOutput]:
    """Simulate the base loan, the prepayment loan and the SIP side by side.

    Returns ``None`` when the inputs cannot be simulated: a non-positive
    principal or tenure, a negative rate, or an EMI (explicit or derived) that
    does not exceed the first month's interest.
    """
    principal = inputs.principal
    if principal <= 0 or inputs.interest_rate < 0 or inputs.tenure_years <= 0:
        logger.debug("Refusing to simulate %s: invalid loan terms", inputs)
        return None

    rate_per_month = monthly_rate(inputs.interest_rate)
    emi = resolve_emi(inputs)
    if not is_solved(emi) or emi <= principal * rate_per_month:
        logger.debug("Refusing to simulate %s: EMI %s does not cover interest", inputs, emi)
        return None

    max_months = inputs.tenure_years * 12 * AMORTIZATION_CEILING_FACTOR
    base = amortize(principal, rate_per_month, emi, max_months)
    prepayment = amortize(principal, rate_per_month, emi, max_months, inputs.extra_annual_prepayment)

    # The investment always spans the no-prepayment payoff horizon.
    horizon = base.months
    investment = project_sip(
        inputs.monthly_sip,
        monthly_rate(inputs.sip_return_rate),
        monthly_rate(inputs.inflation_rate),
        horizon,
    )

    chart_data = build_chart_data(base, prepayment, investment, horizon)

    summary = SimulationSummary(
        total_interest_paid_base=base.total_interest,
        total_interest_paid_with_prepayment=prepayment.total_interest,
        interest_saved=base.total_interest - prepayment.total_interest,
        tenure_reduced_months=base.months - prepayment.months,
        final_sip_corpus_nominal=investment.final_nominal,
        final_sip_corpus_real=investment.final_real,
        loan_free_month=find_loan_free_month(chart_data),
        base_tenure_months=base.months,
        prepayment_tenure_months=prepayment.months,
    )
    return SimulationOutput(chart_data=chart_data, amortization_data=base.rows, summary=summary)
