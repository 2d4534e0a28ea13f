"""Strategy optimizer.

Given a base scenario and an annual surplus, :func:`generate_optimization_strategies`
builds three reallocations of that surplus (all to prepayment, a split, all to
the SIP) and evaluates each one. The all-to-SIP strategy is evaluated with
:func:`run_sip_closure_simulation`, which models paying the loan off in one
shot from the investment corpus as soon as the corpus is large enough.
"""

from __future__ import annotations

import logging
import math
from typing import List

from .config import CLOSURE_CEILING_FACTOR
from .data_models import OptimizationStrategy, SimulationInput, SimulationSummary
from .engine import resolve_emi, run_simulation
from .solver import is_solved, monthly_rate

logger = logging.getLogger(__name__)


def _round(value: float) -> int:
    """Round half up, the way the front-end rounds rupee amounts."""
    return int(math.floor(value + 0.5))


def simulation_summary(inputs: SimulationInput) -> SimulationSummary:
    """Return the summary of a plain simulation, or an all-zero summary."""
    results = run_simulation(inputs)
    return results.summary if results else SimulationSummary()


def run_sip_closure_simulation(
    base_inputs: SimulationInput, aggressive_inputs: SimulationInput
) -> SimulationSummary:
    """Simulate retiring the loan from the SIP corpus.

    The loan (with ``aggressive_inputs``' annual prepayment) and the SIP corpus
    are stepped together for at most twice the base tenure. The first month
    the corpus covers the outstanding balance is the closure month: the loan
    is paid off from the corpus and what is left keeps compounding, with the
    monthly SIP continuing, until the later of the base tenure and the closure
    month. If the EMI alone clears the loan first, that month is the closure
    month and the whole corpus is carried forward.

    When the loan cannot be simulated or closure never happens within the
    ceiling, the plain simulation summary of ``aggressive_inputs`` is returned.
    ``final_sip_corpus_real`` is not computed on the closure path and stays 0.
    """
    principal = base_inputs.principal
    rate_per_month = monthly_rate(base_inputs.interest_rate)
    sip = aggressive_inputs.monthly_sip
    sip_rate = monthly_rate(aggressive_inputs.sip_return_rate)
    prepayment = aggressive_inputs.extra_annual_prepayment

    emi = resolve_emi(base_inputs)
    if not is_solved(emi) or emi <= principal * rate_per_month:
        return simulation_summary(aggressive_inputs)

    if not math.isfinite(base_inputs.tenure_years):
        return simulation_summary(aggressive_inputs)
    base_tenure_months = _round(base_inputs.tenure_years * 12)

    balance = principal
    corpus = 0.0
    total_interest = 0.0
    closure_month = None
    for month in range(1, base_tenure_months * CLOSURE_CEILING_FACTOR + 1):
        interest = balance * rate_per_month
        total_interest += interest
        balance -= emi - interest
        if month % 12 == 0:
            balance -= prepayment

        corpus = (corpus + sip) * (1 + sip_rate)

        if balance > 0 and corpus >= balance:
            closure_month = month
            break
        if balance <= 0:
            closure_month = month
            break

    base_results = run_simulation(base_inputs)
    if base_results is None or closure_month is None:
        logger.debug("No SIP closure for %s; using plain simulation", aggressive_inputs)
        return simulation_summary(aggressive_inputs)

    if balance > 0:
        remaining = corpus - balance
    else:
        remaining = corpus

    for _ in range(closure_month + 1, max(base_tenure_months, closure_month) + 1):
        remaining = (remaining + sip) * (1 + sip_rate)

    base_interest = base_results.summary.total_interest_paid_base
    return SimulationSummary(
        total_interest_paid_base=base_interest,
        total_interest_paid_with_prepayment=total_interest,
        interest_saved=base_interest - total_interest,
        tenure_reduced_months=base_tenure_months - closure_month,
        final_sip_corpus_nominal=remaining,
        final_sip_corpus_real=0.0,
        loan_free_month=closure_month,
        base_tenure_months=base_tenure_months,
        prepayment_tenure_months=closure_month,
    )


def generate_optimization_strategies(
    base_inputs: SimulationInput, annual_surplus: float
) -> List[OptimizationStrategy]:
    """Return the Conservative, Moderate and Aggressive uses of ``annual_surplus``.

    An empty list is returned for a non-positive or non-finite surplus, and
    when the base monthly SIP is not finite.
    """
    if not (math.isfinite(annual_surplus) and annual_surplus > 0):
        return []
    if not math.isfinite(base_inputs.monthly_sip):
        return []

    base_sip = _round(base_inputs.monthly_sip)

    conservative_inputs = base_inputs.replace(
        extra_annual_prepayment=base_inputs.extra_annual_prepayment + annual_surplus,
        monthly_sip=base_sip,
    )

    moderate_prepayment = _round(annual_surplus * 0.5)
    moderate_sip = _round((annual_surplus - moderate_prepayment) / 12)
    moderate_inputs = base_inputs.replace(
        extra_annual_prepayment=base_inputs.extra_annual_prepayment + moderate_prepayment,
        monthly_sip=base_sip + moderate_sip,
    )

    aggressive_inputs = base_inputs.replace(
        monthly_sip=base_sip + _round(annual_surplus / 12),
    )

    return [
        OptimizationStrategy(
            name="Rapid Prepayment",
            description=(
                "Focuses on clearing your loan as fast as possible by allocating 100% of your "
                "surplus to prepayments. Minimizes interest paid."
            ),
            risk_level="Conservative",
            inputs=_reallocated_fields(conservative_inputs),
            results=simulation_summary(conservative_inputs),
        ),
        OptimizationStrategy(
            name="Balanced Growth",
            description=(
                "Splits your surplus between prepayments and SIP investments. A balanced approach "
                "to reducing debt and building wealth."
            ),
            risk_level="Moderate",
            inputs=_reallocated_fields(moderate_inputs),
            results=simulation_summary(moderate_inputs),
        ),
        OptimizationStrategy(
            name="Wealth Maximizer",
            description=(
                "Prioritizes wealth creation by investing your entire surplus into SIPs. Aims to "
                "use the grown corpus to pay off the loan."
            ),
            risk_level="Aggressive",
            inputs=_reallocated_fields(aggressive_inputs),
            results=run_sip_closure_simulation(base_inputs, aggressive_inputs),
        ),
    ]


def _reallocated_fields(inputs: SimulationInput) -> dict:
    return {
        "extra_annual_prepayment": inputs.extra_annual_prepayment,
        "monthly_sip": inputs.monthly_sip,
    }


def apply_strategy(base_inputs: SimulationInput, strategy: OptimizationStrategy) -> SimulationInput:
    """Splice a strategy's reallocated fields back into ``base_inputs``."""
    return base_inputs.replace(**strategy.inputs)
