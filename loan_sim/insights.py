"""Rate insights, an illustrative tax estimate and balance-transfer offers.

These helpers sit on top of the solver and the simulation engine. The tax
figures are an educational approximation of the section 24(b) interest
deduction and carry no guarantee of correctness under current tax law.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .config import (
    BANK_OFFERS,
    INCOME_SLABS,
    MARKET_BENCHMARK_RATE,
    REPO_RATE,
    SECTION_24B_INTEREST_CAP,
    TAX_CESS_FACTOR,
    TAX_ESTIMATE_TENURE_YEARS,
)
from .data_models import SimulationInput
from .engine import run_simulation
from .solver import calculate_emi, is_solved, monthly_rate


def rate_insight(interest_rate: float) -> Optional[Dict[str, str]]:
    """Compare a loan rate with the repo rate and the market benchmark.

    Returns a ``{"type", "message"}`` mapping where ``type`` is ``error``,
    ``warning`` or ``success``, or None for a non-positive rate.
    """
    if interest_rate <= 0:
        return None
    if interest_rate < REPO_RATE:
        return {
            "type": "error",
            "message": (
                f"Interest rate is unlikely to be lower than the current RBI Repo Rate "
                f"({REPO_RATE}%). Please check your input."
            ),
        }
    if interest_rate > MARKET_BENCHMARK_RATE:
        return {
            "type": "warning",
            "message": (
                f"Your rate appears higher than the current market average (~{MARKET_BENCHMARK_RATE}%). "
                "Consider talking to your bank or exploring a balance transfer."
            ),
        }
    return {
        "type": "success",
        "message": "Your interest rate looks competitive against the current market average!",
    }


def slab_rate(slab_id: str) -> float:
    for slab in INCOME_SLABS:
        if slab["id"] == slab_id:
            return slab["rate"]
    return 0.0


def estimate_tax_savings(principal: float, interest_rate: float, slab_id: str) -> Dict[str, float]:
    """Estimate the first-year tax saved on home loan interest.

    The first year's interest is taken from a standard schedule over a fixed
    assumed tenure, capped at the section 24(b) limit, and taxed at the slab
    rate plus cess.
    """
    zeros = {"annual_interest": 0.0, "deductible_interest": 0.0, "potential_savings": 0.0}
    emi = calculate_emi(principal, interest_rate, TAX_ESTIMATE_TENURE_YEARS)
    if principal <= 0 or interest_rate <= 0 or not is_solved(emi):
        return zeros

    rate_per_month = monthly_rate(interest_rate)
    balance = principal
    annual_interest = 0.0
    for _ in range(12):
        interest = balance * rate_per_month
        annual_interest += interest
        balance -= emi - interest

    deductible = min(annual_interest, SECTION_24B_INTEREST_CAP)
    return {
        "annual_interest": annual_interest,
        "deductible_interest": deductible,
        "potential_savings": deductible * slab_rate(slab_id) * TAX_CESS_FACTOR,
    }


def compare_balance_transfers(
    inputs: SimulationInput, offers: Sequence[Dict] = BANK_OFFERS
) -> List[Dict]:
    """Rank lower-rate offers by what a transfer would save.

    The transfer is assumed to happen at the start of the loan and keep the
    current tenure. Savings compare the current loan's total interest with the
    offer's total interest plus its processing fee; offers that do not save
    anything are dropped.
    """
    current = run_simulation(inputs)
    if current is None:
        return []
    current_interest = current.summary.total_interest_paid_base
    principal = inputs.principal
    tenure_years = inputs.tenure_years

    results = []
    for offer in offers:
        if offer["interest_rate"] >= inputs.interest_rate:
            continue
        new_emi = calculate_emi(principal, offer["interest_rate"], tenure_years)
        new_interest = new_emi * tenure_years * 12 - principal
        processing_fee = principal * offer["processing_fee_percent"] / 100
        savings = current_interest - (new_interest + processing_fee)
        if savings <= 0:
            continue
        results.append(
            dict(offer, new_emi=new_emi, processing_fee=processing_fee, total_savings=savings)
        )
    return sorted(results, key=lambda o: o["total_savings"], reverse=True)
