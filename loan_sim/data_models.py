"""Data models for the loan simulator.

This module defines dataclasses representing the different entities used by the
simulator: the user-facing simulation input, the per-month amortization and
chart records, the comparative summary and the optimizer's strategies. All of
them are plain values created fresh on every calculation.

The JSON-facing ``to_dict`` helpers use camelCase keys so that charting and
table front-ends can consume the records verbatim.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Dict, List, Optional


# Map between attribute names and the camelCase keys used on the JSON surface.
INPUT_KEYS = {
    "principal": "principal",
    "interest_rate": "interestRate",
    "tenure_years": "tenureYears",
    "monthly_emi": "monthlyEMI",
    "extra_annual_prepayment": "extraAnnualPrepayment",
    "monthly_sip": "monthlySIP",
    "sip_return_rate": "sipReturnRate",
    "inflation_rate": "inflationRate",
}


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _to_camel_dict(obj) -> Dict[str, Any]:
    return {_camel(k): v for k, v in asdict(obj).items()}


@dataclass(frozen=True)
class SimulationInput:
    """Loan and investment parameters for one scenario.

    Attributes
    ----------
    principal: float
        Loan amount in rupees.
    interest_rate: float
        Annual nominal interest rate in percent.
    tenure_years: float
        Loan tenure in (possibly fractional) years.
    monthly_emi: float
        Monthly installment. ``0`` means "derive it from the other fields".
    extra_annual_prepayment: float
        Lump sum paid towards principal at every 12th month.
    monthly_sip: float
        Amount invested every month.
    sip_return_rate: float
        Expected annual return of the investment in percent.
    inflation_rate: float
        Annual inflation in percent, used for the real (deflated) corpus.
    """

    principal: float
    interest_rate: float
    tenure_years: float
    monthly_emi: float = 0.0
    extra_annual_prepayment: float = 0.0
    monthly_sip: float = 0.0
    sip_return_rate: float = 0.0
    inflation_rate: float = 0.0

    def replace(self, **changes) -> "SimulationInput":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, float]:
        return {INPUT_KEYS[f.name]: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any], defaults: Optional["SimulationInput"] = None) -> "SimulationInput":
        """Build an input from a camelCase (or snake_case) mapping.

        Missing keys are taken from ``defaults`` when given. Values are
        coerced with ``float``, so a non-numeric value raises ``ValueError``,
        as does ``nan`` or ``inf``.
        """
        values: Dict[str, float] = {}
        for name, key in INPUT_KEYS.items():
            if key in data:
                raw = data[key]
            elif name in data:
                raw = data[name]
            elif defaults is not None:
                raw = getattr(defaults, name)
            else:
                raise ValueError(f"Missing input field: {key}")
            try:
                value = float(raw)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"Invalid numeric value for {key}: {raw!r}") from exc
            if not math.isfinite(value):
                raise ValueError(f"Invalid numeric value for {key}: {raw!r}")
            values[name] = value
        return cls(**values)


@dataclass(frozen=True)
class AmortizationDataPoint:
    """One month of the base (no-prepayment) loan ledger.

    ``total_interest`` is cumulative up to and including this month.
    """

    month: int
    principal_paid: float
    interest_paid: float
    ending_balance: float
    total_interest: float

    def to_dict(self) -> Dict[str, Any]:
        return _to_camel_dict(self)


@dataclass(frozen=True)
class ChartDataPoint:
    """Loan balances and investment corpus at the end of ``month``."""

    month: int
    base_loan_balance: float
    prepayment_loan_balance: float
    sip_nominal_corpus: float
    sip_real_corpus: float

    def to_dict(self) -> Dict[str, Any]:
        return _to_camel_dict(self)


@dataclass(frozen=True)
class YearlyDataPoint:
    """Twelve amortization rows folded into one year."""

    year: int
    principal_paid: float
    interest_paid: float
    total_interest: float
    ending_balance: float

    def to_dict(self) -> Dict[str, Any]:
        return _to_camel_dict(self)


@dataclass(frozen=True)
class SimulationSummary:
    total_interest_paid_base: float = 0.0
    total_interest_paid_with_prepayment: float = 0.0
    interest_saved: float = 0.0
    tenure_reduced_months: int = 0
    final_sip_corpus_nominal: float = 0.0
    final_sip_corpus_real: float = 0.0
    loan_free_month: Optional[int] = None
    # Payoff month counts of both tracks; tenure_reduced_months is their difference.
    base_tenure_months: int = 0
    prepayment_tenure_months: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return _to_camel_dict(self)


@dataclass(frozen=True)
class SimulationOutput:
    chart_data: List[ChartDataPoint]
    amortization_data: List[AmortizationDataPoint]
    summary: SimulationSummary

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chartData": [p.to_dict() for p in self.chart_data],
            "amortizationData": [r.to_dict() for r in self.amortization_data],
            "summary": self.summary.to_dict(),
        }


@dataclass(frozen=True)
class OptimizationStrategy:
    """A named reallocation of an annual surplus and its simulated outcome.

    ``inputs`` holds only the two reallocated fields, keyed by attribute name
    (``extra_annual_prepayment`` and ``monthly_sip``), ready to be spliced back
    into a :class:`SimulationInput` with ``replace``.
    """

    name: str
    description: str
    risk_level: str  # 'Conservative', 'Moderate' or 'Aggressive'
    inputs: Dict[str, float] = field(default_factory=dict)
    results: SimulationSummary = field(default_factory=SimulationSummary)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "riskLevel": self.risk_level,
            "inputs": {INPUT_KEYS[k]: v for k, v in self.inputs.items()},
            "results": self.results.to_dict(),
        }
