"""Input validation and calculated-field resolution.

A scenario form lets the user fix any two of interest rate, tenure and EMI and
have the third solved. :func:`resolve_inputs` runs the form-level checks,
solves the designated field and reports problems as per-field messages.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, fields
from typing import Dict, Optional

from .config import (
    MAX_INFLATION_RATE,
    MAX_INTEREST_RATE,
    MAX_PRINCIPAL,
    MAX_SIP_RETURN_RATE,
    MAX_TENURE_YEARS,
    MIN_PRINCIPAL,
    RATE_SEARCH_HIGH,
)
from .data_models import SimulationInput, SimulationOutput
from .engine import run_simulation
from .formatter import format_inr
from .solver import calculate_emi, calculate_interest_rate, calculate_tenure, is_solved, monthly_rate

logger = logging.getLogger(__name__)

CALCULABLE_FIELDS = ("interest_rate", "tenure_years", "monthly_emi")


@dataclass
class Resolution:
    """Outcome of :func:`resolve_inputs`.

    ``changed`` is True when the solved value differs enough from the one
    supplied to be worth highlighting.
    """

    inputs: SimulationInput
    errors: Dict[str, str] = field(default_factory=dict)
    changed: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors


def validate_inputs(inputs: SimulationInput) -> Dict[str, str]:
    """Return a mapping of field name to error message for out-of-range values.

    A non-finite value (``nan``, ``inf``) replaces whatever range message its
    field would otherwise get.
    """
    errors: Dict[str, str] = {}
    principal = inputs.principal
    rate = inputs.interest_rate

    if principal < MIN_PRINCIPAL:
        errors["principal"] = f"Amount must be at least {format_inr(MIN_PRINCIPAL)}."
    elif principal > MAX_PRINCIPAL:
        errors["principal"] = f"Amount cannot exceed {format_inr(MAX_PRINCIPAL)}."

    if rate <= 0:
        errors["interest_rate"] = "Rate must be a positive number."
    elif rate > MAX_INTEREST_RATE:
        errors["interest_rate"] = f"Rate above {MAX_INTEREST_RATE}% is unlikely. Please check."

    if inputs.tenure_years <= 0:
        errors["tenure_years"] = "Tenure must be a positive number."
    elif inputs.tenure_years > MAX_TENURE_YEARS:
        errors["tenure_years"] = f"Tenure cannot be more than {MAX_TENURE_YEARS} years."

    if inputs.monthly_emi < 0:
        errors["monthly_emi"] = "EMI must be a positive number."
    elif 0 < principal < math.inf and 0 < rate < math.inf and inputs.monthly_emi > 0:
        monthly_interest = principal * monthly_rate(rate)
        if inputs.monthly_emi <= monthly_interest:
            errors["monthly_emi"] = f"EMI must be > {format_inr(monthly_interest)} to cover interest."

    if inputs.extra_annual_prepayment < 0:
        errors["extra_annual_prepayment"] = "Cannot be negative."
    elif principal > 0 and inputs.extra_annual_prepayment > principal:
        errors["extra_annual_prepayment"] = "Cannot be more than the loan amount."

    if inputs.monthly_sip < 0:
        errors["monthly_sip"] = "Cannot be negative."

    if inputs.sip_return_rate <= 0 and inputs.monthly_sip > 0:
        errors["sip_return_rate"] = "Return rate must be positive for SIP."
    elif inputs.sip_return_rate > MAX_SIP_RETURN_RATE:
        errors["sip_return_rate"] = f"Returns above {MAX_SIP_RETURN_RATE}% are optimistic. Please check."

    if inputs.inflation_rate < 0:
        errors["inflation_rate"] = "Cannot be negative."
    elif inputs.inflation_rate > MAX_INFLATION_RATE:
        errors["inflation_rate"] = f"Inflation above {MAX_INFLATION_RATE}% is high. Please check."

    for f in fields(inputs):
        if not math.isfinite(getattr(inputs, f.name)):
            errors[f.name] = "Must be a finite number."

    return errors


def _prerequisites_met(inputs: SimulationInput, calculated_field: str, errors: Dict[str, str]) -> bool:
    if inputs.principal <= 0 or "principal" in errors:
        return False
    for name in CALCULABLE_FIELDS:
        if name == calculated_field:
            continue
        if getattr(inputs, name) <= 0 or name in errors:
            return False
    return True


def resolve_inputs(inputs: SimulationInput, calculated_field: str) -> Resolution:
    """Validate ``inputs`` and solve for ``calculated_field``.

    ``calculated_field`` must be one of ``interest_rate``, ``tenure_years`` or
    ``monthly_emi``. The solved field's own validation error is discarded,
    since its current value is about to be replaced.
    """
    if calculated_field not in CALCULABLE_FIELDS:
        raise ValueError(f"Cannot solve for {calculated_field!r}; expected one of {CALCULABLE_FIELDS}")

    errors = validate_inputs(inputs)
    errors.pop(calculated_field, None)
    if not _prerequisites_met(inputs, calculated_field, errors):
        return Resolution(inputs=inputs, errors=errors)

    principal = inputs.principal
    resolved = inputs
    changed = False

    if calculated_field == "monthly_emi":
        value = calculate_emi(principal, inputs.interest_rate, inputs.tenure_years)
        if not is_solved(value):
            errors["monthly_emi"] = "Cannot calculate a valid EMI."
        elif not math.isfinite(inputs.monthly_emi) or round(value) != round(inputs.monthly_emi):
            resolved, changed = inputs.replace(monthly_emi=value), True

    elif calculated_field == "tenure_years":
        value = calculate_tenure(principal, inputs.interest_rate, inputs.monthly_emi)
        # The EMI is the field to fix, so both failures are reported against it.
        if not is_solved(value):
            errors["monthly_emi"] = "With this EMI, the loan will never be repaid."
        elif value > MAX_TENURE_YEARS:
            min_emi = calculate_emi(principal, inputs.interest_rate, MAX_TENURE_YEARS)
            errors["monthly_emi"] = (
                f"For a {MAX_TENURE_YEARS}-yr tenure, EMI must be at least {format_inr(math.ceil(min_emi))}."
            )
            resolved, changed = inputs.replace(tenure_years=0.0), True
        elif not abs(value - inputs.tenure_years) <= 0.01:
            resolved, changed = inputs.replace(tenure_years=value), True

    else:
        value = calculate_interest_rate(principal, inputs.tenure_years, inputs.monthly_emi)
        if not is_solved(value) or value > RATE_SEARCH_HIGH:
            errors["interest_rate"] = "Cannot calculate a realistic rate with these inputs."
        elif not abs(value - inputs.interest_rate) <= 0.01:
            resolved, changed = inputs.replace(interest_rate=value), True

    if errors:
        logger.debug("Resolving %s left errors: %s", calculated_field, errors)
    return Resolution(inputs=resolved, errors=errors, changed=changed)


def simulate_validated(inputs: SimulationInput) -> Optional[SimulationOutput]:
    """Run the simulation only for complete inputs that pass validation."""
    complete = (
        inputs.principal > 0
        and inputs.interest_rate > 0
        and inputs.tenure_years > 0
        and inputs.monthly_emi > 0
    )
    if not complete or validate_inputs(inputs):
        return None
    return run_simulation(inputs)
