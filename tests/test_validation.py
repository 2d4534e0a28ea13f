import math

import pytest

from loan_sim.solver import calculate_emi
from loan_sim.validation import resolve_inputs, simulate_validated, validate_inputs


def test_defaults_are_valid(base_inputs):
    assert validate_inputs(base_inputs) == {}


@pytest.mark.parametrize(
    "changes,field,message",
    [
        ({"principal": 50_000}, "principal", "Amount must be at least ₹1,00,000."),
        ({"principal": 30_000_000}, "principal", "Amount cannot exceed ₹2,00,00,000."),
        ({"interest_rate": 0}, "interest_rate", "Rate must be a positive number."),
        ({"interest_rate": 26}, "interest_rate", "Rate above 25% is unlikely. Please check."),
        ({"tenure_years": 0}, "tenure_years", "Tenure must be a positive number."),
        ({"tenure_years": 31}, "tenure_years", "Tenure cannot be more than 30 years."),
        ({"monthly_emi": -1}, "monthly_emi", "EMI must be a positive number."),
        ({"monthly_emi": 20_000}, "monthly_emi", "EMI must be > ₹21,250 to cover interest."),
        ({"extra_annual_prepayment": -1}, "extra_annual_prepayment", "Cannot be negative."),
        ({"extra_annual_prepayment": 4_000_000}, "extra_annual_prepayment", "Cannot be more than the loan amount."),
        ({"monthly_sip": -5}, "monthly_sip", "Cannot be negative."),
        ({"monthly_sip": 5_000, "sip_return_rate": 0}, "sip_return_rate", "Return rate must be positive for SIP."),
        ({"sip_return_rate": 45}, "sip_return_rate", "Returns above 40% are optimistic. Please check."),
        ({"inflation_rate": -1}, "inflation_rate", "Cannot be negative."),
        ({"inflation_rate": 16}, "inflation_rate", "Inflation above 15% is high. Please check."),
    ],
)
def test_validation_messages(base_inputs, changes, field, message):
    errors = validate_inputs(base_inputs.replace(**changes))
    assert errors[field] == message


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_non_finite_values_are_rejected(base_inputs, value):
    errors = validate_inputs(base_inputs.replace(monthly_sip=value, inflation_rate=value))

    assert errors == {
        "monthly_sip": "Must be a finite number.",
        "inflation_rate": "Must be a finite number.",
    }


def test_non_finite_principal_blocks_solving(base_inputs):
    resolution = resolve_inputs(base_inputs.replace(principal=math.nan), "monthly_emi")

    assert resolution.errors == {"principal": "Must be a finite number."}
    assert resolution.inputs.monthly_emi == 0
    assert simulate_validated(resolution.inputs) is None


def test_zero_sip_return_is_fine_without_sip(base_inputs):
    assert validate_inputs(base_inputs.replace(sip_return_rate=0, monthly_sip=0)) == {}


def test_resolve_emi(base_inputs):
    resolution = resolve_inputs(base_inputs, "monthly_emi")

    assert resolution.ok
    assert resolution.changed
    assert resolution.inputs.monthly_emi == pytest.approx(calculate_emi(3_000_000, 8.5, 30))


def test_resolve_emi_unchanged_when_already_current(base_inputs):
    current = base_inputs.replace(monthly_emi=calculate_emi(3_000_000, 8.5, 30))
    resolution = resolve_inputs(current, "monthly_emi")

    assert resolution.ok
    assert not resolution.changed
    assert resolution.inputs == current


def test_resolve_tenure(base_inputs):
    emi = calculate_emi(3_000_000, 8.5, 20)
    resolution = resolve_inputs(base_inputs.replace(monthly_emi=emi, tenure_years=0), "tenure_years")

    assert resolution.ok
    assert resolution.inputs.tenure_years == pytest.approx(20, abs=0.01)


def test_resolve_tenure_beyond_limit_suggests_minimum_emi(base_inputs):
    resolution = resolve_inputs(base_inputs.replace(monthly_emi=22_000), "tenure_years")

    assert resolution.errors == {"monthly_emi": "For a 30-yr tenure, EMI must be at least ₹23,068."}
    assert resolution.changed
    assert resolution.inputs.tenure_years == 0


def test_resolve_tenure_with_emi_below_interest(base_inputs):
    inputs = base_inputs.replace(monthly_emi=21_000, tenure_years=12)
    resolution = resolve_inputs(inputs, "tenure_years")

    assert list(resolution.errors) == ["monthly_emi"]
    assert not resolution.changed
    assert resolution.inputs.tenure_years == 12


def test_resolve_interest_rate(base_inputs):
    emi = calculate_emi(3_000_000, 9.25, 20)
    inputs = base_inputs.replace(monthly_emi=emi, tenure_years=20, interest_rate=0)
    resolution = resolve_inputs(inputs, "interest_rate")

    assert resolution.ok
    assert resolution.inputs.interest_rate == pytest.approx(9.25, abs=0.01)


def test_resolve_interest_rate_unreachable(base_inputs):
    inputs = base_inputs.replace(monthly_emi=5_000, tenure_years=20, interest_rate=0)
    resolution = resolve_inputs(inputs, "interest_rate")

    assert resolution.errors["interest_rate"] == "Cannot calculate a realistic rate with these inputs."


def test_resolve_skips_solving_without_prerequisites(base_inputs):
    resolution = resolve_inputs(base_inputs.replace(interest_rate=0), "monthly_emi")

    assert not resolution.ok
    assert "interest_rate" in resolution.errors
    assert resolution.inputs.monthly_emi == 0


def test_resolve_rejects_unknown_field(base_inputs):
    with pytest.raises(ValueError):
        resolve_inputs(base_inputs, "principal")


def test_simulate_validated_requires_complete_inputs(base_inputs):
    assert simulate_validated(base_inputs) is None

    complete = resolve_inputs(base_inputs, "monthly_emi").inputs
    assert simulate_validated(complete) is not None
    assert simulate_validated(complete.replace(inflation_rate=20)) is None


def test_resolve_replaces_non_finite_calculated_field(base_inputs):
    resolution = resolve_inputs(base_inputs.replace(monthly_emi=math.nan), "monthly_emi")

    assert resolution.ok
    assert resolution.changed
    assert resolution.inputs.monthly_emi == pytest.approx(calculate_emi(3_000_000, 8.5, 30))
