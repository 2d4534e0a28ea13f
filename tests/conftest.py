import pytest

from loan_sim.config import DEFAULT_INPUTS


@pytest.fixture
def base_inputs():
    """Rs 30 lakh at 8.5% for 30 years, EMI derived, no prepayment or SIP."""
    return DEFAULT_INPUTS


@pytest.fixture
def invested_inputs(base_inputs):
    return base_inputs.replace(
        extra_annual_prepayment=100_000,
        monthly_sip=10_000,
        sip_return_rate=12,
        inflation_rate=6,
    )
