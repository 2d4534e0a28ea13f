"""Defaults, limits and reference tables for the loan simulator."""

from .data_models import SimulationInput

# -----------------------------
# Defaults
# -----------------------------
DEFAULT_INPUTS = SimulationInput(
    principal=3_000_000,
    interest_rate=8.5,
    tenure_years=30,
    monthly_emi=0,
    extra_annual_prepayment=0,
    monthly_sip=0,
    sip_return_rate=12,
    inflation_rate=6,
)

SIP_RISK_CATEGORIES = [
    {"name": "Conservative", "rate": 7},
    {"name": "Moderate", "rate": 10},
    {"name": "Aggressive", "rate": 16},
]

# -----------------------------
# Simulation bounds
# -----------------------------
# Month ceiling of the amortization loops, as a multiple of the tenure in months.
AMORTIZATION_CEILING_FACTOR = 5
# Month ceiling of the SIP-closure search, as a multiple of the tenure in months.
CLOSURE_CEILING_FACTOR = 2

RATE_SEARCH_LOW = 0.0
RATE_SEARCH_HIGH = 50.0
RATE_SEARCH_ITERATIONS = 50

# -----------------------------
# Form validation limits
# -----------------------------
MIN_PRINCIPAL = 100_000
MAX_PRINCIPAL = 20_000_000
MAX_INTEREST_RATE = 25
MAX_TENURE_YEARS = 30
MAX_SIP_RETURN_RATE = 40
MAX_INFLATION_RATE = 15

# -----------------------------
# Market reference rates (percent)
# -----------------------------
REPO_RATE = 6.5
MARKET_BENCHMARK_RATE = 8.5
BEST_OFFER_RATE = 8.0

# -----------------------------
# Tax estimate (illustrative, new regime)
# -----------------------------
SECTION_24B_INTEREST_CAP = 200_000
TAX_CESS_FACTOR = 1.04
TAX_ESTIMATE_TENURE_YEARS = 20
INCOME_SLABS = [
    {"id": "7L", "label": "Upto ₹7L", "rate": 0.0},
    {"id": "10L", "label": "₹7L - ₹10L", "rate": 0.15},
    {"id": "15L", "label": "₹10L - ₹15L", "rate": 0.20},
    {"id": "15L+", "label": "> ₹15L", "rate": 0.30},
]

# -----------------------------
# Balance transfer offers
# -----------------------------
BANK_OFFERS = [
    {"id": "hbfc", "name": "HBFC Bank", "interest_rate": 8.25, "processing_fee_percent": 0.5},
    {"id": "ici", "name": "ICI Bank", "interest_rate": 8.30, "processing_fee_percent": 0.4},
    {"id": "sbi", "name": "State Bank", "interest_rate": 8.40, "processing_fee_percent": 0.35},
    {"id": "axis", "name": "Axis Bank", "interest_rate": 8.35, "processing_fee_percent": 1.0},
]
