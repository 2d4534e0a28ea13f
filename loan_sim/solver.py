"""EMI solver.

Given any three of principal, annual rate, tenure and monthly installment
(EMI), the functions in this module solve for the fourth. Each one has its own
numerical method and degenerate cases:

* ``calculate_emi`` uses the closed-form annuity formula.
* ``calculate_tenure`` inverts it with logarithms.
* ``calculate_interest_rate`` has no closed form and uses bisection.

Failures are reported by value, never by raising: ``0`` for rejected inputs and
``math.inf`` for a payment that never repays the loan. Callers check results
with :func:`is_solved` before using them.
"""

from __future__ import annotations

import math
from typing import Callable

from .config import RATE_SEARCH_HIGH, RATE_SEARCH_ITERATIONS, RATE_SEARCH_LOW


def monthly_rate(annual_rate_percent: float) -> float:
    """Convert an annual percentage rate into a monthly decimal rate."""
    return annual_rate_percent / 12 / 100


def is_solved(value: float) -> bool:
    """Return True if a solver result is usable (finite and positive)."""
    return math.isfinite(value) and value > 0


def calculate_emi(principal: float, annual_rate_percent: float, tenure_years: float) -> float:
    """Return the monthly installment of an amortizing loan.

    The formula is:

        emi = P * r * (1 + r)^n / ((1 + r)^n - 1)

    where ``r`` is the monthly rate and ``n`` the number of months. With a zero
    rate the payment is simply ``P / n``. Returns 0 for a non-positive
    principal or tenure, or a negative rate.
    """
    if principal <= 0 or annual_rate_percent < 0 or tenure_years <= 0:
        return 0.0
    months = tenure_years * 12
    r = monthly_rate(annual_rate_percent)
    if r == 0:
        return principal / months
    factor = (1 + r) ** months
    return principal * r * factor / (factor - 1)


def calculate_tenure(principal: float, annual_rate_percent: float, emi: float) -> float:
    """Return the tenure in years needed to repay ``principal`` with ``emi``.

    Returns ``math.inf`` when the installment does not cover the first month's
    interest (the loan is never repaid) and 0 for rejected inputs.
    """
    if principal <= 0 or annual_rate_percent < 0 or emi <= 0:
        return 0.0
    r = monthly_rate(annual_rate_percent)
    if emi <= principal * r:
        return math.inf
    if r == 0:
        return principal / emi / 12
    months = math.log(emi / (emi - principal * r)) / math.log(1 + r)
    return months / 12


def bisect(
    oracle: Callable[[float], float],
    target: float,
    low: float,
    high: float,
    iterations: int,
) -> float:
    """Find ``x`` in ``[low, high]`` with ``oracle(x) ≈ target``.

    ``oracle`` must be increasing on the interval. The search stops after
    ``iterations`` halvings or once the midpoint can no longer move.
    """
    mid = low
    for _ in range(iterations):
        mid = (low + high) / 2
        if mid == low or mid == high:
            break
        if oracle(mid) > target:
            high = mid
        else:
            low = mid
    return mid


def calculate_interest_rate(principal: float, tenure_years: float, emi: float) -> float:
    """Return the annual rate (percent) at which ``emi`` repays the loan.

    Bisection over ``[0, 50]`` percent using :func:`calculate_emi` as the
    forward model. Returns 0 when the total of all installments does not even
    cover the principal.
    """
    if principal <= 0 or tenure_years <= 0 or emi <= 0 or emi * tenure_years * 12 <= principal:
        return 0.0
    return bisect(
        lambda rate: calculate_emi(principal, rate, tenure_years),
        emi,
        RATE_SEARCH_LOW,
        RATE_SEARCH_HIGH,
        RATE_SEARCH_ITERATIONS,
    )
