"""Utility functions for the loan simulator.

Helpers for parsing user-typed amounts and percentages into floats. Amounts
accept the shorthand common on Indian loan forms (``30L`` for thirty lakh,
``1.2cr`` for 1.2 crore) as well as ``k``/``m``.
"""

from __future__ import annotations

# Longest suffixes first so that "lakh" is not read as "h".
_AMOUNT_SUFFIXES = (
    ("lakh", 100_000.0),
    ("lac", 100_000.0),
    ("cr", 10_000_000.0),
    ("l", 100_000.0),
    ("k", 1_000.0),
    ("m", 1_000_000.0),
)


def parse_amount(value: str) -> float:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers with optional commas or a leading ``₹``
    (``"30,00,000"``) and shorthand suffixes (``"30L"``, ``"1.2cr"``,
    ``"500k"``). Raises ``ValueError`` if the value cannot be parsed.
    """
    cleaned = str(value).strip().lower().replace(",", "").lstrip("₹").strip()
    factor = 1.0
    for suffix, multiplier in _AMOUNT_SUFFIXES:
        if cleaned.endswith(suffix):
            factor = multiplier
            cleaned = cleaned[: -len(suffix)].strip()
            break
    try:
        return float(cleaned) * factor
    except ValueError as exc:
        raise ValueError(f"Invalid amount: {value}") from exc


def parse_percent(value: str) -> float:
    """Parse a percentage string (e.g. ``"8.5"`` or ``"8.5%"``) into percent."""
    cleaned = str(value).strip()
    if cleaned.endswith("%"):
        cleaned = cleaned[:-1]
    try:
        return float(cleaned)
    except ValueError as exc:
        raise ValueError(f"Invalid percentage: {value}") from exc
