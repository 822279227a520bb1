"""Utility functions for the EMI calculator.

This module provides helpers for parsing user input into ``Decimal`` values
and for validating loan inputs before they reach the schedule engine. Every
constraint violation is collected so callers can report them all at once.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, getcontext
from typing import List, Optional

from .data_models import LoanSpec, STRATEGIES
from .errors import InvalidInputError

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

# Shorthand suffixes accepted by ``parse_amount``. Longer suffixes come first
# so "cr" is not mistaken for a bare number ending in "r".
_AMOUNT_SUFFIXES = (
    ("cr", Decimal("10000000")),
    ("k", Decimal("1000")),
    ("m", Decimal("1000000")),
    ("l", Decimal("100000")),
)


def decimal_from_str(value: object) -> Decimal:
    """Convert a number or numeric string into a ``Decimal``.

    Commas and whitespace are stripped, so both ``"1,000,000"`` and
    ``"10,00,000"`` are accepted. Floats go through their ``repr`` to avoid
    binary noise. Raises ``ValueError`` if conversion fails or the result is
    not finite.
    """
    if isinstance(value, Decimal):
        result = value
    else:
        cleaned = "".join(str(value).replace(",", "").split())
        try:
            result = Decimal(cleaned)
        except InvalidOperation as exc:
            raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def parse_amount(value: object) -> Decimal:
    """Parse an amount with optional shorthand suffixes.

    Accepts plain numbers ("500000") and shorthand with ``k`` (thousand),
    ``m`` (million), ``l`` (lakh) or ``cr`` (crore) suffixes, e.g. "50l"
    meaning 5,000,000.
    """
    if isinstance(value, (int, float, Decimal)):
        return decimal_from_str(value)
    text = str(value).strip().lower()
    for suffix, factor in _AMOUNT_SUFFIXES:
        if text.endswith(suffix):
            return decimal_from_str(text[: -len(suffix)]) * factor
    return decimal_from_str(text)


def optional_amount(value: object) -> Optional[Decimal]:
    """Return a positive amount, or ``None`` when nothing usable was given."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = parse_amount(value)
    except ValueError:
        return None
    return amount if amount > 0 else None


def validate_inputs(principal: object, rate: object, tenure: object, strategy: object = None) -> List[str]:
    """Return a list of messages, one per violated input constraint."""
    errors: List[str] = []
    try:
        if parse_amount(principal) <= 0:
            raise ValueError
    except (TypeError, ValueError):
        errors.append("Enter a valid loan amount")
    try:
        if decimal_from_str(rate) < 0:
            raise ValueError
    except (TypeError, ValueError):
        errors.append("Enter a valid interest rate")
    if not _is_positive_whole(tenure):
        errors.append("Enter a valid tenure in months")
    if strategy is not None and strategy not in STRATEGIES:
        errors.append(f"Strategy must be one of {', '.join(STRATEGIES)}")
    return errors


def _is_positive_whole(value: object) -> bool:
    if isinstance(value, bool):
        return False
    try:
        number = decimal_from_str(value)
    except (TypeError, ValueError):
        return False
    return number > 0 and number == number.to_integral_value()


def build_loan_spec(principal: object, rate: object, tenure: object, strategy: str) -> LoanSpec:
    """Validate raw inputs and return a ``LoanSpec``.

    Raises
    ------
    InvalidInputError
        If any input is out of range. The exception lists every problem.
    """
    errors = validate_inputs(principal, rate, tenure, strategy)
    if errors:
        raise InvalidInputError(errors)
    return LoanSpec(
        principal=parse_amount(principal),
        annual_rate_percent=decimal_from_str(rate),
        tenure_months=int(decimal_from_str(tenure)),
        strategy=strategy,
    )
