"""Closed-form loan formulas shared by the schedule engine.

All functions work on ``Decimal`` values and are free of side effects.
"""

from __future__ import annotations

import math
from decimal import Decimal, Overflow, ROUND_CEILING, getcontext
from typing import Union

getcontext().prec = 28  # increase precision for financial calculations


def monthly_rate(annual_rate_percent: Decimal) -> Decimal:
    """Convert an annual nominal rate in percent to a monthly decimal rate."""
    return (Decimal(annual_rate_percent) / Decimal(100)) / Decimal(12)


def emi(principal: Decimal, annual_rate_percent: Decimal, tenure_months: int) -> Decimal:
    """Return the equated monthly installment for a reducing-balance loan.

    The formula is:

        emi = P * i * (1 + i)^n / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of installments. When the interest rate is zero, the
    installment simplifies to ``P / n``. The same holds when the rate is too
    small to move ``(1 + i)^n`` away from 1 at the context precision. When
    ``(1 + i)^n`` overflows the installment is its limit ``P * i``.
    """
    if tenure_months <= 0:
        raise ValueError("Tenure must be positive")
    rate = monthly_rate(annual_rate_percent)
    if rate == 0:
        return Decimal(principal) / Decimal(tenure_months)
    try:
        factor = (1 + rate) ** tenure_months
        if factor == 1:
            return Decimal(principal) / Decimal(tenure_months)
        return Decimal(principal) * rate * factor / (factor - 1)
    except Overflow:
        return Decimal(principal) * rate


def remaining_months(principal: Decimal, rate: Decimal, installment: Decimal) -> Union[int, float]:
    """Return how many installments of ``installment`` clear ``principal``.

    This inverts the EMI formula:

        n = -ln(1 - i * P / emi) / ln(1 + i)

    rounded up to a whole number of months. ``rate`` is the monthly rate.
    When the installment does not even cover the first month's interest the
    loan never amortizes and ``math.inf`` is returned.
    """
    if principal <= 0:
        return 0
    if installment <= 0:
        return math.inf
    growth = (1 + rate).ln()
    if rate == 0 or growth == 0:
        return int((Decimal(principal) / Decimal(installment)).to_integral_value(rounding=ROUND_CEILING))
    numerator = 1 - (rate * principal) / installment
    if numerator <= 0:
        return math.inf
    n = -numerator.ln() / growth
    if n.adjusted() < 12:
        # drop digits below 1e-12 so precision noise does not add a month
        n = n.quantize(Decimal("1e-12"))
    return max(0, int(n.to_integral_value(rounding=ROUND_CEILING)))
