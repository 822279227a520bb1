"""Data models for the EMI prepayment calculator.

This module defines dataclasses representing the entities used by the
calculator: the loan specification, prepayment rules and the events they
expand into, individual schedule rows and the overall schedule result.
Instances are frozen so a computed schedule can be passed around as a value.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Tuple

REDUCE_TENURE = "reduce_tenure"
REDUCE_EMI = "reduce_emi"
STRATEGIES = (REDUCE_TENURE, REDUCE_EMI)

ONCE = "once"
MONTHLY = "monthly"
YEARLY = "yearly"
FREQUENCIES = (ONCE, MONTHLY, YEARLY)


@dataclass(frozen=True)
class LoanSpec:
    """Configuration of a loan.

    Attributes
    ----------
    principal: Decimal
        The amount borrowed.
    annual_rate_percent: Decimal
        Annual nominal interest rate in percent (``8.5`` means 8.5 %).
    tenure_months: int
        Number of monthly installments originally scheduled.
    strategy: str
        What to do after a prepayment. ``"reduce_tenure"`` keeps the
        installment and shortens the loan, ``"reduce_emi"`` keeps the number
        of remaining months and lowers the installment.
    """

    principal: Decimal
    annual_rate_percent: Decimal
    tenure_months: int
    strategy: str = REDUCE_TENURE


@dataclass(frozen=True)
class PrepaymentRule:
    """An extra payment declared by the borrower.

    ``start_month`` is the 1-based installment at which the rule takes effect.
    A ``once`` rule pays a single time at that installment, ``monthly`` and
    ``yearly`` rules repeat from there on.
    """

    amount: object
    frequency: str = ONCE
    start_month: int = 1


@dataclass(frozen=True)
class PrepaymentEvent:
    """A single prepayment due with installment ``month_offset + 1``."""

    month_offset: int
    amount: Decimal


@dataclass(frozen=True)
class InstallmentRow:
    """An entry in the amortization schedule.

    ``opening`` is the balance at the start of the period, before any
    prepayment. Interest accrues on the balance left after the period's
    prepayments, so ``closing == opening - principal - prepayment``.
    """

    index: int
    opening: Decimal
    emi: Decimal
    interest: Decimal
    principal: Decimal
    prepayment: Decimal
    closing: Decimal


@dataclass(frozen=True)
class ScheduleResult:
    rows: Tuple[InstallmentRow, ...]
    total_interest: Decimal
    final_installment: Decimal
    scheduled_installment: Decimal = Decimal("0")
    total_prepayment: Decimal = Decimal("0")
    # True when the period cap stopped the simulation with a balance left
    capped: bool = False

    @property
    def months(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class ScheduleComparison:
    """Savings of a prepayment schedule measured against the plain loan."""

    baseline_emi: Decimal
    baseline_total_interest: Decimal
    baseline_months: int
    strategy_total_interest: Decimal
    strategy_months: int
    interest_saved: Decimal
    months_saved: int
    total_paid_baseline: Decimal
    total_paid_strategy: Decimal
