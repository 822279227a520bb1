"""Core calculation engine for the EMI calculator.

This module builds amortization schedules for reducing-balance loans with
prepayments. Prepayment rules are expanded into a time-ordered list of events
which the simulator applies month by month, rebalancing the loan after each
prepayment either by shortening the tenure or by lowering the installment.
Results are returned as a ``ScheduleResult`` value; nothing is kept between
calls.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from .data_models import (
    FREQUENCIES,
    MONTHLY,
    ONCE,
    REDUCE_EMI,
    REDUCE_TENURE,
    InstallmentRow,
    LoanSpec,
    PrepaymentEvent,
    PrepaymentRule,
    ScheduleComparison,
    ScheduleResult,
)
from .errors import UnknownFrequencyError
from .formulas import emi, monthly_rate, remaining_months
from .utils import optional_amount

logger = logging.getLogger(__name__)

# 100 years of monthly installments. Bounds both event expansion and the
# simulation loop.
MAX_PERIODS = 1200
# Balances at or below this are floating residue, not money owed.
SETTLEMENT_THRESHOLD = Decimal("0.01")


def _rule_offsets(rule: PrepaymentRule) -> range:
    frequency = rule.frequency or ONCE
    if frequency not in FREQUENCIES:
        raise UnknownFrequencyError(rule.frequency)
    first = max(int(rule.start_month or 1), 1) - 1
    if frequency == ONCE:
        return range(first, min(first + 1, MAX_PERIODS))
    step = 1 if frequency == MONTHLY else 12
    return range(first, MAX_PERIODS, step)


def build_events(rules: Iterable[PrepaymentRule]) -> List[PrepaymentEvent]:
    """Expand prepayment rules into events sorted by month offset.

    Rules with a missing, non-numeric or non-positive amount are skipped.
    Events due in the same month keep the order of the rules that produced
    them.

    Raises
    ------
    UnknownFrequencyError
        If a rule names a frequency other than once, monthly or yearly.
    """
    events: List[PrepaymentEvent] = []
    for rule in rules:
        amount = optional_amount(rule.amount)
        if amount is None:
            continue
        events.extend(PrepaymentEvent(month_offset=m, amount=amount) for m in _rule_offsets(rule))
    # sorted() is stable, so ties stay in insertion order
    return sorted(events, key=lambda e: e.month_offset)


def simulate(spec: LoanSpec, events: Sequence[PrepaymentEvent] = ()) -> ScheduleResult:
    """Simulate the loan month by month and return its schedule.

    Parameters
    ----------
    spec: LoanSpec
        A validated loan specification.
    events: Sequence[PrepaymentEvent]
        Prepayments sorted by ``month_offset``, as produced by
        ``build_events``. An event with offset ``k`` is paid with installment
        ``k + 1``, before that installment's interest accrues.

    Returns
    -------
    ScheduleResult
        One row per installment actually paid plus aggregate totals.
    """
    rate = monthly_rate(spec.annual_rate_percent)
    balance = Decimal(spec.principal)
    months_left = spec.tenure_months
    scheduled = emi(balance, spec.annual_rate_percent, spec.tenure_months)
    installment = scheduled

    pending = tuple(events)
    cursor = 0
    rows: List[InstallmentRow] = []
    total_interest = Decimal("0")
    total_prepayment = Decimal("0")
    index = 0

    while balance > 0 and index < MAX_PERIODS and months_left > 0:
        index += 1
        opening = balance

        prepayment = Decimal("0")
        while cursor < len(pending) and pending[cursor].month_offset + 1 == index:
            amount = min(pending[cursor].amount, balance)
            cursor += 1
            if amount > 0:
                prepayment += amount
                balance -= amount

        if prepayment > 0:
            total_prepayment += prepayment
            if spec.strategy == REDUCE_EMI:
                installment = emi(balance, spec.annual_rate_percent, months_left)
            elif spec.strategy == REDUCE_TENURE:
                months_left = remaining_months(balance, rate, installment)

        interest = balance * rate
        principal_pay = min(installment - interest, balance)
        if principal_pay < 0:
            principal_pay = Decimal("0")
        balance = max(Decimal("0"), balance - principal_pay)
        total_interest += interest

        settled = balance <= SETTLEMENT_THRESHOLD
        if settled:
            # fold the residue into the last installment so the row balances
            principal_pay += balance
            balance = Decimal("0")
        rows.append(
            InstallmentRow(
                index=index,
                opening=opening,
                emi=min(principal_pay + interest, installment) if balance == 0 else installment,
                interest=interest,
                principal=principal_pay,
                prepayment=prepayment,
                closing=balance,
            )
        )
        if settled:
            break
        months_left -= 1

    capped = balance > 0 and index >= MAX_PERIODS
    if capped:
        logger.warning(
            "Schedule stopped at the %d period cap with %.2f outstanding at installment %.2f",
            MAX_PERIODS,
            balance,
            installment,
        )
    logger.debug("Built schedule: %d rows, total interest %.2f", len(rows), total_interest)

    return ScheduleResult(
        rows=tuple(rows),
        total_interest=total_interest,
        final_installment=rows[-1].emi if rows else Decimal("0"),
        scheduled_installment=scheduled,
        total_prepayment=total_prepayment,
        capped=capped,
    )


def baseline_schedule(spec: LoanSpec) -> ScheduleResult:
    """Return the schedule of the loan without any prepayment."""
    return simulate(spec, ())


def compare_with_baseline(spec: LoanSpec, result: ScheduleResult) -> ScheduleComparison:
    """Measure what the prepayments in ``result`` save against the plain loan."""
    base = baseline_schedule(spec)
    return ScheduleComparison(
        baseline_emi=base.scheduled_installment,
        baseline_total_interest=base.total_interest,
        baseline_months=base.months,
        strategy_total_interest=result.total_interest,
        strategy_months=result.months,
        interest_saved=max(Decimal("0"), base.total_interest - result.total_interest),
        months_saved=max(0, spec.tenure_months - result.months),
        total_paid_baseline=base.scheduled_installment * spec.tenure_months,
        total_paid_strategy=Decimal(spec.principal) + result.total_interest,
    )


def summarize(
    spec: LoanSpec,
    result: ScheduleResult,
    comparison: Optional[ScheduleComparison] = None,
) -> Dict[str, object]:
    """Return the summary figures of a schedule as plain numbers."""
    summary: Dict[str, object] = {
        "principal": float(spec.principal),
        "annual_rate_percent": float(spec.annual_rate_percent),
        "tenure_months": spec.tenure_months,
        "strategy": spec.strategy,
        "scheduled_installment": float(result.scheduled_installment),
        "final_installment": float(result.final_installment),
        "total_interest": float(result.total_interest),
        "total_prepayment": float(result.total_prepayment),
        "total_cost": float(Decimal(spec.principal) + result.total_interest),
        "months": result.months,
        "capped": result.capped,
    }
    if comparison is not None:
        summary["comparison"] = {
            "baseline_emi": float(comparison.baseline_emi),
            "baseline_total_interest": float(comparison.baseline_total_interest),
            "baseline_months": comparison.baseline_months,
            "interest_saved": float(comparison.interest_saved),
            "months_saved": comparison.months_saved,
            "total_paid_baseline": float(comparison.total_paid_baseline),
            "total_paid_strategy": float(comparison.total_paid_strategy),
        }
    return summary
