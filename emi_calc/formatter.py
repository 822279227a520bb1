"""Output helpers for the EMI calculator.

This module renders amortization schedules and summaries as plain text
tables, CSV and JSON-ready dictionaries. Monetary values are printed with
two decimals; no currency symbols or locale grouping are applied.
"""

from __future__ import annotations

import csv
from typing import Dict, Iterable, List, TextIO

from .data_models import InstallmentRow

CSV_HEADER = ["Index", "Opening", "EMI", "Interest", "Principal", "Prepayment", "Closing"]


def print_summary(summary: Dict[str, object]) -> None:
    """Print a summary of loan metrics in a human‑readable format."""
    print("Summary")
    print("-" * 72)
    print(f"Principal          : {summary['principal']:.2f}")
    print(f"Annual rate        : {summary['annual_rate_percent']:.2f}%")
    print(f"Strategy           : {summary['strategy']}")
    print(f"Scheduled EMI      : {summary['scheduled_installment']:.2f}")
    print(f"Final installment  : {summary['final_installment']:.2f}")
    print(f"Total interest     : {summary['total_interest']:.2f}")
    if summary.get("total_prepayment", 0):
        print(f"Total prepayment   : {summary['total_prepayment']:.2f}")
    print(f"Total cost         : {summary['total_cost']:.2f}")
    print(f"Original tenure    : {summary['tenure_months']} months")
    print(f"New tenure         : {summary['months']} months")
    if summary.get("capped"):
        print("Warning            : installment does not amortize the loan; schedule capped")
    comparison = summary.get("comparison")
    if comparison:
        print(f"Baseline interest  : {comparison['baseline_total_interest']:.2f}")
        print(f"Interest saved     : {comparison['interest_saved']:.2f}")
        if comparison.get("months_saved"):
            print(f"Tenure reduction   : {int(comparison['months_saved'])} months")
    print("-" * 72)


def print_schedule(rows: Iterable[InstallmentRow]) -> None:
    """Print the amortization schedule as a tab separated table."""
    print("\t".join(CSV_HEADER))
    for row in rows:
        print("\t".join(_row_cells(row)))


def print_comparison(s1: Dict[str, object], s2: Dict[str, object]) -> None:
    """Print two loan summaries side by side.

    The difference column is scenario2 - scenario1, so a negative value means
    the second scenario is cheaper or shorter.
    """
    print("Comparison")
    print("=" * 72)
    print(f"{'Metric':22s} {s1['strategy']:>15s} {s2['strategy']:>15s} {'Difference':>15s}")
    for key in ("final_installment", "total_interest", "total_cost", "months"):
        v1 = s1[key]
        v2 = s2[key]
        print(f"{key:22s} {v1:15.2f} {v2:15.2f} {v2 - v1:15.2f}")
    print("=" * 72)


def _row_cells(row: InstallmentRow) -> List[str]:
    return [
        str(row.index),
        f"{row.opening:.2f}",
        f"{row.emi:.2f}",
        f"{row.interest:.2f}",
        f"{row.principal:.2f}",
        f"{row.prepayment:.2f}",
        f"{row.closing:.2f}",
    ]


def schedule_to_dicts(rows: Iterable[InstallmentRow]) -> List[Dict[str, object]]:
    """Convert schedule rows into JSON-serialisable dictionaries."""
    return [
        {
            "index": row.index,
            "opening": float(row.opening),
            "emi": float(row.emi),
            "interest": float(row.interest),
            "principal": float(row.principal),
            "prepayment": float(row.prepayment),
            "closing": float(row.closing),
        }
        for row in rows
    ]


def write_csv(stream: TextIO, rows: Iterable[InstallmentRow]) -> None:
    """Write the schedule to ``stream`` as CSV with two-decimal amounts."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for row in rows:
        writer.writerow(_row_cells(row))
