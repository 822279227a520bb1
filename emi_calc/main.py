"""Command‑line interface for the EMI calculator.

This module uses the ``click`` library to implement a multi‑command
interface. Users can compute full amortization schedules with prepayments,
view summaries or compare the two prepayment strategies. Results can be
printed to the terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click

from .data_models import FREQUENCIES, REDUCE_EMI, REDUCE_TENURE, STRATEGIES, LoanSpec, PrepaymentRule, ScheduleResult
from .engine import build_events, compare_with_baseline, simulate, summarize
from .errors import CalculatorError
from .formatter import print_comparison, print_schedule, print_summary, schedule_to_dicts, write_csv
from .utils import build_loan_spec, parse_amount

logger = logging.getLogger(__name__)


def parse_prepayment_strings(values: Tuple[str, ...]) -> List[PrepaymentRule]:
    """Parse ``AMOUNT[:FREQUENCY[:START_MONTH]]`` strings into rules."""
    rules: List[PrepaymentRule] = []
    for item in values:
        parts = item.split(":")
        if len(parts) > 3:
            raise click.BadParameter(
                f"Prepayment must be in AMOUNT[:FREQUENCY[:START_MONTH]] format; got {item}"
            )
        try:
            amount = parse_amount(parts[0])
        except ValueError as exc:
            raise click.BadParameter(str(exc))
        frequency = parts[1].lower() if len(parts) > 1 and parts[1] else "once"
        if frequency not in FREQUENCIES:
            raise click.BadParameter(
                f"Prepayment frequency must be one of {', '.join(FREQUENCIES)}; got {frequency}"
            )
        start_month = 1
        if len(parts) == 3:
            try:
                start_month = int(parts[2])
            except ValueError:
                raise click.BadParameter(f"Invalid start month: {parts[2]}")
            if start_month < 1:
                raise click.BadParameter(f"Start month must be 1 or later; got {start_month}")
        rules.append(PrepaymentRule(amount=amount, frequency=frequency, start_month=start_month))
    return rules


def build_spec_from_options(principal: str, rate: str, tenure: str, strategy: str) -> LoanSpec:
    try:
        return build_loan_spec(principal, rate, tenure, strategy)
    except CalculatorError as exc:
        raise click.BadParameter(str(exc))


def run_schedule(spec: LoanSpec, prepayment: Tuple[str, ...]) -> ScheduleResult:
    rules = parse_prepayment_strings(prepayment)
    return simulate(spec, build_events(rules))


def export_to_json(path: Path, result: ScheduleResult, summary: Dict[str, Any]) -> None:
    """Export schedule and summary to a JSON file."""
    data = {"summary": summary, "schedule": schedule_to_dicts(result.rows)}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, result: ScheduleResult) -> None:
    """Export schedule to a CSV file."""
    with path.open("w", newline="", encoding="utf-8") as f:
        write_csv(f, result.rows)


strategy_option = click.option(
    "--strategy",
    "strategy",
    type=click.Choice(STRATEGIES),
    default=REDUCE_TENURE,
    show_default=True,
    help="How the loan is rebalanced after a prepayment",
)


def loan_options(func):
    """Attach the loan and prepayment options shared by every command."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Loan amount (accepts k, m, l, cr suffixes)"),
        click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)"),
        click.option("--tenure", "-t", "tenure", required=True, help="Loan tenure in months"),
        click.option(
            "--prepayment",
            "prepayment",
            multiple=True,
            help="Prepayment in AMOUNT[:once|monthly|yearly[:START_MONTH]] format. Example: --prepayment 100000:yearly:12",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option(
    "--log-level",
    "log_level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging verbosity",
)
def cli(log_level: str) -> None:
    """An EMI calculator with prepayment planning."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@loan_options
@strategy_option
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
@click.option("--max-rows", "max_rows", type=int, default=120, show_default=True, help="Rows to print to the terminal")
def schedule(
    principal: str,
    rate: str,
    tenure: str,
    strategy: str,
    prepayment: Tuple[str, ...],
    output: Optional[str],
    max_rows: int,
) -> None:
    """Compute and print the full amortization schedule."""
    spec = build_spec_from_options(principal, rate, tenure, strategy)
    result = run_schedule(spec, prepayment)
    summary_data = summarize(spec, result, compare_with_baseline(spec, result))
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, result, summary_data)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, result)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        logger.info("Exported %d rows to %s", result.months, path)
        click.echo(f"Schedule exported to {path}")
        return
    print_summary(summary_data)
    # Limit schedule length printed to avoid flooding the terminal
    if result.months > max_rows:
        click.echo(f"Schedule has {result.months} rows; showing first {max_rows} rows.")
        print_schedule(result.rows[:max_rows])
    else:
        print_schedule(result.rows)


@cli.command()
@loan_options
@strategy_option
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(
    principal: str,
    rate: str,
    tenure: str,
    strategy: str,
    prepayment: Tuple[str, ...],
    output: Optional[str],
) -> None:
    """Compute and print only the summary metrics for a loan."""
    spec = build_spec_from_options(principal, rate, tenure, strategy)
    result = run_schedule(spec, prepayment)
    summary_data = summarize(spec, result, compare_with_baseline(spec, result))
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": summary_data}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(summary_data)


@cli.command()
@loan_options
def compare(
    principal: str,
    rate: str,
    tenure: str,
    prepayment: Tuple[str, ...],
) -> None:
    """Compare reducing the tenure against reducing the EMI.

    Both strategies are simulated with the same prepayments, for example:

        emi-calc compare -p 50l -r 8.5 -t 240 --prepayment 100000:yearly
    """
    summaries = []
    for name in (REDUCE_TENURE, REDUCE_EMI):
        spec = build_spec_from_options(principal, rate, tenure, name)
        summaries.append(summarize(spec, run_schedule(spec, prepayment)))
    print_comparison(summaries[0], summaries[1])


if __name__ == "__main__":
    cli()
