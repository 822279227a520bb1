import io
import logging
import os

from flask import Flask, Response, jsonify, request

from emi_calc.data_models import REDUCE_EMI, REDUCE_TENURE, PrepaymentRule
from emi_calc.engine import build_events, compare_with_baseline, simulate, summarize
from emi_calc.errors import CalculatorError, InvalidInputError
from emi_calc.formatter import schedule_to_dicts, write_csv
from emi_calc.utils import build_loan_spec

app = Flask(__name__)
app.config["MAX_ROWS"] = int(os.environ.get("EMI_CALC_MAX_ROWS", "120"))

logger = logging.getLogger(__name__)


def _payload() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInputError(["Request body must be a JSON object"])
    return data


def _rules_from_payload(data: dict) -> list:
    """Turn the ``prepayments`` list of a request into prepayment rules.

    Entries without a usable amount are kept; ``build_events`` drops them.
    """
    rules = []
    for item in data.get("prepayments") or []:
        if not isinstance(item, dict):
            raise InvalidInputError(["Each prepayment must be an object with amount and frequency"])
        raw_start = item.get("start_month")
        try:
            start_month = 1 if raw_start in (None, "") else int(raw_start)
        except (TypeError, ValueError):
            raise InvalidInputError([f"Invalid start month: {raw_start}"])
        if start_month < 1:
            raise InvalidInputError([f"Start month must be 1 or later; got {start_month}"])
        rules.append(
            PrepaymentRule(
                amount=item.get("amount"),
                frequency=item.get("frequency") or "once",
                start_month=start_month,
            )
        )
    return rules


def _run(data: dict, strategy: str):
    spec = build_loan_spec(data.get("principal"), data.get("rate"), data.get("tenure"), strategy)
    result = simulate(spec, build_events(_rules_from_payload(data)))
    return spec, result


def _schedule_view(summary: dict, rows: list, show_full_schedule: bool):
    if show_full_schedule:
        return summary, rows
    max_rows = app.config["MAX_ROWS"]
    preview = rows[:max_rows]
    if len(rows) > max_rows:
        summary["truncated"] = len(rows) - len(preview)
    return summary, preview


@app.errorhandler(CalculatorError)
def handle_calculator_error(exc):
    errors = getattr(exc, "errors", None) or [str(exc)]
    logger.info("Rejected request: %s", "; ".join(errors))
    return jsonify({"error": str(exc), "errors": errors}), 400


@app.get("/api/health")
def health():
    return jsonify({"status": "ok"})


@app.post("/api/schedule")
def schedule():
    data = _payload()
    spec, result = _run(data, data.get("strategy") or REDUCE_TENURE)
    summary = summarize(spec, result, compare_with_baseline(spec, result))
    summary, rows = _schedule_view(summary, list(result.rows), bool(data.get("full")))
    return jsonify({"summary": summary, "schedule": schedule_to_dicts(rows)})


@app.post("/api/schedule.csv")
def schedule_csv():
    data = _payload()
    _, result = _run(data, data.get("strategy") or REDUCE_TENURE)
    buffer = io.StringIO()
    write_csv(buffer, result.rows)
    return Response(
        buffer.getvalue(),
        mimetype="text/csv",
        headers={"Content-Disposition": "attachment; filename=amortization_schedule.csv"},
    )


@app.post("/api/compare")
def compare():
    data = _payload()
    summaries = {}
    for strategy in (REDUCE_TENURE, REDUCE_EMI):
        spec, result = _run(data, strategy)
        summaries[strategy] = summarize(spec, result, compare_with_baseline(spec, result))
    return jsonify(summaries)


if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("EMI_CALC_LOG_LEVEL", "INFO").upper())
    host = os.environ.get("EMI_CALC_HOST", "0.0.0.0")
    port = int(os.environ.get("EMI_CALC_PORT", "8710"))
    print("Starting EMI calculator API...")
    app.run(host=host, port=port, debug=True)
