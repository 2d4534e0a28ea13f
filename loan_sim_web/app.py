import logging
import math
import os

from flask import Flask, jsonify, request

from loan_sim.config import DEFAULT_INPUTS, INCOME_SLABS, SIP_RISK_CATEGORIES
from loan_sim.data_models import INPUT_KEYS, SimulationInput
from loan_sim.formatter import aggregate_yearly
from loan_sim.insights import compare_balance_transfers, estimate_tax_savings, rate_insight
from loan_sim.optimizer import generate_optimization_strategies
from loan_sim.validation import CALCULABLE_FIELDS, resolve_inputs, validate_inputs
from loan_sim.engine import run_simulation

app = Flask(__name__)
app.config["MAX_SCHEDULE_ROWS"] = int(os.environ.get("LOAN_SIM_MAX_SCHEDULE_ROWS", "0"))
logging.basicConfig(level=os.environ.get("LOAN_SIM_LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

INVALID_DATA_MESSAGE = "Incomplete or invalid data. Please check your inputs."

# Form fields are exchanged with their camelCase names.
CALCULATED_FIELD_KEYS = {INPUT_KEYS[name]: name for name in CALCULABLE_FIELDS}
SLAB_IDS = [s["id"] for s in INCOME_SLABS]


class BadRequest(Exception):
    def __init__(self, message: str, status: int = 400, **payload):
        super().__init__(message)
        self.status = status
        self.payload = payload


@app.errorhandler(BadRequest)
def _handle_bad_request(exc: BadRequest):
    body = {"error": str(exc)}
    body.update(exc.payload)
    return jsonify(body), exc.status


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    return data


def _inputs_from(data) -> SimulationInput:
    if not isinstance(data, dict):
        raise BadRequest("'inputs' must be a JSON object")
    try:
        return SimulationInput.from_dict(data, defaults=DEFAULT_INPUTS)
    except ValueError as exc:
        raise BadRequest(str(exc))


def _camel_errors(errors: dict) -> dict:
    return {INPUT_KEYS.get(name, name): message for name, message in errors.items()}


def _amortization_view(rows: list) -> list:
    limit = app.config["MAX_SCHEDULE_ROWS"]
    if limit > 0:
        rows = rows[:limit]
    return [row.to_dict() for row in rows]


@app.get("/api/defaults")
def defaults():
    return jsonify(
        {
            "inputs": DEFAULT_INPUTS.to_dict(),
            "sipRiskCategories": SIP_RISK_CATEGORIES,
            "incomeSlabs": INCOME_SLABS,
        }
    )


@app.post("/api/solve")
def solve():
    data = _json_body()
    inputs = _inputs_from(data.get("inputs", data))
    key = data.get("calculatedField", "monthlyEMI")
    if key not in CALCULATED_FIELD_KEYS:
        raise BadRequest(f"calculatedField must be one of {sorted(CALCULATED_FIELD_KEYS)}")
    resolution = resolve_inputs(inputs, CALCULATED_FIELD_KEYS[key])
    return jsonify(
        {
            "inputs": resolution.inputs.to_dict(),
            "errors": _camel_errors(resolution.errors),
            "changed": resolution.changed,
        }
    )


@app.post("/api/simulate")
def simulate():
    data = _json_body()
    inputs = _inputs_from(data.get("inputs", data))
    errors = validate_inputs(inputs)
    if errors:
        raise BadRequest(INVALID_DATA_MESSAGE, status=422, errors=_camel_errors(errors))
    results = run_simulation(inputs)
    if results is None:
        raise BadRequest(INVALID_DATA_MESSAGE, status=422)
    payload = results.to_dict()
    payload["amortizationData"] = _amortization_view(results.amortization_data)
    payload["yearlyData"] = [y.to_dict() for y in aggregate_yearly(results.amortization_data)]
    return jsonify(payload)


@app.post("/api/optimize")
def optimize():
    data = _json_body()
    inputs = _inputs_from(data.get("inputs", {}))
    try:
        surplus = float(data.get("annualSurplus", 0))
    except (TypeError, ValueError):
        raise BadRequest("annualSurplus must be a number")
    if not math.isfinite(surplus):
        raise BadRequest("annualSurplus must be a finite number")
    if surplus <= 0:
        raise BadRequest("annualSurplus must be positive")
    if run_simulation(inputs) is None:
        raise BadRequest(INVALID_DATA_MESSAGE, status=422)
    strategies = generate_optimization_strategies(inputs, surplus)
    logger.info("Generated %d strategies for surplus %.0f", len(strategies), surplus)
    return jsonify({"strategies": [s.to_dict() for s in strategies]})


@app.post("/api/insights")
def insights():
    data = _json_body()
    inputs = _inputs_from(data.get("inputs", {}))
    slab = data.get("slab", INCOME_SLABS[-1]["id"])
    if slab not in SLAB_IDS:
        raise BadRequest(f"slab must be one of {SLAB_IDS}")
    tax = estimate_tax_savings(inputs.principal, inputs.interest_rate, slab)
    offers = compare_balance_transfers(inputs)
    return jsonify(
        {
            "rateInsight": rate_insight(inputs.interest_rate),
            "tax": {
                "annualInterest": tax["annual_interest"],
                "deductibleInterest": tax["deductible_interest"],
                "potentialSavings": tax["potential_savings"],
            },
            "balanceTransferOffers": [
                {
                    "id": o["id"],
                    "name": o["name"],
                    "interestRate": o["interest_rate"],
                    "processingFeePercent": o["processing_fee_percent"],
                    "newEmi": o["new_emi"],
                    "processingFee": o["processing_fee"],
                    "totalSavings": o["total_savings"],
                }
                for o in offers
            ],
        }
    )


if __name__ == "__main__":
    print("Starting loan simulator API...")
    app.run(host="0.0.0.0", port=8710, debug=True)
