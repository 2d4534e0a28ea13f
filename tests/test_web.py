import pytest

from loan_sim.config import DEFAULT_INPUTS
from loan_sim_web.app import app


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


def test_defaults(client):
    response = client.get("/api/defaults")

    assert response.status_code == 200
    body = response.get_json()
    assert body["inputs"]["principal"] == 3_000_000
    assert body["inputs"]["monthlyEMI"] == 0
    assert [c["rate"] for c in body["sipRiskCategories"]] == [7, 10, 16]


def test_simulate_defaults(client):
    response = client.post("/api/simulate", json={"inputs": DEFAULT_INPUTS.to_dict()})

    assert response.status_code == 200
    body = response.get_json()
    assert body["summary"]["interestSaved"] == 0
    assert body["summary"]["loanFreeMonth"] is None
    assert len(body["chartData"]) == body["summary"]["baseTenureMonths"] + 1
    assert len(body["yearlyData"]) == 30 or len(body["yearlyData"]) == 31
    assert set(body["chartData"][1]) == {
        "month",
        "baseLoanBalance",
        "prepaymentLoanBalance",
        "sipNominalCorpus",
        "sipRealCorpus",
    }


def test_simulate_accepts_flat_body_and_fills_defaults(client):
    response = client.post("/api/simulate", json={"extraAnnualPrepayment": 100_000, "monthlySIP": 10_000})

    assert response.status_code == 200
    summary = response.get_json()["summary"]
    assert summary["interestSaved"] > 0
    assert summary["finalSipCorpusNominal"] > summary["finalSipCorpusReal"]


def test_simulate_limits_schedule_rows(client):
    app.config["MAX_SCHEDULE_ROWS"] = 12
    try:
        response = client.post("/api/simulate", json={})
    finally:
        app.config["MAX_SCHEDULE_ROWS"] = 0
    assert len(response.get_json()["amortizationData"]) == 12


def test_simulate_validation_errors(client):
    response = client.post("/api/simulate", json={"principal": 50_000})

    assert response.status_code == 422
    assert "principal" in response.get_json()["errors"]


def test_simulate_unsimulable(client):
    response = client.post(
        "/api/simulate", json={"principal": 1_000_000, "interestRate": 0, "tenureYears": 20, "monthlyEMI": 1}
    )
    assert response.status_code == 422


def test_simulate_requires_json(client):
    response = client.post("/api/simulate", data="principal=1", content_type="text/plain")
    assert response.status_code == 400


def test_simulate_rejects_non_numeric_fields(client):
    response = client.post("/api/simulate", json={"principal": "a lot"})

    assert response.status_code == 400
    assert "principal" in response.get_json()["error"]


@pytest.mark.parametrize("value", ["nan", "inf", "-Infinity"])
def test_simulate_rejects_non_finite_fields(client, value):
    response = client.post("/api/simulate", json={"monthlySIP": value})

    assert response.status_code == 400
    assert "monthlySIP" in response.get_json()["error"]


def test_solve_tenure(client):
    inputs = dict(DEFAULT_INPUTS.to_dict(), monthlyEMI=26_035, tenureYears=0)
    response = client.post("/api/solve", json={"inputs": inputs, "calculatedField": "tenureYears"})

    body = response.get_json()
    assert response.status_code == 200
    assert body["errors"] == {}
    assert body["changed"] is True
    assert body["inputs"]["tenureYears"] == pytest.approx(20, abs=0.01)


def test_solve_reports_errors_by_json_key(client):
    inputs = dict(DEFAULT_INPUTS.to_dict(), monthlyEMI=22_000)
    response = client.post("/api/solve", json={"inputs": inputs, "calculatedField": "tenureYears"})

    body = response.get_json()
    assert body["errors"] == {"monthlyEMI": "For a 30-yr tenure, EMI must be at least ₹23,068."}
    assert body["inputs"]["tenureYears"] == 0


def test_solve_rejects_unknown_field(client):
    response = client.post("/api/solve", json={"inputs": {}, "calculatedField": "principal"})
    assert response.status_code == 400


def test_optimize(client):
    response = client.post("/api/optimize", json={"inputs": DEFAULT_INPUTS.to_dict(), "annualSurplus": 120_000})

    assert response.status_code == 200
    strategies = response.get_json()["strategies"]
    assert [s["riskLevel"] for s in strategies] == ["Conservative", "Moderate", "Aggressive"]
    assert strategies[1]["inputs"] == {"extraAnnualPrepayment": 60_000, "monthlySIP": 5_000}
    assert strategies[2]["results"]["finalSipCorpusReal"] == 0


@pytest.mark.parametrize("surplus", [0, -5, "many", "inf", "nan"])
def test_optimize_rejects_bad_surplus(client, surplus):
    response = client.post("/api/optimize", json={"inputs": {}, "annualSurplus": surplus})
    assert response.status_code == 400


def test_insights(client):
    response = client.post("/api/insights", json={"inputs": DEFAULT_INPUTS.to_dict(), "slab": "15L+"})

    body = response.get_json()
    assert response.status_code == 200
    assert body["rateInsight"]["type"] == "success"
    assert body["tax"]["deductibleInterest"] == 200_000
    assert body["balanceTransferOffers"][0]["id"] == "hbfc"


def test_insights_rejects_unknown_slab(client):
    response = client.post("/api/insights", json={"inputs": DEFAULT_INPUTS.to_dict(), "slab": "50L"})

    assert response.status_code == 400
    assert "slab" in response.get_json()["error"]
