import json

import pytest
from click.testing import CliRunner

from loan_sim.main import cli

LOAN = ["-p", "30L", "-r", "8.5", "-t", "30"]


@pytest.fixture
def runner():
    return CliRunner()


def test_emi_command(runner):
    result = runner.invoke(cli, ["emi", *LOAN])

    assert result.exit_code == 0, result.output
    assert "₹23,067" in result.output


def test_emi_command_rejects_zero_rate(runner):
    result = runner.invoke(cli, ["emi", "-p", "30L", "-r", "0", "-t", "30"])
    assert result.exit_code == 1


def test_bad_amount_is_a_usage_error(runner):
    result = runner.invoke(cli, ["emi", "-p", "plenty", "-r", "8.5", "-t", "30"])

    assert result.exit_code == 2
    assert "Invalid amount" in result.output


def test_solve_for_tenure(runner):
    result = runner.invoke(cli, ["solve", "--solve-for", "tenure", "-p", "30L", "-r", "8.5", "-e", "26035"])

    assert result.exit_code == 0, result.output
    assert "Tenure        : 20.00 years" in result.output


def test_solve_for_rate(runner):
    result = runner.invoke(cli, ["solve", "--solve-for", "rate", "-p", "30L", "-t", "30", "-e", "23067.40"])

    assert result.exit_code == 0, result.output
    assert "Interest rate : 8.50%" in result.output


def test_solve_reports_field_errors(runner):
    result = runner.invoke(cli, ["solve", "--solve-for", "tenure", "-p", "30L", "-r", "8.5", "-e", "20000"])
    assert result.exit_code == 1


def test_simulate_prints_summary(runner):
    result = runner.invoke(
        cli,
        ["simulate", *LOAN, "--prepayment", "1L", "--sip", "10k", "--sip-return", "12", "--inflation", "6"],
    )

    assert result.exit_code == 0, result.output
    assert "Interest saved" in result.output
    assert "showing first 120 rows" in result.output


def test_simulate_yearly(runner):
    result = runner.invoke(cli, ["simulate", *LOAN, "--yearly"])

    assert result.exit_code == 0, result.output
    assert "Year\tPrincipal" in result.output


def test_simulate_rejects_unpayable_emi(runner):
    result = runner.invoke(cli, ["simulate", "-p", "10L", "-r", "10", "-t", "20", "-e", "1"])

    assert result.exit_code == 1
    assert "Cannot simulate" in result.output


def test_simulate_exports_json(runner, tmp_path):
    path = tmp_path / "plan.json"
    result = runner.invoke(cli, ["simulate", *LOAN, "--sip", "5000", "--output", str(path)])

    assert result.exit_code == 0, result.output
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["inputs"]["principal"] == 3_000_000
    assert data["chartData"][0]["baseLoanBalance"] == 3_000_000
    assert set(data["summary"]) >= {"interestSaved", "tenureReducedMonths", "loanFreeMonth"}


def test_simulate_exports_csv(runner, tmp_path):
    path = tmp_path / "plan.csv"
    result = runner.invoke(cli, ["simulate", *LOAN, "--output", str(path)])

    assert result.exit_code == 0, result.output
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("Month,Base_Loan_Balance")
    assert lines[1].startswith("0,3000000")


def test_simulate_rejects_unknown_export_format(runner, tmp_path):
    result = runner.invoke(cli, ["simulate", *LOAN, "--output", str(tmp_path / "plan.xlsx")])
    assert result.exit_code == 2


def test_optimize(runner):
    result = runner.invoke(cli, ["optimize", *LOAN, "--surplus", "1.2L"])

    assert result.exit_code == 0, result.output
    for name in ("Rapid Prepayment", "Balanced Growth", "Wealth Maximizer"):
        assert name in result.output


def test_optimize_requires_positive_surplus(runner):
    result = runner.invoke(cli, ["optimize", *LOAN, "--surplus", "0"])
    assert result.exit_code == 2


def test_insights(runner):
    result = runner.invoke(cli, ["insights", *LOAN, "--slab", "15L+"])

    assert result.exit_code == 0, result.output
    assert "Potential tax saved  : ₹62,400" in result.output
    assert "HBFC Bank" in result.output


@pytest.mark.parametrize(
    "args,missing",
    [
        (["-p", "30L", "-t", "30"], "--rate"),
        (["-p", "30L", "-r", "8.5"], "--tenure"),
    ],
)
def test_insights_requires_rate_and_tenure(runner, args, missing):
    result = runner.invoke(cli, ["insights", *args])

    assert result.exit_code == 2
    assert missing in result.output
