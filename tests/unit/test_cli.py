"""Unit tests for the command-line interface."""

import pytest
from click.testing import CliRunner

from interfaces.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


def test_pmt_zero_rate(runner):
    result = runner.invoke(cli, ["pmt", "-r", "0", "-n", "360", "-p", "30000"])

    assert result.exit_code == 0
    assert "Payment: -83.3333" in result.output


def test_pmt_annuity_due_flag(runner):
    end = runner.invoke(cli, ["pmt", "-r", "0.01", "-n", "24", "-p", "5000"])
    begin = runner.invoke(cli, ["pmt", "-r", "0.01", "-n", "24", "-p", "5000", "--begin"])

    assert end.exit_code == 0 and begin.exit_code == 0
    assert end.output != begin.output


def test_fv(runner):
    result = runner.invoke(cli, ["fv", "-r", "0.005", "-n", "10", "-y", "-100"])

    assert result.exit_code == 0
    assert "Future Value: 1022.80" in result.output


def test_npv(runner):
    result = runner.invoke(cli, ["npv", "-r", "0.1", "110", "121"])

    assert result.exit_code == 0
    assert "Net Present Value: 200.0000" in result.output


def test_nper_domain_error_reported(runner):
    result = runner.invoke(cli, ["nper", "-r", "0.01", "-y", "-10", "-p", "10000"])

    assert result.exit_code == 0
    assert "Error:" in result.output


def test_rate(runner):
    result = runner.invoke(cli, ["rate", "-n", "360", "-y", "-146.62", "-p", "30000"])

    assert result.exit_code == 0
    assert "Rate: 0.0034" in result.output or "Rate: 0.0035" in result.output


def test_rate_failure_reported(runner):
    result = runner.invoke(cli, ["rate", "-n", "12", "-y", "100", "-p", "1000", "-m", "brent"])

    assert result.exit_code == 0
    assert "Solver failed" in result.output


def test_sunrise(runner):
    result = runner.invoke(
        cli, ["sunrise", "--lat", "39.9", "--lng", "116.4", "-d", "2024-06-21"]
    )

    assert result.exit_code == 0
    assert "Sunrise: 2024-06-21T04:" in result.output
    assert "+08:00" in result.output


def test_sunset_with_zone(runner):
    result = runner.invoke(
        cli, ["sunset", "--lat", "0", "--lng", "0", "-d", "2024-03-20", "-z", "0"]
    )

    assert result.exit_code == 0
    assert "Sunset: 2024-03-20T18:" in result.output


def test_polar_sunrise_reported(runner):
    result = runner.invoke(
        cli, ["sunrise", "--lat", "80", "--lng", "15", "-d", "2024-06-21"]
    )

    assert result.exit_code == 0
    assert "Solver failed" in result.output


def test_verbose_flag(runner):
    result = runner.invoke(cli, ["-v", "npv", "-r", "0", "1", "2"])

    assert result.exit_code == 0
    assert "Net Present Value: 3.0000" in result.output


def test_pmt_tiny_rate_matches_zero_rate(runner):
    result = runner.invoke(cli, ["pmt", "-r", "1e-17", "-n", "360", "-p", "30000"])

    assert result.exit_code == 0
    assert "Payment: -83.3333" in result.output


@pytest.mark.parametrize("args", [
    ["pmt", "-r", "-2", "-n", "2", "-p", "1000"],
    ["pv", "-r", "-1", "-n", "12", "-y", "-100"],
    ["npv", "-r", "-1", "100"],
])
def test_degenerate_rate_reported(runner, args):
    result = runner.invoke(cli, args)

    assert result.exit_code == 0
    assert result.exception is None
    assert "Error:" in result.output
