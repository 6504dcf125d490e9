"""
Pytest configuration and shared fixtures.
"""

import pytest
from datetime import date


@pytest.fixture
def loan_params():
    """30-year loan of 30,000 repaid monthly at the end of each period."""
    return {
        "nper": 360,
        "pmt": -146.62,
        "pv": 30000.0,
        "fv": 0.0,
        "at_start": False,
    }


@pytest.fixture
def car_loan_params():
    """5-year loan of 10,000 at 0.5% per month."""
    return {
        "rate": 0.005,
        "nper": 60,
        "pv": 10000.0,
        "fv": 0.0,
    }


@pytest.fixture
def march_equinox():
    return date(2024, 3, 20)


@pytest.fixture
def june_solstice():
    return date(2024, 6, 21)


@pytest.fixture
def december_solstice():
    return date(2024, 12, 21)
