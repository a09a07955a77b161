"""
Pytest configuration and shared fixtures for the household simulator tests.
"""

import os
from datetime import date
from unittest.mock import patch

import pytest

from finsim.config import reset_global_settings
from finsim.models.scenario import (
    ExpenseItem,
    IncomeConfig,
    InterestRateTier,
    MacroConfig,
    MortgageConfig,
    RiskSettings,
    create_default_expenses,
    create_default_income,
    create_default_macro,
    create_default_mortgage,
    create_default_risk_settings,
)
from finsim.models.simulation.config import EnginePolicy


@pytest.fixture
def policy():
    """Default engine policy."""
    return EnginePolicy()


@pytest.fixture
def default_inputs():
    """The default household configuration, keyed like the service sections."""
    return {
        "expenses": create_default_expenses(),
        "income": create_default_income(),
        "mortgage": create_default_mortgage(),
        "macro": create_default_macro(),
        "risk_settings": create_default_risk_settings(),
    }


@pytest.fixture
def simple_mortgage():
    """Single-rate 6% mortgage over 30 years without prepayment rules."""
    return MortgageConfig(
        principal=300_000,
        start_date=date(2026, 1, 1),
        tenure_years=30,
        rates=[InterestRateTier(start_month=1, end_month=360, rate=6.0)],
    )


@pytest.fixture
def lean_expenses():
    """One mandatory and one discretionary item, both without growth."""
    return [
        ExpenseItem(name="Rent", category="MANDATORY", amount=2_000_000),
        ExpenseItem(name="Dining", category="DISCRETIONARY", amount=1_000_000),
    ]


@pytest.fixture
def flat_income():
    """Salary without growth, bonuses or BPJS."""
    return IncomeConfig(base_salary=10_000_000)


@pytest.fixture
def zero_inflation():
    return MacroConfig(inflation_rate=0.0)


@pytest.fixture
def no_risk_dates():
    return RiskSettings()


@pytest.fixture
def app_env():
    """Environment with a valid SECRET_KEY and fresh global settings."""
    reset_global_settings()
    with patch.dict(
        os.environ, {"SECRET_KEY": "test-secret-key-123", "APP_ENV": "testing"}, clear=True
    ):
        yield
    reset_global_settings()
