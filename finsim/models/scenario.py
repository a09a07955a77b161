"""
Pydantic models for household simulation inputs.

This module defines the configuration value objects that feed the monthly
simulation engine: expenses, income, mortgage, macro assumptions, scenario
selection and risk dates. All models are frozen so a run can treat them as
read-only.
"""

from datetime import date
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ScenarioType(str, Enum):
    """Employment scenario simulated for the household."""

    NORMAL = "NORMAL"
    UNEMPLOYED = "UNEMPLOYED"
    WORST_CASE = "WORST_CASE"


class ExpenseItem(BaseModel):
    """A single recurring monthly expense."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Expense name")
    category: Literal["MANDATORY", "DISCRETIONARY"] = Field(
        ..., description="Mandatory expenses are never cut by austerity"
    )
    amount: float = Field(..., ge=0, description="Monthly amount in base year money")
    annual_increase_percent: float = Field(
        default=0.0, ge=0, description="Item-specific annual growth rate (%)"
    )


class IncomeConfig(BaseModel):
    """Salary, scheduled bonuses and severance savings."""

    model_config = ConfigDict(frozen=True)

    base_salary: float = Field(..., ge=0, description="Monthly base salary")
    annual_increase_percent: float = Field(
        default=0.0, ge=0, description="Annual salary growth rate (%)"
    )
    thr_months: List[int] = Field(
        default_factory=list,
        description="Calendar months (0 = January) paying a 13th-month bonus",
    )
    compensation_months: List[int] = Field(
        default_factory=list,
        description="Calendar months (0 = January) paying a compensation bonus",
    )
    bpjs_initial_balance: float = Field(
        default=0.0, ge=0, description="Opening severance-savings (BPJS) balance"
    )

    @field_validator("thr_months", "compensation_months")
    @classmethod
    def validate_months(cls, v: List[int]) -> List[int]:
        for month in v:
            if not 0 <= month <= 11:
                raise ValueError("Bonus months must be between 0 and 11")
        return v


class InterestRateTier(BaseModel):
    """Annual rate applied over an inclusive, 1-based range of loan months."""

    model_config = ConfigDict(frozen=True)

    start_month: int = Field(..., ge=1, description="First loan month (1-based)")
    end_month: int = Field(..., ge=1, description="Last loan month (inclusive)")
    rate: float = Field(..., ge=0, le=100, description="Annual interest rate (%)")

    @model_validator(mode="after")
    def validate_range(self):
        if self.end_month < self.start_month:
            raise ValueError("end_month must be >= start_month")
        return self


class MortgageConfig(BaseModel):
    """Mortgage parameters and prepayment policy."""

    model_config = ConfigDict(frozen=True)

    principal: float = Field(..., gt=0, description="Loan principal")
    start_date: date = Field(..., description="Date of the first installment")
    tenure_years: int = Field(..., ge=1, le=50, description="Loan term in years")
    penalty_percent: float = Field(
        default=0.0, ge=0, lt=100, description="Early repayment penalty (%)"
    )
    extra_payment_min_multiple: float = Field(
        default=0.0,
        ge=0,
        description="Minimum extra payment as a multiple of the installment",
    )
    use_deposito: bool = Field(
        default=False, description="Whether the extra-payment bucket earns interest"
    )
    rates: List[InterestRateTier] = Field(
        default_factory=list, description="Ordered interest rate tiers"
    )

    @property
    def tenure_months(self) -> int:
        return self.tenure_years * 12


class MacroConfig(BaseModel):
    """Macroeconomic assumptions."""

    model_config = ConfigDict(frozen=True)

    inflation_rate: float = Field(
        default=0.0, ge=0, description="Global annual inflation rate (%)"
    )


class RiskSettings(BaseModel):
    """Calendar dates driving the job-loss scenarios.

    Dates are kept as raw strings; they are resolved to month offsets once at
    the start of a pass and unparsable values count as already elapsed.
    """

    model_config = ConfigDict(frozen=True)

    job_loss_date: Optional[str] = Field(
        default=None, description="ISO date on which employment ends"
    )
    notification_date: Optional[str] = Field(
        default=None, description="ISO date on which the layoff notice arrives"
    )


def create_default_expenses() -> List[ExpenseItem]:
    """Create the default household expense list."""
    return [
        ExpenseItem(
            name="Groceries",
            category="MANDATORY",
            amount=4_000_000,
            annual_increase_percent=4,
        ),
        ExpenseItem(
            name="Utilities",
            category="MANDATORY",
            amount=1_500_000,
            annual_increase_percent=3,
        ),
        ExpenseItem(
            name="Transport",
            category="MANDATORY",
            amount=1_000_000,
            annual_increase_percent=3,
        ),
        ExpenseItem(
            name="Entertainment",
            category="DISCRETIONARY",
            amount=2_000_000,
            annual_increase_percent=2,
        ),
    ]


def create_default_income() -> IncomeConfig:
    """Create the default income configuration."""
    return IncomeConfig(
        base_salary=25_000_000,
        annual_increase_percent=5,
        thr_months=[2],  # March
        compensation_months=[3],  # April
        bpjs_initial_balance=15_000_000,
    )


def create_default_mortgage() -> MortgageConfig:
    """Create the default tiered-rate mortgage."""
    return MortgageConfig(
        principal=800_000_000,
        start_date=date(2026, 1, 1),
        tenure_years=15,
        penalty_percent=1.0,
        extra_payment_min_multiple=6,
        use_deposito=True,
        rates=[
            InterestRateTier(start_month=1, end_month=24, rate=3.65),
            InterestRateTier(start_month=25, end_month=60, rate=7.65),
            InterestRateTier(start_month=61, end_month=120, rate=9.65),
            InterestRateTier(start_month=121, end_month=360, rate=11.0),
        ],
    )


def create_default_macro() -> MacroConfig:
    """Create the default macro assumptions (4% inflation)."""
    return MacroConfig(inflation_rate=4.0)


def create_default_risk_settings() -> RiskSettings:
    """Create default risk dates: notice in month 14, job loss in month 17."""
    return RiskSettings(job_loss_date="2027-06-01", notification_date="2027-03-01")
