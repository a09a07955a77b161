"""
Employment income strategies for the household simulation.

This module models salary growth, scheduled THR/compensation bonuses and the
BPJS severance-savings balance, plus the job-loss state machine
(employed -> survival mode -> unemployed) with severance and BPJS liquidation.
A strategy instance holds pass-local state and must not be shared between
simulation passes.
"""

from abc import ABC, abstractmethod
from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .scenario import IncomeConfig, ScenarioType
from .simulation.config import EnginePolicy


class EmploymentState(str, Enum):
    """Employment states of the job-loss state machine."""

    EMPLOYED = "EMPLOYED"
    SURVIVAL_MODE = "SURVIVAL_MODE"
    UNEMPLOYED = "UNEMPLOYED"


class MonthlyContext(BaseModel):
    """Inputs available to a strategy for one simulation month."""

    month_index: int = Field(..., ge=0, description="Simulation month (0-based)")
    year_index: int = Field(..., ge=0, description="Simulation year (0-based)")
    current_date: date = Field(..., description="First day of the calendar month")
    income: IncomeConfig = Field(..., description="Income configuration")
    job_loss_month_index: int = Field(
        ..., description="Month employment ends (-1 = already happened)"
    )
    notification_month_index: int = Field(
        ..., description="Month the layoff notice arrives (-1 = already happened)"
    )


class MonthlyIncome(BaseModel):
    """Income and employment status produced by a strategy for one month."""

    base_income: float = Field(..., ge=0, description="Salary paid this month")
    bonus_income: float = Field(
        ..., ge=0, description="THR, compensation, severance and BPJS payouts"
    )
    expense_multiplier: float = Field(
        ..., ge=0, le=1, description="Discretionary spending multiplier"
    )
    events: List[str] = Field(default_factory=list, description="Income events")
    is_employed: bool = Field(..., description="Whether a salary is still paid")
    in_survival_mode: bool = Field(
        ..., description="Notice received but still employed"
    )
    bpjs_balance: float = Field(..., ge=0, description="BPJS balance after the month")

    @property
    def total_income(self) -> float:
        return self.base_income + self.bonus_income


def current_salary(income: IncomeConfig, year_index: int) -> float:
    """Monthly salary after ``year_index`` years of growth."""
    return income.base_salary * (1 + income.annual_increase_percent / 100) ** year_index


def format_money(amount: float) -> str:
    """Format an amount for event text, e.g. ``Rp 26,250,000``."""
    return f"Rp {amount:,.0f}"


class EmploymentStrategy(ABC):
    """Base class for income strategies."""

    def __init__(
        self, initial_bpjs: float, policy: Optional[EnginePolicy] = None
    ) -> None:
        self.policy = policy or EnginePolicy()
        self.bpjs_balance = initial_bpjs
        self.state = EmploymentState.EMPLOYED

    @property
    def is_employed(self) -> bool:
        return self.state != EmploymentState.UNEMPLOYED

    @property
    def in_survival_mode(self) -> bool:
        return self.state == EmploymentState.SURVIVAL_MODE

    @abstractmethod
    def process_month(self, ctx: MonthlyContext) -> MonthlyIncome:
        """Produce income and status for one month."""

    def _employed_income(self, ctx: MonthlyContext):
        """Salary, scheduled bonuses and BPJS growth for an employed month."""
        events: List[str] = []
        salary = current_salary(ctx.income, ctx.year_index)
        bonus = 0.0
        calendar_month = ctx.current_date.month - 1

        if calendar_month in ctx.income.thr_months:
            bonus += salary
            events.append("THR")
        if calendar_month in ctx.income.compensation_months:
            bonus += salary
            events.append("Compensation")

        monthly_growth = self.policy.bpjs_growth_rate / 12 / 100
        self.bpjs_balance += (
            self.bpjs_balance * monthly_growth
            + salary * self.policy.bpjs_contribution_rate
        )

        return salary, bonus, events


class NormalEmployment(EmploymentStrategy):
    """Steady employment for the whole horizon."""

    def process_month(self, ctx: MonthlyContext) -> MonthlyIncome:
        salary, bonus, events = self._employed_income(ctx)
        return MonthlyIncome(
            base_income=salary,
            bonus_income=bonus,
            expense_multiplier=1.0,
            events=events,
            is_employed=True,
            in_survival_mode=False,
            bpjs_balance=self.bpjs_balance,
        )


class JobLossEmployment(EmploymentStrategy):
    """Employment that ends on the configured job-loss month.

    The notice month moves the household into survival mode: discretionary
    spending is cut and extra mortgage payments stop. On job loss one month of
    salary is paid as severance; the following month the BPJS balance is paid
    out in full.
    """

    def __init__(
        self, initial_bpjs: float, policy: Optional[EnginePolicy] = None
    ) -> None:
        super().__init__(initial_bpjs, policy)
        self.job_lost_month: Optional[int] = None
        self.bpjs_liquidated = False

    def _transition(self, ctx: MonthlyContext, events: List[str]) -> None:
        if self.state != EmploymentState.UNEMPLOYED:
            if ctx.month_index >= ctx.job_loss_month_index:
                self.state = EmploymentState.UNEMPLOYED
                self.job_lost_month = ctx.month_index
                return
        if self.state == EmploymentState.EMPLOYED:
            if ctx.month_index >= ctx.notification_month_index:
                self.state = EmploymentState.SURVIVAL_MODE
                events.append("Notice Received: Survival Mode")

    def process_month(self, ctx: MonthlyContext) -> MonthlyIncome:
        events: List[str] = []
        base_income = 0.0
        bonus_income = 0.0
        expense_multiplier = 1.0

        self._transition(ctx, events)

        if self.state != EmploymentState.UNEMPLOYED:
            base_income, bonus_income, income_events = self._employed_income(ctx)
            events.extend(income_events)
            if self.state == EmploymentState.SURVIVAL_MODE:
                expense_multiplier = self.policy.austerity_multiplier
                events.append("Austerity")
        else:
            expense_multiplier = self.policy.austerity_multiplier
            events.append("Austerity")

            if ctx.month_index == self.job_lost_month:
                severance = (
                    current_salary(ctx.income, ctx.year_index)
                    * self.policy.severance_salary_months
                )
                bonus_income += severance
                events.append("Job Loss Event")
                events.append(f"Severance Paid (+{format_money(severance)})")

            elif (
                not self.bpjs_liquidated
                and self.job_lost_month is not None
                and ctx.month_index >= self.job_lost_month + 1
            ):
                payout = self.bpjs_balance
                bonus_income += payout
                self.bpjs_balance = 0.0
                self.bpjs_liquidated = True
                events.append(f"BPJS Liquidated (+{format_money(payout)})")

        return MonthlyIncome(
            base_income=base_income,
            bonus_income=bonus_income,
            expense_multiplier=expense_multiplier,
            events=events,
            is_employed=self.is_employed,
            in_survival_mode=self.in_survival_mode,
            bpjs_balance=self.bpjs_balance,
        )


def create_strategy(
    scenario: ScenarioType,
    initial_bpjs: float,
    policy: Optional[EnginePolicy] = None,
) -> EmploymentStrategy:
    """
    Create the income strategy for a scenario.

    Args:
        scenario: Scenario type selected for the pass
        initial_bpjs: Opening BPJS balance
        policy: Engine policy

    Returns:
        JobLossEmployment for UNEMPLOYED and WORST_CASE, else NormalEmployment
    """
    if scenario in (ScenarioType.UNEMPLOYED, ScenarioType.WORST_CASE):
        return JobLossEmployment(initial_bpjs, policy)
    return NormalEmployment(initial_bpjs, policy)
