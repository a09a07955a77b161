"""
Simulation result models.

This module provides the immutable month record, the run summary, the
cash-versus-deposito impact analysis and the SimulationResult container that
is the sole output of the engine.

The SimulationResult is handed over to the caller once built:
1. ``logs`` holds one MonthRecord per simulated month, in order
2. ``year_logs`` holds one YearEvent per realized extra payment
3. ``summary`` condenses milestones, interest and risk
4. ``impact_analysis`` compares the cash-only and deposito strategies
"""

from datetime import date
from typing import Any, Dict, List, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from ..mortgage_amortization import YearEvent
from ..risk import RiskLevel


class MonthRecord(BaseModel):
    """Snapshot of one simulated month. Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    month_index: int = Field(..., ge=0, description="Simulation month (0-based)")
    month_date: date = Field(..., description="First day of the calendar month")
    date_str: str = Field(..., description="Display label, e.g. 'Mar 2027'")
    year: int = Field(..., description="Calendar year")

    # Income
    income_base: float = Field(..., ge=0)
    income_bonus: float = Field(..., ge=0)
    total_income: float = Field(..., ge=0)

    # Expenses
    expenses_mandatory: float = Field(..., ge=0)
    expenses_discretionary: float = Field(..., ge=0)
    total_expenses: float = Field(..., ge=0)

    # Mortgage
    mortgage_paid: float = Field(..., ge=0)
    mortgage_interest: float = Field(..., ge=0)
    mortgage_principal_paid: float = Field(..., ge=0)
    mortgage_balance: float = Field(..., ge=0)
    mortgage_rate: float = Field(..., ge=0)
    principal_after_regular: float = Field(
        ..., ge=0, description="Balance after the regular payment, before prepayment"
    )
    extra_payment_made: float = Field(..., ge=0)
    installment_baseline: float = Field(..., ge=0)
    installment_current: float = Field(..., ge=0)
    installment_next: float = Field(..., ge=0)

    # Cash flow and buckets
    net_flow: float = Field(...)
    buffer_balance: float = Field(..., ge=0)
    emergency_balance: float = Field(..., ge=0)
    extra_payment_bucket: float = Field(..., ge=0)
    deposito_balance: float = Field(..., ge=0)
    deposito_interest_earned: float = Field(..., ge=0)
    cumulative_deposito_interest: float = Field(..., ge=0)
    bpjs_balance: float = Field(..., ge=0)

    # Risk and events
    liquidity_months: float = Field(...)
    risk_level: RiskLevel = Field(...)
    risk_reason: str = Field(default="")
    is_employed: bool = Field(...)
    in_survival_mode: bool = Field(...)
    has_bankruptcy: bool = Field(...)
    events: List[str] = Field(default_factory=list)

    @property
    def total_liquid(self) -> float:
        return (
            self.buffer_balance
            + self.emergency_balance
            + self.extra_payment_bucket
            + self.deposito_balance
        )


class SimulationSummary(BaseModel):
    """Condensed outcome of one simulation pass."""

    months_to_full_buffer: Optional[int] = Field(default=None)
    months_to_full_emergency: Optional[int] = Field(default=None)
    mortgage_payoff_date: Optional[date] = Field(default=None)
    mortgage_payoff_month_index: Optional[int] = Field(default=None)
    total_interest_paid: float = Field(..., ge=0)
    baseline_interest_paid: float = Field(
        ..., ge=0, description="Interest of the never-prepaid baseline loan"
    )
    total_interest_saved: float = Field(..., ge=0)
    liquidity_runway_months: float = Field(
        ..., description="Runway in the final simulated month"
    )
    lowest_liquidity_months: float = Field(...)
    risk_level: RiskLevel = Field(...)
    risk_reason: str = Field(...)
    purchasing_power_loss: float = Field(
        ..., description="Cumulative inflation over the horizon (%)"
    )
    max_job_search_months: Optional[int] = Field(default=None)
    bankruptcy_date: Optional[str] = Field(default=None)
    bankruptcy_month_index: Optional[int] = Field(default=None)


class StrategySnapshot(BaseModel):
    """Key figures of one strategy (cash-only or deposito)."""

    total_asset_interest: float = Field(..., ge=0)
    total_mortgage_interest_paid: float = Field(..., ge=0)
    payoff_date: Optional[date] = Field(default=None)
    payoff_month_index: int = Field(
        ..., description="Payoff month, or the never-paid-off sentinel"
    )


class ImpactAnalysis(BaseModel):
    """Comparison of the deposito strategy against cash-only."""

    cash_strategy: StrategySnapshot
    deposito_strategy: StrategySnapshot
    net_benefit: float = Field(
        ..., description="Extra deposito interest plus mortgage interest avoided"
    )
    months_saved: int = Field(..., ge=0)
    is_payoff_achieved_faster: bool


class SimulationResult(BaseModel):
    """
    Complete output of one engine invocation.

    Example:
        ```python
        result = run_simulation(expenses, income, mortgage, macro,
                                ScenarioType.NORMAL, risk_settings)
        result.summary.mortgage_payoff_date
        result.yearly_totals()["net_flow"]
        ```
    """

    logs: List[MonthRecord] = Field(..., description="One record per month")
    year_logs: List[YearEvent] = Field(
        default_factory=list, description="Realized extra payments"
    )
    summary: SimulationSummary
    impact_analysis: ImpactAnalysis

    model_config = ConfigDict(extra="forbid")

    @property
    def months(self) -> int:
        """Get the number of simulated months."""
        return len(self.logs)

    def get_month(self, month_index: int) -> MonthRecord:
        """Get the record of a simulation month."""
        if not 0 <= month_index < len(self.logs):
            raise ValueError(f"Month {month_index} is outside the simulation range")
        return self.logs[month_index]

    def column(self, field_name: str) -> np.ndarray:
        """Get one numeric MonthRecord field as an array over all months."""
        return np.array([getattr(r, field_name) for r in self.logs], dtype=np.float64)

    def yearly_totals(self) -> Dict[str, np.ndarray]:
        """
        Aggregate monthly flows per simulation year.

        Returns:
            Dict of arrays indexed by simulation year: summed flows
            (income, expenses, mortgage, net flow, deposito interest) and
            year-end balances (mortgage, total liquid assets)
        """
        if not self.logs:
            return {}

        years = len(self.logs) // 12 + (1 if len(self.logs) % 12 else 0)
        index = np.arange(len(self.logs)) // 12

        totals: Dict[str, np.ndarray] = {}
        for field_name in (
            "total_income",
            "total_expenses",
            "mortgage_paid",
            "mortgage_interest",
            "extra_payment_made",
            "net_flow",
            "deposito_interest_earned",
        ):
            totals[field_name] = np.bincount(
                index, weights=self.column(field_name), minlength=years
            )

        year_end = np.minimum((np.arange(years) + 1) * 12, len(self.logs)) - 1
        totals["mortgage_balance"] = self.column("mortgage_balance")[year_end]
        liquid = np.array([r.total_liquid for r in self.logs], dtype=np.float64)
        totals["total_liquid"] = liquid[year_end]
        return totals

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation of the result."""
        return self.model_dump(mode="json")
