"""
Statistics aggregation for the household simulation.

This module collects the month records of a pass, latches milestones (first
month each liquidity bucket reaches its target, mortgage payoff) and builds
the final summary.
"""

import logging
from datetime import date
from typing import List, Optional

import numpy as np

from .risk import RiskSummary
from .simulation.config import EnginePolicy
from .simulation.result import MonthRecord, SimulationSummary

logger = logging.getLogger(__name__)


def purchasing_power_loss(inflation_rate: float, years: float = 20) -> float:
    """Cumulative price increase (%) after ``years`` of ``inflation_rate`` %."""
    return ((1 + inflation_rate / 100) ** years - 1) * 100


class StatisticsAggregator:
    """Month log and milestone tracker for a single pass."""

    def __init__(self, policy: Optional[EnginePolicy] = None) -> None:
        self.policy = policy or EnginePolicy()
        self.logs: List[MonthRecord] = []
        self.buffer_full_month: Optional[int] = None
        self.emergency_full_month: Optional[int] = None
        self.payoff_month: Optional[int] = None
        self.payoff_date: Optional[date] = None

    def log_month(self, record: MonthRecord) -> None:
        """Append a month record."""
        self.logs.append(record)

    def get_logs(self) -> List[MonthRecord]:
        return list(self.logs)

    def record_milestones(
        self,
        month_index: int,
        month_date: date,
        buffer_balance: float,
        buffer_target: float,
        emergency_balance: float,
        emergency_target: float,
        is_mortgage_paid_off: bool,
    ) -> None:
        """
        Latch the first occurrence of each milestone.

        Args:
            month_index: Simulation month (0-based)
            month_date: Calendar date of the month
            buffer_balance: Buffer bucket balance after allocation
            buffer_target: Buffer target for the month
            emergency_balance: Emergency bucket balance after allocation
            emergency_target: Emergency target for the month
            is_mortgage_paid_off: Whether the loan is cleared
        """
        tolerance = self.policy.milestone_tolerance
        if self.buffer_full_month is None and buffer_balance >= buffer_target - tolerance:
            self.buffer_full_month = month_index
        if (
            self.emergency_full_month is None
            and emergency_balance >= emergency_target - tolerance
        ):
            self.emergency_full_month = month_index
        if is_mortgage_paid_off and self.payoff_month is None:
            self.payoff_month = month_index
            self.payoff_date = month_date
            logger.info("Mortgage paid off in month %d (%s)", month_index, month_date)

    def job_search_months(
        self, risk_summary: RiskSummary, job_loss_month_index: Optional[int]
    ) -> Optional[int]:
        """
        Months survivable after job loss.

        Args:
            risk_summary: Risk summary of the pass
            job_loss_month_index: Job loss month; None for steady employment,
                negative when it had already happened at the start

        Returns:
            Months from job loss to bankruptcy, or to the horizon when the
            household stays solvent; None without a job loss in the horizon
        """
        horizon = self.policy.horizon_months
        if job_loss_month_index is None or job_loss_month_index >= horizon:
            return None

        start = max(0, job_loss_month_index)
        if risk_summary.bankruptcy_month_index is not None:
            return max(0, risk_summary.bankruptcy_month_index - start)
        return horizon - start

    def generate_summary(
        self,
        risk_summary: RiskSummary,
        total_interest_saved: float,
        baseline_interest_paid: float,
        inflation_rate: float,
        job_loss_month_index: Optional[int] = None,
    ) -> SimulationSummary:
        """
        Build the pass summary.

        Args:
            risk_summary: Risk summary from the classifier
            total_interest_saved: Interest saved by extra payments
            baseline_interest_paid: Interest of the never-prepaid baseline loan
            inflation_rate: Annual inflation rate (%)
            job_loss_month_index: Job loss month for job-loss scenarios

        Returns:
            SimulationSummary
        """
        max_job_search = self.job_search_months(risk_summary, job_loss_month_index)

        reason = risk_summary.risk_reason
        if max_job_search is not None:
            if risk_summary.bankruptcy_date:
                reason = f"Insolvency {max_job_search} months after job loss."
            else:
                reason = f"Survived >{max_job_search} months without job."

        interest = np.array([r.mortgage_interest for r in self.logs], dtype=np.float64)
        total_interest_paid = float(interest.sum()) if interest.size else 0.0
        runway = self.logs[-1].liquidity_months if self.logs else 0.0

        return SimulationSummary(
            months_to_full_buffer=self.buffer_full_month,
            months_to_full_emergency=self.emergency_full_month,
            mortgage_payoff_date=self.payoff_date,
            mortgage_payoff_month_index=self.payoff_month,
            total_interest_paid=total_interest_paid,
            baseline_interest_paid=baseline_interest_paid,
            total_interest_saved=total_interest_saved,
            liquidity_runway_months=runway,
            lowest_liquidity_months=risk_summary.lowest_liquidity_months,
            risk_level=risk_summary.risk_level,
            risk_reason=reason,
            purchasing_power_loss=purchasing_power_loss(
                inflation_rate, self.policy.horizon_months / 12
            ),
            max_job_search_months=max_job_search,
            bankruptcy_date=risk_summary.bankruptcy_date,
            bankruptcy_month_index=risk_summary.bankruptcy_month_index,
        )
