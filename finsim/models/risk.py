"""
Liquidity risk classification for the household simulation.

This module rates each simulated month LOW/MEDIUM/HIGH from the liquidity
runway and employment status, tracks the worst rating and the lowest runway
of the whole pass, and latches the first bankruptcy.
"""

import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .scenario import ScenarioType
from .simulation.config import EnginePolicy

logger = logging.getLogger(__name__)

ROBUST_PLAN_REASON = "Financial plan is robust."


class RiskLevel(str, Enum):
    """Monthly liquidity risk level."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def severity(self) -> int:
        return {"LOW": 0, "MEDIUM": 1, "HIGH": 2}[self.value]


class RiskState(BaseModel):
    """Risk assessment for one month."""

    liquidity_months: float = Field(..., description="Months of burn covered")
    risk_level: RiskLevel = Field(..., description="Risk level for the month")
    reason: str = Field(default="", description="Why the level was assigned")
    has_bankruptcy: bool = Field(..., description="Bankruptcy latched so far")
    bankruptcy_date: Optional[str] = Field(default=None)


class RiskSummary(BaseModel):
    """Whole-pass risk summary."""

    lowest_liquidity_months: float = Field(..., description="Runway watermark")
    risk_level: RiskLevel = Field(..., description="Worst level seen")
    risk_reason: str = Field(..., description="Reason for the worst level")
    bankruptcy_date: Optional[str] = Field(default=None)
    bankruptcy_month_index: Optional[int] = Field(default=None)


class RiskClassifier:
    """Per-pass risk tracker."""

    def __init__(
        self,
        scenario: ScenarioType,
        notification_month_index: int,
        policy: Optional[EnginePolicy] = None,
    ) -> None:
        """Initialize the classifier.

        Args:
            scenario: Scenario of the pass
            notification_month_index: Month the layoff notice arrives; the
                runway watermark is only tracked from here on for job-loss
                scenarios
            policy: Engine policy holding thresholds and sentinels
        """
        self.scenario = scenario
        self.notification_month_index = notification_month_index
        self.policy = policy or EnginePolicy()

        self.lowest_liquidity = self.policy.runway_sentinel
        self.max_severity = 0
        self.max_reason = ROBUST_PLAN_REASON
        self.has_bankruptcy = False
        self.bankruptcy_month_index: Optional[int] = None
        self.bankruptcy_date: Optional[str] = None

    def liquidity_months(self, total_liquid: float, monthly_burn: float) -> float:
        """Runway in months, or the sentinel when nothing is being spent."""
        if monthly_burn <= 0:
            return self.policy.runway_sentinel
        return total_liquid / monthly_burn

    def tracks_watermark(self, month_index: int) -> bool:
        if self.scenario == ScenarioType.NORMAL:
            return True
        return month_index >= self.notification_month_index

    def classify(
        self,
        month_index: int,
        net_flow: float,
        liquidity_months: float,
        is_employed: bool,
        in_survival_mode: bool,
    ):
        """Return (level, reason) for one month, most severe condition first."""
        high = self.policy.high_risk_runway_months
        medium = self.policy.medium_risk_runway_months

        if self.has_bankruptcy:
            return RiskLevel.HIGH, "Bankrupt"

        if not is_employed:
            if liquidity_months < high:
                return RiskLevel.HIGH, f"Runway < {high:g}mo (Unemployed)"
            if liquidity_months < medium:
                return RiskLevel.MEDIUM, f"Runway < {medium:g}mo (Unemployed)"
            return RiskLevel.LOW, ""

        if in_survival_mode:
            if liquidity_months < high:
                return RiskLevel.HIGH, "Critical Pre-loss Runway"
            return RiskLevel.MEDIUM, "Survival Mode (Preparing)"

        if net_flow < 0:
            if liquidity_months < high:
                return RiskLevel.HIGH, "High Burn Rate & Low Liquidity"
            if liquidity_months < medium:
                return RiskLevel.MEDIUM, "Negative Cashflow"
            return RiskLevel.LOW, ""

        fragile = self.policy.fragile_runway_months
        if liquidity_months < fragile and month_index > self.policy.fragile_grace_months:
            return RiskLevel.MEDIUM, f"Fragile (Buffer < {fragile:g}mo)"

        return RiskLevel.LOW, ""

    def analyze(
        self,
        month_index: int,
        net_flow: float,
        total_liquid_assets: float,
        monthly_burn_rate: float,
        is_employed: bool,
        in_survival_mode: bool,
    ) -> RiskState:
        """
        Rate one month and update the whole-pass trackers.

        Args:
            month_index: Simulation month (0-based)
            net_flow: Net cash flow of the month
            total_liquid_assets: Sum of all bucket balances
            monthly_burn_rate: Expenses plus installment while the loan is active
            is_employed: Whether a salary is still paid
            in_survival_mode: Notice received but still employed

        Returns:
            RiskState for the month
        """
        liquidity = self.liquidity_months(total_liquid_assets, monthly_burn_rate)

        if self.tracks_watermark(month_index) and liquidity < self.lowest_liquidity:
            self.lowest_liquidity = liquidity

        level, reason = self.classify(
            month_index, net_flow, liquidity, is_employed, in_survival_mode
        )

        if level.severity > self.max_severity:
            self.max_severity = level.severity
            self.max_reason = reason

        return RiskState(
            liquidity_months=liquidity,
            risk_level=level,
            reason=reason,
            has_bankruptcy=self.has_bankruptcy,
            bankruptcy_date=self.bankruptcy_date,
        )

    def register_bankruptcy(self, month_index: int, date_label: str) -> bool:
        """
        Latch the first bankruptcy of the pass.

        Returns:
            True only for the call that set the latch
        """
        if self.has_bankruptcy:
            return False

        self.has_bankruptcy = True
        self.bankruptcy_month_index = month_index
        self.bankruptcy_date = date_label
        logger.warning("Liquidity exhausted in month %d (%s)", month_index, date_label)
        return True

    def get_summary(self) -> RiskSummary:
        """Summarize the worst risk of the pass."""
        if self.has_bankruptcy or self.max_severity == 2:
            level = RiskLevel.HIGH
        elif self.max_severity == 1:
            level = RiskLevel.MEDIUM
        else:
            level = RiskLevel.LOW

        return RiskSummary(
            lowest_liquidity_months=self.lowest_liquidity,
            risk_level=level,
            risk_reason=self.max_reason,
            bankruptcy_date=self.bankruptcy_date,
            bankruptcy_month_index=self.bankruptcy_month_index,
        )
