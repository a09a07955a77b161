"""
Mortgage amortization for the household simulation.

This module provides the tiered-rate amortization engine: monthly
interest/principal splits, installment recomputation on rate changes, annual
opportunistic extra payments with penalties, and a parallel baseline loan that
is never prepaid and is used to measure interest saved.
"""

import logging
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from .scenario import InterestRateTier, MortgageConfig
from .simulation.config import EnginePolicy

logger = logging.getLogger(__name__)


class YearEvent(BaseModel):
    """One realized annual extra payment."""

    year: int = Field(..., ge=0, description="Simulation year index (0-based)")
    month_index: int = Field(..., ge=0, description="Simulation month of payment")
    extra_payment_paid: float = Field(
        ..., ge=0, description="Amount withdrawn from the extra-payment bucket"
    )
    penalty_paid: float = Field(..., ge=0, description="Early repayment penalty")
    principal_reduced: float = Field(..., ge=0, description="Net principal reduction")
    installment_before: float = Field(
        ..., ge=0, description="Installment before the prepayment"
    )
    installment_after: float = Field(
        ..., ge=0, description="Installment after recomputation"
    )
    interest_saved: float = Field(..., ge=0, description="Estimated interest saved")


class MortgagePaymentResult(BaseModel):
    """Outcome of one month of mortgage processing."""

    installment: float = Field(..., ge=0, description="Amount paid this month")
    principal_paid: float = Field(..., ge=0, description="Regular principal portion")
    interest_paid: float = Field(..., ge=0, description="Interest portion")
    remaining_balance: float = Field(..., ge=0, description="Principal after month")
    current_rate: float = Field(..., ge=0, description="Annual rate applied (%)")
    extra_payment_made: float = Field(
        default=0.0, ge=0, description="Extra payment withdrawn from the bucket"
    )
    is_paid_off: bool = Field(..., description="Whether the loan is cleared")
    events: List[str] = Field(default_factory=list, description="Mortgage events")
    year_event: Optional[YearEvent] = Field(
        default=None, description="Extra payment record, if one was made"
    )


class MortgageCalculator:
    """Stateless helpers for annuity loans."""

    @staticmethod
    def calculate_monthly_payment(
        principal: float, annual_rate: float, months_remaining: int
    ) -> float:
        """
        Calculate the fixed installment using the standard annuity formula (PMT).

        Args:
            principal: Outstanding principal
            annual_rate: Annual interest rate in percent (e.g. 3.65)
            months_remaining: Remaining number of monthly payments

        Returns:
            Monthly installment (0 for a cleared loan or an exhausted term)
        """
        if months_remaining <= 0 or principal <= 0:
            return 0.0

        monthly_rate = annual_rate / 100 / 12
        if monthly_rate == 0:
            return principal / months_remaining

        growth = (1 + monthly_rate) ** months_remaining
        return principal * monthly_rate * growth / (growth - 1)

    @staticmethod
    def calculate_interest_payment(balance: float, annual_rate: float) -> float:
        """Interest accrued on ``balance`` over one month at ``annual_rate`` %."""
        return balance * annual_rate / 100 / 12

    @staticmethod
    def rate_for_month(
        rates: Sequence[InterestRateTier], month_number: int, default_rate: float
    ) -> float:
        """
        Find the annual rate for a 1-based loan month.

        Args:
            rates: Configured rate tiers, in order
            month_number: Loan month (1-based)
            default_rate: Rate used when no tiers are configured

        Returns:
            Rate of the first tier containing the month, else the last tier's
            rate, else ``default_rate``
        """
        for tier in rates:
            if tier.start_month <= month_number <= tier.end_month:
                return tier.rate
        if rates:
            return rates[-1].rate
        return default_rate


class AmortizationEngine:
    """Owns the mortgage state for a single simulation pass."""

    def __init__(
        self, config: MortgageConfig, policy: Optional[EnginePolicy] = None
    ) -> None:
        """Initialize the loan and its never-prepaid baseline twin.

        Args:
            config: Mortgage configuration
            policy: Engine policy (dust threshold, fallback rate)
        """
        self.config = config
        self.policy = policy or EnginePolicy()
        self.rates = tuple(config.rates)

        self.principal = config.principal
        self.months_remaining = config.tenure_months
        self.installment = MortgageCalculator.calculate_monthly_payment(
            config.principal, self.get_rate(0), self.months_remaining
        )

        self.baseline_principal = config.principal
        self.baseline_months_remaining = config.tenure_months
        self.baseline_installment = self.installment

        self.accumulated_interest_saved = 0.0
        self.total_interest_paid = 0.0
        self.baseline_interest_paid = 0.0
        self.is_paid_off = False

    def get_rate(self, month_index: int) -> float:
        """Annual rate (%) for a 0-based simulation month."""
        return MortgageCalculator.rate_for_month(
            self.rates, month_index + 1, self.policy.default_rate
        )

    def rate_changed(self, month_index: int) -> bool:
        return month_index > 0 and self.get_rate(month_index) != self.get_rate(
            month_index - 1
        )

    def _advance_baseline(self, month_index: int) -> None:
        if self.baseline_principal <= 0:
            return

        rate = self.get_rate(month_index)
        if self.rate_changed(month_index):
            self.baseline_installment = MortgageCalculator.calculate_monthly_payment(
                self.baseline_principal, rate, self.baseline_months_remaining
            )

        interest = MortgageCalculator.calculate_interest_payment(
            self.baseline_principal, rate
        )
        if self.baseline_months_remaining <= 0:
            payment = self.baseline_principal + interest
        else:
            payment = min(self.baseline_installment, self.baseline_principal + interest)

        self.baseline_interest_paid += interest
        self.baseline_principal = max(
            0.0, self.baseline_principal - max(0.0, payment - interest)
        )
        self.baseline_months_remaining = max(0, self.baseline_months_remaining - 1)

    def _paid_off_result(self) -> MortgagePaymentResult:
        self.principal = 0.0
        self.installment = 0.0
        self.is_paid_off = True
        return MortgagePaymentResult(
            installment=0.0,
            principal_paid=0.0,
            interest_paid=0.0,
            remaining_balance=0.0,
            current_rate=0.0,
            is_paid_off=True,
        )

    def process_month(
        self,
        month_index: int,
        extra_bucket_balance: float,
        can_make_extra_payment: bool,
        year_index: int,
    ) -> MortgagePaymentResult:
        """
        Apply one month of amortization and, on anniversaries, an extra payment.

        Args:
            month_index: Simulation month (0-based)
            extra_bucket_balance: Current extra-payment bucket balance
            can_make_extra_payment: False while in survival mode or unemployed
            year_index: Simulation year (0-based)

        Returns:
            MortgagePaymentResult for the month
        """
        self._advance_baseline(month_index)

        if self.principal <= 0 or self.principal < self.policy.dust_threshold:
            return self._paid_off_result()

        events: List[str] = []
        current_rate = self.get_rate(month_index)

        if self.rate_changed(month_index):
            self.installment = MortgageCalculator.calculate_monthly_payment(
                self.principal, current_rate, self.months_remaining
            )
            events.append(f"Rate: {current_rate:g}%")

        interest_paid = MortgageCalculator.calculate_interest_payment(
            self.principal, current_rate
        )
        if self.months_remaining <= 0:
            # Term exhausted with a residual balance: settle it in full.
            payment = self.principal + interest_paid
        else:
            payment = min(self.installment, self.principal + interest_paid)
        principal_paid = max(0.0, payment - interest_paid)

        self.principal = max(0.0, self.principal - principal_paid)
        self.months_remaining = max(0, self.months_remaining - 1)
        self.total_interest_paid += interest_paid

        extra_payment_made = 0.0
        year_event = None
        if (
            month_index > 0
            and month_index % 12 == 0
            and self.principal > 0
            and can_make_extra_payment
        ):
            year_event = self._apply_extra_payment(
                month_index, extra_bucket_balance, current_rate, year_index
            )
            if year_event is not None:
                extra_payment_made = year_event.extra_payment_paid

        if self.principal <= 0:
            self.is_paid_off = True

        return MortgagePaymentResult(
            installment=payment,
            principal_paid=principal_paid,
            interest_paid=interest_paid,
            remaining_balance=self.principal,
            current_rate=current_rate,
            extra_payment_made=extra_payment_made,
            is_paid_off=self.is_paid_off,
            events=events,
            year_event=year_event,
        )

    def _apply_extra_payment(
        self,
        month_index: int,
        bucket_balance: float,
        current_rate: float,
        year_index: int,
    ) -> Optional[YearEvent]:
        minimum = self.config.extra_payment_min_multiple * self.installment
        if bucket_balance <= 0 or bucket_balance < minimum:
            return None

        amount = bucket_balance
        penalty = amount * self.config.penalty_percent / 100
        net_reduction = min(amount - penalty, self.principal)
        installment_before = self.installment

        self.principal = max(0.0, self.principal - net_reduction)

        # months_remaining already reflects this month's regular payment
        recomputed = MortgageCalculator.calculate_monthly_payment(
            self.principal, current_rate, self.months_remaining
        )
        # A prepayment shortens the schedule; it never raises the installment.
        self.installment = min(installment_before, recomputed)

        interest_saved = max(
            0.0,
            (installment_before - self.installment) * self.months_remaining
            - net_reduction,
        )
        self.accumulated_interest_saved += interest_saved

        logger.debug(
            "Extra payment of %.2f in month %d reduced principal by %.2f",
            amount,
            month_index,
            net_reduction,
        )

        return YearEvent(
            year=year_index,
            month_index=month_index,
            extra_payment_paid=amount,
            penalty_paid=penalty,
            principal_reduced=net_reduction,
            installment_before=installment_before,
            installment_after=self.installment,
            interest_saved=interest_saved,
        )
