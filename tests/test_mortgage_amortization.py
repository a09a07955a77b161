"""
Tests for mortgage amortization calculations.

This module tests the annuity payment formula, tier lookup, the month-by-month
amortization engine, annual extra payments with penalties and the
never-prepaid baseline loan.
"""

from datetime import date

import pytest

from finsim.models.mortgage_amortization import AmortizationEngine, MortgageCalculator
from finsim.models.scenario import (
    InterestRateTier,
    MortgageConfig,
    create_default_mortgage,
)
from finsim.models.simulation.config import EnginePolicy


class TestMortgageCalculator:
    """Test cases for MortgageCalculator class."""

    def test_calculate_monthly_payment_basic(self):
        """Test basic monthly payment calculation."""
        # Standard 30-year mortgage: 300,000 at 6% interest
        payment = MortgageCalculator.calculate_monthly_payment(
            principal=300000, annual_rate=6.0, months_remaining=360
        )

        assert abs(payment - 1798.65) < 0.01

    def test_calculate_monthly_payment_default_loan(self):
        """Test the default 800M loan at the first tier rate over 15 years."""
        payment = MortgageCalculator.calculate_monthly_payment(
            principal=800_000_000, annual_rate=3.65, months_remaining=180
        )

        assert abs(payment - 5_778_171.05) < 1

    def test_calculate_monthly_payment_zero_interest(self):
        """Test monthly payment calculation with zero interest rate."""
        payment = MortgageCalculator.calculate_monthly_payment(
            principal=300000, annual_rate=0.0, months_remaining=360
        )

        assert abs(payment - 300000 / 360) < 0.01

    @pytest.mark.parametrize(
        "principal,months", [(0, 360), (-5, 360), (300000, 0), (300000, -1)]
    )
    def test_calculate_monthly_payment_degenerate(self, principal, months):
        assert (
            MortgageCalculator.calculate_monthly_payment(principal, 6.0, months) == 0.0
        )

    def test_calculate_interest_payment(self):
        """Test interest payment calculation."""
        interest = MortgageCalculator.calculate_interest_payment(
            balance=300000, annual_rate=6.0
        )

        assert interest == pytest.approx(1500.0)

    def test_rate_for_month_uses_inclusive_tiers(self):
        tiers = create_default_mortgage().rates

        assert MortgageCalculator.rate_for_month(tiers, 1, 12.0) == 3.65
        assert MortgageCalculator.rate_for_month(tiers, 24, 12.0) == 3.65
        assert MortgageCalculator.rate_for_month(tiers, 25, 12.0) == 7.65
        assert MortgageCalculator.rate_for_month(tiers, 121, 12.0) == 11.0

    def test_rate_for_month_falls_back_to_last_tier(self):
        """Test that uncovered months use the last tier's rate."""
        tiers = [
            InterestRateTier(start_month=1, end_month=12, rate=3.0),
            InterestRateTier(start_month=25, end_month=36, rate=7.0),
        ]

        assert MortgageCalculator.rate_for_month(tiers, 15, 12.0) == 7.0
        assert MortgageCalculator.rate_for_month(tiers, 400, 12.0) == 7.0

    def test_rate_for_month_without_tiers(self):
        assert MortgageCalculator.rate_for_month([], 5, 12.0) == 12.0


class TestAmortizationEngine:
    """Test cases for AmortizationEngine."""

    def test_full_tenure_repays_principal(self, simple_mortgage):
        """Test that regular payments retire the loan over its term."""
        engine = AmortizationEngine(simple_mortgage, EnginePolicy(dust_threshold=0))
        installment = engine.installment

        principal_paid = 0.0
        interest_paid = 0.0
        for m in range(360):
            res = engine.process_month(m, 0.0, False, m // 12)
            principal_paid += res.principal_paid
            interest_paid += res.interest_paid

        assert principal_paid == pytest.approx(300000, rel=1e-9)
        assert engine.principal == pytest.approx(0, abs=1e-6)
        assert interest_paid == pytest.approx(installment * 360 - 300000, rel=1e-6)

    def test_interest_principal_split(self, simple_mortgage):
        engine = AmortizationEngine(simple_mortgage)

        res = engine.process_month(0, 0.0, False, 0)

        assert res.interest_paid == pytest.approx(1500.0)
        assert res.principal_paid == pytest.approx(res.installment - 1500.0)
        assert res.remaining_balance == pytest.approx(300000 - res.principal_paid)
        assert res.current_rate == 6.0
        assert res.events == []

    def test_rate_change_recomputes_installment(self):
        """Test that a new tier triggers recomputation and a rate event."""
        engine = AmortizationEngine(create_default_mortgage())
        first_installment = engine.installment

        for m in range(24):
            engine.process_month(m, 0.0, False, m // 12)
        balance = engine.principal

        res = engine.process_month(24, 0.0, False, 2)

        expected = MortgageCalculator.calculate_monthly_payment(balance, 7.65, 156)
        assert res.installment == pytest.approx(expected)
        assert res.installment > first_installment
        assert res.current_rate == 7.65
        assert res.events == ["Rate: 7.65%"]

    def test_extra_payment_on_anniversary(self):
        """Test an extra payment at month 12 with penalty and clamp."""
        engine = AmortizationEngine(create_default_mortgage())
        for m in range(12):
            res = engine.process_month(m, 0.0, True, m // 12)
            assert res.year_event is None

        res = engine.process_month(12, 100_000_000, True, 1)
        event = res.year_event

        assert event is not None
        assert event.year == 1
        assert event.month_index == 12
        assert event.extra_payment_paid == pytest.approx(100_000_000)
        assert event.penalty_paid == pytest.approx(1_000_000)
        assert event.principal_reduced == pytest.approx(99_000_000)
        assert event.installment_after <= event.installment_before
        assert res.extra_payment_made == pytest.approx(100_000_000)

        # 180 - 13 regular payments
        assert engine.months_remaining == 167
        expected_saved = (
            event.installment_before - event.installment_after
        ) * 167 - 99_000_000
        assert event.interest_saved == pytest.approx(expected_saved)
        assert event.interest_saved > 0
        assert engine.accumulated_interest_saved == pytest.approx(event.interest_saved)
        assert engine.installment == pytest.approx(event.installment_after)

    def test_extra_payment_below_minimum_is_skipped(self):
        engine = AmortizationEngine(create_default_mortgage())
        for m in range(12):
            engine.process_month(m, 0.0, True, 0)

        # Minimum is 6 installments (~34.7M)
        res = engine.process_month(12, 30_000_000, True, 1)

        assert res.year_event is None
        assert res.extra_payment_made == 0

    @pytest.mark.parametrize("month_index,allowed", [(6, True), (12, False), (0, True)])
    def test_extra_payment_requires_anniversary_and_permission(
        self, month_index, allowed
    ):
        engine = AmortizationEngine(create_default_mortgage())
        for m in range(month_index):
            engine.process_month(m, 0.0, True, m // 12)

        res = engine.process_month(month_index, 500_000_000, allowed, month_index // 12)

        assert res.year_event is None

    def test_net_reduction_capped_at_principal(self):
        """Test that an oversized extra payment clears the loan."""
        mortgage = MortgageConfig(
            principal=50_000_000,
            start_date=date(2026, 1, 1),
            tenure_years=5,
            penalty_percent=1.0,
            rates=[InterestRateTier(start_month=1, end_month=60, rate=6.0)],
        )
        engine = AmortizationEngine(mortgage)
        for m in range(12):
            engine.process_month(m, 0.0, True, 0)
        balance = engine.principal

        res = engine.process_month(12, 100_000_000, True, 1)

        assert res.year_event.principal_reduced == pytest.approx(
            balance - res.principal_paid
        )
        assert res.remaining_balance == 0
        assert res.is_paid_off is True
        assert engine.installment == 0

    def test_dust_balance_is_written_off(self):
        mortgage = MortgageConfig(
            principal=5_000, start_date=date(2026, 1, 1), tenure_years=1
        )
        engine = AmortizationEngine(mortgage)

        res = engine.process_month(0, 0.0, False, 0)

        assert res.is_paid_off is True
        assert res.installment == 0
        assert res.remaining_balance == 0

    def test_no_tiers_uses_default_rate(self):
        mortgage = MortgageConfig(
            principal=1_000_000, start_date=date(2026, 1, 1), tenure_years=1
        )
        engine = AmortizationEngine(mortgage)

        res = engine.process_month(0, 0.0, False, 0)

        assert res.current_rate == 12.0
        assert res.interest_paid == pytest.approx(10_000)

    def test_baseline_is_never_prepaid(self):
        """Test that the baseline loan ignores extra payments."""
        engine = AmortizationEngine(create_default_mortgage())
        for m in range(13):
            bucket = 100_000_000 if m == 12 else 0.0
            engine.process_month(m, bucket, True, m // 12)

        assert engine.baseline_principal > engine.principal
        assert engine.baseline_months_remaining == engine.months_remaining
        assert engine.baseline_installment > engine.installment

        for m in range(13, 180):
            engine.process_month(m, 0.0, True, m // 12)

        assert engine.baseline_interest_paid > engine.total_interest_paid
        assert engine.baseline_principal == pytest.approx(0, abs=1e-3)
