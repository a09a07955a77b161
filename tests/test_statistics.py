"""Tests for the statistics aggregator and summary generation."""

from datetime import date

import pytest

from finsim.models.risk import RiskLevel, RiskSummary
from finsim.models.simulation.result import MonthRecord
from finsim.models.statistics import StatisticsAggregator, purchasing_power_loss


def make_record(month_index, **overrides):
    """Create a month record with neutral values."""
    values = dict(
        month_index=month_index,
        month_date=date(2026 + month_index // 12, month_index % 12 + 1, 1),
        date_str="",
        year=2026 + month_index // 12,
        income_base=0.0,
        income_bonus=0.0,
        total_income=0.0,
        expenses_mandatory=0.0,
        expenses_discretionary=0.0,
        total_expenses=0.0,
        mortgage_paid=0.0,
        mortgage_interest=0.0,
        mortgage_principal_paid=0.0,
        mortgage_balance=0.0,
        mortgage_rate=0.0,
        principal_after_regular=0.0,
        extra_payment_made=0.0,
        installment_baseline=0.0,
        installment_current=0.0,
        installment_next=0.0,
        net_flow=0.0,
        buffer_balance=0.0,
        emergency_balance=0.0,
        extra_payment_bucket=0.0,
        deposito_balance=0.0,
        deposito_interest_earned=0.0,
        cumulative_deposito_interest=0.0,
        bpjs_balance=0.0,
        liquidity_months=0.0,
        risk_level=RiskLevel.LOW,
        is_employed=True,
        in_survival_mode=False,
        has_bankruptcy=False,
    )
    values.update(overrides)
    return MonthRecord(**values)


def make_risk_summary(bankruptcy_month_index=None):
    return RiskSummary(
        lowest_liquidity_months=2.5,
        risk_level=RiskLevel.HIGH if bankruptcy_month_index else RiskLevel.MEDIUM,
        risk_reason="Negative Cashflow",
        bankruptcy_date="Jul 2028" if bankruptcy_month_index else None,
        bankruptcy_month_index=bankruptcy_month_index,
    )


def test_purchasing_power_loss():
    assert purchasing_power_loss(4.0) == pytest.approx(119.112314, rel=1e-6)
    assert purchasing_power_loss(0.0) == 0


class TestMilestones:
    """Test cases for milestone latching."""

    def test_buffer_and_emergency_latch_once(self):
        stats = StatisticsAggregator()

        stats.record_milestones(0, date(2026, 1, 1), 800, 1_000, 0, 5_000, False)
        stats.record_milestones(1, date(2026, 2, 1), 905, 1_000, 0, 5_000, False)
        stats.record_milestones(2, date(2026, 3, 1), 0, 1_000, 4_950, 5_000, False)
        stats.record_milestones(3, date(2026, 4, 1), 1_000, 1_000, 5_000, 5_000, False)

        assert stats.buffer_full_month == 1
        assert stats.emergency_full_month == 2

    def test_payoff_latches_first_month(self):
        stats = StatisticsAggregator()

        stats.record_milestones(10, date(2026, 11, 1), 0, 1, 0, 1, False)
        stats.record_milestones(11, date(2026, 12, 1), 0, 1, 0, 1, True)
        stats.record_milestones(12, date(2027, 1, 1), 0, 1, 0, 1, True)

        assert stats.payoff_month == 11
        assert stats.payoff_date == date(2026, 12, 1)


class TestJobSearchMonths:
    """Test cases for the survivable job search horizon."""

    def test_no_job_loss(self):
        stats = StatisticsAggregator()

        assert stats.job_search_months(make_risk_summary(), None) is None
        assert stats.job_search_months(make_risk_summary(), 240) is None

    def test_survived_to_horizon(self):
        assert StatisticsAggregator().job_search_months(make_risk_summary(), 17) == 223

    def test_bankrupt_after_job_loss(self):
        stats = StatisticsAggregator()
        assert stats.job_search_months(make_risk_summary(30), 17) == 13

    def test_job_loss_before_start(self):
        assert StatisticsAggregator().job_search_months(make_risk_summary(), -1) == 240


class TestGenerateSummary:
    """Test cases for summary generation."""

    def test_summary_aggregates_logs(self):
        stats = StatisticsAggregator()
        for m in range(3):
            stats.log_month(
                make_record(m, mortgage_interest=1_000.0 * (m + 1), liquidity_months=m)
            )

        summary = stats.generate_summary(
            make_risk_summary(),
            total_interest_saved=50.0,
            baseline_interest_paid=7_000.0,
            inflation_rate=4.0,
        )

        assert summary.total_interest_paid == pytest.approx(6_000.0)
        assert summary.baseline_interest_paid == 7_000.0
        assert summary.total_interest_saved == 50.0
        assert summary.liquidity_runway_months == 2
        assert summary.lowest_liquidity_months == 2.5
        assert summary.risk_reason == "Negative Cashflow"
        assert summary.max_job_search_months is None
        assert summary.purchasing_power_loss == pytest.approx(119.112314, rel=1e-6)

    def test_reason_rewritten_for_survived_job_loss(self):
        summary = StatisticsAggregator().generate_summary(
            make_risk_summary(), 0.0, 0.0, 4.0, job_loss_month_index=17
        )

        assert summary.max_job_search_months == 223
        assert summary.risk_reason == "Survived >223 months without job."

    def test_reason_rewritten_for_insolvency(self):
        summary = StatisticsAggregator().generate_summary(
            make_risk_summary(30), 0.0, 0.0, 4.0, job_loss_month_index=17
        )

        assert summary.risk_reason == "Insolvency 13 months after job loss."
        assert summary.bankruptcy_month_index == 30
        assert summary.bankruptcy_date == "Jul 2028"

    def test_empty_logs(self):
        summary = StatisticsAggregator().generate_summary(
            make_risk_summary(), 0.0, 0.0, 0.0
        )

        assert summary.total_interest_paid == 0
        assert summary.liquidity_runway_months == 0
        assert summary.months_to_full_buffer is None
