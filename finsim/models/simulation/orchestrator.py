"""
Simulation orchestrator.

This module drives the monthly loop that wires the income strategy, expense
projector, amortization engine, cash allocation engine, risk classifier and
statistics aggregator together, and runs a shadow pass with the deposito flag
flipped so that the cash-only and deposito strategies can be compared.

Each pass builds its own engine instances; passes share no mutable state and
never modify the configuration objects they receive.
"""

import logging
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

from ..cash_allocation import BucketTargets, CashAllocationEngine
from ..employment import MonthlyContext, create_strategy
from ..expense_engine import ExpenseProjector
from ..mortgage_amortization import AmortizationEngine, YearEvent
from ..risk import RiskClassifier
from ..scenario import (
    ExpenseItem,
    IncomeConfig,
    MacroConfig,
    MortgageConfig,
    RiskSettings,
    ScenarioType,
)
from ..statistics import StatisticsAggregator
from ..time_grid import MonthGrid
from .config import EnginePolicy
from .result import (
    ImpactAnalysis,
    MonthRecord,
    SimulationResult,
    SimulationSummary,
    StrategySnapshot,
)

logger = logging.getLogger(__name__)


class PassOutcome(BaseModel):
    """Output of a single simulation pass."""

    model_config = ConfigDict(frozen=True)

    logs: List[MonthRecord]
    year_logs: List[YearEvent]
    summary: SimulationSummary
    snapshot: StrategySnapshot


class SimulationOrchestrator:
    """Runs the 240-month household simulation and its comparison pass."""

    def __init__(self, policy: Optional[EnginePolicy] = None) -> None:
        """Initialize the orchestrator.

        Args:
            policy: Engine policy shared (read-only) by every pass
        """
        self.policy = policy or EnginePolicy()

    def run_pass(
        self,
        expenses: Iterable[ExpenseItem],
        income: IncomeConfig,
        mortgage: MortgageConfig,
        macro: MacroConfig,
        scenario: ScenarioType,
        risk_settings: RiskSettings,
    ) -> PassOutcome:
        """
        Run one full simulation pass.

        Args:
            expenses: Monthly expense items
            income: Income configuration
            mortgage: Mortgage configuration (its deposito flag is honoured)
            macro: Macro assumptions
            scenario: Employment scenario
            risk_settings: Notification and job-loss dates

        Returns:
            PassOutcome with month logs, extra payment events, summary and
            the strategy snapshot used for the impact analysis
        """
        scenario = ScenarioType(scenario)
        policy = self.policy
        grid = MonthGrid(
            start_date=mortgage.start_date, horizon_months=policy.horizon_months
        )

        # Dates are resolved once; the loop only compares integers.
        job_loss_month_index = grid.resolve_offset(risk_settings.job_loss_date)
        notification_month_index = grid.resolve_offset(risk_settings.notification_date)

        expense_projector = ExpenseProjector(expenses, macro)
        amortization = AmortizationEngine(mortgage, policy)
        cash = CashAllocationEngine(mortgage.use_deposito, policy)
        risk = RiskClassifier(scenario, notification_month_index, policy)
        stats = StatisticsAggregator(policy)
        strategy = create_strategy(scenario, income.bpjs_initial_balance, policy)

        year_logs: List[YearEvent] = []

        logger.debug(
            "Starting %s pass (deposito=%s, job loss month %d, notice month %d)",
            scenario.value,
            mortgage.use_deposito,
            job_loss_month_index,
            notification_month_index,
        )

        for m in range(policy.horizon_months):
            year_index = m // 12
            month_date = grid.month_date(m)
            date_str = grid.month_label(m)

            # A. Income
            ctx = MonthlyContext(
                month_index=m,
                year_index=year_index,
                current_date=month_date,
                income=income,
                job_loss_month_index=job_loss_month_index,
                notification_month_index=notification_month_index,
            )
            income_res = strategy.process_month(ctx)
            events = list(income_res.events)

            # B. Expenses
            expense_res = expense_projector.calculate(
                year_index, income_res.expense_multiplier
            )

            # C. Mortgage
            can_make_extra = income_res.is_employed and not income_res.in_survival_mode
            mortgage_res = amortization.process_month(
                m, cash.balances["extra"], can_make_extra, year_index
            )
            events.extend(mortgage_res.events)

            if mortgage_res.year_event is not None:
                year_logs.append(mortgage_res.year_event)
                events.append("Extra Payment")
            if mortgage_res.extra_payment_made > 0:
                cash.deduct_extra_payment(mortgage_res.extra_payment_made)

            # D. Cash flow and buckets
            net_flow = (
                income_res.total_income - expense_res.total - mortgage_res.installment
            )
            obligation = (
                mortgage_res.installment
                if mortgage_res.installment > 0
                else amortization.baseline_installment
            )
            targets = BucketTargets.for_obligations(expense_res.total, obligation, policy)
            cf = cash.process(net_flow, targets)

            if cf.has_bankruptcy and risk.register_bankruptcy(m, date_str):
                events.append("INSOLVENT")

            # E. Risk
            monthly_burn = expense_res.total + (
                mortgage_res.installment if mortgage_res.remaining_balance > 0 else 0.0
            )
            risk_state = risk.analyze(
                m,
                net_flow,
                cf.buckets.total,
                monthly_burn,
                income_res.is_employed,
                income_res.in_survival_mode,
            )

            stats.record_milestones(
                m,
                month_date,
                cf.buckets.buffer,
                targets.buffer,
                cf.buckets.emergency,
                targets.emergency,
                mortgage_res.is_paid_off,
            )

            # F. Log
            stats.log_month(
                MonthRecord(
                    month_index=m,
                    month_date=month_date,
                    date_str=date_str,
                    year=month_date.year,
                    income_base=income_res.base_income,
                    income_bonus=income_res.bonus_income,
                    total_income=income_res.total_income,
                    expenses_mandatory=expense_res.mandatory_total,
                    expenses_discretionary=expense_res.discretionary_total,
                    total_expenses=expense_res.total,
                    mortgage_paid=mortgage_res.installment,
                    mortgage_interest=mortgage_res.interest_paid,
                    mortgage_principal_paid=mortgage_res.principal_paid,
                    mortgage_balance=mortgage_res.remaining_balance,
                    mortgage_rate=mortgage_res.current_rate,
                    principal_after_regular=mortgage_res.remaining_balance
                    + (
                        mortgage_res.year_event.principal_reduced
                        if mortgage_res.year_event
                        else 0.0
                    ),
                    extra_payment_made=mortgage_res.extra_payment_made,
                    installment_baseline=amortization.baseline_installment,
                    installment_current=mortgage_res.installment,
                    installment_next=amortization.installment,
                    net_flow=net_flow,
                    buffer_balance=cf.buckets.buffer,
                    emergency_balance=cf.buckets.emergency,
                    extra_payment_bucket=cf.buckets.extra,
                    deposito_balance=cf.buckets.deposito,
                    deposito_interest_earned=cf.deposito_interest_earned,
                    cumulative_deposito_interest=cash.cumulative_interest,
                    bpjs_balance=income_res.bpjs_balance,
                    liquidity_months=risk_state.liquidity_months,
                    risk_level=risk_state.risk_level,
                    risk_reason=risk_state.reason,
                    is_employed=income_res.is_employed,
                    in_survival_mode=income_res.in_survival_mode,
                    has_bankruptcy=risk.has_bankruptcy,
                    events=events,
                )
            )

        summary = stats.generate_summary(
            risk.get_summary(),
            total_interest_saved=amortization.accumulated_interest_saved,
            baseline_interest_paid=amortization.baseline_interest_paid,
            inflation_rate=macro.inflation_rate,
            job_loss_month_index=(
                None if scenario == ScenarioType.NORMAL else job_loss_month_index
            ),
        )

        snapshot = StrategySnapshot(
            total_asset_interest=cash.cumulative_interest,
            total_mortgage_interest_paid=summary.total_interest_paid,
            payoff_date=summary.mortgage_payoff_date,
            payoff_month_index=(
                summary.mortgage_payoff_month_index
                if summary.mortgage_payoff_month_index is not None
                else policy.never_paid_off
            ),
        )

        logger.debug(
            "Finished %s pass (deposito=%s): risk %s, payoff month %s",
            scenario.value,
            mortgage.use_deposito,
            summary.risk_level.value,
            summary.mortgage_payoff_month_index,
        )

        return PassOutcome(
            logs=stats.get_logs(),
            year_logs=year_logs,
            summary=summary,
            snapshot=snapshot,
        )

    def build_impact_analysis(
        self, cash: StrategySnapshot, deposito: StrategySnapshot
    ) -> ImpactAnalysis:
        """
        Compare the deposito strategy against cash-only.

        Args:
            cash: Snapshot of the pass without deposito yield
            deposito: Snapshot of the pass with deposito yield

        Returns:
            ImpactAnalysis with net benefit and months saved
        """
        interest_earned_delta = deposito.total_asset_interest - cash.total_asset_interest
        mortgage_interest_delta = (
            cash.total_mortgage_interest_paid - deposito.total_mortgage_interest_paid
        )

        never = self.policy.never_paid_off
        if cash.payoff_month_index >= never:
            # Cash-only never clears the loan: count the months left in the
            # horizon when the deposito run does clear it.
            if deposito.payoff_month_index < never:
                months_saved = self.policy.horizon_months - deposito.payoff_month_index
            else:
                months_saved = 0
        else:
            months_saved = max(0, cash.payoff_month_index - deposito.payoff_month_index)

        return ImpactAnalysis(
            cash_strategy=cash,
            deposito_strategy=deposito,
            net_benefit=interest_earned_delta + mortgage_interest_delta,
            months_saved=months_saved,
            is_payoff_achieved_faster=deposito.payoff_month_index
            < cash.payoff_month_index,
        )

    def run(
        self,
        expenses: Iterable[ExpenseItem],
        income: IncomeConfig,
        mortgage: MortgageConfig,
        macro: MacroConfig,
        scenario: ScenarioType,
        risk_settings: RiskSettings,
    ) -> SimulationResult:
        """
        Run the caller's configuration plus the deposito-flipped shadow pass.

        Args:
            expenses: Monthly expense items
            income: Income configuration
            mortgage: Mortgage configuration
            macro: Macro assumptions
            scenario: Employment scenario
            risk_settings: Notification and job-loss dates

        Returns:
            SimulationResult of the caller's configuration with the impact
            analysis of both strategies
        """
        scenario = ScenarioType(scenario)
        expenses = tuple(expenses)
        main = self.run_pass(expenses, income, mortgage, macro, scenario, risk_settings)

        shadow_mortgage = mortgage.model_copy(
            update={"use_deposito": not mortgage.use_deposito}
        )
        shadow = self.run_pass(
            expenses, income, shadow_mortgage, macro, scenario, risk_settings
        )

        if mortgage.use_deposito:
            deposito_run, cash_run = main, shadow
        else:
            cash_run, deposito_run = main, shadow

        impact = self.build_impact_analysis(cash_run.snapshot, deposito_run.snapshot)

        logger.info(
            "Simulation complete: scenario=%s risk=%s payoff=%s net deposito benefit=%.2f",
            scenario.value,
            main.summary.risk_level.value,
            main.summary.mortgage_payoff_date,
            impact.net_benefit,
        )

        return SimulationResult(
            logs=main.logs,
            year_logs=main.year_logs,
            summary=main.summary,
            impact_analysis=impact,
        )


def run_simulation(
    expenses: Iterable[ExpenseItem],
    income: IncomeConfig,
    mortgage: MortgageConfig,
    macro: MacroConfig,
    scenario: ScenarioType,
    risk_settings: RiskSettings,
    policy: Optional[EnginePolicy] = None,
) -> SimulationResult:
    """Run a complete simulation with the given (or default) engine policy."""
    return SimulationOrchestrator(policy).run(
        expenses, income, mortgage, macro, scenario, risk_settings
    )
