"""Domain models and engines for the household financial simulation."""

from .scenario import (
    ExpenseItem,
    IncomeConfig,
    InterestRateTier,
    MacroConfig,
    MortgageConfig,
    RiskSettings,
    ScenarioType,
    create_default_expenses,
    create_default_income,
    create_default_macro,
    create_default_mortgage,
    create_default_risk_settings,
)
from .time_grid import ALREADY_ELAPSED, MonthGrid
from .expense_engine import ExpenseBreakdown, ExpenseProjector
from .mortgage_amortization import (
    AmortizationEngine,
    MortgageCalculator,
    MortgagePaymentResult,
    YearEvent,
)
from .cash_allocation import (
    BucketState,
    BucketTargets,
    CashAllocationEngine,
    CashflowResult,
)
from .employment import (
    EmploymentState,
    EmploymentStrategy,
    JobLossEmployment,
    MonthlyContext,
    MonthlyIncome,
    NormalEmployment,
    create_strategy,
)
from .risk import RiskClassifier, RiskLevel, RiskState, RiskSummary
from .statistics import StatisticsAggregator
from .simulation.config import EnginePolicy
from .simulation.result import (
    ImpactAnalysis,
    MonthRecord,
    SimulationResult,
    SimulationSummary,
    StrategySnapshot,
)
from .simulation.orchestrator import SimulationOrchestrator, run_simulation

__all__ = [
    "ScenarioType",
    "ExpenseItem",
    "IncomeConfig",
    "InterestRateTier",
    "MortgageConfig",
    "MacroConfig",
    "RiskSettings",
    "create_default_expenses",
    "create_default_income",
    "create_default_mortgage",
    "create_default_macro",
    "create_default_risk_settings",
    "ALREADY_ELAPSED",
    "MonthGrid",
    "ExpenseBreakdown",
    "ExpenseProjector",
    "AmortizationEngine",
    "MortgageCalculator",
    "MortgagePaymentResult",
    "YearEvent",
    "BucketState",
    "BucketTargets",
    "CashAllocationEngine",
    "CashflowResult",
    "EmploymentState",
    "EmploymentStrategy",
    "JobLossEmployment",
    "MonthlyContext",
    "MonthlyIncome",
    "NormalEmployment",
    "create_strategy",
    "RiskClassifier",
    "RiskLevel",
    "RiskState",
    "RiskSummary",
    "StatisticsAggregator",
    "EnginePolicy",
    "ImpactAnalysis",
    "MonthRecord",
    "SimulationResult",
    "SimulationSummary",
    "StrategySnapshot",
    "SimulationOrchestrator",
    "run_simulation",
]
