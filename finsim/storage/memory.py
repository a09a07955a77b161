"""In-memory configuration repository."""

import logging
from typing import List, Optional

from finsim.models.scenario import (
    ExpenseItem,
    IncomeConfig,
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

from .base import FinancialRepository, RepositoryError

logger = logging.getLogger(__name__)


class InMemoryFinancialRepository(FinancialRepository):
    """
    Process-local repository seeded with the default household.

    Every getter hands out a copy so callers can never mutate stored state.
    """

    def __init__(
        self,
        expenses: Optional[List[ExpenseItem]] = None,
        income: Optional[IncomeConfig] = None,
        mortgage: Optional[MortgageConfig] = None,
        macro: Optional[MacroConfig] = None,
        scenario: ScenarioType = ScenarioType.NORMAL,
        risk_settings: Optional[RiskSettings] = None,
    ) -> None:
        self._expenses = list(
            expenses if expenses is not None else create_default_expenses()
        )
        self._income = income or create_default_income()
        self._mortgage = mortgage or create_default_mortgage()
        self._macro = macro or create_default_macro()
        self._scenario = ScenarioType(scenario)
        self._risk_settings = risk_settings or create_default_risk_settings()

    def get_expenses(self) -> List[ExpenseItem]:
        return [item.model_copy() for item in self._expenses]

    def save_expenses(self, expenses: List[ExpenseItem]) -> None:
        for item in expenses:
            if not isinstance(item, ExpenseItem):
                raise RepositoryError(
                    f"Expected ExpenseItem, got {type(item).__name__}"
                )
        self._expenses = [item.model_copy() for item in expenses]
        logger.debug("Stored %d expense items", len(self._expenses))

    def get_income(self) -> IncomeConfig:
        return self._income.model_copy(deep=True)

    def save_income(self, income: IncomeConfig) -> None:
        self._income = income.model_copy(deep=True)

    def get_mortgage(self) -> MortgageConfig:
        return self._mortgage.model_copy(deep=True)

    def save_mortgage(self, mortgage: MortgageConfig) -> None:
        self._mortgage = mortgage.model_copy(deep=True)

    def get_macro(self) -> MacroConfig:
        return self._macro.model_copy()

    def save_macro(self, macro: MacroConfig) -> None:
        self._macro = macro.model_copy()

    def get_scenario(self) -> ScenarioType:
        return self._scenario

    def save_scenario(self, scenario: ScenarioType) -> None:
        try:
            self._scenario = ScenarioType(scenario)
        except ValueError as e:
            raise RepositoryError(f"Unknown scenario: {scenario}") from e

    def get_risk_settings(self) -> RiskSettings:
        return self._risk_settings.model_copy()

    def save_risk_settings(self, risk_settings: RiskSettings) -> None:
        self._risk_settings = risk_settings.model_copy()
