"""
Base configuration repository interface and exceptions.

This module defines the abstract interface that every store of simulation
inputs must follow, along with common exceptions.
"""

from abc import ABC, abstractmethod
from typing import List

from finsim.models.scenario import (
    ExpenseItem,
    IncomeConfig,
    MacroConfig,
    MortgageConfig,
    RiskSettings,
    ScenarioType,
)


class RepositoryError(Exception):
    """Base exception for repository-related errors."""


class FinancialRepository(ABC):
    """
    Abstract base class for simulation input stores.

    A repository holds the six inputs of a simulation run. Getters return
    values the caller may keep; later saves never change them.
    """

    @abstractmethod
    def get_expenses(self) -> List[ExpenseItem]:
        """Return the monthly expense items."""

    @abstractmethod
    def save_expenses(self, expenses: List[ExpenseItem]) -> None:
        """
        Replace the monthly expense items.

        Args:
            expenses: New expense list

        Raises:
            RepositoryError: If the expenses cannot be stored
        """

    @abstractmethod
    def get_income(self) -> IncomeConfig:
        """Return the income configuration."""

    @abstractmethod
    def save_income(self, income: IncomeConfig) -> None:
        """Replace the income configuration."""

    @abstractmethod
    def get_mortgage(self) -> MortgageConfig:
        """Return the mortgage configuration."""

    @abstractmethod
    def save_mortgage(self, mortgage: MortgageConfig) -> None:
        """Replace the mortgage configuration."""

    @abstractmethod
    def get_macro(self) -> MacroConfig:
        """Return the macro assumptions."""

    @abstractmethod
    def save_macro(self, macro: MacroConfig) -> None:
        """Replace the macro assumptions."""

    @abstractmethod
    def get_scenario(self) -> ScenarioType:
        """Return the selected employment scenario."""

    @abstractmethod
    def save_scenario(self, scenario: ScenarioType) -> None:
        """Replace the selected employment scenario."""

    @abstractmethod
    def get_risk_settings(self) -> RiskSettings:
        """Return the notification and job-loss dates."""

    @abstractmethod
    def save_risk_settings(self, risk_settings: RiskSettings) -> None:
        """Replace the notification and job-loss dates."""
