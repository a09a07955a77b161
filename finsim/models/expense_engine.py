"""
Expense projection for the household simulation.

This module inflates the configured monthly expense items year over year and
applies the austerity multiplier to discretionary spending.
"""

from typing import Iterable

from pydantic import BaseModel, Field

from .scenario import ExpenseItem, MacroConfig


class ExpenseBreakdown(BaseModel):
    """Monthly expense totals for one simulation month."""

    mandatory_total: float = Field(..., ge=0, description="Mandatory expenses")
    discretionary_total: float = Field(
        ..., ge=0, description="Discretionary expenses after austerity"
    )
    total: float = Field(..., ge=0, description="Total monthly expenses")


class ExpenseProjector:
    """Projects monthly expenses for any simulation year."""

    def __init__(self, expenses: Iterable[ExpenseItem], macro: MacroConfig) -> None:
        """Initialize the projector.

        Args:
            expenses: Expense items (copied; the caller's list is not retained)
            macro: Macro assumptions providing the global inflation floor
        """
        self.expenses = tuple(expenses)
        self.inflation_rate = macro.inflation_rate

    def effective_rate(self, item: ExpenseItem) -> float:
        """An item grows at its own rate but never slower than inflation."""
        return max(self.inflation_rate, item.annual_increase_percent)

    def inflate(self, item: ExpenseItem, year_index: int) -> float:
        """Get an item's monthly amount in the given simulation year."""
        return item.amount * (1 + self.effective_rate(item) / 100) ** year_index

    def calculate(
        self, year_index: int, austerity_multiplier: float = 1.0
    ) -> ExpenseBreakdown:
        """
        Calculate monthly expenses for a simulation year.

        Args:
            year_index: Years elapsed since the simulation start (0-based)
            austerity_multiplier: Factor applied to discretionary spending

        Returns:
            ExpenseBreakdown with mandatory, discretionary and total amounts
        """
        mandatory_total = 0.0
        discretionary_total = 0.0

        for item in self.expenses:
            amount = self.inflate(item, year_index)
            if item.category == "MANDATORY":
                mandatory_total += amount
            else:
                discretionary_total += amount

        discretionary_total *= austerity_multiplier

        return ExpenseBreakdown(
            mandatory_total=mandatory_total,
            discretionary_total=discretionary_total,
            total=mandatory_total + discretionary_total,
        )
