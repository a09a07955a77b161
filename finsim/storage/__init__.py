"""
Storage module for simulation inputs.

This module provides a unified interface for loading and saving the six
inputs of a simulation run (expenses, income, mortgage, macro assumptions,
scenario and risk dates).
"""

from .base import FinancialRepository, RepositoryError
from .memory import InMemoryFinancialRepository

__all__ = [
    "FinancialRepository",
    "RepositoryError",
    "InMemoryFinancialRepository",
]
