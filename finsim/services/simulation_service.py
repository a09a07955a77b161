"""
Simulation service for coordinating household simulation runs.

This service loads the simulation inputs from a repository, applies any
per-request overrides and runs the orchestrator, handling the flow from
stored configuration through to the final result.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from pydantic import TypeAdapter

from finsim.models.scenario import (
    ExpenseItem,
    IncomeConfig,
    MacroConfig,
    MortgageConfig,
    RiskSettings,
    ScenarioType,
)
from finsim.models.simulation.config import EnginePolicy
from finsim.models.simulation.orchestrator import SimulationOrchestrator
from finsim.models.simulation.result import SimulationResult
from finsim.storage.base import FinancialRepository

logger = logging.getLogger(__name__)

# Input sections and the type each one is validated against
SECTIONS: Dict[str, TypeAdapter] = {
    "expenses": TypeAdapter(List[ExpenseItem]),
    "income": TypeAdapter(IncomeConfig),
    "mortgage": TypeAdapter(MortgageConfig),
    "macro": TypeAdapter(MacroConfig),
    "scenario": TypeAdapter(ScenarioType),
    "risk_settings": TypeAdapter(RiskSettings),
}


class SimulationService:
    """Service for running simulations against stored inputs."""

    def __init__(
        self, repository: FinancialRepository, policy: Optional[EnginePolicy] = None
    ) -> None:
        """Initialize the simulation service.

        Args:
            repository: Store holding the six simulation inputs
            policy: Engine policy passed to every run
        """
        self.repository = repository
        self.orchestrator = SimulationOrchestrator(policy)
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def parse_section(section: str, payload: Any) -> Any:
        """Validate a raw payload for one input section.

        Args:
            section: Section name (see ``SECTIONS``)
            payload: JSON-decoded value

        Returns:
            The validated model, list of models or scenario

        Raises:
            KeyError: If the section is unknown
            pydantic.ValidationError: If the payload is invalid
        """
        return SECTIONS[section].validate_python(payload)

    def load_inputs(self) -> Dict[str, Any]:
        """Load every input section from the repository."""
        return {
            "expenses": self.repository.get_expenses(),
            "income": self.repository.get_income(),
            "mortgage": self.repository.get_mortgage(),
            "macro": self.repository.get_macro(),
            "scenario": self.repository.get_scenario(),
            "risk_settings": self.repository.get_risk_settings(),
        }

    def get_config(self) -> Dict[str, Any]:
        """Current inputs as JSON-ready data."""
        return {
            section: SECTIONS[section].dump_python(value, mode="json")
            for section, value in self.load_inputs().items()
        }

    def run_simulation(
        self, overrides: Optional[Mapping[str, Any]] = None
    ) -> SimulationResult:
        """Run a simulation on the stored inputs.

        Args:
            overrides: Optional already-validated replacements for any input
                section; they are used for this run only and never stored

        Returns:
            SimulationResult of the stored (or overridden) configuration
        """
        inputs = self.load_inputs()
        if overrides:
            unknown = set(overrides) - set(SECTIONS)
            if unknown:
                raise KeyError(f"Unknown sections: {sorted(unknown)}")
            inputs.update(overrides)

        self.logger.info(
            "Running %s simulation (deposito=%s)",
            ScenarioType(inputs["scenario"]).value,
            inputs["mortgage"].use_deposito,
        )
        return self.orchestrator.run(
            inputs["expenses"],
            inputs["income"],
            inputs["mortgage"],
            inputs["macro"],
            inputs["scenario"],
            inputs["risk_settings"],
        )

    def update_section(self, section: str, value: Any) -> SimulationResult:
        """Save one validated input section and re-run the simulation."""
        savers = {
            "expenses": self.repository.save_expenses,
            "income": self.repository.save_income,
            "mortgage": self.repository.save_mortgage,
            "macro": self.repository.save_macro,
            "scenario": self.repository.save_scenario,
            "risk_settings": self.repository.save_risk_settings,
        }
        savers[section](value)
        self.logger.debug("Updated %s", section)
        return self.run_simulation()

    def update_expenses(self, expenses: List[ExpenseItem]) -> SimulationResult:
        return self.update_section("expenses", expenses)

    def update_income(self, income: IncomeConfig) -> SimulationResult:
        return self.update_section("income", income)

    def update_mortgage(self, mortgage: MortgageConfig) -> SimulationResult:
        return self.update_section("mortgage", mortgage)

    def update_macro(self, macro: MacroConfig) -> SimulationResult:
        return self.update_section("macro", macro)

    def update_scenario(self, scenario: ScenarioType) -> SimulationResult:
        return self.update_section("scenario", scenario)

    def update_risk_settings(self, risk_settings: RiskSettings) -> SimulationResult:
        return self.update_section("risk_settings", risk_settings)
