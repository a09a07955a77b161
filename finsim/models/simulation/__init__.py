"""
Simulation orchestration module.

This module provides the monthly household simulation orchestrator and the
models it consumes and produces.

Key Components:
- config: Pydantic policy model holding every engine constant
- result: Month records, summary, impact analysis and the SimulationResult
- orchestrator: Runs the main pass and the deposito-flipped shadow pass

Submodules are imported explicitly (``from finsim.models.simulation.result
import ...``) because the engines in ``finsim.models`` depend on ``config``.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import EnginePolicy
    from .orchestrator import SimulationOrchestrator, run_simulation
    from .result import (
        ImpactAnalysis,
        MonthRecord,
        SimulationResult,
        SimulationSummary,
        StrategySnapshot,
    )

__all__ = [
    "EnginePolicy",
    "SimulationOrchestrator",
    "run_simulation",
    "ImpactAnalysis",
    "MonthRecord",
    "SimulationResult",
    "SimulationSummary",
    "StrategySnapshot",
]
