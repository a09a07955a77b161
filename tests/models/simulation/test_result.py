"""
Tests for simulation result models.

This module tests the SimulationResult container including:
- Month lookup and column extraction
- Yearly aggregation with numpy
- Immutability of month records
- JSON-ready serialization
"""

import json

import numpy as np
import pytest
from pydantic import ValidationError

from finsim.models.scenario import ScenarioType
from finsim.models.simulation.config import EnginePolicy
from finsim.models.simulation.orchestrator import run_simulation
from finsim.models.simulation.result import SimulationResult


def simulate(default_inputs, horizon_months=240):
    return run_simulation(
        default_inputs["expenses"],
        default_inputs["income"],
        default_inputs["mortgage"],
        default_inputs["macro"],
        ScenarioType.UNEMPLOYED,
        default_inputs["risk_settings"],
        policy=EnginePolicy(horizon_months=horizon_months),
    )


@pytest.fixture
def result(default_inputs):
    return simulate(default_inputs)


class TestSimulationResult:
    """Test cases for SimulationResult helpers."""

    def test_get_month(self, result):
        assert result.get_month(5).month_index == 5

    @pytest.mark.parametrize("month_index", [-1, 240])
    def test_get_month_out_of_range(self, result, month_index):
        with pytest.raises(ValueError, match="outside the simulation range"):
            result.get_month(month_index)

    def test_column(self, result):
        column = result.column("total_income")

        assert column.shape == (240,)
        assert column[0] == pytest.approx(result.logs[0].total_income)

    def test_yearly_totals(self, result):
        totals = result.yearly_totals()

        assert totals["total_income"].shape == (20,)
        assert totals["net_flow"].sum() == pytest.approx(result.column("net_flow").sum())
        assert totals["total_income"][0] == pytest.approx(
            sum(r.total_income for r in result.logs[:12])
        )
        assert totals["mortgage_balance"][1] == pytest.approx(
            result.logs[23].mortgage_balance
        )
        assert totals["total_liquid"][-1] == pytest.approx(result.logs[-1].total_liquid)

    def test_yearly_totals_partial_final_year(self, default_inputs):
        result = simulate(default_inputs, horizon_months=18)
        totals = result.yearly_totals()

        assert totals["total_expenses"].shape == (2,)
        assert totals["total_expenses"][1] == pytest.approx(
            sum(r.total_expenses for r in result.logs[12:])
        )
        assert totals["total_liquid"][1] == pytest.approx(result.logs[17].total_liquid)

    def test_month_records_are_immutable(self, result):
        with pytest.raises(ValidationError):
            result.logs[0].net_flow = 0.0

    def test_extra_fields_are_rejected(self, result):
        data = result.model_dump()
        data["unexpected"] = True

        with pytest.raises(ValidationError):
            SimulationResult(**data)

    def test_to_dict_is_json_ready(self, result):
        data = result.to_dict()
        encoded = json.loads(json.dumps(data))

        assert len(encoded["logs"]) == 240
        assert encoded["logs"][0]["month_date"] == "2026-01-01"
        assert encoded["logs"][0]["risk_level"] in {"LOW", "MEDIUM", "HIGH"}
        assert set(encoded["summary"]) >= {
            "risk_level",
            "risk_reason",
            "mortgage_payoff_date",
            "max_job_search_months",
        }
        assert set(encoded["impact_analysis"]) == {
            "cash_strategy",
            "deposito_strategy",
            "net_benefit",
            "months_saved",
            "is_payoff_achieved_faster",
        }

    def test_round_trip_through_model_validate(self, result):
        restored = SimulationResult.model_validate(result.to_dict())

        assert restored.summary == result.summary
        assert np.allclose(restored.column("net_flow"), result.column("net_flow"))
