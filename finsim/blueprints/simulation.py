"""
Simulation blueprint for the household financial simulator.

This module provides API endpoints for reading the stored simulation inputs,
running a simulation with optional per-request overrides, and saving a single
input section.
"""

from typing import Any

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from finsim.services.simulation_service import SECTIONS, SimulationService
from finsim.storage.base import RepositoryError

simulation_bp = Blueprint("simulation", __name__, url_prefix="/api/simulation")


def _service() -> SimulationService:
    return current_app.extensions["simulation_service"]


def _validation_error(e: ValidationError) -> Any:
    return (
        jsonify(
            {
                "error": "Invalid configuration",
                "details": e.errors(include_url=False, include_context=False),
            }
        ),
        400,
    )


@simulation_bp.route("/config", methods=["GET"])
def get_config() -> Any:
    """Get the stored simulation inputs.

    Returns:
        JSON response with one entry per input section
    """
    try:
        return jsonify(_service().get_config()), 200
    except RepositoryError as e:
        current_app.logger.error(f"Error loading configuration: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@simulation_bp.route("/run", methods=["POST"])
def run_simulation() -> Any:
    """Run a simulation.

    The optional JSON body may hold any of the input sections; they replace
    the stored values for this run only.

    Returns:
        JSON response with the full simulation result
    """
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    unknown = sorted(set(data) - set(SECTIONS))
    if unknown:
        return jsonify({"error": f"Unknown sections: {unknown}"}), 400

    try:
        overrides = {
            section: SimulationService.parse_section(section, payload)
            for section, payload in data.items()
        }
    except ValidationError as e:
        return _validation_error(e)

    try:
        result = _service().run_simulation(overrides)
    except Exception as e:
        current_app.logger.error(f"Error running simulation: {str(e)}")
        return jsonify({"error": "Simulation failed", "message": str(e)}), 500

    return jsonify(result.to_dict()), 200


@simulation_bp.route("/config/<section>", methods=["PUT"])
def update_section(section: str) -> Any:
    """Save one input section and re-run the simulation.

    Args:
        section: Name of the input section to replace

    Returns:
        JSON response with the fresh simulation result
    """
    if section not in SECTIONS:
        return jsonify({"error": f"Unknown section: {section}"}), 404

    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "Request body must be JSON"}), 400

    try:
        value = SimulationService.parse_section(section, data)
    except ValidationError as e:
        return _validation_error(e)

    try:
        result = _service().update_section(section, value)
    except RepositoryError as e:
        current_app.logger.error(f"Error saving {section}: {str(e)}")
        return jsonify({"error": "Could not save configuration"}), 500
    except Exception as e:
        current_app.logger.error(f"Error running simulation: {str(e)}")
        return jsonify({"error": "Simulation failed", "message": str(e)}), 500

    return jsonify(result.to_dict()), 200
