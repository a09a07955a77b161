"""Health check blueprint."""

from flask import Blueprint, Response, current_app, jsonify

health_bp = Blueprint("health", __name__)


@health_bp.route("/healthz")
def health_check() -> Response:
    """Health check endpoint.

    Returns:
        JSON response with status and the simulation horizon in months
    """
    service = current_app.extensions["simulation_service"]
    return jsonify(
        {
            "status": "ok",
            "horizon_months": service.orchestrator.policy.horizon_months,
        }
    )
