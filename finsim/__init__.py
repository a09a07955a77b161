"""Household Financial Simulator Flask Application Factory."""

import logging
from typing import Optional

from flask import Flask

from finsim.config import get_engine_policy, get_global_settings
from finsim.services.simulation_service import SimulationService
from finsim.storage.base import FinancialRepository
from finsim.storage.memory import InMemoryFinancialRepository


def create_app(
    config_name: Optional[str] = None,
    repository: Optional[FinancialRepository] = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        config_name: Configuration name (development, testing, production)
        repository: Configuration repository; an in-memory one seeded with
            the default household is used when omitted

    Returns:
        Flask: Configured Flask application instance
    """
    app = Flask(__name__)

    # Configuration from Pydantic Settings
    settings = get_global_settings()
    app.config["SECRET_KEY"] = settings.secret_key
    app.config["ENV"] = settings.flask_env
    app.config["DEBUG"] = settings.app_env == "development"
    app.config["TESTING"] = (config_name or settings.app_env) == "testing"

    logging.basicConfig(level=settings.log_level)

    # Simulation service shared by the request handlers
    app.extensions["simulation_service"] = SimulationService(
        repository or InMemoryFinancialRepository(),
        policy=get_engine_policy(settings),
    )

    # Register blueprints
    from finsim.blueprints.health import health_bp
    from finsim.blueprints.simulation import simulation_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(simulation_bp)

    return app
