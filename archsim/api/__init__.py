from __future__ import annotations

from .routes.comparison_routes import comparison_routes
from .routes.metrics_routes import metrics_routes
from .routes.scenario_routes import scenario_routes
from .routes.simulation_routes import simulation_routes


def register_routes(app) -> None:
    app.register_blueprint(simulation_routes)
    app.register_blueprint(metrics_routes)
    app.register_blueprint(scenario_routes)
    app.register_blueprint(comparison_routes)
