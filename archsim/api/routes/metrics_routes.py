from __future__ import annotations

from flask import Blueprint, jsonify, request

from ...services.metrics_service import MetricsService

metrics_routes = Blueprint("metrics_routes", __name__)


@metrics_routes.route("/api/metrics/calculate", methods=["POST"])
def calculate_route():
    payload = request.get_json(silent=True) or {}
    result, status = MetricsService().calculate(payload)
    return jsonify(result), status


@metrics_routes.route("/api/metrics/what-if", methods=["POST"])
def what_if_route():
    payload = request.get_json(silent=True) or {}
    result, status = MetricsService().what_if(payload)
    return jsonify(result), status
