from __future__ import annotations

from flask import Blueprint, jsonify, request

from ...services.comparison_service import ComparisonService

comparison_routes = Blueprint("comparison_routes", __name__)


@comparison_routes.route("/api/comparison", methods=["POST"])
def compare_route():
    payload = request.get_json(silent=True) or {}
    result, status = ComparisonService().compare(payload)
    return jsonify(result), status
