from __future__ import annotations

from flask import Blueprint, jsonify, request

from ...services.simulation_service import SimulationService

simulation_routes = Blueprint("simulation_routes", __name__)


@simulation_routes.route("/api/validate", methods=["POST"])
def validate_route():
    payload = request.get_json(silent=True) or {}
    result = SimulationService().validate_graph(payload)
    return jsonify(result)


@simulation_routes.route("/api/simulation/longest-paths", methods=["POST"])
def longest_paths_route():
    payload = request.get_json(silent=True) or {}
    result, status = SimulationService().longest_paths(payload)
    return jsonify(result), status


@simulation_routes.route("/api/simulation/longest-path/<node_id>", methods=["POST"])
def longest_path_route(node_id: str):
    payload = request.get_json(silent=True) or {}
    result, status = SimulationService().longest_path_from(node_id, payload)
    return jsonify(result), status


@simulation_routes.route("/api/simulation/analyze", methods=["POST"])
def analyze_route():
    payload = request.get_json(silent=True) or {}
    result, status = SimulationService().analyze(payload)
    return jsonify(result), status


@simulation_routes.route("/api/simulation/percentiles/<node_id>", methods=["POST"])
def percentiles_route(node_id: str):
    payload = request.get_json(silent=True) or {}
    result, status = SimulationService().percentiles(node_id, payload)
    return jsonify(result), status
