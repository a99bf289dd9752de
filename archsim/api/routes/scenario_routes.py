from __future__ import annotations

from flask import Blueprint, jsonify, request

from ...services.scenario_service import ScenarioService

scenario_routes = Blueprint("scenario_routes", __name__)


@scenario_routes.route("/api/scenarios", methods=["GET"])
def list_scenarios():
    scenarios = ScenarioService().list_scenarios()
    payload = [ScenarioService.serialize(scenario, include_graph=False) for scenario in scenarios]
    return jsonify({"scenarios": payload})


@scenario_routes.route("/api/scenarios", methods=["POST"])
def create_scenario():
    payload = request.get_json(silent=True) or {}
    result, status = ScenarioService().create(payload)
    return jsonify(result), status


@scenario_routes.route("/api/scenarios/<scenario_id>", methods=["GET"])
def get_scenario(scenario_id: str):
    scenario = ScenarioService().get(scenario_id)
    if not scenario:
        return jsonify({"error": "Scenario not found."}), 404
    return jsonify(ScenarioService.serialize(scenario))


@scenario_routes.route("/api/scenarios/<scenario_id>", methods=["DELETE"])
def delete_scenario(scenario_id: str):
    if not ScenarioService().delete(scenario_id):
        return jsonify({"error": "Scenario not found."}), 404
    return jsonify({"status": "deleted"})
