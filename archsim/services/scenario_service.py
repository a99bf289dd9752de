from __future__ import annotations

from typing import Dict, List, Optional

from ..core.errors import GraphConfigurationError
from ..core.graph import Graph
from ..db.models import ScenarioRecord
from ..db.repository import ScenarioRepository
from .errors import Response, error_response
from .payloads import parse_uuid


class ScenarioService:
    def __init__(self, repository: Optional[ScenarioRepository] = None) -> None:
        self._repo = repository or ScenarioRepository()

    def create(self, payload: Dict[str, object]) -> Response:
        if not isinstance(payload, dict):
            payload = {}
        name = str(payload.get("name") or "Untitled Scenario").strip()
        graph_json = payload.get("graph")
        try:
            if not isinstance(graph_json, dict):
                raise GraphConfigurationError(["graph must be an object with nodes and edges."])
            Graph.from_dict(graph_json)
        except GraphConfigurationError as exc:
            return error_response(exc)

        description = payload.get("description")
        record = ScenarioRecord(
            name=name,
            description=str(description) if description is not None else None,
            graph_json=graph_json,
        )
        return self.serialize(self._repo.create(record)), 201

    def get(self, scenario_id: str) -> Optional[ScenarioRecord]:
        key = parse_uuid(scenario_id)
        if key is None:
            return None
        return self._repo.get(key)

    def list_scenarios(self) -> List[ScenarioRecord]:
        return self._repo.list_all()

    def delete(self, scenario_id: str) -> bool:
        key = parse_uuid(scenario_id)
        if key is None:
            return False
        return self._repo.delete(key)

    @staticmethod
    def serialize(scenario: ScenarioRecord, include_graph: bool = True) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "id": str(scenario.id),
            "name": scenario.name,
            "description": scenario.description,
            "createdAt": scenario.created_at.isoformat() if scenario.created_at else None,
            "updatedAt": scenario.updated_at.isoformat() if scenario.updated_at else None,
        }
        if include_graph:
            payload["graph"] = scenario.graph_json
        return payload
