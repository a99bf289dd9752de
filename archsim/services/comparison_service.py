from __future__ import annotations

import threading
from typing import Dict, Optional

from ..core.comparator import Scenario, ScenarioComparator
from ..core.errors import ArchSimError, GraphConfigurationError, ScenarioNotFoundError
from ..core.graph import Graph
from ..core.pricing import PricingTable
from ..db.repository import ScenarioRepository
from .errors import Response, error_response
from .payloads import parse_uuid


class ComparisonService:
    def __init__(
        self,
        repository: Optional[ScenarioRepository] = None,
        pricing: Optional[PricingTable] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self._repo = repository or ScenarioRepository()
        self._comparator = ScenarioComparator(pricing) if pricing is not None else ScenarioComparator()
        self._cancel_event = cancel_event

    def compare(self, payload: Dict[str, object]) -> Response:
        ids = payload.get("scenarioIds") if isinstance(payload, dict) else None
        if not isinstance(ids, list) or len(ids) != 2:
            return {"error": "scenarioIds must contain exactly two scenario ids."}, 400
        return self.compare_scenarios(str(ids[0]), str(ids[1]))

    def compare_scenarios(self, scenario1_id: str, scenario2_id: str) -> Response:
        try:
            baseline = self._load(scenario1_id)
            candidate = self._load(scenario2_id)
            result = self._comparator.compare(baseline, candidate, cancel_event=self._cancel_event)
        except ArchSimError as exc:
            return error_response(exc)
        return result.to_dict(), 200

    def _load(self, scenario_id: str) -> Scenario:
        key = parse_uuid(scenario_id)
        record = self._repo.get(key) if key is not None else None
        if record is None:
            raise ScenarioNotFoundError(scenario_id)
        try:
            graph = Graph.from_dict(record.graph_json or {})
        except GraphConfigurationError as exc:
            raise GraphConfigurationError([f"Scenario {scenario_id}: {error}" for error in exc.errors]) from exc
        return Scenario(id=str(record.id), name=record.name, graph=graph)
