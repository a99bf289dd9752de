from __future__ import annotations

from typing import Dict, Optional

from ..core.errors import ArchSimError, GraphConfigurationError
from ..core.graph import Graph
from ..core.metrics_calculator import MetricsCalculator
from ..core.pricing import PricingTable
from .errors import Response, error_response
from .payloads import graph_payload


class MetricsService:
    def __init__(self, pricing: Optional[PricingTable] = None) -> None:
        self._calculator = MetricsCalculator(pricing) if pricing is not None else MetricsCalculator()

    def calculate(self, payload: Dict[str, object]) -> Response:
        try:
            graph = Graph.from_dict(graph_payload(payload, key="diagramContent"))
            metrics = self._calculator.calculate(graph)
        except ArchSimError as exc:
            return error_response(exc)
        return metrics.to_dict(), 200

    def what_if(self, payload: Dict[str, object]) -> Response:
        if not isinstance(payload, dict):
            payload = {}
        node_id = payload.get("nodeId")
        new_instance_count = payload.get("newInstanceCount")
        try:
            if not node_id:
                raise GraphConfigurationError(["nodeId is required."])
            graph = Graph.from_dict(graph_payload(payload, key="diagramContent"))
            metrics = self._calculator.what_if(graph, str(node_id), new_instance_count)
        except ArchSimError as exc:
            return error_response(exc)
        return metrics.to_dict(), 200
