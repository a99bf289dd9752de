from __future__ import annotations

import threading
from typing import Dict, Optional

from ..config import Config
from ..core.critical_path import analyze_performance, calculate_longest_path_from_node, calculate_longest_paths
from ..core.errors import AnalysisCancelled, ArchSimError, GraphConfigurationError
from ..core.graph import Graph, validate_graph
from ..core.percentile_simulator import PercentileSimulator
from ..core.queueing import GaussianJitter, MM1QueueingModel, QuadraticOverloadModel, UniformJitter
from .errors import Response, error_response
from .payloads import float_option, graph_payload, int_option

JITTER_MODELS = {"uniform": UniformJitter, "gaussian": GaussianJitter}
QUEUEING_MODELS = {"mm1": MM1QueueingModel, "quadratic": QuadraticOverloadModel}


class SimulationService:
    def __init__(self, cancel_event: Optional[threading.Event] = None) -> None:
        self._cancel_event = cancel_event

    def validate_graph(self, payload: Dict[str, object]) -> Dict[str, object]:
        return validate_graph(graph_payload(payload))

    def longest_paths(self, payload: Dict[str, object]) -> Response:
        try:
            graph = Graph.from_dict(graph_payload(payload))
            results = calculate_longest_paths(graph, cancel_event=self._cancel_event)
        except AnalysisCancelled:
            return {"totalPaths": 0, "paths": [], "cancelled": True}, 200
        except ArchSimError as exc:
            return error_response(exc)
        return {"totalPaths": len(results), "paths": [result.to_dict() for result in results]}, 200

    def longest_path_from(self, node_id: str, payload: Dict[str, object]) -> Response:
        try:
            graph = Graph.from_dict(graph_payload(payload))
            result = calculate_longest_path_from_node(graph, node_id, cancel_event=self._cancel_event)
        except ArchSimError as exc:
            return error_response(exc)
        if result is None:
            return {"error": f"Node {node_id} not found or no valid path exists."}, 404
        return result.to_dict(), 200

    def analyze(self, payload: Dict[str, object]) -> Response:
        try:
            graph = Graph.from_dict(graph_payload(payload))
            analysis = analyze_performance(graph, cancel_event=self._cancel_event)
        except ArchSimError as exc:
            return error_response(exc)
        if analysis is None:
            return {"message": "No valid paths found in the system."}, 200
        return analysis.to_dict(), 200

    def percentiles(self, node_id: str, payload: Dict[str, object]) -> Response:
        try:
            graph = Graph.from_dict(graph_payload(payload))
            simulator = self._simulator(payload if isinstance(payload, dict) else {})
            result = simulator.run(graph, node_id, cancel_event=self._cancel_event)
        except ArchSimError as exc:
            return error_response(exc)
        if result is None:
            return {"error": f"Node {node_id} not found."}, 404
        return result.to_dict(), 200

    @staticmethod
    def _simulator(options: Dict[str, object]) -> PercentileSimulator:
        jitter_factor = float_option(options, "jitterFactor", Config.JITTER_FACTOR)
        jitter_name = str(options.get("jitterDistribution", "uniform")).lower()
        queue_name = str(options.get("queueingModel", "mm1")).lower()
        if jitter_name not in JITTER_MODELS:
            raise GraphConfigurationError([f"jitterDistribution must be one of: {', '.join(sorted(JITTER_MODELS))}."])
        if queue_name not in QUEUEING_MODELS:
            raise GraphConfigurationError([f"queueingModel must be one of: {', '.join(sorted(QUEUEING_MODELS))}."])
        jitter_cls = JITTER_MODELS[jitter_name]
        queue_cls = QUEUEING_MODELS[queue_name]
        return PercentileSimulator(
            trials=int_option(options, "trials", Config.SIMULATION_TRIALS, minimum=1, maximum=Config.MAX_TRIALS),
            jitter=jitter_cls(jitter_factor),
            queueing=queue_cls(),
            burst_factor=float_option(options, "burstFactor", Config.BURST_FACTOR),
            utilization_threshold=float_option(options, "utilizationThreshold", Config.UTILIZATION_THRESHOLD),
            concurrent_requests=int_option(options, "concurrentRequests", 1, minimum=1),
            workers=int_option(options, "workers", Config.SIMULATION_WORKERS, minimum=1, maximum=Config.MAX_WORKERS),
            seed=int_option(options, "seed", None),
        )
