from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Mapping, Optional, Tuple

from ..config import Config
from .errors import AnalysisCancelled, UnsupportedTopologyError
from .graph.model import Adjacency, Graph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Path:
    nodes: Tuple[str, ...]
    latency_ms: float

    def extend(self, node_id: str, latency_ms: float) -> "Path":
        return Path(nodes=self.nodes + (node_id,), latency_ms=latency_ms)


@dataclass(frozen=True)
class SimulationResult:
    entry_node_id: str
    end_node_id: str
    path: Tuple[str, ...]
    total_latency_ms: float
    path_length: int
    summary: str

    @classmethod
    def from_path(cls, entry_node_id: str, end_node_id: str, path: Path) -> "SimulationResult":
        return cls(
            entry_node_id=entry_node_id,
            end_node_id=end_node_id,
            path=path.nodes,
            total_latency_ms=path.latency_ms,
            path_length=len(path.nodes),
            summary=(
                f"Longest path from {entry_node_id} to {end_node_id}: "
                f"{len(path.nodes)} nodes, {path.latency_ms:.2f}ms total latency"
            ),
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "entryNodeId": self.entry_node_id,
            "endNodeId": self.end_node_id,
            "path": list(self.path),
            "totalLatencyMs": self.total_latency_ms,
            "pathLength": self.path_length,
            "summary": self.summary,
        }


@dataclass(frozen=True)
class PerformanceAnalysis:
    total_nodes: int
    total_edges: int
    critical_path: SimulationResult
    paths: Tuple[SimulationResult, ...]

    @property
    def average_latency_ms(self) -> float:
        return sum(result.total_latency_ms for result in self.paths) / len(self.paths)

    @property
    def max_latency_ms(self) -> float:
        return max(result.total_latency_ms for result in self.paths)

    @property
    def min_latency_ms(self) -> float:
        return min(result.total_latency_ms for result in self.paths)

    def to_dict(self) -> Dict[str, object]:
        critical = self.critical_path
        return {
            "systemOverview": {
                "totalNodes": self.total_nodes,
                "totalEdges": self.total_edges,
                "entryPointsCount": len(self.paths),
            },
            "criticalPath": {
                "from": critical.entry_node_id,
                "to": critical.end_node_id,
                "totalLatencyMs": critical.total_latency_ms,
                "path": list(critical.path),
                "pathLength": critical.path_length,
            },
            "statistics": {
                "averagePathLatencyMs": self.average_latency_ms,
                "maxPathLatencyMs": self.max_latency_ms,
                "minPathLatencyMs": self.min_latency_ms,
                "totalPaths": len(self.paths),
            },
            "allPaths": [
                {
                    "entryNodeId": result.entry_node_id,
                    "endNodeId": result.end_node_id,
                    "latencyMs": result.total_latency_ms,
                    "nodeCount": result.path_length,
                }
                for result in self.paths
            ],
        }


def ensure_acyclic(graph: Graph, start_id: Optional[str] = None) -> None:
    cycle = graph.find_cycle(start_id)
    if cycle:
        logger.warning("Rejecting cyclic topology: %s", " -> ".join(cycle))
        raise UnsupportedTopologyError(f"Graph contains a cycle: {' -> '.join(cycle)}.")


def relax_longest_paths(
    graph: Graph,
    start_id: str,
    adjacency: Optional[Adjacency] = None,
    node_latencies: Optional[Mapping[str, float]] = None,
    cancel_event: Optional[threading.Event] = None,
    max_relaxations: Optional[int] = None,
) -> Dict[str, Path]:
    """Longest known path to every node reachable from ``start_id``.

    A target is re-enqueued only on a strictly longer path, so the first path
    found wins ties. ``node_latencies`` overrides declared node latencies.
    """
    start = graph.node(start_id)
    if start is None:
        return {}
    adjacency = graph.adjacency() if adjacency is None else adjacency
    budget = Config.MAX_RELAXATIONS if max_relaxations is None else max_relaxations

    def latency_of(node_id: str) -> float:
        if node_latencies is not None and node_id in node_latencies:
            return node_latencies[node_id]
        return graph.node(node_id).latency_ms

    seed = Path(nodes=(start_id,), latency_ms=latency_of(start_id))
    longest: Dict[str, Path] = {start_id: seed}
    queue: Deque[Path] = deque([seed])
    relaxations = 0

    while queue:
        if cancel_event is not None and cancel_event.is_set():
            raise AnalysisCancelled(f"Path analysis from {start_id} was cancelled.")
        relaxations += 1
        if relaxations > budget:
            raise UnsupportedTopologyError(
                f"Path analysis from {start_id} exceeded {budget} relaxations."
            )
        current = queue.popleft()
        for edge in adjacency.get(current.nodes[-1], []):
            latency = current.latency_ms + edge.latency_ms + latency_of(edge.target)
            best = longest.get(edge.target)
            if best is None or latency > best.latency_ms:
                candidate = current.extend(edge.target, latency)
                longest[edge.target] = candidate
                queue.append(candidate)

    logger.debug("Relaxed %d paths from %s", relaxations, start_id)
    return longest


def pick_terminal(graph: Graph, longest: Mapping[str, Path], adjacency: Adjacency) -> Optional[Tuple[str, Path]]:
    best: Optional[Tuple[str, Path]] = None
    for node in graph.terminal_nodes(adjacency):
        path = longest.get(node.id)
        if path is None:
            continue
        if best is None or path.latency_ms > best[1].latency_ms:
            best = (node.id, path)
    return best


def calculate_longest_path_from_node(
    graph: Graph,
    start_id: str,
    cancel_event: Optional[threading.Event] = None,
    max_relaxations: Optional[int] = None,
) -> Optional[SimulationResult]:
    if graph.node(start_id) is None:
        return None
    ensure_acyclic(graph, start_id)
    adjacency = graph.adjacency()
    longest = relax_longest_paths(
        graph,
        start_id,
        adjacency=adjacency,
        cancel_event=cancel_event,
        max_relaxations=max_relaxations,
    )
    terminal = pick_terminal(graph, longest, adjacency)
    if terminal is None:
        return None
    end_id, path = terminal
    return SimulationResult.from_path(start_id, end_id, path)


def calculate_longest_paths(
    graph: Graph,
    cancel_event: Optional[threading.Event] = None,
    max_relaxations: Optional[int] = None,
) -> List[SimulationResult]:
    results: List[SimulationResult] = []
    for entry in graph.entry_nodes():
        result = calculate_longest_path_from_node(
            graph, entry.id, cancel_event=cancel_event, max_relaxations=max_relaxations
        )
        if result is not None:
            results.append(result)
    return results


def critical_path(results: List[SimulationResult]) -> Optional[SimulationResult]:
    if not results:
        return None
    return max(results, key=lambda result: result.total_latency_ms)


def analyze_performance(
    graph: Graph,
    cancel_event: Optional[threading.Event] = None,
) -> Optional[PerformanceAnalysis]:
    results = calculate_longest_paths(graph, cancel_event=cancel_event)
    critical = critical_path(results)
    if critical is None:
        return None
    return PerformanceAnalysis(
        total_nodes=len(graph.nodes),
        total_edges=len(graph.edges),
        critical_path=critical,
        paths=tuple(results),
    )
