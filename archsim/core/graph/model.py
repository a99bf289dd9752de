from __future__ import annotations

import enum
import math
from collections import defaultdict
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..errors import GraphConfigurationError


class NodeCategory(str, enum.Enum):
    ENTRY_POINT = "EntryPoint"
    TRAFFIC_MANAGER = "TrafficManager"
    COMPUTE = "Compute"
    STORAGE = "Storage"
    MIDDLEWARE = "Middleware"

    @classmethod
    def parse(cls, value: object) -> "NodeCategory":
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower().replace(" ", "").replace("_", "")
        for category in cls:
            if category.value.lower() == key:
                return category
        raise ValueError(f"Unknown node category: {value!r}.")


def _number(data: Mapping[str, object], key: str, default: Optional[float] = None) -> Optional[float]:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValueError(f"{key} must be a number.")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be a number.") from exc
    if math.isnan(number) or math.isinf(number):
        raise ValueError(f"{key} must be a finite number.")
    return number


def _section(data: Mapping[str, object], key: str) -> Optional[Mapping[str, object]]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ValueError(f"{key} must be an object.")
    return value


@dataclass(frozen=True)
class NodeSpecs:
    latency_base: float = 0.0
    max_throughput: float = 1000.0
    reliability: float = 0.99

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "NodeSpecs":
        return cls(
            latency_base=_number(data, "latencyBase", 0.0),
            max_throughput=_number(data, "maxThroughput", 1000.0),
            reliability=_number(data, "reliability", 0.99),
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "latencyBase": self.latency_base,
            "maxThroughput": self.max_throughput,
            "reliability": self.reliability,
        }


@dataclass(frozen=True)
class TechnicalProps:
    instance_count: Optional[int] = None
    is_clustered: bool = False
    backup_policy: Optional[str] = None
    region: Optional[str] = None
    additional_props: Dict[str, object] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "TechnicalProps":
        instance_count = _number(data, "instanceCount")
        if instance_count is not None and instance_count != int(instance_count):
            raise ValueError("instanceCount must be a whole number.")
        extras = data.get("additionalProps") or {}
        if not isinstance(extras, Mapping):
            raise ValueError("additionalProps must be an object.")
        backup_policy = data.get("backupPolicy")
        region = data.get("region")
        return cls(
            instance_count=int(instance_count) if instance_count is not None else None,
            is_clustered=bool(data.get("isClustered", False)),
            backup_policy=str(backup_policy) if backup_policy is not None else None,
            region=str(region) if region is not None else None,
            additional_props=dict(extras),
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "instanceCount": self.instance_count,
            "isClustered": self.is_clustered,
            "backupPolicy": self.backup_policy,
            "region": self.region,
            "additionalProps": dict(self.additional_props),
        }


@dataclass(frozen=True)
class SimulationProps:
    processing_time_ms: float = 0.0
    failure_rate: float = 0.0
    queue_size: Optional[int] = None
    current_load: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "SimulationProps":
        queue_size = _number(data, "queueSize")
        return cls(
            processing_time_ms=_number(data, "processingTimeMs", 0.0),
            failure_rate=_number(data, "failureRate", 0.0),
            queue_size=int(queue_size) if queue_size is not None else None,
            current_load=_number(data, "currentLoad"),
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "processingTimeMs": self.processing_time_ms,
            "failureRate": self.failure_rate,
            "queueSize": self.queue_size,
            "currentLoad": self.current_load,
        }


@dataclass(frozen=True)
class Node:
    id: str
    category: NodeCategory
    specs: NodeSpecs = field(default_factory=NodeSpecs)
    type: str = ""
    label: str = ""
    props: Optional[TechnicalProps] = None
    simulation: Optional[SimulationProps] = None
    entry_point: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "Node":
        node_id = str(data.get("id") or "").strip()
        if not node_id:
            raise ValueError("Each node must include a non-empty id.")
        metadata = _section(data, "metadata") or {}
        try:
            specs = _section(metadata, "specs")
            props = _section(metadata, "props")
            simulation = _section(metadata, "simulation")
            return cls(
                id=node_id,
                category=NodeCategory.parse(metadata.get("category")),
                specs=NodeSpecs.from_dict(specs) if specs is not None else NodeSpecs(),
                type=str(data.get("type") or ""),
                label=str(metadata.get("label") or node_id),
                props=TechnicalProps.from_dict(props) if props is not None else None,
                simulation=SimulationProps.from_dict(simulation) if simulation is not None else None,
                entry_point=bool(data.get("isEntryPoint", False)),
            )
        except ValueError as exc:
            raise ValueError(f"Node {node_id}: {exc}") from exc

    def to_dict(self) -> Dict[str, object]:
        metadata: Dict[str, object] = {
            "label": self.display_name,
            "category": self.category.value,
            "specs": self.specs.to_dict(),
        }
        if self.props is not None:
            metadata["props"] = self.props.to_dict()
        if self.simulation is not None:
            metadata["simulation"] = self.simulation.to_dict()
        return {
            "id": self.id,
            "type": self.type,
            "isEntryPoint": self.entry_point,
            "metadata": metadata,
        }

    @property
    def display_name(self) -> str:
        return self.label or self.id

    @property
    def is_entry_point(self) -> bool:
        return self.entry_point or self.category is NodeCategory.ENTRY_POINT

    @property
    def latency_ms(self) -> float:
        return self.specs.latency_base

    @property
    def capacity(self) -> float:
        return self.specs.max_throughput

    @property
    def instance_count(self) -> int:
        if self.props is None or self.props.instance_count is None:
            return 1
        return self.props.instance_count

    @property
    def failure_rate(self) -> Optional[float]:
        return self.simulation.failure_rate if self.simulation is not None else None

    @property
    def processing_time_ms(self) -> float:
        if self.simulation is not None and self.simulation.processing_time_ms > 0:
            return self.simulation.processing_time_ms
        return self.latency_ms

    def with_instance_count(self, instance_count: int) -> "Node":
        props = self.props or TechnicalProps()
        return replace(self, props=replace(props, instance_count=instance_count))

    def problems(self) -> List[str]:
        prefix = f"Node {self.id}"
        problems: List[str] = []
        if self.specs.latency_base < 0:
            problems.append(f"{prefix}: latencyBase must be >= 0.")
        if self.specs.max_throughput <= 0:
            problems.append(f"{prefix}: maxThroughput must be > 0.")
        if not 0 <= self.specs.reliability <= 1:
            problems.append(f"{prefix}: reliability must be between 0 and 1.")
        if self.props is not None and self.props.instance_count is not None and self.props.instance_count < 1:
            problems.append(f"{prefix}: instanceCount must be >= 1.")
        if self.simulation is not None:
            if self.simulation.processing_time_ms < 0:
                problems.append(f"{prefix}: processingTimeMs must be >= 0.")
            if not 0 <= self.simulation.failure_rate <= 1:
                problems.append(f"{prefix}: failureRate must be between 0 and 1.")
            if self.simulation.queue_size is not None and self.simulation.queue_size < 0:
                problems.append(f"{prefix}: queueSize must be >= 0.")
            if self.simulation.current_load is not None and not 0 <= self.simulation.current_load <= 1:
                problems.append(f"{prefix}: currentLoad must be between 0 and 1.")
        return problems


@dataclass(frozen=True)
class EdgeData:
    protocol: str = "HTTP"
    auth: Optional[str] = None
    traffic_weight: float = 1.0
    network_latency: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "EdgeData":
        auth = data.get("auth")
        return cls(
            protocol=str(data.get("protocol") or "HTTP"),
            auth=str(auth) if auth is not None else None,
            traffic_weight=_number(data, "trafficWeight", 1.0),
            network_latency=_number(data, "networkLatency", 0.0),
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "protocol": self.protocol,
            "auth": self.auth,
            "trafficWeight": self.traffic_weight,
            "networkLatency": self.network_latency,
        }


@dataclass(frozen=True)
class Edge:
    id: str
    source: str
    target: str
    label: Optional[str] = None
    data: Optional[EdgeData] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object], index: int = 0) -> "Edge":
        source = str(data.get("source") or "").strip()
        target = str(data.get("target") or "").strip()
        edge_id = str(data.get("id") or f"{source}->{target}#{index}")
        payload = _section(data, "data")
        label = data.get("label")
        try:
            edge_data = EdgeData.from_dict(payload) if payload is not None else None
        except ValueError as exc:
            raise ValueError(f"Edge {edge_id}: {exc}") from exc
        return cls(
            id=edge_id,
            source=source,
            target=target,
            label=str(label) if label is not None else None,
            data=edge_data,
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "label": self.label,
            "data": self.data.to_dict() if self.data is not None else None,
        }

    @property
    def latency_ms(self) -> float:
        return self.data.network_latency if self.data is not None else 0.0


Adjacency = Dict[str, List[Edge]]


@dataclass(frozen=True)
class Graph:
    """Immutable diagram snapshot. Construction rejects malformed input."""

    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()
    _node_map: Dict[str, Node] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))
        errors = structural_errors(self.nodes, self.edges)
        if errors:
            raise GraphConfigurationError(errors)
        object.__setattr__(self, "_node_map", {node.id: node for node in self.nodes})

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "Graph":
        if not isinstance(data, Mapping):
            raise GraphConfigurationError(["Graph must be an object."])
        errors: List[str] = []
        raw_nodes = data.get("nodes") or []
        raw_edges = data.get("edges") or []
        if not isinstance(raw_nodes, Sequence) or not isinstance(raw_edges, Sequence):
            raise GraphConfigurationError(["Graph nodes and edges must be lists."])

        nodes: List[Node] = []
        for raw in raw_nodes:
            try:
                if not isinstance(raw, Mapping):
                    raise ValueError("Each node must be an object.")
                nodes.append(Node.from_dict(raw))
            except ValueError as exc:
                errors.append(str(exc))

        edges: List[Edge] = []
        for index, raw in enumerate(raw_edges):
            try:
                if not isinstance(raw, Mapping):
                    raise ValueError("Each edge must be an object.")
                edges.append(Edge.from_dict(raw, index))
            except ValueError as exc:
                errors.append(str(exc))

        if errors:
            # Surface structural problems alongside field problems in one report.
            errors.extend(structural_errors(nodes, edges))
            raise GraphConfigurationError(errors)
        return cls(nodes=tuple(nodes), edges=tuple(edges))

    def to_dict(self) -> Dict[str, object]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._node_map

    def node(self, node_id: str) -> Optional[Node]:
        return self._node_map.get(node_id)

    def adjacency(self) -> Adjacency:
        adjacency: Adjacency = defaultdict(list)
        for edge in self.edges:
            adjacency[edge.source].append(edge)
        return dict(adjacency)

    def incoming_counts(self) -> Dict[str, int]:
        counts = {node.id: 0 for node in self.nodes}
        for edge in self.edges:
            counts[edge.target] += 1
        return counts

    def entry_nodes(self) -> List[Node]:
        counts = self.incoming_counts()
        return [node for node in self.nodes if node.is_entry_point or counts[node.id] == 0]

    def terminal_nodes(self, adjacency: Optional[Adjacency] = None) -> List[Node]:
        adjacency = self.adjacency() if adjacency is None else adjacency
        return [node for node in self.nodes if not adjacency.get(node.id)]

    def reachable_from(self, start_id: str, adjacency: Optional[Adjacency] = None) -> List[str]:
        """Node ids reachable from ``start_id`` in breadth-first order, start included."""
        if start_id not in self._node_map:
            return []
        adjacency = self.adjacency() if adjacency is None else adjacency
        seen = {start_id}
        ordered = [start_id]
        index = 0
        while index < len(ordered):
            for edge in adjacency.get(ordered[index], []):
                if edge.target not in seen:
                    seen.add(edge.target)
                    ordered.append(edge.target)
            index += 1
        return ordered

    def find_cycle(self, start_id: Optional[str] = None) -> List[str]:
        """Return one cycle as a closed list of node ids, or an empty list.

        Iterative three-colour DFS so deep diagrams cannot exhaust the stack.
        With ``start_id`` only the subgraph reachable from that node is searched.
        """
        adjacency = self.adjacency()
        roots: Iterable[str] = [start_id] if start_id is not None else [node.id for node in self.nodes]
        visiting: Dict[str, int] = {}
        done = set()
        for root in roots:
            if root in done or root not in self._node_map:
                continue
            stack: List[Tuple[str, int]] = [(root, 0)]
            trail: List[str] = [root]
            visiting[root] = 0
            while stack:
                node_id, position = stack[-1]
                edges = adjacency.get(node_id, [])
                if position < len(edges):
                    stack[-1] = (node_id, position + 1)
                    target = edges[position].target
                    if target in visiting:
                        return trail[visiting[target]:] + [target]
                    if target not in done:
                        visiting[target] = len(trail)
                        trail.append(target)
                        stack.append((target, 0))
                    continue
                stack.pop()
                trail.pop()
                del visiting[node_id]
                done.add(node_id)
        return []

    def with_instance_count(self, node_id: str, instance_count: int) -> "Graph":
        nodes = tuple(
            node.with_instance_count(instance_count) if node.id == node_id else node for node in self.nodes
        )
        return Graph(nodes=nodes, edges=self.edges)


def structural_errors(nodes: Sequence[Node], edges: Sequence[Edge]) -> List[str]:
    errors: List[str] = []
    seen = set()
    for node in nodes:
        if not node.id:
            errors.append("Each node must include a non-empty id.")
            continue
        if node.id in seen:
            errors.append(f"Duplicate node id: {node.id}.")
        seen.add(node.id)
        errors.extend(node.problems())

    for edge in edges:
        if edge.source not in seen or edge.target not in seen:
            errors.append(f"Edge {edge.id} must reference valid node ids.")
            continue
        if edge.source == edge.target:
            errors.append(f"Edge {edge.id}: self-referential edges are not allowed.")
            continue
        if edge.latency_ms < 0:
            errors.append(f"Edge {edge.id}: networkLatency must be >= 0.")
    return sorted(set(errors))
