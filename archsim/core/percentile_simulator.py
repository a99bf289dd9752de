from __future__ import annotations

import logging
import random
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from ..config import Config
from .critical_path import ensure_acyclic, pick_terminal, relax_longest_paths
from .graph.model import Adjacency, Graph, Node
from .queueing import MM1QueueingModel, UniformJitter

logger = logging.getLogger(__name__)


class JitterModel(Protocol):
    def sample(self, processing_time_ms: float, rng: random.Random) -> float: ...


class QueueingModel(Protocol):
    def delay(self, service_time_ms: float, utilization: float) -> float: ...


SEVERITY_TIERS: Sequence[Tuple[float, str]] = ((0.95, "Critical"), (0.90, "High"), (0.80, "Medium"))


def severity_for(load_factor: float) -> str:
    for threshold, severity in SEVERITY_TIERS:
        if load_factor > threshold:
            return severity
    return "Low"


def _reason(severity: str, load_factor: float) -> str:
    usage = f"{load_factor:.0%} of capacity"
    if load_factor > 1:
        return f"Node is overloaded at {usage}; requests queue on every burst. Add instances or raise capacity."
    if severity == "Critical":
        return f"Node is running at {usage}. Scale up or add instances now to avoid saturation."
    if severity == "High":
        return f"Node is close to its limit ({usage}). Add instances or scale up."
    if severity == "Medium":
        return f"Node is running at {usage}. Consider scaling up to keep latency stable."
    return f"Node is running at {usage}."


@dataclass(frozen=True)
class OverloadedNodeReport:
    node_id: str
    capacity: float
    actual_load: float
    avg_queueing_delay_ms: float
    load_factor: float
    severity: str
    reason: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "nodeId": self.node_id,
            "capacity": self.capacity,
            "actualLoad": self.actual_load,
            "avgQueueingDelayMs": self.avg_queueing_delay_ms,
            "loadFactor": self.load_factor,
            "severity": self.severity,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class PercentileResult:
    entry_node_id: str
    simulation_count: int
    p50_latency_ms: float
    p95_latency_ms: float
    min_latency_ms: float
    max_latency_ms: float
    avg_latency_ms: float
    overloaded_nodes: Tuple[OverloadedNodeReport, ...] = ()
    cancelled: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {
            "entryNodeId": self.entry_node_id,
            "simulationCount": self.simulation_count,
            "p50LatencyMs": self.p50_latency_ms,
            "p95LatencyMs": self.p95_latency_ms,
            "minLatencyMs": self.min_latency_ms,
            "maxLatencyMs": self.max_latency_ms,
            "avgLatencyMs": self.avg_latency_ms,
            "overloadedNodes": [report.to_dict() for report in self.overloaded_nodes],
            "cancelled": self.cancelled,
        }


@dataclass(frozen=True)
class TrialSample:
    latency_ms: float
    queueing_delays: Tuple[Tuple[str, float], ...]


@dataclass
class PercentileSimulator:
    """Monte-Carlo latency distribution for one entry point.

    Each trial jitters every reachable node's processing time, adds queuing
    delay from its instantaneous load, then takes the critical path over those
    per-trial latencies. Trials share nothing mutable; samples are merged once
    every trial has finished.
    """

    trials: int = field(default_factory=lambda: Config.SIMULATION_TRIALS)
    jitter: JitterModel = field(default_factory=lambda: UniformJitter(Config.JITTER_FACTOR))
    queueing: QueueingModel = field(default_factory=MM1QueueingModel)
    burst_factor: float = field(default_factory=lambda: Config.BURST_FACTOR)
    utilization_threshold: float = field(default_factory=lambda: Config.UTILIZATION_THRESHOLD)
    concurrent_requests: int = 1
    workers: int = field(default_factory=lambda: Config.SIMULATION_WORKERS)
    seed: Optional[int] = None

    def run(
        self,
        graph: Graph,
        entry_id: str,
        cancel_event: Optional[threading.Event] = None,
    ) -> Optional[PercentileResult]:
        if graph.node(entry_id) is None:
            return None
        ensure_acyclic(graph, entry_id)

        adjacency = graph.adjacency()
        reachable = [graph.node(node_id) for node_id in graph.reachable_from(entry_id, adjacency)]
        loads = {node.id: self.sustained_load(node) for node in reachable}
        master = random.Random(self.seed)
        seeds = [master.getrandbits(64) for _ in range(max(self.trials, 0))]

        def run_trial(trial_seed: int) -> Optional[TrialSample]:
            if cancel_event is not None and cancel_event.is_set():
                return None
            return self._trial(graph, entry_id, adjacency, reachable, loads, random.Random(trial_seed))

        if self.workers > 1 and len(seeds) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                outcomes = list(executor.map(run_trial, seeds))
        else:
            outcomes = []
            for trial_seed in seeds:
                outcome = run_trial(trial_seed)
                if outcome is None:
                    break
                outcomes.append(outcome)

        samples = [sample for sample in outcomes if sample is not None]
        cancelled = len(samples) < len(seeds)
        if cancelled:
            logger.info("Percentile run from %s cancelled after %d of %d trials", entry_id, len(samples), len(seeds))
        logger.debug("Completed %d trials from %s", len(samples), entry_id)
        return self._aggregate(entry_id, samples, reachable, loads, cancelled)

    def sustained_load(self, node: Node) -> float:
        background = 0.0
        if node.simulation is not None and node.simulation.current_load is not None:
            background = node.simulation.current_load * node.capacity
        return float(self.concurrent_requests) + background

    def _trial(
        self,
        graph: Graph,
        entry_id: str,
        adjacency: Adjacency,
        reachable: List[Node],
        loads: Dict[str, float],
        rng: random.Random,
    ) -> TrialSample:
        latencies: Dict[str, float] = {}
        delays: List[Tuple[str, float]] = []
        for node in reachable:
            service = node.processing_time_ms
            latency = max(0.0, node.latency_ms + self.jitter.sample(service, rng))
            load = loads[node.id]
            if self.burst_factor > 0:
                load *= 1.0 + rng.uniform(-self.burst_factor, self.burst_factor)
            delay = self.queueing.delay(service, load / node.capacity)
            latencies[node.id] = latency + delay
            delays.append((node.id, delay))

        longest = relax_longest_paths(graph, entry_id, adjacency=adjacency, node_latencies=latencies)
        terminal = pick_terminal(graph, longest, adjacency)
        total = terminal[1].latency_ms if terminal is not None else 0.0
        return TrialSample(latency_ms=total, queueing_delays=tuple(delays))

    def _aggregate(
        self,
        entry_id: str,
        samples: List[TrialSample],
        reachable: List[Node],
        loads: Dict[str, float],
        cancelled: bool,
    ) -> PercentileResult:
        latencies = sorted(sample.latency_ms for sample in samples)
        count = len(latencies)

        delay_totals: Dict[str, float] = {}
        for sample in samples:
            for node_id, delay in sample.queueing_delays:
                delay_totals[node_id] = delay_totals.get(node_id, 0.0) + delay

        reports: List[OverloadedNodeReport] = []
        for node in reachable:
            load_factor = loads[node.id] / node.capacity
            if load_factor <= self.utilization_threshold:
                continue
            severity = severity_for(load_factor)
            reports.append(
                OverloadedNodeReport(
                    node_id=node.id,
                    capacity=node.capacity,
                    actual_load=loads[node.id],
                    avg_queueing_delay_ms=delay_totals.get(node.id, 0.0) / count if count else 0.0,
                    load_factor=load_factor,
                    severity=severity,
                    reason=_reason(severity, load_factor),
                )
            )
        reports.sort(key=lambda report: report.load_factor, reverse=True)

        if not count:
            return PercentileResult(
                entry_node_id=entry_id,
                simulation_count=0,
                p50_latency_ms=0.0,
                p95_latency_ms=0.0,
                min_latency_ms=0.0,
                max_latency_ms=0.0,
                avg_latency_ms=0.0,
                overloaded_nodes=tuple(reports),
                cancelled=cancelled,
            )

        return PercentileResult(
            entry_node_id=entry_id,
            simulation_count=count,
            p50_latency_ms=latencies[count // 2],
            p95_latency_ms=latencies[int(count * 0.95)],
            min_latency_ms=latencies[0],
            max_latency_ms=latencies[-1],
            avg_latency_ms=sum(latencies) / count,
            overloaded_nodes=tuple(reports),
            cancelled=cancelled,
        )


def simulate_with_percentiles(
    graph: Graph,
    entry_id: str,
    cancel_event: Optional[threading.Event] = None,
    **options: object,
) -> Optional[PercentileResult]:
    return PercentileSimulator(**options).run(graph, entry_id, cancel_event=cancel_event)
