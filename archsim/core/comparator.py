from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional

from .critical_path import calculate_longest_paths, critical_path
from .errors import NoValidPathsError
from .graph.model import Graph, NodeCategory
from .pricing import DEFAULT_PRICING, PricingTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scenario:
    id: str
    name: str
    graph: Graph


@dataclass(frozen=True)
class ScenarioMetrics:
    scenario_id: str
    scenario_name: str
    total_latency_ms: float
    throughput_rps: float
    estimated_cost_usd: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "scenarioId": self.scenario_id,
            "scenarioName": self.scenario_name,
            "totalLatencyMs": self.total_latency_ms,
            "throughputRps": self.throughput_rps,
            "estimatedCostUsd": round(self.estimated_cost_usd, 2),
        }


@dataclass(frozen=True)
class ComparisonDifferences:
    latency_diff: float
    latency_percent: float
    throughput_diff: float
    throughput_percent: float
    cost_diff: float
    cost_percent: float

    @classmethod
    def between(cls, baseline: ScenarioMetrics, candidate: ScenarioMetrics) -> "ComparisonDifferences":
        latency_diff, latency_percent = _delta(baseline.total_latency_ms, candidate.total_latency_ms)
        throughput_diff, throughput_percent = _delta(baseline.throughput_rps, candidate.throughput_rps)
        cost_diff, cost_percent = _delta(baseline.estimated_cost_usd, candidate.estimated_cost_usd)
        return cls(
            latency_diff=latency_diff,
            latency_percent=latency_percent,
            throughput_diff=throughput_diff,
            throughput_percent=throughput_percent,
            cost_diff=cost_diff,
            cost_percent=cost_percent,
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "latencyDiff": self.latency_diff,
            "latencyPercent": self.latency_percent,
            "throughputDiff": self.throughput_diff,
            "throughputPercent": self.throughput_percent,
            "costDiff": self.cost_diff,
            "costPercent": self.cost_percent,
        }


@dataclass(frozen=True)
class ComparisonResult:
    scenario1: ScenarioMetrics
    scenario2: ScenarioMetrics
    differences: ComparisonDifferences

    def to_dict(self) -> Dict[str, object]:
        return {
            "scenario1": self.scenario1.to_dict(),
            "scenario2": self.scenario2.to_dict(),
            "differences": self.differences.to_dict(),
        }


def _delta(baseline: float, candidate: float):
    diff = candidate - baseline
    percent = diff / baseline * 100 if baseline > 0 else 0.0
    return diff, percent


def estimate_throughput(graph: Graph) -> float:
    return sum(node.capacity for node in graph.nodes if node.category is NodeCategory.ENTRY_POINT)


def estimate_cost(graph: Graph, pricing: PricingTable = DEFAULT_PRICING) -> float:
    return sum(pricing.capacity_cost(node.category) * node.capacity / 1000.0 for node in graph.nodes)


@dataclass
class ScenarioComparator:
    pricing: PricingTable = field(default_factory=lambda: DEFAULT_PRICING)

    def scenario_metrics(self, scenario: Scenario, cancel_event: Optional[threading.Event] = None) -> ScenarioMetrics:
        results = calculate_longest_paths(scenario.graph, cancel_event=cancel_event)
        critical = critical_path(results)
        if critical is None:
            raise NoValidPathsError(f"No valid paths found in scenario {scenario.name or scenario.id}.")
        return ScenarioMetrics(
            scenario_id=scenario.id,
            scenario_name=scenario.name,
            total_latency_ms=critical.total_latency_ms,
            throughput_rps=estimate_throughput(scenario.graph),
            estimated_cost_usd=estimate_cost(scenario.graph, self.pricing),
        )

    def compare(
        self,
        baseline: Scenario,
        candidate: Scenario,
        cancel_event: Optional[threading.Event] = None,
    ) -> ComparisonResult:
        metrics1 = self.scenario_metrics(baseline, cancel_event)
        metrics2 = self.scenario_metrics(candidate, cancel_event)
        logger.debug(
            "Compared %s (%.2fms) with %s (%.2fms)",
            baseline.id,
            metrics1.total_latency_ms,
            candidate.id,
            metrics2.total_latency_ms,
        )
        return ComparisonResult(
            scenario1=metrics1,
            scenario2=metrics2,
            differences=ComparisonDifferences.between(metrics1, metrics2),
        )
