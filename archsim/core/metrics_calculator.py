from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .errors import GraphConfigurationError
from .graph.model import Graph, Node, NodeCategory
from .pricing import DEFAULT_PRICING, PricingTable

logger = logging.getLogger(__name__)

NO_DATA = "No Data"
RATING_TIERS: Sequence[Tuple[int, float, str]] = (
    (85, 0.01, "Excellent"),
    (70, 0.03, "High Efficiency"),
    (50, 0.05, "Medium Efficiency"),
)
NEEDS_OPTIMIZATION = "Needs Optimization"

MAX_INCOMING_EDGES = 5
HIGH_FAILURE_RATE = 0.05


@dataclass(frozen=True)
class SystemMetrics:
    monthly_cost: float
    overall_error_rate: float
    health_score: int
    efficiency_rating: str
    availability_percentage: float
    cost_breakdown: Dict[str, float] = field(default_factory=dict)
    bottlenecks: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, object]:
        return {
            "monthlyCost": round(self.monthly_cost, 2),
            "overallErrorRate": self.overall_error_rate,
            "healthScore": self.health_score,
            "efficiencyRating": self.efficiency_rating,
            "availabilityPercentage": self.availability_percentage,
            "costBreakdown": {category: round(cost, 2) for category, cost in self.cost_breakdown.items()},
            "bottlenecks": list(self.bottlenecks),
        }


def empty_metrics() -> SystemMetrics:
    return SystemMetrics(
        monthly_cost=0.0,
        overall_error_rate=0.0,
        health_score=100,
        efficiency_rating=NO_DATA,
        availability_percentage=100.0,
    )


@dataclass
class MetricsCalculator:
    """KPI figures derived from declared node configuration only."""

    pricing: PricingTable = field(default_factory=lambda: DEFAULT_PRICING)

    def calculate(self, graph: Graph) -> SystemMetrics:
        nodes = list(graph.nodes)
        if not nodes:
            return empty_metrics()

        cost, breakdown = self.monthly_cost(nodes)
        error_rate = overall_error_rate(nodes)
        bottlenecks = detect_bottlenecks(graph)
        score = health_score(error_rate, len(bottlenecks), nodes)
        return SystemMetrics(
            monthly_cost=cost,
            overall_error_rate=error_rate,
            health_score=score,
            efficiency_rating=efficiency_rating(score, error_rate),
            availability_percentage=availability(nodes),
            cost_breakdown=breakdown,
            bottlenecks=tuple(bottlenecks),
        )

    def what_if(self, graph: Graph, node_id: str, instance_count: int) -> SystemMetrics:
        if isinstance(instance_count, bool) or not isinstance(instance_count, int) or instance_count < 1:
            raise GraphConfigurationError([f"newInstanceCount must be a whole number >= 1, got {instance_count!r}."])
        if graph.node(node_id) is None:
            logger.info("What-if target %s not in graph; returning unchanged metrics", node_id)
        return self.calculate(graph.with_instance_count(node_id, instance_count))

    def monthly_cost(self, nodes: Sequence[Node]) -> Tuple[float, Dict[str, float]]:
        breakdown: Dict[str, float] = {}
        total = 0.0
        for node in nodes:
            pricing = self.pricing.pricing_for(node.category)
            if pricing is None:
                continue
            cost = pricing.monthly_cost(node.instance_count)
            total += cost
            breakdown[node.category.value] = breakdown.get(node.category.value, 0.0) + cost
        return total, breakdown


def overall_error_rate(nodes: Sequence[Node]) -> float:
    weighted_error = 0.0
    total_weight = 0
    for node in nodes:
        failure_rate = node.failure_rate
        if failure_rate is None:
            continue
        instances = node.instance_count
        # Replicas dampen the effective failure rate.
        weighted_error += failure_rate / math.sqrt(instances) * instances
        total_weight += instances
    return weighted_error / total_weight if total_weight > 0 else 0.0


def detect_bottlenecks(graph: Graph) -> List[str]:
    incoming = graph.incoming_counts()
    bottlenecks: List[str] = []
    for node in graph.nodes:
        name = node.display_name
        if incoming[node.id] > MAX_INCOMING_EDGES:
            bottlenecks.append(f"{name}: Too many incoming connections ({incoming[node.id]})")

        failure_rate = node.failure_rate or 0.0
        if node.instance_count < 2 and failure_rate > HIGH_FAILURE_RATE:
            bottlenecks.append(f"{name}: Single instance with high failure rate ({failure_rate:.0%})")

        backup_policy = node.props.backup_policy if node.props is not None else None
        if node.category is NodeCategory.STORAGE and not backup_policy:
            bottlenecks.append(f"{name}: No backup policy configured")
    return bottlenecks


def health_score(error_rate: float, bottleneck_count: int, nodes: Sequence[Node]) -> int:
    score = 100
    score -= int(error_rate * 400)
    score -= bottleneck_count * 10
    score += 2 * sum(1 for node in nodes if node.props is not None and node.props.is_clustered)
    score += 3 * sum(1 for node in nodes if node.instance_count > 1)
    return max(0, min(100, score))


def efficiency_rating(score: int, error_rate: float) -> str:
    for min_score, max_error, rating in RATING_TIERS:
        if score >= min_score and error_rate < max_error:
            return rating
    return NEEDS_OPTIMIZATION


def availability(nodes: Sequence[Node]) -> float:
    if not nodes:
        return 100.0
    system = 1.0
    for node in nodes:
        # Parallel replicas inside a node, nodes in series.
        system *= 1.0 - (1.0 - node.specs.reliability) ** node.instance_count
    return system * 100.0


def calculate_metrics(graph: Graph, pricing: Optional[PricingTable] = None) -> SystemMetrics:
    return MetricsCalculator(pricing or DEFAULT_PRICING).calculate(graph)
