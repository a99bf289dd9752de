from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from .graph.model import NodeCategory


@dataclass(frozen=True)
class NodePricing:
    base_price: float
    price_per_instance: float

    def monthly_cost(self, instance_count: int) -> float:
        return self.base_price + self.price_per_instance * instance_count


def _default_prices() -> Dict[NodeCategory, NodePricing]:
    # USD per month.
    return {
        NodeCategory.ENTRY_POINT: NodePricing(50.0, 30.0),
        NodeCategory.TRAFFIC_MANAGER: NodePricing(100.0, 50.0),
        NodeCategory.COMPUTE: NodePricing(150.0, 100.0),
        NodeCategory.STORAGE: NodePricing(200.0, 80.0),
        NodeCategory.MIDDLEWARE: NodePricing(80.0, 40.0),
    }


def _default_comparison_costs() -> Dict[NodeCategory, float]:
    # USD per month for every 1000 rps of declared capacity.
    return {
        NodeCategory.STORAGE: 50.0,
        NodeCategory.MIDDLEWARE: 30.0,
        NodeCategory.TRAFFIC_MANAGER: 20.0,
        NodeCategory.COMPUTE: 40.0,
        NodeCategory.ENTRY_POINT: 20.0,
    }


@dataclass(frozen=True)
class PricingTable:
    prices: Mapping[NodeCategory, NodePricing] = field(default_factory=_default_prices)
    capacity_costs: Mapping[NodeCategory, float] = field(default_factory=_default_comparison_costs)
    fallback_capacity_cost: float = 35.0

    def pricing_for(self, category: NodeCategory) -> Optional[NodePricing]:
        return self.prices.get(category)

    def capacity_cost(self, category: NodeCategory) -> float:
        return self.capacity_costs.get(category, self.fallback_capacity_cost)


DEFAULT_PRICING = PricingTable()
