from .model import (
    Edge,
    EdgeData,
    Graph,
    Node,
    NodeCategory,
    NodeSpecs,
    SimulationProps,
    TechnicalProps,
)
from .validator import validate_graph

__all__ = [
    "Edge",
    "EdgeData",
    "Graph",
    "Node",
    "NodeCategory",
    "NodeSpecs",
    "SimulationProps",
    "TechnicalProps",
    "validate_graph",
]
