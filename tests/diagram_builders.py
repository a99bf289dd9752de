from __future__ import annotations

from typing import Dict, List, Optional


def node(
    node_id: str,
    category: str = "Compute",
    latency: float = 0,
    throughput: float = 1000,
    reliability: float = 0.99,
    instances: Optional[int] = None,
    clustered: Optional[bool] = None,
    backup: Optional[str] = None,
    processing: Optional[float] = None,
    failure: Optional[float] = None,
    current_load: Optional[float] = None,
    entry: bool = False,
    label: Optional[str] = None,
) -> Dict[str, object]:
    metadata: Dict[str, object] = {
        "category": category,
        "specs": {"latencyBase": latency, "maxThroughput": throughput, "reliability": reliability},
    }
    if label is not None:
        metadata["label"] = label
    props = {}
    if instances is not None:
        props["instanceCount"] = instances
    if clustered is not None:
        props["isClustered"] = clustered
    if backup is not None:
        props["backupPolicy"] = backup
    if props:
        metadata["props"] = props
    if processing is not None or failure is not None or current_load is not None:
        simulation: Dict[str, object] = {
            "processingTimeMs": processing or 0,
            "failureRate": failure or 0,
        }
        if current_load is not None:
            simulation["currentLoad"] = current_load
        metadata["simulation"] = simulation
    return {"id": node_id, "type": category, "isEntryPoint": entry, "metadata": metadata}


def edge(source: str, target: str, latency: float = 0, edge_id: Optional[str] = None) -> Dict[str, object]:
    return {
        "id": edge_id or f"{source}-{target}",
        "source": source,
        "target": target,
        "data": {"protocol": "HTTP", "networkLatency": latency},
    }


def diagram(nodes: List[Dict[str, object]], edges: Optional[List[Dict[str, object]]] = None) -> Dict[str, object]:
    return {"nodes": nodes, "edges": edges or []}
