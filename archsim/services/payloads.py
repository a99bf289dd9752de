from __future__ import annotations

import uuid
from typing import Mapping, Optional

from ..core.errors import GraphConfigurationError

Payload = Mapping[str, object]


def graph_payload(payload: object, key: str = "graph") -> Payload:
    """The diagram inside a request body: either under ``key`` or the body itself."""
    if not isinstance(payload, Mapping):
        return {}
    nested = payload.get(key)
    if isinstance(nested, Mapping):
        return nested
    return payload


def int_option(
    payload: Payload,
    key: str,
    default: Optional[int],
    minimum: int = 0,
    maximum: Optional[int] = None,
) -> Optional[int]:
    value = payload.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)) or int(value) != value:
        raise GraphConfigurationError([f"{key} must be a whole number."])
    if value < minimum:
        raise GraphConfigurationError([f"{key} must be >= {minimum}."])
    if maximum is not None and value > maximum:
        raise GraphConfigurationError([f"{key} must be <= {maximum}."])
    return int(value)


def float_option(payload: Payload, key: str, default: float, minimum: float = 0.0) -> float:
    value = payload.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise GraphConfigurationError([f"{key} must be a number."])
    if value < minimum:
        raise GraphConfigurationError([f"{key} must be >= {minimum}."])
    return float(value)


def parse_uuid(value: object) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None
