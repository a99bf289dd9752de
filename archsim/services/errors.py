from __future__ import annotations

import logging
from typing import Dict, Tuple

from ..core.errors import (
    AnalysisCancelled,
    ArchSimError,
    GraphConfigurationError,
    NoValidPathsError,
    ScenarioNotFoundError,
    UnsupportedTopologyError,
)

logger = logging.getLogger(__name__)

Response = Tuple[Dict[str, object], int]


def error_response(exc: ArchSimError) -> Response:
    """Map an engine failure onto an explicit ``(payload, status)`` result."""
    if isinstance(exc, GraphConfigurationError):
        logger.info("Rejected graph: %s", exc)
        return {"error": "Invalid graph configuration.", "errors": exc.errors}, 400
    if isinstance(exc, ScenarioNotFoundError):
        return {"error": str(exc)}, 404
    if isinstance(exc, NoValidPathsError):
        return {"error": str(exc)}, 422
    if isinstance(exc, UnsupportedTopologyError):
        logger.warning("Could not analyse topology: %s", exc)
        return {"error": "Could not analyze this topology.", "detail": str(exc)}, 500
    if isinstance(exc, AnalysisCancelled):
        return {"error": "Analysis was cancelled.", "cancelled": True}, 200
    logger.error("Analysis failed: %s", exc)
    return {"error": str(exc) or "Analysis failed."}, 500
