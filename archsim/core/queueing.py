"""Jitter and queuing-delay models used by the percentile simulator.

Both are small strategy objects so a run can swap the distribution or the
delay formula without touching the simulator.
"""

from __future__ import annotations

import random
from dataclasses import dataclass


@dataclass(frozen=True)
class UniformJitter:
    """Symmetric uniform perturbation of +/- ``factor`` times the processing time."""

    factor: float = 0.1

    def sample(self, processing_time_ms: float, rng: random.Random) -> float:
        if self.factor <= 0 or processing_time_ms <= 0:
            return 0.0
        spread = processing_time_ms * self.factor
        return rng.uniform(-spread, spread)


@dataclass(frozen=True)
class GaussianJitter:
    """Normal perturbation with sigma = ``factor`` times the processing time, cut at 3 sigma."""

    factor: float = 0.1

    def sample(self, processing_time_ms: float, rng: random.Random) -> float:
        if self.factor <= 0 or processing_time_ms <= 0:
            return 0.0
        sigma = processing_time_ms * self.factor
        return max(-3 * sigma, min(3 * sigma, rng.gauss(0.0, sigma)))


@dataclass(frozen=True)
class MM1QueueingModel:
    """Single-server queue wait: ``service * rho / (1 - rho)``.

    No delay is added until utilisation passes ``onset``; past it the delay is
    the growth of the wait curve since ``onset``, so it starts from zero. Past
    ``max_utilization`` the curve continues quadratically from its value at that
    point so a saturated node gets a large but finite penalty.
    """

    onset: float = 1.0
    max_utilization: float = 0.99

    def delay(self, service_time_ms: float, utilization: float) -> float:
        if service_time_ms <= 0 or utilization <= 0 or utilization <= self.onset:
            return 0.0
        return service_time_ms * (self._wait_factor(utilization) - self._wait_factor(max(self.onset, 0.0)))

    def _wait_factor(self, utilization: float) -> float:
        if utilization < self.max_utilization:
            return utilization / (1.0 - utilization)
        ceiling = self.max_utilization / (1.0 - self.max_utilization)
        return ceiling * (utilization / self.max_utilization) ** 2


@dataclass(frozen=True)
class QuadraticOverloadModel:
    """``service * (rho - 1)^2`` once a node runs past its capacity."""

    def delay(self, service_time_ms: float, utilization: float) -> float:
        if service_time_ms <= 0 or utilization <= 1.0:
            return 0.0
        return service_time_ms * (utilization - 1.0) ** 2
