from __future__ import annotations

from typing import Iterable, List


class ArchSimError(RuntimeError):
    pass


class GraphConfigurationError(ArchSimError):
    def __init__(self, errors: Iterable[str]) -> None:
        self.errors: List[str] = sorted(set(errors))
        super().__init__("; ".join(self.errors) or "Invalid graph.")


class UnsupportedTopologyError(ArchSimError):
    """The graph shape cannot be analysed, e.g. a cycle on a latency path."""


class AnalysisCancelled(ArchSimError):
    pass


class ScenarioNotFoundError(ArchSimError):
    def __init__(self, scenario_id: object) -> None:
        self.scenario_id = scenario_id
        super().__init__(f"Scenario {scenario_id} not found.")


class NoValidPathsError(ArchSimError):
    pass
