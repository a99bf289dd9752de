import pytest

from archsim.core.comparator import Scenario, ScenarioComparator, estimate_cost, estimate_throughput
from archsim.core.errors import NoValidPathsError
from archsim.core.graph import Graph
from archsim.core.pricing import PricingTable

from diagram_builders import diagram, edge, node


def scenario(scenario_id, lb_throughput, api_latency):
    graph = Graph.from_dict(
        diagram(
            [node("lb", "EntryPoint", latency=5, throughput=lb_throughput), node("api", latency=api_latency)],
            [edge("lb", "api")],
        )
    )
    return Scenario(id=scenario_id, name=f"Scenario {scenario_id}", graph=graph)


def test_identical_scenarios_have_no_difference():
    baseline = scenario("s1", 1000, 50)
    result = ScenarioComparator().compare(baseline, scenario("s2", 1000, 50))
    differences = result.differences.to_dict()
    assert all(value == 0 for value in differences.values())


def test_compare_reports_absolute_and_relative_changes():
    result = ScenarioComparator().compare(scenario("s1", 1000, 50), scenario("s2", 2000, 40))
    assert result.scenario1.total_latency_ms == 55
    assert result.scenario2.total_latency_ms == 45
    assert result.scenario1.throughput_rps == 1000
    assert result.scenario2.throughput_rps == 2000
    assert result.scenario1.estimated_cost_usd == pytest.approx(60)
    assert result.scenario2.estimated_cost_usd == pytest.approx(80)

    differences = result.differences
    assert differences.latency_diff == -10
    assert differences.latency_percent == pytest.approx(-18.1818, rel=1e-4)
    assert differences.throughput_diff == 1000
    assert differences.throughput_percent == pytest.approx(100)
    assert differences.cost_diff == pytest.approx(20)
    assert differences.cost_percent == pytest.approx(33.3333, rel=1e-4)


def test_scenario_without_paths():
    empty = Scenario(id="empty", name="Empty", graph=Graph())
    with pytest.raises(NoValidPathsError):
        ScenarioComparator().compare(empty, scenario("s2", 1000, 10))


def test_zero_baseline_gives_zero_percent():
    graph = Graph.from_dict(diagram([node("api", latency=10)]))
    baseline = Scenario(id="a", name="No entry point", graph=graph)
    result = ScenarioComparator().compare(baseline, scenario("b", 500, 10))
    assert result.scenario1.throughput_rps == 0
    assert result.differences.throughput_diff == 500
    assert result.differences.throughput_percent == 0


def test_cost_scales_with_capacity():
    graph = Graph.from_dict(diagram([node("q", "Middleware", throughput=2000)]))
    assert estimate_cost(graph) == pytest.approx(60)
    assert estimate_cost(graph, PricingTable(capacity_costs={})) == pytest.approx(70)
    assert estimate_throughput(graph) == 0


def test_to_dict_shape():
    data = ScenarioComparator().compare(scenario("s1", 1000, 50), scenario("s2", 2000, 40)).to_dict()
    assert set(data) == {"scenario1", "scenario2", "differences"}
    assert data["scenario1"]["scenarioName"] == "Scenario s1"
    assert data["scenario2"]["estimatedCostUsd"] == 80
