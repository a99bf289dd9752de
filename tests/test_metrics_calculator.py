import pytest

from archsim.core.errors import GraphConfigurationError
from archsim.core.graph import Graph, NodeCategory
from archsim.core.metrics_calculator import (
    MetricsCalculator,
    availability,
    calculate_metrics,
    efficiency_rating,
    overall_error_rate,
)
from archsim.core.pricing import NodePricing, PricingTable

from diagram_builders import diagram, edge, node


def build(nodes, edges=None):
    return Graph.from_dict(diagram(nodes, edges))


def test_empty_graph_has_no_data():
    metrics = calculate_metrics(Graph())
    assert metrics.efficiency_rating == "No Data"
    assert metrics.health_score == 100
    assert metrics.monthly_cost == 0
    assert metrics.availability_percentage == 100


def test_monthly_cost_and_breakdown():
    graph = build(
        [
            node("lb", "EntryPoint", instances=2),
            node("api", instances=3),
            node("db", "Storage", backup="daily"),
        ]
    )
    metrics = calculate_metrics(graph)
    assert metrics.monthly_cost == 840
    assert metrics.cost_breakdown == {"EntryPoint": 110, "Compute": 450, "Storage": 280}


def test_error_rate_is_dampened_by_replicas():
    graph = build([node("a", failure=0.02), node("b", failure=0.01, instances=4), node("c")])
    assert overall_error_rate(graph.nodes) == pytest.approx(0.008)


def test_error_rate_without_simulation_data():
    assert overall_error_rate(build([node("a"), node("b")]).nodes) == 0


def test_storage_without_backup_is_a_bottleneck():
    metrics = calculate_metrics(build([node("db", "Storage")]))
    assert metrics.bottlenecks == ("db: No backup policy configured",)
    assert metrics.health_score == 90


def test_single_instance_with_high_failure_rate():
    metrics = calculate_metrics(build([node("api", failure=0.1, label="Orders API")]))
    assert "Orders API: Single instance with high failure rate (10%)" in metrics.bottlenecks


def test_too_many_incoming_connections():
    sources = [node(f"s{i}") for i in range(6)]
    graph = build(sources + [node("hub")], [edge(f"s{i}", "hub") for i in range(6)])
    assert calculate_metrics(graph).bottlenecks == ("hub: Too many incoming connections (6)",)


def test_health_score_rewards_clustering_and_replicas():
    graph = build([node("a", failure=0.02, instances=2, clustered=True)])
    # error 0.02 / sqrt(2) -> int(5.65) = 5 penalty, +2 clustered, +3 replicas
    assert calculate_metrics(graph).health_score == 100


def test_health_score_is_clamped_at_one_hundred():
    graph = build([node(f"api{i}", instances=3, clustered=True) for i in range(4)])
    # raw score 100 + 4 * (2 + 3)
    assert calculate_metrics(graph).health_score == 100


def test_health_score_is_clamped_at_zero():
    graph = build([node(f"db{i}", "Storage") for i in range(11)])
    assert calculate_metrics(graph).health_score == 0


@pytest.mark.parametrize(
    "score, error_rate, rating",
    [
        (90, 0.005, "Excellent"),
        (90, 0.02, "High Efficiency"),
        (70, 0.029, "High Efficiency"),
        (60, 0.04, "Medium Efficiency"),
        (49, 0.0, "Needs Optimization"),
        (95, 0.05, "Needs Optimization"),
    ],
)
def test_efficiency_rating(score, error_rate, rating):
    assert efficiency_rating(score, error_rate) == rating


def test_availability_in_series_with_replicas():
    graph = build([node("a", reliability=0.9), node("b", reliability=0.9, instances=2)])
    assert availability(graph.nodes) == pytest.approx(89.1)


def test_what_if_does_not_mutate_input():
    graph = build([node("api", failure=0.1)])
    calculator = MetricsCalculator()
    before = calculator.calculate(graph)
    after = calculator.what_if(graph, "api", 3)
    assert after.monthly_cost == before.monthly_cost + 200
    assert after.bottlenecks == ()
    assert graph.node("api").instance_count == 1


def test_what_if_unknown_node_returns_same_metrics():
    graph = build([node("api")])
    calculator = MetricsCalculator()
    assert calculator.what_if(graph, "ghost", 4) == calculator.calculate(graph)


@pytest.mark.parametrize("count", [0, -1, 1.5, True, "2"])
def test_what_if_rejects_bad_instance_count(count):
    with pytest.raises(GraphConfigurationError):
        MetricsCalculator().what_if(build([node("api")]), "api", count)


def test_custom_pricing_table():
    pricing = PricingTable(prices={NodeCategory.COMPUTE: NodePricing(10.0, 1.0)})
    metrics = MetricsCalculator(pricing).calculate(build([node("api", instances=2), node("db", "Storage", backup="x")]))
    assert metrics.monthly_cost == 12
    assert metrics.cost_breakdown == {"Compute": 12}


def test_to_dict_uses_wire_names():
    data = calculate_metrics(build([node("db", "Storage")])).to_dict()
    assert set(data) == {
        "monthlyCost",
        "overallErrorRate",
        "healthScore",
        "efficiencyRating",
        "availabilityPercentage",
        "costBreakdown",
        "bottlenecks",
    }
