import uuid

from diagram_builders import diagram, edge, node


def two_tier(api_latency=50, lb_throughput=1000):
    return diagram(
        [node("lb", "EntryPoint", latency=5, throughput=lb_throughput), node("api", latency=api_latency)],
        [edge("lb", "api")],
    )


def create_scenario(client, name, graph):
    response = client.post("/api/scenarios", json={"name": name, "graph": graph})
    assert response.status_code == 201
    return response.get_json()["id"]


def test_health(client):
    assert client.get("/api/health").get_json() == {"status": "ok"}


def test_validate_route(client):
    response = client.post("/api/validate", json={"graph": two_tier()})
    data = response.get_json()
    assert data["valid"] is True
    assert data["entryNodes"] == ["lb"]


def test_longest_paths_route(client):
    response = client.post("/api/simulation/longest-paths", json=two_tier())
    data = response.get_json()
    assert response.status_code == 200
    assert data["totalPaths"] == 1
    assert data["paths"][0]["path"] == ["lb", "api"]
    assert data["paths"][0]["totalLatencyMs"] == 55


def test_longest_path_unknown_node(client):
    response = client.post("/api/simulation/longest-path/ghost", json=two_tier())
    assert response.status_code == 404


def test_invalid_graph_is_rejected(client):
    response = client.post("/api/simulation/analyze", json=diagram([node("a")], [edge("a", "b")]))
    assert response.status_code == 400
    assert response.get_json()["errors"] == ["Edge a-b must reference valid node ids."]


def test_cycle_is_reported_as_unsupported_topology(client):
    graph = diagram([node("lb", "EntryPoint"), node("a"), node("b")], [edge("lb", "a"), edge("a", "b"), edge("b", "a")])
    response = client.post("/api/simulation/longest-paths", json=graph)
    assert response.status_code == 500
    assert "cycle" in response.get_json()["detail"]


def test_analyze_without_paths(client):
    response = client.post("/api/simulation/analyze", json={"nodes": [], "edges": []})
    assert response.status_code == 200
    assert response.get_json() == {"message": "No valid paths found in the system."}


def test_percentiles_route(client):
    body = {"graph": two_tier(), "trials": 100, "seed": 11, "workers": 2}
    response = client.post("/api/simulation/percentiles/lb", json=body)
    data = response.get_json()
    assert response.status_code == 200
    assert data["simulationCount"] == 100
    assert data["p50LatencyMs"] <= data["p95LatencyMs"]
    assert data["cancelled"] is False


def test_percentiles_rejects_bad_options(client):
    response = client.post("/api/simulation/percentiles/lb", json={"graph": two_tier(), "trials": 0})
    assert response.status_code == 400


def test_percentiles_unknown_entry(client):
    response = client.post("/api/simulation/percentiles/ghost", json={"graph": two_tier(), "trials": 5})
    assert response.status_code == 404


def test_metrics_routes(client):
    graph = diagram([node("db", "Storage", failure=0.1)])
    calculated = client.post("/api/metrics/calculate", json={"diagramContent": graph}).get_json()
    assert calculated["monthlyCost"] == 280
    assert "db: No backup policy configured" in calculated["bottlenecks"]

    what_if = client.post(
        "/api/metrics/what-if", json={"diagramContent": graph, "nodeId": "db", "newInstanceCount": 2}
    ).get_json()
    assert what_if["monthlyCost"] == 360


def test_what_if_requires_valid_count(client):
    body = {"diagramContent": two_tier(), "nodeId": "api", "newInstanceCount": 0}
    assert client.post("/api/metrics/what-if", json=body).status_code == 400


def test_scenario_crud(client):
    scenario_id = create_scenario(client, "Baseline", two_tier())

    fetched = client.get(f"/api/scenarios/{scenario_id}").get_json()
    assert fetched["name"] == "Baseline"
    assert fetched["graph"]["nodes"][0]["id"] == "lb"

    listed = client.get("/api/scenarios").get_json()["scenarios"]
    assert [item["id"] for item in listed] == [scenario_id]
    assert "graph" not in listed[0]

    assert client.delete(f"/api/scenarios/{scenario_id}").status_code == 200
    assert client.get(f"/api/scenarios/{scenario_id}").status_code == 404


def test_scenario_create_rejects_invalid_graph(client):
    response = client.post("/api/scenarios", json={"name": "Broken", "graph": diagram([node("a", throughput=0)])})
    assert response.status_code == 400


def test_compare_scenarios(client):
    first = create_scenario(client, "Current", two_tier())
    second = create_scenario(client, "Scaled", two_tier(api_latency=40, lb_throughput=2000))
    response = client.post("/api/comparison", json={"scenarioIds": [first, second]})
    data = response.get_json()
    assert response.status_code == 200
    assert data["scenario1"]["scenarioName"] == "Current"
    assert data["differences"]["latencyDiff"] == -10
    assert data["differences"]["throughputDiff"] == 1000


def test_compare_missing_scenario(client):
    first = create_scenario(client, "Current", two_tier())
    response = client.post("/api/comparison", json={"scenarioIds": [first, str(uuid.uuid4())]})
    assert response.status_code == 404


def test_compare_needs_two_ids(client):
    assert client.post("/api/comparison", json={"scenarioIds": ["only-one"]}).status_code == 400


def test_compare_scenario_without_paths(client):
    first = create_scenario(client, "Current", two_tier())
    empty = create_scenario(client, "Empty", {"nodes": [], "edges": []})
    response = client.post("/api/comparison", json={"scenarioIds": [first, empty]})
    assert response.status_code == 422


def test_percentiles_model_options(client):
    body = {"graph": two_tier(), "trials": 20, "jitterDistribution": "gaussian", "queueingModel": "quadratic"}
    assert client.post("/api/simulation/percentiles/lb", json=body).status_code == 200

    body["queueingModel"] = "erlang"
    response = client.post("/api/simulation/percentiles/lb", json=body)
    assert response.status_code == 400
    assert response.get_json()["errors"] == ["queueingModel must be one of: mm1, quadratic."]


def test_percentiles_caps_request_size(client):
    too_many_trials = {"graph": two_tier(), "trials": 10**9}
    response = client.post("/api/simulation/percentiles/lb", json=too_many_trials)
    assert response.status_code == 400
    assert response.get_json()["errors"] == ["trials must be <= 100000."]

    too_many_workers = {"graph": two_tier(), "trials": 5, "workers": 10_000}
    assert client.post("/api/simulation/percentiles/lb", json=too_many_workers).status_code == 400
