import pytest

from archsim.app import create_app
from archsim.core.graph import Graph

from diagram_builders import diagram, edge, node


@pytest.fixture
def linear_graph():
    return Graph.from_dict(
        diagram(
            [node("a", "EntryPoint", latency=5), node("b", latency=10), node("c", "Storage", latency=50)],
            [edge("a", "b", 15), edge("b", "c", 20)],
        )
    )


@pytest.fixture
def diamond_graph():
    return Graph.from_dict(
        diagram(
            [node("a", latency=10), node("b", latency=5), node("c", latency=30), node("d", latency=20)],
            [edge("a", "b", 1), edge("a", "c", 3), edge("b", "d"), edge("c", "d")],
        )
    )


@pytest.fixture
def app():
    app = create_app(database_url="sqlite://", log_level="WARNING")
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()
