"""Tests for DependencyGraph assembly and queries."""

from __future__ import annotations

import pytest

from infragraph.models.module import ModuleConfig
from infragraph.models.result import Dependency
from infragraph.models.types import DependencyType
from infragraph.resolution.graph import DependencyGraph
from infragraph.resolution.index import ModuleIndex


@pytest.fixture
def chain_graph() -> DependencyGraph:
    """app -> db -> network, plus an isolated module."""
    index = ModuleIndex.from_modules(
        {
            "network": ModuleConfig(name="network", type="networking"),
            "db": ModuleConfig(name="db", type="database"),
            "app": ModuleConfig(name="app", type="compute"),
            "misc": ModuleConfig(name="misc"),
        }
    )
    deps = [
        Dependency("app", "db", DependencyType.VARIABLE_REFERENCE, {"variable": "db"}),
        Dependency("db", "network", DependencyType.RESOURCE_REFERENCE, {"resource": "x"}),
    ]
    return DependencyGraph.build(index, deps)


class TestGraphBuilding:
    """Tests for node and edge projection."""

    def test_nodes_are_modules(self, chain_graph: DependencyGraph) -> None:
        assert [n.id for n in chain_graph.nodes] == ["network", "db", "app", "misc"]
        assert chain_graph.nodes[0].type == "networking"
        assert chain_graph.nodes[0].label == "network"

    def test_edges_project_dependencies(self, chain_graph: DependencyGraph) -> None:
        edge = chain_graph.to_dict()["edges"][0]

        assert edge == {
            "source": "app",
            "target": "db",
            "type": "variable_reference",
            "metadata": {"variable": "db"},
        }
        assert chain_graph.edge_count == 2


class TestQueries:
    """Tests for transitive queries."""

    def test_dependencies_of(self, chain_graph: DependencyGraph) -> None:
        assert chain_graph.dependencies_of("app") == {"db", "network"}

    def test_dependents_of(self, chain_graph: DependencyGraph) -> None:
        """Changing network affects everything above it."""
        assert chain_graph.dependents_of("network") == {"db", "app"}

    def test_unknown_module(self, chain_graph: DependencyGraph) -> None:
        assert chain_graph.dependents_of("nope") == set()
        assert chain_graph.dependencies_of("nope") == set()

    def test_deployment_order(self, chain_graph: DependencyGraph) -> None:
        """Dependencies are applied before their dependents."""
        order = chain_graph.deployment_order()

        assert order == [["misc", "network"], ["db"], ["app"]]

    def test_deployment_order_cyclic(self) -> None:
        index = ModuleIndex.from_modules({"a": ModuleConfig(name="a"), "b": ModuleConfig(name="b")})
        graph = DependencyGraph.build(
            index,
            [
                Dependency("a", "b", DependencyType.LOCAL_REFERENCE),
                Dependency("b", "a", DependencyType.LOCAL_REFERENCE),
            ],
        )

        assert graph.deployment_order() is None
