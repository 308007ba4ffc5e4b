"""Module dependency graph assembly and querying.

Nodes are exactly the indexed modules; edges are a direct projection of
the collected dependencies. A networkx view backs the transitive queries.
"""

from __future__ import annotations

from typing import Any

import networkx as nx

from infragraph.models.result import Dependency, GraphEdge, GraphNode
from infragraph.resolution.index import ModuleIndex


class DependencyGraph:
    """Directed module graph with dependents/dependencies queries."""

    def __init__(self, nodes: list[GraphNode], edges: list[GraphEdge]) -> None:
        self.nodes = nodes
        self.edges = edges
        self._graph: nx.MultiDiGraph = nx.MultiDiGraph()
        for node in nodes:
            self._graph.add_node(node.id, type=node.type)
        for edge in edges:
            self._graph.add_edge(edge.source, edge.target, type=edge.type.value)

    @classmethod
    def build(cls, index: ModuleIndex, dependencies: list[Dependency]) -> DependencyGraph:
        """Assemble the graph from an index and its collected edges.

        Edges are projected as given. The scanning passes only emit edges
        between indexed modules.
        """
        nodes = [
            GraphNode(id=name, type=module.type, label=name)
            for name, module in index.items()
        ]
        edges = [
            GraphEdge(source=d.source, target=d.target, type=d.type, metadata=d.metadata)
            for d in dependencies
        ]
        return cls(nodes, edges)

    def successors(self) -> dict[str, list[str]]:
        """Outgoing targets per module, one entry per edge, in edge order."""
        adjacency: dict[str, list[str]] = {node.id: [] for node in self.nodes}
        for edge in self.edges:
            adjacency.setdefault(edge.source, []).append(edge.target)
        return adjacency

    def dependencies_of(self, module: str) -> set[str]:
        """All modules ``module`` depends on, transitively."""
        if module not in self._graph:
            return set()
        return set(nx.descendants(self._graph, module))

    def dependents_of(self, module: str) -> set[str]:
        """All modules that depend on ``module``, transitively.

        These are the modules affected if ``module`` changes.
        """
        if module not in self._graph:
            return set()
        return set(nx.ancestors(self._graph, module))

    def deployment_order(self) -> list[list[str]] | None:
        """Group modules into apply stages, dependencies first.

        Returns:
            Stages of modules that can be applied together, or None if
            the graph has a cycle.
        """
        if not nx.is_directed_acyclic_graph(self._graph):
            return None
        # Edges point from dependent to dependency, so reverse for apply order.
        stages = nx.topological_generations(self._graph.reverse(copy=False))
        return [sorted(stage) for stage in stages]

    def to_networkx(self) -> nx.MultiDiGraph:
        return self._graph.copy()

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }
