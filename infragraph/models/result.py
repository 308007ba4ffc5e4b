"""Output records of a dependency analysis run.

``to_dict()`` renders each record in the wire format consumed by the
visualization layer (camelCase keys, ``from``/``to`` edge ends).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from infragraph.models.types import AnalysisWarning, DependencyType, IntegrationType

if TYPE_CHECKING:
    from infragraph.resolution.graph import DependencyGraph


@dataclass
class Dependency:
    """A directed edge between two modules of one repository."""

    source: str  # depending module
    target: str  # module depended upon
    type: DependencyType
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.source,
            "to": self.target,
            "type": self.type.value,
            "metadata": dict(self.metadata),
        }


@dataclass
class CrossAppDependency:
    """An inferred coupling between two applications.

    Ends are qualified as ``app.resourceType.resourceName`` (or
    ``app.api_gateway`` for API targets).
    """

    source: str
    target: str
    type: IntegrationType
    metadata: dict[str, Any] = field(default_factory=dict)
    cross_application: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.source,
            "to": self.target,
            "type": self.type.value,
            "metadata": dict(self.metadata),
            "crossApplication": self.cross_application,
        }


@dataclass
class CrossAppAnalysis:
    """Result of a pairwise cross-application scan."""

    dependencies: list[CrossAppDependency] = field(default_factory=list)
    warnings: list[AnalysisWarning] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        """True if any embedded document had to be skipped."""
        return len(self.warnings) > 0

    def to_list(self) -> list[dict[str, Any]]:
        return [d.to_dict() for d in self.dependencies]


@dataclass
class GraphNode:
    id: str
    type: str | None
    label: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "type": self.type, "label": self.label}


@dataclass
class GraphEdge:
    source: str
    target: str
    type: DependencyType
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "type": self.type.value,
            "metadata": dict(self.metadata),
        }


@dataclass
class ModuleSummary:
    """Size summary of one indexed module."""

    type: str | None
    outputs_count: int
    variables_count: int
    resources_count: int
    data_sources_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "outputsCount": self.outputs_count,
            "variablesCount": self.variables_count,
            "resourcesCount": self.resources_count,
            "dataSourcesCount": self.data_sources_count,
        }


@dataclass
class ModuleCouplings:
    """Edge counts touching one module."""

    module: str
    outgoing: int
    incoming: int

    @property
    def total(self) -> int:
        return self.outgoing + self.incoming

    def to_dict(self, include_module: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {
            "outgoing": self.outgoing,
            "incoming": self.incoming,
            "total": self.total,
        }
        if include_module:
            data = {"module": self.module, **data}
        return data


@dataclass
class DependencyStatistics:
    total_dependencies: int = 0
    dependency_types: dict[str, int] = field(default_factory=dict)
    module_dependency_counts: dict[str, ModuleCouplings] = field(default_factory=dict)
    most_dependent_modules: list[ModuleCouplings] = field(default_factory=list)
    isolated_modules: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalDependencies": self.total_dependencies,
            "dependencyTypes": dict(self.dependency_types),
            "moduleDependencyCounts": {
                name: counts.to_dict() for name, counts in self.module_dependency_counts.items()
            },
            # Key spelling is part of the consumer contract.
            "mostDependendModules": [
                counts.to_dict(include_module=True) for counts in self.most_dependent_modules
            ],
            "isolatedModules": list(self.isolated_modules),
        }


@dataclass
class DependencyAnalysisResult:
    """Everything one cross-module resolution run produces."""

    environment: str
    dependencies: list[Dependency]
    dependency_graph: DependencyGraph
    circular_dependencies: list[list[str]]
    module_index: dict[str, ModuleSummary]
    statistics: DependencyStatistics
    warnings: list[AnalysisWarning] = field(default_factory=list)

    @property
    def has_cycles(self) -> bool:
        return len(self.circular_dependencies) > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "dependencies": [d.to_dict() for d in self.dependencies],
            "dependencyGraph": self.dependency_graph.to_dict(),
            "circularDependencies": [list(c) for c in self.circular_dependencies],
            "moduleIndex": {name: s.to_dict() for name, s in self.module_index.items()},
            "statistics": self.statistics.to_dict(),
            "warnings": [w.to_dict() for w in self.warnings],
        }
