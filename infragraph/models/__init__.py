"""Data records shared across the engine."""

from infragraph.models.module import (
    MISSING,
    Application,
    EnvironmentConfig,
    ModuleConfig,
    OutputDef,
    VariableDef,
)
from infragraph.models.result import (
    CrossAppAnalysis,
    CrossAppDependency,
    Dependency,
    DependencyAnalysisResult,
    DependencyStatistics,
    GraphEdge,
    GraphNode,
    ModuleCouplings,
    ModuleSummary,
)
from infragraph.models.types import (
    AnalysisWarning,
    DependencyType,
    DomainHeuristic,
    IntegrationType,
    ModuleReference,
    ResourceReference,
)

__all__ = [
    "MISSING",
    "AnalysisWarning",
    "Application",
    "CrossAppAnalysis",
    "CrossAppDependency",
    "Dependency",
    "DependencyAnalysisResult",
    "DependencyStatistics",
    "DependencyType",
    "DomainHeuristic",
    "EnvironmentConfig",
    "GraphEdge",
    "GraphNode",
    "IntegrationType",
    "ModuleConfig",
    "ModuleCouplings",
    "ModuleReference",
    "ModuleSummary",
    "OutputDef",
    "ResourceReference",
    "VariableDef",
]
