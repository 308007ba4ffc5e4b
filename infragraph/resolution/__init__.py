"""Cross-module dependency resolution."""

from infragraph.resolution.context import DependencyCollector, ResolverContext
from infragraph.resolution.cycles import detect_circular_dependencies
from infragraph.resolution.graph import DependencyGraph
from infragraph.resolution.index import ModuleIndex
from infragraph.resolution.resolver import (
    CrossModuleDependencyResolver,
    resolve_cross_module_dependencies,
)
from infragraph.resolution.statistics import dependency_statistics

__all__ = [
    "CrossModuleDependencyResolver",
    "DependencyCollector",
    "DependencyGraph",
    "ModuleIndex",
    "ResolverContext",
    "detect_circular_dependencies",
    "dependency_statistics",
    "resolve_cross_module_dependencies",
]
