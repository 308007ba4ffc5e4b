"""Dependency resolution engine for infrastructure-as-code repositories."""

from infragraph.environment import build_environment_config, resolve_module_variables
from infragraph.errors import (
    ConfigurationError,
    DependencyResolutionError,
    InfraGraphError,
    InvalidInputError,
)
from infragraph.integration.detector import (
    CrossApplicationDetector,
    infer_cross_application_dependencies,
)
from infragraph.models import (
    Application,
    CrossAppDependency,
    Dependency,
    DependencyAnalysisResult,
    DependencyType,
    EnvironmentConfig,
    IntegrationType,
    ModuleConfig,
)
from infragraph.resolution.resolver import (
    CrossModuleDependencyResolver,
    resolve_cross_module_dependencies,
)
from infragraph.resources import infer_resource_dependencies

__all__ = [
    "Application",
    "ConfigurationError",
    "CrossAppDependency",
    "CrossApplicationDetector",
    "CrossModuleDependencyResolver",
    "Dependency",
    "DependencyAnalysisResult",
    "DependencyResolutionError",
    "DependencyType",
    "EnvironmentConfig",
    "InfraGraphError",
    "IntegrationType",
    "InvalidInputError",
    "ModuleConfig",
    "build_environment_config",
    "infer_cross_application_dependencies",
    "infer_resource_dependencies",
    "resolve_cross_module_dependencies",
    "resolve_module_variables",
]
