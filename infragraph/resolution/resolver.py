"""Cross-module dependency resolution.

Runs the full pipeline for one environment of one repository:
index -> scanning passes -> graph -> cycles + statistics.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from infragraph.errors import DependencyResolutionError, InfraGraphError, InvalidInputError
from infragraph.models.module import EnvironmentConfig
from infragraph.models.result import DependencyAnalysisResult
from infragraph.models.types import ModuleReference, ResourceReference
from infragraph.references.extractors import (
    ModuleOutputExtractor,
    ReferenceExtractor,
    TypedResourceExtractor,
)
from infragraph.resolution.builder import collect_dependencies
from infragraph.resolution.context import ResolverContext
from infragraph.resolution.cycles import detect_circular_dependencies
from infragraph.resolution.graph import DependencyGraph
from infragraph.resolution.index import ModuleIndex
from infragraph.resolution.statistics import dependency_statistics

logger = logging.getLogger(__name__)


class CrossModuleDependencyResolver:
    """Resolves module-to-module dependencies for an environment.

    The resolver holds only its extractors. All run state lives in a
    ResolverContext created per call, so one instance can be reused.
    """

    def __init__(
        self,
        module_extractor: ReferenceExtractor[ModuleReference] | None = None,
        resource_extractor: ReferenceExtractor[ResourceReference] | None = None,
    ) -> None:
        self._module_extractor = module_extractor or ModuleOutputExtractor()
        self._resource_extractor = resource_extractor or TypedResourceExtractor()

    def resolve(
        self,
        environment_config: EnvironmentConfig | Mapping[str, Any],
    ) -> DependencyAnalysisResult:
        """Resolve cross-module dependencies.

        Args:
            environment_config: Resolved environment, or its wire dict.

        Returns:
            DependencyAnalysisResult for the environment.

        Raises:
            InvalidInputError: If the input shape is unusable.
            DependencyResolutionError: If any stage fails. Nothing partial
                is returned.
        """
        environment = "unknown"
        try:
            if not isinstance(environment_config, EnvironmentConfig):
                if not isinstance(environment_config, Mapping):
                    raise InvalidInputError(
                        "environment_config",
                        f"expected a mapping, got {type(environment_config).__name__}",
                    )
                environment = str(environment_config.get("environment") or "prod")
                environment_config = EnvironmentConfig.from_dict(environment_config)
            environment = environment_config.environment
            ctx = ResolverContext(
                index=ModuleIndex.from_modules(environment_config.modules),
                module_extractor=self._module_extractor,
                resource_extractor=self._resource_extractor,
            )
            collect_dependencies(ctx)

            dependencies = ctx.collector.dependencies
            graph = DependencyGraph.build(ctx.index, dependencies)
            cycles = detect_circular_dependencies(graph)
            statistics = dependency_statistics(ctx.index.names, dependencies)
            module_index = ctx.index.summary()
        except InfraGraphError:
            logger.exception("cross_module_resolution_failed environment=%s", environment)
            raise
        except Exception as exc:
            logger.exception("cross_module_resolution_failed environment=%s", environment)
            raise DependencyResolutionError(environment, str(exc)) from exc

        for name, module in ctx.index.items():
            missing = module.unresolved_variables
            if missing:
                ctx.warn(
                    "unresolved_variables",
                    f"{len(missing)} required variable(s) have no value",
                    name,
                    variables=missing,
                )

        logger.info(
            "cross_module_resolution_complete environment=%s modules=%d dependencies=%d cycles=%d",
            environment,
            len(ctx.index),
            len(dependencies),
            len(cycles),
        )

        return DependencyAnalysisResult(
            environment=environment,
            dependencies=dependencies,
            dependency_graph=graph,
            circular_dependencies=cycles,
            module_index=module_index,
            statistics=statistics,
            warnings=list(ctx.warnings),
        )


def resolve_cross_module_dependencies(
    environment_config: EnvironmentConfig | Mapping[str, Any],
) -> DependencyAnalysisResult:
    """Resolve dependencies with the default regex extractors."""
    return CrossModuleDependencyResolver().resolve(environment_config)
