"""Dependency graph builder: turns references into typed module edges.

Four scanning passes run over the indexed modules:

1. Output references in resolved variables, locals and resource bodies
2. Data sources that read resources managed by another module
3. Declared variable defaults pointing at module outputs
4. Explicit ``depends_on`` entries naming another module's resources

Every edge joins two indexed modules. A module never gets an edge to
itself, and a reference naming an unknown module or resource produces no
edge.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from infragraph.models.module import ModuleConfig
from infragraph.models.types import DependencyType
from infragraph.references.extractors import serialize
from infragraph.resolution.context import ResolverContext

logger = logging.getLogger(__name__)


def _config_blocks(config: Any) -> Iterator[dict[str, Any]]:
    """Yield resource blocks; hcl2json may emit a list per instance."""
    if isinstance(config, list):
        for block in config:
            if isinstance(block, dict):
                yield block
    elif isinstance(config, dict):
        yield config


def _add_output_reference(
    ctx: ResolverContext,
    module_name: str,
    text: str,
    dep_type: DependencyType,
    origin_key: str,
    origin: str,
) -> None:
    for ref in ctx.module_extractor.extract(text):
        if ref.module == module_name or ref.module not in ctx.index:
            continue
        ctx.collector.add(
            module_name,
            ref.module,
            dep_type,
            {origin_key: origin, "reference": ref.full, "type": "output"},
        )


def analyze_output_references(ctx: ResolverContext) -> None:
    """Pass 1: ``module.X.Y`` in resolved variables, locals and resources."""
    for module_name, module in ctx.index.items():
        for var_name, value in module.resolved_variables.items():
            # Only literal strings can carry an expression reference.
            if isinstance(value, str):
                _add_output_reference(
                    ctx, module_name, value,
                    DependencyType.VARIABLE_REFERENCE, "variable", var_name,
                )

        for local_name, value in module.locals.items():
            _add_output_reference(
                ctx, module_name, serialize(value),
                DependencyType.LOCAL_REFERENCE, "local", local_name,
            )

        for resource_type, instances in module.managed_resources.items():
            for resource_name, config in instances.items():
                _add_output_reference(
                    ctx, module_name, serialize(config),
                    DependencyType.RESOURCE_REFERENCE, "resource",
                    f"{resource_type}.{resource_name}",
                )


def analyze_data_source_references(ctx: ResolverContext) -> None:
    """Pass 2: data sources reading resources managed elsewhere."""
    for module_name, module in ctx.index.items():
        for data_type, instances in module.data_resources.items():
            for data_name, config in instances.items():
                for ref in ctx.resource_extractor.extract(serialize(config)):
                    target = ctx.index.find_module_with_resource(ref.type, ref.name)
                    if target is None or target == module_name:
                        continue
                    ctx.collector.add(
                        module_name,
                        target,
                        DependencyType.DATA_SOURCE_DEPENDENCY,
                        {
                            "dataSource": f"{data_type}.{data_name}",
                            "targetResource": f"{ref.type}.{ref.name}",
                            "reference": ref.full,
                        },
                    )


def analyze_variable_defaults(ctx: ResolverContext) -> None:
    """Pass 3: declared defaults (not resolved values) naming other modules."""
    for module_name, module in ctx.index.items():
        for var_name, var_def in module.variables.items():
            if not var_def.default:
                continue
            for ref in ctx.module_extractor.extract(serialize(var_def.default)):
                if ref.module == module_name or ref.module not in ctx.index:
                    continue
                ctx.collector.add(
                    module_name,
                    ref.module,
                    DependencyType.VARIABLE_DEFAULT_REFERENCE,
                    {"variable": var_name, "reference": ref.full},
                )


def _depends_on_entries(module: ModuleConfig) -> Iterator[tuple[str, str]]:
    for resource_type, instances in module.managed_resources.items():
        for resource_name, config in instances.items():
            for block in _config_blocks(config):
                depends_on = block.get("depends_on")
                if not depends_on:
                    continue
                if not isinstance(depends_on, list):
                    depends_on = [depends_on]
                for entry in depends_on:
                    if isinstance(entry, str):
                        yield f"{resource_type}.{resource_name}", entry


def analyze_explicit_dependencies(ctx: ResolverContext) -> None:
    """Pass 4: ``depends_on`` entries owned by another module."""
    for module_name, module in ctx.index.items():
        for resource, entry in _depends_on_entries(module):
            target = ctx.index.find_module_with_resource(entry)
            if target is None or target == module_name:
                continue
            ctx.collector.add(
                module_name,
                target,
                DependencyType.EXPLICIT_DEPENDENCY,
                {"resource": resource, "dependsOn": entry},
            )


PASSES = (
    analyze_output_references,
    analyze_data_source_references,
    analyze_variable_defaults,
    analyze_explicit_dependencies,
)


def collect_dependencies(ctx: ResolverContext) -> None:
    """Run every scanning pass against the context, in order."""
    for scan in PASSES:
        before = len(ctx.collector)
        scan(ctx)
        logger.debug(
            "dependency_pass_complete pass=%s new_edges=%d",
            scan.__name__,
            len(ctx.collector) - before,
        )
