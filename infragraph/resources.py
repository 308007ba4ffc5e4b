"""Resource-level dependencies inside a single application.

Finer-grained than the module graph: edges connect individual resources
(``aws_instance.web -> aws_vpc.main``) within one parsed configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping

from infragraph.references.extractors import TypedResourceExtractor


@dataclass(frozen=True)
class ResourceDependency:
    source: str  # "type.name" of the depending resource
    target: str  # referenced resource, as written
    type: Literal["explicit", "reference"]


def infer_resource_dependencies(
    parsed: Mapping[str, Any],
    extractor: TypedResourceExtractor | None = None,
) -> list[ResourceDependency]:
    """Infer resource edges from a parsed configuration.

    ``depends_on`` entries become ``explicit`` edges. Typed references in
    top-level string attributes, and in lists of strings, become
    ``reference`` edges; ``depends_on`` itself is not rescanned. Nested
    blocks are not searched.

    Args:
        parsed: ``{"resource": {type: {name: config | [config, ...]}}}``.
        extractor: Resource reference extractor to use.

    Returns:
        Edges in discovery order; repeats are kept.
    """
    extractor = extractor or TypedResourceExtractor()
    edges: list[ResourceDependency] = []

    for resource_type, instances in (parsed.get("resource") or {}).items():
        if not isinstance(instances, Mapping):
            continue
        for name, configs in instances.items():
            source = f"{resource_type}.{name}"
            blocks = configs if isinstance(configs, list) else [configs]
            for config in blocks:
                if not isinstance(config, Mapping):
                    continue

                depends_on = config.get("depends_on")
                if depends_on:
                    for entry in depends_on if isinstance(depends_on, list) else [depends_on]:
                        edges.append(ResourceDependency(source, str(entry), "explicit"))

                for attr, value in config.items():
                    if attr == "depends_on":
                        continue
                    texts = [value] if isinstance(value, str) else (
                        [v for v in value if isinstance(v, str)] if isinstance(value, list) else []
                    )
                    for text in texts:
                        for ref in extractor.extract(text):
                            edges.append(ResourceDependency(source, ref.full, "reference"))

    return edges
