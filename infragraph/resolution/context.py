"""Per-run state of a cross-module resolution.

A fresh ResolverContext is built for every run and handed to each stage,
so nothing from a previous run can leak into the next.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from infragraph.models.result import Dependency
from infragraph.models.types import (
    AnalysisWarning,
    DependencyType,
    ModuleReference,
    ResourceReference,
)
from infragraph.references.extractors import (
    ModuleOutputExtractor,
    ReferenceExtractor,
    TypedResourceExtractor,
)
from infragraph.resolution.index import ModuleIndex


def _metadata_key(metadata: dict[str, Any]) -> str:
    """Canonical text of metadata so equal content compares equal."""
    return json.dumps(metadata, sort_keys=True, default=str)


class DependencyCollector:
    """Append-only edge list that drops exact duplicates.

    Two edges are duplicates only when ``source``, ``target``, ``type``
    and the deep value of ``metadata`` all match. Edges that differ in
    metadata alone are kept.
    """

    def __init__(self) -> None:
        self._edges: list[Dependency] = []
        self._seen: set[tuple[str, str, str, str]] = set()

    def add(
        self,
        source: str,
        target: str,
        dep_type: DependencyType,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        """Record an edge unless an identical one exists.

        Returns:
            True if the edge was appended.
        """
        metadata = dict(metadata or {})
        key = (source, target, dep_type.value, _metadata_key(metadata))
        if key in self._seen:
            return False
        self._seen.add(key)
        self._edges.append(
            Dependency(source=source, target=target, type=dep_type, metadata=metadata)
        )
        return True

    def __len__(self) -> int:
        return len(self._edges)

    @property
    def dependencies(self) -> list[Dependency]:
        return list(self._edges)


@dataclass
class ResolverContext:
    """Everything one resolution run reads and writes."""

    index: ModuleIndex
    module_extractor: ReferenceExtractor[ModuleReference] = field(
        default_factory=ModuleOutputExtractor
    )
    resource_extractor: ReferenceExtractor[ResourceReference] = field(
        default_factory=TypedResourceExtractor
    )
    collector: DependencyCollector = field(default_factory=DependencyCollector)
    warnings: list[AnalysisWarning] = field(default_factory=list)

    def warn(self, code: str, message: str, location: str, **details: Any) -> None:
        self.warnings.append(
            AnalysisWarning(code=code, message=message, location=location, details=details)
        )
