"""Text-level reference discovery."""

from infragraph.references.extractors import (
    ModuleOutputExtractor,
    ReferenceExtractor,
    TypedResourceExtractor,
    extract_module_references,
    extract_resource_references,
    serialize,
)

__all__ = [
    "ModuleOutputExtractor",
    "ReferenceExtractor",
    "TypedResourceExtractor",
    "extract_module_references",
    "extract_resource_references",
    "serialize",
]
