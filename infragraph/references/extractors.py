"""Reference extraction using regex patterns.

Finds inter-module references in attribute values. Extraction runs over
text only: nested values are serialized by the caller first, so a
reference buried in a list or map is still found. Coincidental matches
inside literal strings are accepted.
"""

from __future__ import annotations

import json
import re
from typing import Any, Protocol, TypeVar

from infragraph.models.types import ModuleReference, ResourceReference

RefT = TypeVar("RefT", covariant=True)

# module.<name>.<output>; names may carry hyphens, outputs may not
MODULE_OUTPUT_PATTERN = re.compile(
    r"module\.([a-zA-Z_][a-zA-Z0-9_-]*?)\.([a-zA-Z_][a-zA-Z0-9_]*)"
)


class ReferenceExtractor(Protocol[RefT]):
    """Finds structured references in a piece of text."""

    def extract(self, text: str) -> list[RefT]:
        """Return every non-overlapping reference in ``text``, in order."""
        ...


class ModuleOutputExtractor:
    """Extracts ``module.<name>.<output>`` references."""

    pattern = MODULE_OUTPUT_PATTERN

    def extract(self, text: str) -> list[ModuleReference]:
        return [
            ModuleReference(full=m.group(0), module=m.group(1), output=m.group(2))
            for m in self.pattern.finditer(text)
        ]


class TypedResourceExtractor:
    """Extracts ``<provider>_<kind>.<name>`` resource references.

    By default any lowercase provider prefix is accepted. Pass
    ``providers=["aws"]`` to restrict matches to known vendors.
    """

    def __init__(self, providers: list[str] | tuple[str, ...] | None = None) -> None:
        if providers:
            prefix = "(?:" + "|".join(re.escape(p) for p in providers) + ")"
        else:
            prefix = "[a-z][a-z0-9]*"
        self.pattern = re.compile(rf"\b({prefix}_[a-zA-Z0-9_]+)\.([a-zA-Z0-9_-]+)")

    def extract(self, text: str) -> list[ResourceReference]:
        return [
            ResourceReference(full=m.group(0), type=m.group(1), name=m.group(2))
            for m in self.pattern.finditer(text)
        ]


_module_extractor = ModuleOutputExtractor()
_resource_extractor = TypedResourceExtractor()


def extract_module_references(text: str) -> list[ModuleReference]:
    """Find all module output references in text.

    Args:
        text: Raw attribute value or serialized document.

    Returns:
        References in order of appearance. Empty for non-matching text.
    """
    return _module_extractor.extract(text)


def extract_resource_references(text: str) -> list[ResourceReference]:
    """Find all typed resource references in text.

    Args:
        text: Raw attribute value or serialized document.

    Returns:
        References in order of appearance. Empty for non-matching text.
    """
    return _resource_extractor.extract(text)


def serialize(value: Any) -> str:
    """Render a nested value as text for extraction.

    Strings pass through untouched; everything else becomes JSON.
    Values JSON cannot represent fall back to ``str``.
    """
    if isinstance(value, str):
        return value
    return json.dumps(value, default=str)
