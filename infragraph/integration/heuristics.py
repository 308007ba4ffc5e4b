"""Heuristics deciding whether a value points at another application."""

from __future__ import annotations

import re
from typing import Any, Iterable

from infragraph.models.types import DomainHeuristic


def references_application(
    value: Any,
    application_name: str,
    heuristics: Iterable[DomainHeuristic] = (),
) -> bool:
    """Check whether an endpoint value refers to an application.

    Matches:
    - The application name anywhere in the value (case-insensitive)
    - Any heuristic whose application pattern matches the name and whose
      domain pattern matches the value

    Args:
        value: Endpoint value, usually a URL. Non-strings never match.
        application_name: Name of the candidate target application.
        heuristics: Archetype heuristics to try after the name.

    Returns:
        True if the value is taken to reference the application.
    """
    if not value or not isinstance(value, str):
        return False

    if re.search(re.escape(application_name), value, re.IGNORECASE):
        return True

    return any(h.matches(application_name, value) for h in heuristics)


def shares_keyword(a: str, b: str, keywords: Iterable[str]) -> bool:
    """True if both names contain at least one common keyword."""
    a_lower = a.lower()
    b_lower = b.lower()
    return any(k in a_lower and k in b_lower for k in keywords)
