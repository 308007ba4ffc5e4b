"""Cross-application integration detection."""

from infragraph.integration.detector import (
    CrossApplicationDetector,
    infer_cross_application_dependencies,
)
from infragraph.integration.heuristics import references_application, shares_keyword

__all__ = [
    "CrossApplicationDetector",
    "infer_cross_application_dependencies",
    "references_application",
    "shares_keyword",
]
