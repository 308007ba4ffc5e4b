"""Detection constants and heuristic configuration loading.

The cross-application detector reads these defaults. Callers who know
their own application archetypes pass their own heuristics instead, or
load them from YAML with ``load_heuristics``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from infragraph.errors import ConfigurationError
from infragraph.models.types import DomainHeuristic

# Environment variable name fragments that mark an API endpoint
ECS_API_ENV_MARKERS: tuple[str, ...] = ("API_URL",)
LAMBDA_API_ENV_MARKERS: tuple[str, ...] = ("API_URL", "ENDPOINT")

# Shared naming vocabulary that suggests a topic feeds a queue
MESSAGING_KEYWORDS: tuple[str, ...] = ("insight", "event", "notification", "alert")

# (application name pattern, endpoint domain pattern)
DEFAULT_DOMAIN_HEURISTICS: tuple[DomainHeuristic, ...] = (
    DomainHeuristic.compile("insight", r"insight.*engine|sagemaker|ml.*inference"),
    DomainHeuristic.compile("engagement", r"engagement.*hub|analytics.*service"),
)

# How many modules the statistics report as most coupled
MOST_COUPLED_LIMIT: int = 5


@dataclass
class HeuristicConfig:
    """Cross-application heuristics loaded from a YAML file."""

    heuristics: list[DomainHeuristic] = field(default_factory=list)
    keywords: tuple[str, ...] = MESSAGING_KEYWORDS


def load_heuristics(path: str | Path) -> HeuristicConfig:
    """Load cross-application heuristics from a YAML file.

    Expected layout::

        heuristics:
          - application: insight
            domain: "insight.*engine|sagemaker"
        keywords: [insight, event]

    Args:
        path: Path to the YAML file.

    Returns:
        HeuristicConfig with compiled heuristics.

    Raises:
        ConfigurationError: If the file is unreadable or malformed.
    """
    source = str(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except OSError as exc:
        raise ConfigurationError(source, str(exc)) from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(source, f"invalid YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(source, "top level must be a mapping")

    heuristics: list[DomainHeuristic] = []
    for i, entry in enumerate(data.get("heuristics") or []):
        if not isinstance(entry, dict) or "application" not in entry or "domain" not in entry:
            raise ConfigurationError(
                source, f"heuristics[{i}] needs 'application' and 'domain' keys"
            )
        try:
            heuristics.append(
                DomainHeuristic.compile(str(entry["application"]), str(entry["domain"]))
            )
        except ValueError as exc:
            raise ConfigurationError(source, f"heuristics[{i}]: {exc}") from exc

    keywords = data.get("keywords")
    if keywords is None:
        return HeuristicConfig(heuristics=heuristics)
    if not isinstance(keywords, list):
        raise ConfigurationError(source, "keywords must be a list")
    return HeuristicConfig(
        heuristics=heuristics,
        keywords=tuple(str(k).lower() for k in keywords),
    )
