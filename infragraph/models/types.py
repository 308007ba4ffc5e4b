"""Core type definitions: edge kinds, references, warnings, heuristics."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DependencyType(str, Enum):
    """How one module came to depend on another.

    Each value is produced by exactly one scanning pass of the builder.
    """

    VARIABLE_REFERENCE = "variable_reference"
    LOCAL_REFERENCE = "local_reference"
    RESOURCE_REFERENCE = "resource_reference"
    DATA_SOURCE_DEPENDENCY = "data_source_dependency"
    VARIABLE_DEFAULT_REFERENCE = "variable_default_reference"
    EXPLICIT_DEPENDENCY = "explicit_dependency"


class IntegrationType(str, Enum):
    """Coupling kinds between independently deployed applications."""

    API = "api_integration"
    MESSAGING = "messaging_integration"
    DATA = "data_integration"


@dataclass(frozen=True)
class ModuleReference:
    """A ``module.<name>.<output>`` reference found in text."""

    full: str
    module: str
    output: str


@dataclass(frozen=True)
class ResourceReference:
    """A ``<provider>_<kind>.<name>`` reference found in text."""

    full: str
    type: str
    name: str


@dataclass
class AnalysisWarning:
    """A local degradation that did not stop the run.

    Collected alongside results so callers can tell a clean run from a
    degraded-but-completed one without scraping logs.
    """

    code: str  # "malformed_container_definitions", "malformed_policy", ...
    message: str
    location: str  # e.g. "billing.aws_iam_policy.reader"
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "location": self.location,
            "details": dict(self.details),
        }


@dataclass(frozen=True)
class DomainHeuristic:
    """Matches endpoints of an application archetype by domain keywords.

    When the target application's name matches ``application_pattern``,
    an endpoint value matching ``domain_pattern`` counts as a reference
    to that application even if the name itself is absent.
    """

    application_pattern: re.Pattern[str]
    domain_pattern: re.Pattern[str]

    @classmethod
    def compile(cls, application: str, domain: str) -> DomainHeuristic:
        """Build a heuristic from two case-insensitive regex strings.

        Raises:
            ValueError: If either pattern does not compile.
        """
        try:
            return cls(
                application_pattern=re.compile(application, re.IGNORECASE),
                domain_pattern=re.compile(domain, re.IGNORECASE),
            )
        except re.error as exc:
            raise ValueError(f"invalid pattern: {exc}") from exc

    def matches(self, application_name: str, value: str) -> bool:
        return bool(
            self.application_pattern.search(application_name)
            and self.domain_pattern.search(value)
        )
