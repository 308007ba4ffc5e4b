"""Error hierarchy for the dependency engine.

Only top-level failures raise. Local degradations (missing optional
fields, malformed embedded JSON, unresolvable references) are handled
where they occur and never surface as exceptions.
"""

from __future__ import annotations


class InfraGraphError(Exception):
    """Base error for the dependency engine.

    All engine-specific errors inherit from this.
    """

    pass


# =============================================================================
# Input Errors
# =============================================================================


class InvalidInputError(InfraGraphError):
    """Input is shaped so that no analysis is possible.

    Attributes:
        field_name: The offending field
        reason: Human-readable error description
    """

    def __init__(self, field_name: str, reason: str) -> None:
        self.field_name = field_name
        self.reason = reason
        super().__init__(f"Invalid input for {field_name}: {reason}")


class ConfigurationError(InfraGraphError):
    """Heuristic configuration could not be loaded.

    Attributes:
        source: Path or description of the configuration source
        reason: Human-readable error description
    """

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid configuration in {source}: {reason}")


# =============================================================================
# Resolution Errors
# =============================================================================


class DependencyResolutionError(InfraGraphError):
    """A cross-module resolution run failed as a whole.

    The underlying exception is chained as ``__cause__``. No partial
    graph is ever returned alongside this error.

    Attributes:
        environment: Environment name of the failed run
        reason: Human-readable error description
    """

    def __init__(self, environment: str, reason: str) -> None:
        self.environment = environment
        self.reason = reason
        super().__init__(f"Dependency resolution failed for {environment}: {reason}")
