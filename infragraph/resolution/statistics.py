"""Summary statistics over a resolved dependency list."""

from __future__ import annotations

from collections import Counter

from infragraph.config import MOST_COUPLED_LIMIT
from infragraph.models.result import Dependency, DependencyStatistics, ModuleCouplings


def dependency_statistics(
    module_names: list[str],
    dependencies: list[Dependency],
    limit: int = MOST_COUPLED_LIMIT,
) -> DependencyStatistics:
    """Aggregate edge counts per type and per module.

    Args:
        module_names: Indexed modules, in index order.
        dependencies: Collected edges.
        limit: How many modules to report as most coupled.

    Returns:
        DependencyStatistics. Ties in the most-coupled ranking keep
        index order.
    """
    outgoing = Counter(d.source for d in dependencies)
    incoming = Counter(d.target for d in dependencies)
    types = Counter(d.type.value for d in dependencies)

    counts: dict[str, ModuleCouplings] = {}
    isolated: list[str] = []
    for name in module_names:
        couplings = ModuleCouplings(module=name, outgoing=outgoing[name], incoming=incoming[name])
        counts[name] = couplings
        if couplings.total == 0:
            isolated.append(name)

    ranked = sorted(counts.values(), key=lambda c: c.total, reverse=True)

    return DependencyStatistics(
        total_dependencies=len(dependencies),
        dependency_types=dict(types),
        module_dependency_counts=counts,
        most_dependent_modules=ranked[:limit],
        isolated_modules=isolated,
    )
