"""Tests for dependency statistics."""

from __future__ import annotations

from infragraph.models.result import Dependency
from infragraph.models.types import DependencyType
from infragraph.resolution.statistics import dependency_statistics


def dep(source: str, target: str, dep_type: DependencyType = DependencyType.LOCAL_REFERENCE) -> Dependency:
    return Dependency(source=source, target=target, type=dep_type, metadata={"s": source})


class TestStatistics:
    """Tests for dependency_statistics."""

    def test_type_histogram(self) -> None:
        stats = dependency_statistics(
            ["a", "b", "c"],
            [
                dep("a", "b"),
                dep("a", "c", DependencyType.EXPLICIT_DEPENDENCY),
                dep("b", "c"),
            ],
        )

        assert stats.total_dependencies == 3
        assert stats.dependency_types == {"local_reference": 2, "explicit_dependency": 1}

    def test_module_counts(self) -> None:
        stats = dependency_statistics(["a", "b"], [dep("a", "b")])

        assert stats.module_dependency_counts["a"].to_dict() == {
            "outgoing": 1,
            "incoming": 0,
            "total": 1,
        }
        assert stats.module_dependency_counts["b"].incoming == 1

    def test_isolated_modules(self) -> None:
        """Modules with no edges either way are isolated."""
        stats = dependency_statistics(["a", "b", "lonely"], [dep("a", "b")])

        assert stats.isolated_modules == ["lonely"]

    def test_most_coupled_top_five(self) -> None:
        """Top five by total, descending; ties keep module order."""
        names = ["hub", "m1", "m2", "m3", "m4", "m5", "m6"]
        deps = [dep("hub", n) for n in names[1:]] + [dep("m6", "m5")]
        stats = dependency_statistics(names, deps)

        ranked = [c.module for c in stats.most_dependent_modules]
        assert ranked == ["hub", "m5", "m6", "m1", "m2"]
        assert stats.most_dependent_modules[0].total == 6

    def test_wire_keys(self) -> None:
        data = dependency_statistics(["a", "b"], [dep("a", "b")]).to_dict()

        assert set(data) == {
            "totalDependencies",
            "dependencyTypes",
            "moduleDependencyCounts",
            "mostDependendModules",
            "isolatedModules",
        }
        assert data["mostDependendModules"][0] == {
            "module": "a",
            "outgoing": 1,
            "incoming": 0,
            "total": 1,
        }

    def test_empty(self) -> None:
        stats = dependency_statistics([], [])

        assert stats.total_dependencies == 0
        assert stats.most_dependent_modules == []
