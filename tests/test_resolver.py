"""End-to-end tests for cross-module dependency resolution."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from infragraph.errors import DependencyResolutionError, InvalidInputError
from infragraph.models.module import EnvironmentConfig
from infragraph.references.extractors import ModuleOutputExtractor
from infragraph.resolution.resolver import (
    CrossModuleDependencyResolver,
    resolve_cross_module_dependencies,
)


def make_environment(modules: dict[str, dict[str, Any]], environment: str = "prod") -> dict[str, Any]:
    """Wire-format environment config as the external parser emits it."""
    return {
        "environment": environment,
        "variables": {},
        "backendConfig": {},
        "modules": {name: {"name": name, **data} for name, data in modules.items()},
    }


@pytest.fixture
def repo_environment() -> dict[str, Any]:
    """vpc <- ec2 (default), vpc <- rds (resource), rds <- ec2 (data), plus iso."""
    return make_environment(
        {
            "vpc": {
                "type": "networking",
                "outputs": {"vpc_id": {"value": "${aws_vpc.main.id}"}},
                "managedResources": {"aws_vpc": {"main": {"cidr_block": "10.0.0.0/16"}}},
            },
            "ec2": {
                "type": "compute",
                "variables": {"vpc_id_ref": {"type": "string", "default": "module.vpc.vpc_id"}},
                "dataResources": {"aws_db_instance": {"primary": {"id": "${aws_db_instance.main.id}"}}},
                "resolvedVariables": {"vpc_id_ref": "vpc-123"},
            },
            "rds": {
                "type": "database",
                "managedResources": {
                    "aws_db_instance": {"main": {"vpc": "${module.vpc.vpc_id}"}},
                },
            },
            "iso": {"type": "misc"},
        }
    )


class TestResolution:
    """Tests for the full pipeline."""

    def test_expected_edges(self, repo_environment: dict[str, Any]) -> None:
        result = resolve_cross_module_dependencies(repo_environment)

        edges = {(d.source, d.target, d.type.value) for d in result.dependencies}
        assert edges == {
            ("ec2", "vpc", "variable_default_reference"),
            ("rds", "vpc", "resource_reference"),
            ("ec2", "rds", "data_source_dependency"),
        }

    def test_single_default_reference_scenario(self) -> None:
        """vpc + ec2 with a default module reference -> exactly one edge."""
        env = make_environment(
            {
                "vpc": {"outputs": {"vpc_id": {"value": "x"}}},
                "ec2": {"variables": {"vpc_id_ref": {"default": "module.vpc.vpc_id"}}},
            }
        )
        result = resolve_cross_module_dependencies(env)

        assert [d.to_dict() for d in result.dependencies] == [
            {
                "from": "ec2",
                "to": "vpc",
                "type": "variable_default_reference",
                "metadata": {"variable": "vpc_id_ref", "reference": "module.vpc.vpc_id"},
            }
        ]

    def test_isolated_module(self, repo_environment: dict[str, Any]) -> None:
        result = resolve_cross_module_dependencies(repo_environment)

        assert result.statistics.isolated_modules == ["iso"]

    def test_graph_nodes_match_modules(self, repo_environment: dict[str, Any]) -> None:
        """Every edge end is a known node."""
        result = resolve_cross_module_dependencies(repo_environment)
        node_ids = {n.id for n in result.dependency_graph.nodes}

        assert node_ids == {"vpc", "ec2", "rds", "iso"}
        for edge in result.dependency_graph.edges:
            assert edge.source in node_ids
            assert edge.target in node_ids

    def test_reference_to_unknown_module_leaves_no_edge(self) -> None:
        """A module.X.Y naming a module outside the repository is dropped."""
        env = make_environment(
            {
                "app": {
                    "locals": {"x": "module.ghost.id"},
                    "variables": {"ref": {"default": "module.ghost.arn"}},
                },
                "vpc": {},
            }
        )
        data = resolve_cross_module_dependencies(env).to_dict()

        node_ids = {n["id"] for n in data["dependencyGraph"]["nodes"]}
        dangling = [
            e for e in data["dependencyGraph"]["edges"]
            if e["source"] not in node_ids or e["target"] not in node_ids
        ]
        assert dangling == []
        assert data["dependencies"] == []
        assert data["statistics"]["isolatedModules"] == ["app", "vpc"]

    def test_cycle_across_modules(self) -> None:
        """A -> B -> C -> A via output references is detected in order."""
        env = make_environment(
            {
                "a": {"locals": {"x": "module.b.out"}},
                "b": {"locals": {"x": "module.c.out"}},
                "c": {"locals": {"x": "module.a.out"}},
            }
        )
        result = resolve_cross_module_dependencies(env)

        assert result.has_cycles
        assert ["a", "b", "c", "a"] in result.circular_dependencies

    def test_deterministic(self, repo_environment: dict[str, Any]) -> None:
        """Same input twice -> identical dependency lists."""
        first = resolve_cross_module_dependencies(repo_environment)
        second = resolve_cross_module_dependencies(repo_environment)

        assert [d.to_dict() for d in first.dependencies] == [d.to_dict() for d in second.dependencies]

    def test_no_duplicate_edges(self, repo_environment: dict[str, Any]) -> None:
        repo_environment["modules"]["rds"]["locals"] = {
            "a": "module.vpc.vpc_id",
            "b": "module.vpc.vpc_id module.vpc.vpc_id",
        }
        result = resolve_cross_module_dependencies(repo_environment)

        rendered = [repr(sorted(d.to_dict().items())) for d in result.dependencies]
        assert len(rendered) == len(set(rendered))

    def test_resolver_reusable(self) -> None:
        """State from one run never leaks into the next."""
        resolver = CrossModuleDependencyResolver()
        first = resolver.resolve(make_environment({"a": {"locals": {"x": "module.b.y"}}, "b": {}}))
        second = resolver.resolve(make_environment({"c": {}}))

        assert len(first.dependencies) == 1
        assert second.dependencies == []
        assert [n.id for n in second.dependency_graph.nodes] == ["c"]

    def test_accepts_environment_config(self) -> None:
        env = EnvironmentConfig.from_dict(make_environment({"a": {}}, environment="staging"))
        result = resolve_cross_module_dependencies(env)

        assert result.environment == "staging"

    def test_custom_extractor(self) -> None:
        """A substituted extractor drives the reference passes."""

        class NothingExtractor(ModuleOutputExtractor):
            def extract(self, text: str) -> list:
                return []

        resolver = CrossModuleDependencyResolver(module_extractor=NothingExtractor())
        result = resolver.resolve(make_environment({"a": {"locals": {"x": "module.b.y"}}, "b": {}}))

        assert result.dependencies == []


class TestWarnings:
    """Tests for structured degradation reporting."""

    def test_unresolved_variables_reported(self) -> None:
        """A None resolved value is surfaced as a warning."""
        env = make_environment(
            {"app": {"variables": {"region": {}}, "resolvedVariables": {"region": None}}}
        )
        result = resolve_cross_module_dependencies(env)

        assert len(result.warnings) == 1
        assert result.warnings[0].code == "unresolved_variables"
        assert result.warnings[0].details == {"variables": ["region"]}


class TestWireFormat:
    """Tests for DependencyAnalysisResult.to_dict."""

    def test_top_level_keys(self, repo_environment: dict[str, Any]) -> None:
        data = resolve_cross_module_dependencies(repo_environment).to_dict()

        assert set(data) == {
            "dependencies",
            "dependencyGraph",
            "circularDependencies",
            "moduleIndex",
            "statistics",
            "warnings",
        }
        assert set(data["dependencyGraph"]) == {"nodes", "edges"}
        assert data["moduleIndex"]["vpc"] == {
            "type": "networking",
            "outputsCount": 1,
            "variablesCount": 0,
            "resourcesCount": 1,
            "dataSourcesCount": 0,
        }


class TestErrors:
    """Tests for top-level failure handling."""

    def test_modules_not_mapping(self, caplog: pytest.LogCaptureFixture) -> None:
        """Unusable input fails the whole run and is logged."""
        with caplog.at_level(logging.ERROR):
            with pytest.raises(InvalidInputError):
                resolve_cross_module_dependencies({"environment": "dev", "modules": ["a"]})

        assert "cross_module_resolution_failed" in caplog.text

    def test_non_mapping_input(self, caplog: pytest.LogCaptureFixture) -> None:
        """Input that is not a mapping is rejected and logged."""
        with caplog.at_level(logging.ERROR):
            with pytest.raises(InvalidInputError) as exc_info:
                resolve_cross_module_dependencies(["not", "a", "config"])  # type: ignore[arg-type]

        assert exc_info.value.field_name == "environment_config"
        assert "cross_module_resolution_failed environment=unknown" in caplog.text

    def test_stage_failure_wrapped(self) -> None:
        """Unexpected failures are chained into DependencyResolutionError."""

        class BrokenExtractor(ModuleOutputExtractor):
            def extract(self, text: str) -> list:
                raise RuntimeError("boom")

        resolver = CrossModuleDependencyResolver(module_extractor=BrokenExtractor())
        with pytest.raises(DependencyResolutionError) as exc_info:
            resolver.resolve(make_environment({"a": {"locals": {"x": "1"}}}))

        assert exc_info.value.environment == "prod"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
