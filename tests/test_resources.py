"""Tests for resource-level dependency inference."""

from __future__ import annotations

from infragraph.references.extractors import TypedResourceExtractor
from infragraph.resources import ResourceDependency, infer_resource_dependencies


class TestInferResourceDependencies:
    """Tests for explicit and reference edges between resources."""

    def test_explicit_and_reference_edges(self) -> None:
        parsed = {
            "resource": {
                "aws_instance": {
                    "web": {
                        "depends_on": ["aws_iam_role.web"],
                        "subnet_id": "${aws_subnet.private.id}",
                        "vpc_security_group_ids": ["${aws_security_group.web.id}", 3],
                        "tags": {"Name": "aws_vpc.main"},
                    }
                }
            }
        }

        edges = infer_resource_dependencies(parsed)

        assert edges == [
            ResourceDependency("aws_instance.web", "aws_iam_role.web", "explicit"),
            ResourceDependency("aws_instance.web", "aws_subnet.private", "reference"),
            ResourceDependency("aws_instance.web", "aws_security_group.web", "reference"),
        ]

    def test_scalar_depends_on(self) -> None:
        parsed = {"resource": {"aws_eip": {"ip": {"depends_on": "aws_internet_gateway.gw"}}}}

        assert infer_resource_dependencies(parsed) == [
            ResourceDependency("aws_eip.ip", "aws_internet_gateway.gw", "explicit")
        ]

    def test_list_shaped_blocks(self) -> None:
        """hcl2json lists of blocks are each scanned."""
        parsed = {
            "resource": {
                "aws_route": {
                    "r": [
                        {"gateway_id": "${aws_internet_gateway.gw.id}"},
                        {"nat_gateway_id": "${aws_nat_gateway.nat.id}"},
                    ]
                }
            }
        }

        targets = [e.target for e in infer_resource_dependencies(parsed)]

        assert targets == ["aws_internet_gateway.gw", "aws_nat_gateway.nat"]

    def test_repeats_kept(self) -> None:
        parsed = {
            "resource": {
                "aws_lb": {"lb": {"a": "aws_subnet.one.id", "b": "aws_subnet.one.arn"}}
            }
        }

        assert len(infer_resource_dependencies(parsed)) == 2

    def test_provider_restriction(self) -> None:
        parsed = {
            "resource": {
                "aws_instance": {"web": {"a": "google_compute_network.vpc", "b": "aws_vpc.main"}}
            }
        }

        edges = infer_resource_dependencies(parsed, TypedResourceExtractor(providers=["aws"]))

        assert [e.target for e in edges] == ["aws_vpc.main"]

    def test_empty(self) -> None:
        assert infer_resource_dependencies({}) == []
        assert infer_resource_dependencies({"resource": {"aws_vpc": "oops"}}) == []
