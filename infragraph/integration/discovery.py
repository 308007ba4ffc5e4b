"""Extraction of integration-relevant resources from one application.

Each extractor walks ``resources["resource"]`` and returns flat records.
Embedded JSON documents that fail to parse are skipped one at a time and
reported to the ``on_error`` callback; the walk continues.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

from infragraph.models.module import Application

logger = logging.getLogger(__name__)

# (location, code, error) -> None
ErrorCallback = Callable[[str, str, Exception], None]


def ignore_error(location: str, code: str, error: Exception) -> None:
    pass


@dataclass
class TopicDef:
    type: str
    name: str
    topic_name: str
    config: dict[str, Any]


@dataclass
class SubscriberDef:
    """An SNS subscription or an SQS queue that may receive from a topic."""

    type: str
    name: str
    subscription_type: str  # protocol for subscriptions, "sqs" for queues
    topic_arn: str | None = None
    queue_name: str | None = None
    config: dict[str, Any] = field(default_factory=dict)


@dataclass
class BucketDef:
    type: str
    name: str
    bucket_name: str
    config: dict[str, Any]


@dataclass
class S3AccessDef:
    """One IAM policy statement granting S3 actions."""

    type: str
    name: str
    actions: list[str]
    resources: list[str]

    @property
    def access_type(self) -> str:
        return ",".join(self.actions)


@dataclass
class EnvironmentEndpoint:
    """An API-looking environment variable on a compute resource."""

    type: str
    name: str
    variable: str
    value: Any
    integration_type: str  # "REST_API" or "LAMBDA_INVOKE"


def iter_blocks(app: Application, resource_type: str) -> Iterator[tuple[str, dict[str, Any]]]:
    """Yield ``(name, config)`` for every block of a resource type."""
    instances = app.resource_blocks.get(resource_type) or {}
    for name, configs in instances.items():
        blocks = configs if isinstance(configs, list) else [configs]
        for config in blocks:
            if isinstance(config, dict):
                yield name, config


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else [value]


def _load_embedded(value: Any) -> Any:
    """Parse a JSON document that may already be decoded."""
    if isinstance(value, str):
        return json.loads(value)
    return value


def extract_sns_topics(app: Application) -> list[TopicDef]:
    return [
        TopicDef(
            type="aws_sns_topic",
            name=name,
            topic_name=str(config.get("name") or name),
            config=config,
        )
        for name, config in iter_blocks(app, "aws_sns_topic")
    ]


def extract_subscribers(app: Application) -> list[SubscriberDef]:
    """SNS subscriptions and SQS queues, in resource order."""
    subscribers: list[SubscriberDef] = []
    for resource_type in app.resource_blocks:
        if resource_type == "aws_sns_topic_subscription":
            for name, config in iter_blocks(app, resource_type):
                topic_arn = config.get("topic_arn")
                subscribers.append(
                    SubscriberDef(
                        type=resource_type,
                        name=name,
                        subscription_type=str(config.get("protocol") or "unknown"),
                        topic_arn=topic_arn if isinstance(topic_arn, str) else None,
                        config=config,
                    )
                )
        elif resource_type == "aws_sqs_queue":
            for name, config in iter_blocks(app, resource_type):
                subscribers.append(
                    SubscriberDef(
                        type=resource_type,
                        name=name,
                        subscription_type="sqs",
                        queue_name=str(config.get("name") or name),
                        config=config,
                    )
                )
    return subscribers


def extract_s3_buckets(app: Application) -> list[BucketDef]:
    return [
        BucketDef(
            type="aws_s3_bucket",
            name=name,
            bucket_name=str(config.get("bucket") or name),
            config=config,
        )
        for name, config in iter_blocks(app, "aws_s3_bucket")
    ]


def extract_s3_access(app: Application, on_error: ErrorCallback = ignore_error) -> list[S3AccessDef]:
    """IAM policy statements that grant ``s3:`` actions on S3 ARNs."""
    access: list[S3AccessDef] = []
    for resource_type in ("aws_iam_role_policy", "aws_iam_policy"):
        for name, config in iter_blocks(app, resource_type):
            if not config.get("policy"):
                continue
            location = f"{app.name}.{resource_type}.{name}"
            try:
                policy = _load_embedded(config["policy"])
            except (TypeError, ValueError) as exc:
                logger.warning("malformed_policy location=%s error=%s", location, exc)
                on_error(location, "malformed_policy", exc)
                continue
            if not isinstance(policy, dict):
                continue

            for statement in _as_list(policy.get("Statement") or []):
                if not isinstance(statement, dict):
                    continue
                if not statement.get("Action") or not statement.get("Resource"):
                    continue
                actions = [
                    a for a in _as_list(statement["Action"])
                    if isinstance(a, str) and a.startswith("s3:")
                ]
                resources = [
                    r for r in _as_list(statement["Resource"])
                    if isinstance(r, str) and "s3:" in r
                ]
                if actions and resources:
                    access.append(
                        S3AccessDef(type=resource_type, name=name, actions=actions, resources=resources)
                    )
    return access


def extract_api_endpoints(
    app: Application,
    ecs_markers: tuple[str, ...],
    lambda_markers: tuple[str, ...],
    on_error: ErrorCallback = ignore_error,
) -> list[EnvironmentEndpoint]:
    """Environment variables that look like API endpoints.

    Covers ECS container definitions (JSON string or decoded list) and
    Lambda ``environment.variables``.
    """
    endpoints: list[EnvironmentEndpoint] = []
    for resource_type in app.resource_blocks:
        if resource_type == "aws_ecs_task_definition":
            endpoints.extend(_ecs_endpoints(app, ecs_markers, on_error))
        elif resource_type == "aws_lambda_function":
            endpoints.extend(_lambda_endpoints(app, lambda_markers))
    return endpoints


def _ecs_endpoints(
    app: Application,
    markers: tuple[str, ...],
    on_error: ErrorCallback,
) -> Iterator[EnvironmentEndpoint]:
    resource_type = "aws_ecs_task_definition"
    for name, config in iter_blocks(app, resource_type):
        if not config.get("container_definitions"):
            continue
        location = f"{app.name}.{resource_type}.{name}"
        try:
            containers = _load_embedded(config["container_definitions"])
        except (TypeError, ValueError) as exc:
            logger.warning("malformed_container_definitions location=%s error=%s", location, exc)
            on_error(location, "malformed_container_definitions", exc)
            continue
        if not isinstance(containers, list):
            continue

        for container in containers:
            if not isinstance(container, dict):
                continue
            for env_var in container.get("environment") or []:
                if not isinstance(env_var, dict):
                    continue
                var_name = env_var.get("name")
                value = env_var.get("value")
                if not var_name or not value:
                    continue
                if any(marker in var_name for marker in markers):
                    yield EnvironmentEndpoint(
                        type=resource_type,
                        name=name,
                        variable=var_name,
                        value=value,
                        integration_type="REST_API",
                    )


def _lambda_endpoints(app: Application, markers: tuple[str, ...]) -> Iterator[EnvironmentEndpoint]:
    resource_type = "aws_lambda_function"
    for name, config in iter_blocks(app, resource_type):
        # hcl2json renders nested blocks as single-element lists
        for environment in _as_list(config.get("environment") or []):
            if not isinstance(environment, dict):
                continue
            variables = environment.get("variables") or {}
            if not isinstance(variables, dict):
                continue
            for var_name, value in variables.items():
                if any(marker in var_name for marker in markers):
                    yield EnvironmentEndpoint(
                        type=resource_type,
                        name=name,
                        variable=var_name,
                        value=value,
                        integration_type="LAMBDA_INVOKE",
                    )
