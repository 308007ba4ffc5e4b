"""Cross-application integration detection.

Compares every ordered pair of applications (source, target) and infers
three kinds of coupling:

- API: source compute resources carry an endpoint env var naming target
- Messaging: target publishes an SNS topic that source subscribes to
- Data: source IAM policies grant S3 access to target buckets

API and data edges point from the consumer to the provider. Messaging
edges point from the topic owner to the subscriber.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from infragraph.config import (
    DEFAULT_DOMAIN_HEURISTICS,
    ECS_API_ENV_MARKERS,
    LAMBDA_API_ENV_MARKERS,
    MESSAGING_KEYWORDS,
    HeuristicConfig,
)
from infragraph.integration.discovery import (
    ErrorCallback,
    SubscriberDef,
    TopicDef,
    extract_api_endpoints,
    extract_s3_access,
    extract_s3_buckets,
    extract_sns_topics,
    extract_subscribers,
    ignore_error,
)
from infragraph.integration.heuristics import references_application, shares_keyword
from infragraph.models.module import Application
from infragraph.models.result import CrossAppAnalysis, CrossAppDependency
from infragraph.models.types import AnalysisWarning, DomainHeuristic, IntegrationType

logger = logging.getLogger(__name__)


class CrossApplicationDetector:
    """Heuristic pairwise scan for couplings between applications.

    Args:
        heuristics: Archetype heuristics for endpoint matching. Defaults
            to DEFAULT_DOMAIN_HEURISTICS.
        keywords: Shared naming vocabulary for topic/queue matching.
        ecs_markers: Env var name fragments marking ECS endpoints.
        lambda_markers: Env var name fragments marking Lambda endpoints.
    """

    def __init__(
        self,
        heuristics: Iterable[DomainHeuristic] | None = None,
        keywords: Iterable[str] = MESSAGING_KEYWORDS,
        ecs_markers: tuple[str, ...] = ECS_API_ENV_MARKERS,
        lambda_markers: tuple[str, ...] = LAMBDA_API_ENV_MARKERS,
    ) -> None:
        self._heuristics = tuple(
            DEFAULT_DOMAIN_HEURISTICS if heuristics is None else heuristics
        )
        self._keywords = tuple(k.lower() for k in keywords)
        self._ecs_markers = ecs_markers
        self._lambda_markers = lambda_markers

    @classmethod
    def from_config(cls, config: HeuristicConfig) -> CrossApplicationDetector:
        return cls(heuristics=config.heuristics, keywords=config.keywords)

    def analyze(
        self,
        applications: Sequence[Application | Mapping[str, Any]],
    ) -> CrossAppAnalysis:
        """Scan all ordered application pairs.

        Args:
            applications: Applications (or their wire dicts).

        Returns:
            CrossAppAnalysis with dependencies and any parse warnings.
            Fewer than two applications yields an empty analysis.
        """
        apps = [a if isinstance(a, Application) else Application.from_dict(a) for a in applications]
        analysis = CrossAppAnalysis()
        if len(apps) < 2:
            return analysis

        seen_warnings: set[tuple[str, str]] = set()

        def record(location: str, code: str, error: Exception) -> None:
            # Each source document is re-read once per target; report it once.
            if (location, code) in seen_warnings:
                return
            seen_warnings.add((location, code))
            analysis.warnings.append(
                AnalysisWarning(code=code, message=str(error), location=location)
            )

        for i, source in enumerate(apps):
            for j, target in enumerate(apps):
                if i == j:
                    continue
                analysis.dependencies.extend(self.detect_api_integrations(source, target, record))
                analysis.dependencies.extend(self.detect_messaging_integrations(source, target))
                analysis.dependencies.extend(self.detect_data_integrations(source, target, record))

        logger.info(
            "cross_app_scan_complete applications=%d dependencies=%d warnings=%d",
            len(apps),
            len(analysis.dependencies),
            len(analysis.warnings),
        )
        return analysis

    def detect_api_integrations(
        self,
        source: Application,
        target: Application,
        on_error: ErrorCallback = ignore_error,
    ) -> list[CrossAppDependency]:
        """Endpoints in ``source`` that reference ``target``."""
        endpoints = extract_api_endpoints(
            source, self._ecs_markers, self._lambda_markers, on_error
        )
        return [
            CrossAppDependency(
                source=f"{source.name}.{ep.type}.{ep.name}",
                target=f"{target.name}.api_gateway",
                type=IntegrationType.API,
                metadata={
                    "protocol": "HTTPS",
                    "integration_type": ep.integration_type,
                    "environment_variable": ep.variable,
                    "endpoint": ep.value,
                },
            )
            for ep in endpoints
            if references_application(ep.value, target.name, self._heuristics)
        ]

    def detect_messaging_integrations(
        self,
        source: Application,
        target: Application,
    ) -> list[CrossAppDependency]:
        """Subscribers in ``source`` fed by topics in ``target``."""
        topics = extract_sns_topics(target)
        if not topics:
            return []

        dependencies: list[CrossAppDependency] = []
        for sub in extract_subscribers(source):
            for topic in topics:
                if not self._is_subscription(sub, topic):
                    continue
                dependencies.append(
                    CrossAppDependency(
                        source=f"{target.name}.{topic.type}.{topic.name}",
                        target=f"{source.name}.{sub.type}.{sub.name}",
                        type=IntegrationType.MESSAGING,
                        metadata={
                            "protocol": "SNS",
                            "integration_type": "PUB_SUB",
                            "topic_name": topic.topic_name,
                            "subscription_type": sub.subscription_type,
                        },
                    )
                )
        return dependencies

    def _is_subscription(self, sub: SubscriberDef, topic: TopicDef) -> bool:
        if sub.topic_arn and topic.topic_name in sub.topic_arn:
            return True
        if sub.queue_name:
            return shares_keyword(topic.topic_name, sub.queue_name, self._keywords)
        return False

    def detect_data_integrations(
        self,
        source: Application,
        target: Application,
        on_error: ErrorCallback = ignore_error,
    ) -> list[CrossAppDependency]:
        """IAM statements in ``source`` granting S3 access to ``target`` buckets."""
        buckets = extract_s3_buckets(target)
        if not buckets:
            return []

        dependencies: list[CrossAppDependency] = []
        for access in extract_s3_access(source, on_error):
            for bucket in buckets:
                matched = [
                    r for r in access.resources
                    if bucket.bucket_name in r or target.name in r
                ]
                if not matched:
                    continue
                dependencies.append(
                    CrossAppDependency(
                        source=f"{source.name}.{access.type}.{access.name}",
                        target=f"{target.name}.{bucket.type}.{bucket.name}",
                        type=IntegrationType.DATA,
                        metadata={
                            "protocol": "S3",
                            "integration_type": "DATA_ACCESS",
                            "bucket_name": bucket.bucket_name,
                            "access_pattern": access.access_type,
                            "actions": list(access.actions),
                            "resources": matched,
                        },
                    )
                )
        return dependencies


def infer_cross_application_dependencies(
    applications: Sequence[Application | Mapping[str, Any]],
    heuristics: Iterable[DomainHeuristic] | None = None,
) -> list[CrossAppDependency]:
    """Flat list of cross-application dependencies with default settings."""
    return CrossApplicationDetector(heuristics=heuristics).analyze(applications).dependencies
