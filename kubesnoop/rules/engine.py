"""
Evaluation orchestrator.

Walks a cluster snapshot type by type, fetches the enabled rules for each type
from the rule store and applies them to every resource. Findings are returned in
a fixed order: resource type, then resource order within the type, then rule
order within the resource.
"""

from dataclasses import dataclass
from typing import Any

import structlog

from kubesnoop.collector.snapshot import ClusterSnapshot, resource_identifier, resource_name, resource_namespace
from kubesnoop.core.errors import MalformedResourceError, RuleStoreUnavailableError
from kubesnoop.core.models import Finding, FindingSummary
from kubesnoop.core.utils.logging import log_operation
from kubesnoop.rules.condition_evaluator import ConditionEvaluator
from kubesnoop.rules.evaluator import evaluate_resource
from kubesnoop.rules.interface import RuleStore
from kubesnoop.rules.models import RuleType, SecurityRule
from kubesnoop.rules.values import from_python

logger = structlog.get_logger(__name__)

# Synthetic field holding the network policies joined onto a namespace document
NETWORK_POLICIES_FIELD = "networkPolicies"


@dataclass(frozen=True)
class ResourceStream:
    """One sequence of resources sharing a kind and identifier form."""

    kind: str
    documents: list[Any]
    namespaced: bool


class EvaluationEngine:
    """
    Applies stored rules to a cluster snapshot.

    The engine is synchronous and keeps no state between runs apart from the
    parsed-condition cache in its ConditionEvaluator.
    """

    def __init__(self, store: RuleStore, evaluator: ConditionEvaluator | None = None):
        self.store = store
        self.evaluator = evaluator or ConditionEvaluator()

    def evaluate_all(self, snapshot: ClusterSnapshot) -> list[Finding]:
        """
        Evaluate every enabled rule against every resource in the snapshot.

        Args:
            snapshot: Collected resources grouped by type

        Returns:
            Findings ordered by resource type (pods, services, RBAC, namespaces,
            nodes), then resource order, then rule order.

        Raises:
            RuleStoreUnavailableError: if rules for a type cannot be fetched. The
                error carries the findings of the types processed before it.
        """
        findings: list[Finding] = []

        with log_operation(
            "evaluate_all",
            pods=len(snapshot.pods),
            services=len(snapshot.services),
            namespaces=len(snapshot.namespaces),
        ):
            for rule_type, streams in self._plan(snapshot):
                if not any(stream.documents for stream in streams):
                    continue

                rules = self._fetch_rules(rule_type, findings)
                for stream in streams:
                    for document in stream.documents:
                        findings.extend(self._evaluate_document(stream, document, rules))

        logger.info("evaluation_finished", findings=len(findings))
        return findings

    @staticmethod
    def summarize(findings: list[Finding]) -> FindingSummary:
        return FindingSummary.from_findings(findings)

    def _fetch_rules(self, rule_type: RuleType, findings: list[Finding]) -> list[SecurityRule]:
        try:
            rules = self.store.get_enabled_rules(rule_type)
        except RuleStoreUnavailableError as e:
            logger.error("rule_fetch_failed", rule_type=rule_type.value, error=str(e))
            raise RuleStoreUnavailableError(
                f"Failed to evaluate {rule_type.value} rules: {e}",
                resource_type=rule_type.value,
                partial_findings=list(findings),
            ) from e
        logger.debug("rules_fetched", rule_type=rule_type.value, count=len(rules))
        return rules

    def _evaluate_document(self, stream: ResourceStream, document: Any, rules: list[SecurityRule]) -> list[Finding]:
        try:
            resource_id = resource_identifier(stream.kind, document, namespaced=stream.namespaced)
            value = from_python(document)
        except MalformedResourceError as e:
            logger.warning("resource_skipped", kind=stream.kind, error=str(e))
            return []
        return evaluate_resource(value, resource_id, rules, self.evaluator)

    def _plan(self, snapshot: ClusterSnapshot) -> list[tuple[RuleType, list[ResourceStream]]]:
        return [
            (RuleType.POD, [ResourceStream("Pod", snapshot.pods, namespaced=True)]),
            (RuleType.SERVICE, [ResourceStream("Service", snapshot.services, namespaced=True)]),
            (
                RuleType.RBAC,
                [
                    ResourceStream("ClusterRole", snapshot.rbac.cluster_roles, namespaced=False),
                    ResourceStream("Role", snapshot.rbac.roles, namespaced=True),
                ],
            ),
            (
                RuleType.NAMESPACE,
                [
                    ResourceStream(
                        "Namespace",
                        join_network_policies(snapshot.namespaces, snapshot.network_policies),
                        namespaced=False,
                    )
                ],
            ),
            (RuleType.NODE, [ResourceStream("Node", snapshot.nodes, namespaced=False)]),
        ]


def join_network_policies(namespaces: list[Any], network_policies: list[Any]) -> list[Any]:
    """
    Attach to each namespace document the network policies that live in it.

    The policies go under ``networkPolicies`` (an empty list when there are none).
    Documents that are not mappings are passed through untouched.
    """
    by_namespace: dict[str, list[Any]] = {}
    for policy in network_policies:
        by_namespace.setdefault(resource_namespace(policy), []).append(policy)

    joined: list[Any] = []
    for namespace in namespaces:
        if isinstance(namespace, dict):
            namespace = {**namespace, NETWORK_POLICIES_FIELD: by_namespace.get(resource_name(namespace), [])}
        joined.append(namespace)
    return joined
