"""Tests for the evaluation orchestrator."""

import math

import pytest

from kubesnoop.collector.snapshot import ClusterSnapshot
from kubesnoop.core.errors import RuleStoreUnavailableError
from kubesnoop.core.models import Severity
from kubesnoop.rules.defaults import DEFAULT_RULES
from kubesnoop.rules.engine import EvaluationEngine, join_network_policies
from kubesnoop.rules.models import RuleType
from kubesnoop.rules.stores import InMemoryRuleStore

DESCRIPTIONS = {rule.name: rule.description for rule in DEFAULT_RULES}


def _messages_by_resource(findings) -> dict[str, list[str]]:
    grouped: dict[str, list[str]] = {}
    for finding in findings:
        grouped.setdefault(finding.resource, []).append(finding.message)
    return grouped


class RecordingStore(InMemoryRuleStore):
    """In-memory store that records fetches and can fail for one rule type."""

    def __init__(self, rules, failing_type: str | None = None):
        super().__init__(rules)
        self.failing_type = failing_type
        self.fetched: list[str] = []

    def get_enabled_rules(self, rule_type=None):
        self.fetched.append(RuleType(rule_type).value)
        if rule_type == self.failing_type:
            raise RuleStoreUnavailableError("database is locked")
        return super().get_enabled_rules(rule_type)


class TestEvaluateAll:
    def test_findings_are_ordered_by_type_resource_and_rule(self, default_store, cluster_data):
        engine = EvaluationEngine(default_store)

        findings = engine.evaluate_all(ClusterSnapshot.model_validate(cluster_data))

        assert [(finding.resource, finding.message) for finding in findings] == [
            ("Pod/prod/web", DESCRIPTIONS["privileged-container"]),
            ("Pod/prod/web", DESCRIPTIONS["root-user-container"]),
            ("Pod/prod/web", DESCRIPTIONS["no-resource-limits"]),
            ("Pod/prod/web", DESCRIPTIONS["latest-image-tag"]),
            ("Pod/prod/web", DESCRIPTIONS["host-network-usage"]),
            ("Pod/prod/web", DESCRIPTIONS["default-service-account"]),
            ("Service/prod/front", DESCRIPTIONS["nodeport-service"]),
            ("ClusterRole/super-admin", DESCRIPTIONS["wildcard-rbac-permissions"]),
            ("Namespace/dev", DESCRIPTIONS["no-network-policies"]),
        ]

    def test_rule_order_only_changes_order_within_a_resource(self, cluster_data):
        snapshot = ClusterSnapshot.model_validate(cluster_data)
        forward = EvaluationEngine(InMemoryRuleStore(DEFAULT_RULES)).evaluate_all(snapshot)
        backward = EvaluationEngine(InMemoryRuleStore(list(reversed(DEFAULT_RULES)))).evaluate_all(snapshot)

        forward_by_resource = _messages_by_resource(forward)
        backward_by_resource = _messages_by_resource(backward)

        assert list(forward_by_resource) == list(backward_by_resource)
        assert {resource: messages[::-1] for resource, messages in forward_by_resource.items()} == backward_by_resource
        assert sorted(forward, key=repr) == sorted(backward, key=repr)

    def test_rules_for_other_resource_types_are_never_applied(self, default_store, cluster_data, rule_factory):
        snapshot = ClusterSnapshot.model_validate(cluster_data)
        before = EvaluationEngine(default_store).evaluate_all(snapshot)

        default_store.add(rule_factory(name="deployment-host-network", rule_type="deployment"))

        assert EvaluationEngine(default_store).evaluate_all(snapshot) == before

    def test_runs_are_idempotent(self, default_store, cluster_data):
        engine = EvaluationEngine(default_store)
        snapshot = ClusterSnapshot.model_validate(cluster_data)

        assert engine.evaluate_all(snapshot) == engine.evaluate_all(snapshot)

    def test_one_store_call_per_non_empty_type(self, cluster_data):
        store = RecordingStore(DEFAULT_RULES)
        cluster_data["services"] = []

        EvaluationEngine(store).evaluate_all(ClusterSnapshot.model_validate(cluster_data))

        assert store.fetched == ["pod", "rbac", "namespace"]

    def test_empty_snapshot(self, default_store):
        assert EvaluationEngine(default_store).evaluate_all(ClusterSnapshot()) == []

    def test_disabled_rules_are_not_applied(self, default_store, cluster_data):
        rule = default_store.get_rule_by_name("nodeport-service")
        default_store.set_enabled(rule.id, False)

        findings = EvaluationEngine(default_store).evaluate_all(ClusterSnapshot.model_validate(cluster_data))

        assert all(not finding.resource.startswith("Service/") for finding in findings)

    def test_malformed_resources_are_skipped(self, default_store):
        snapshot = ClusterSnapshot(
            pods=[
                "not-a-pod",
                {"metadata": {"name": "nan", "namespace": "prod"}, "hostNetwork": True, "ratio": math.nan},
                {"metadata": {"name": "ok", "namespace": "prod"}, "hostNetwork": True},
            ]
        )

        findings = EvaluationEngine(default_store).evaluate_all(snapshot)

        assert {finding.resource for finding in findings} == {"Pod/prod/ok"}

    def test_nodes_are_evaluated_last(self, default_store, rule_factory):
        default_store.add(
            rule_factory(name="node-unschedulable", rule_type="node", query="$.unschedulable", condition="== true")
        )
        snapshot = ClusterSnapshot(
            nodes=[{"metadata": {"name": "worker-1"}, "unschedulable": True}],
            namespaces=[{"metadata": {"name": "dev"}}],
        )

        findings = EvaluationEngine(default_store).evaluate_all(snapshot)

        assert [finding.resource for finding in findings] == ["Namespace/dev", "Node/worker-1"]

    def test_store_failure_keeps_partial_findings(self, cluster_data):
        engine = EvaluationEngine(RecordingStore(DEFAULT_RULES, failing_type="rbac"))

        with pytest.raises(RuleStoreUnavailableError) as exc_info:
            engine.evaluate_all(ClusterSnapshot.model_validate(cluster_data))

        assert exc_info.value.resource_type == "rbac"
        assert [finding.resource for finding in exc_info.value.partial_findings] == ["Pod/prod/web"] * 6 + [
            "Service/prod/front"
        ]


class TestSummary:
    def test_counts_by_severity(self, default_store, cluster_data):
        engine = EvaluationEngine(default_store)

        summary = engine.summarize(engine.evaluate_all(ClusterSnapshot.model_validate(cluster_data)))

        assert summary.total == 9
        assert summary.high + summary.medium + summary.low == 9
        assert summary.high == len([rule for rule in DEFAULT_RULES if rule.severity == Severity.HIGH])


class TestJoinNetworkPolicies:
    def test_policies_are_grouped_by_namespace(self):
        namespaces = [{"metadata": {"name": "prod"}}, {"name": "dev"}, "broken"]
        policies = [
            {"metadata": {"name": "deny-all", "namespace": "prod"}},
            {"metadata": {"name": "allow-dns", "namespace": "prod"}},
        ]

        joined = join_network_policies(namespaces, policies)

        assert [policy["metadata"]["name"] for policy in joined[0]["networkPolicies"]] == ["deny-all", "allow-dns"]
        assert joined[1]["networkPolicies"] == []
        assert joined[2] == "broken"
        assert "networkPolicies" not in namespaces[0]
