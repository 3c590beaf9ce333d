"""
Shared fixtures for the kubesnoop test suite.
"""

import pytest

from kubesnoop.rules.defaults import DEFAULT_RULES
from kubesnoop.rules.models import SecurityRule
from kubesnoop.rules.stores import InMemoryRuleStore


def make_rule(**overrides) -> SecurityRule:
    """Build a rule with sensible defaults; keyword arguments override fields."""
    fields = {
        "name": "host-network",
        "category": "Network Security",
        "severity": "HIGH",
        "description": "Pod uses host network",
        "remediation": "Remove hostNetwork: true",
        "rule_type": "pod",
        "query": "$.hostNetwork",
        "condition": "== true",
    }
    fields.update(overrides)
    return SecurityRule(**fields)


@pytest.fixture
def default_store() -> InMemoryRuleStore:
    """In-memory store holding the default rule corpus."""
    return InMemoryRuleStore(DEFAULT_RULES)


@pytest.fixture
def cluster_data() -> dict:
    """A small cluster snapshot that triggers every default rule type."""
    return {
        "cluster_version": "v1.29.2",
        "pods": [
            {
                "metadata": {"name": "web", "namespace": "prod"},
                "hostNetwork": True,
                "serviceAccount": "default",
                "containers": [
                    {
                        "name": "app",
                        "image": "nginx:latest",
                        "securityContext": {"privileged": True, "runAsUser": 0},
                        "resources": {"limits": {}},
                    }
                ],
            },
            {
                "metadata": {"name": "api", "namespace": "prod"},
                "serviceAccount": "api",
                "containers": [
                    {
                        "name": "api",
                        "image": "registry.local/api:1.2.0",
                        "securityContext": {"runAsUser": 1000},
                        "resources": {"limits": {"cpu": "500m", "memory": "256Mi"}},
                    }
                ],
            },
        ],
        "services": [
            {"metadata": {"name": "front", "namespace": "prod"}, "type": "NodePort"},
            {"metadata": {"name": "backend", "namespace": "prod"}, "type": "ClusterIP"},
        ],
        "rbac": {
            "cluster_roles": [{"metadata": {"name": "super-admin"}, "rules": [{"resources": ["pods", "*"]}]}],
            "roles": [{"metadata": {"name": "reader", "namespace": "prod"}, "rules": [{"resources": ["pods"]}]}],
        },
        "namespaces": [{"metadata": {"name": "prod"}}, {"metadata": {"name": "dev"}}],
        "network_policies": [{"metadata": {"name": "deny-all", "namespace": "prod"}}],
    }


@pytest.fixture
def rule_factory():
    return make_rule
