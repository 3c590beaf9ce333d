"""
Integration tests for snapshot evaluation over HTTP.
"""

from kubesnoop.api.dependencies import get_rule_store
from kubesnoop.core.errors import RuleStoreUnavailableError
from kubesnoop.main import app
from kubesnoop.rules.stores import InMemoryRuleStore


class UnavailableStore(InMemoryRuleStore):
    def get_enabled_rules(self, rule_type=None):
        raise RuleStoreUnavailableError("database is locked")


class TestEvaluateAPIIntegration:
    def test_evaluate_snapshot(self, client, cluster_data):
        response = client.post("/api/v1/evaluate", json=cluster_data)

        assert response.status_code == 200
        data = response.json()
        assert data["summary"]["total"] == len(data["findings"]) == 9
        assert data["findings"][0] == {
            "severity": "HIGH",
            "category": "Container Security",
            "resource": "Pod/prod/web",
            "message": "Container is running in privileged mode",
            "remediation": "Remove privileged: true from container security context",
        }
        assert data["findings"][-1]["resource"] == "Namespace/dev"

    def test_evaluate_empty_snapshot(self, client):
        response = client.post("/api/v1/evaluate", json={})

        assert response.status_code == 200
        assert response.json() == {"findings": [], "summary": {"total": 0, "high": 0, "medium": 0, "low": 0}}

    def test_store_unavailable(self, client, cluster_data):
        store = UnavailableStore()
        app.dependency_overrides[get_rule_store] = lambda: store

        response = client.post("/api/v1/evaluate", json=cluster_data)

        assert response.status_code == 503
        data = response.json()
        assert data["code"] == "rule_store_unavailable"
        assert data["details"]["resource_type"] == "pod"
        assert data["details"]["partial_findings"] == []
