"""
In-memory rule store.

Backs tests and ephemeral deployments; contents are lost with the process.
"""

import structlog

from kubesnoop.core.errors import DuplicateRuleError, RuleNotFoundError
from kubesnoop.rules.interface import RuleStore, normalize_rule_type
from kubesnoop.rules.models import RuleType, SecurityRule

logger = structlog.get_logger(__name__)


class InMemoryRuleStore(RuleStore):
    """Rules kept in a dict keyed by auto-assigned integer id."""

    def __init__(self, rules: list[SecurityRule] | None = None):
        self._rules: dict[int, SecurityRule] = {}
        self._next_id = 1
        for rule in rules or []:
            self.add(rule)

    def get_enabled_rules(self, rule_type: RuleType | str | None = None) -> list[SecurityRule]:
        return self.get_rules(rule_type, include_disabled=False)

    def get_rules(self, rule_type: RuleType | str | None = None, include_disabled: bool = True) -> list[SecurityRule]:
        wanted = normalize_rule_type(rule_type)
        return [
            rule
            for _, rule in sorted(self._rules.items())
            if (include_disabled or rule.enabled) and (wanted is None or rule.rule_type == wanted)
        ]

    def get_rule(self, rule_id: int) -> SecurityRule:
        try:
            return self._rules[rule_id]
        except KeyError:
            raise RuleNotFoundError(rule_id) from None

    def get_rule_by_name(self, name: str) -> SecurityRule | None:
        return next((rule for rule in self._rules.values() if rule.name == name), None)

    def add(self, rule: SecurityRule) -> SecurityRule:
        if self.get_rule_by_name(rule.name) is not None:
            raise DuplicateRuleError(rule.name)
        stored = rule.model_copy(update={"id": self._next_id})
        self._rules[self._next_id] = stored
        self._next_id += 1
        logger.debug("rule_added", rule=stored.name, rule_id=stored.id)
        return stored

    def update(self, rule_id: int, rule: SecurityRule) -> SecurityRule:
        self.get_rule(rule_id)
        existing = self.get_rule_by_name(rule.name)
        if existing is not None and existing.id != rule_id:
            raise DuplicateRuleError(rule.name)
        stored = rule.model_copy(update={"id": rule_id})
        self._rules[rule_id] = stored
        return stored

    def delete(self, rule_id: int) -> None:
        self.get_rule(rule_id)
        del self._rules[rule_id]

    def set_enabled(self, rule_id: int, enabled: bool) -> SecurityRule:
        stored = self.get_rule(rule_id).model_copy(update={"enabled": enabled})
        self._rules[rule_id] = stored
        return stored
