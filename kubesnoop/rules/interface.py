from abc import ABC, abstractmethod

from kubesnoop.rules.models import RuleType, SecurityRule


class RuleStore(ABC):
    """
    Abstract interface for reading and managing security rules.

    This interface allows us to swap out different rule storage technologies
    (embedded database, in-memory map, remote service) without changing the
    evaluation engine, which only ever calls get_enabled_rules.
    """

    @abstractmethod
    def get_enabled_rules(self, rule_type: RuleType | str | None = None) -> list[SecurityRule]:
        """
        Fetch enabled rules, optionally filtered by rule type.

        Args:
            rule_type: Resource collection the rules apply to; None for all types

        Returns:
            Enabled rules in ascending id order

        Raises:
            RuleStoreUnavailableError: if the store cannot be queried
        """
        pass

    @abstractmethod
    def get_rules(self, rule_type: RuleType | str | None = None, include_disabled: bool = True) -> list[SecurityRule]:
        """List rules for management, disabled ones included by default."""
        pass

    @abstractmethod
    def get_rule(self, rule_id: int) -> SecurityRule:
        """Fetch one rule; raises RuleNotFoundError when missing."""
        pass

    @abstractmethod
    def get_rule_by_name(self, name: str) -> SecurityRule | None:
        pass

    @abstractmethod
    def add(self, rule: SecurityRule) -> SecurityRule:
        """Insert a rule and return it with its assigned id; raises DuplicateRuleError on a taken name."""
        pass

    @abstractmethod
    def update(self, rule_id: int, rule: SecurityRule) -> SecurityRule:
        """Replace every field of an existing rule except its id."""
        pass

    @abstractmethod
    def delete(self, rule_id: int) -> None:
        pass

    @abstractmethod
    def set_enabled(self, rule_id: int, enabled: bool) -> SecurityRule:
        pass

    def count(self) -> int:
        return len(self.get_rules())

    def seed_defaults(self) -> int:
        """
        Insert the default rule corpus when the store is empty.

        Returns:
            Number of rules inserted
        """
        from kubesnoop.rules.defaults import DEFAULT_RULES

        if self.count() > 0:
            return 0
        for rule in DEFAULT_RULES:
            self.add(rule)
        return len(DEFAULT_RULES)


def normalize_rule_type(rule_type: RuleType | str | None) -> str | None:
    if rule_type is None or rule_type == "":
        return None
    if isinstance(rule_type, RuleType):
        return rule_type.value
    return rule_type.strip().lower()
