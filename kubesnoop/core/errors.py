"""
Core error classes for the kubesnoop application.
"""

from typing import Any


class RuleStoreUnavailableError(Exception):
    """Raised when the rule store cannot be reached or queried.

    When raised from an evaluation run, ``partial_findings`` holds the findings of
    the resource types that were processed before the failure.
    """

    def __init__(
        self,
        message: str,
        resource_type: str | None = None,
        partial_findings: list[Any] | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.partial_findings = partial_findings or []
        super().__init__(message)


class RuleNotFoundError(Exception):
    """Raised when a rule id does not exist in the store."""

    def __init__(self, rule_id: int) -> None:
        self.rule_id = rule_id
        super().__init__(f"Rule with ID {rule_id} not found")


class DuplicateRuleError(Exception):
    """Raised when a rule name is already taken."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Rule named '{name}' already exists")


class MalformedResourceError(Exception):
    """Raised when a resource document cannot be converted into the value model."""

    pass


class RuleFileError(Exception):
    """Raised when a rules file is missing or cannot be parsed."""

    pass
