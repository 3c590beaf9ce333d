from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kubesnoop.core.models import Severity


class RuleType(str, Enum):
    """Resource collections the engine evaluates. Stored rules may name others; they are kept but never applied."""

    POD = "pod"
    SERVICE = "service"
    RBAC = "rbac"
    NAMESPACE = "namespace"
    NODE = "node"


class SecurityRule(BaseModel):
    """A declarative security check evaluated against one resource collection.

    ``condition`` describes the violation: when it is satisfied for a resource,
    a finding is produced.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    name: str
    category: str
    severity: Severity
    description: str
    remediation: str
    rule_type: str = Field(min_length=1)
    query: str
    condition: str
    enabled: bool = True
    tags: str = ""

    @field_validator("severity", mode="before")
    @classmethod
    def _normalize_severity(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("rule_type", mode="before")
    @classmethod
    def _normalize_rule_type(cls, value: Any) -> Any:
        if isinstance(value, RuleType):
            return value.value
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _join_tags(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, list | set | tuple):
            return join_tags(value)
        return value

    @property
    def tag_set(self) -> frozenset[str]:
        """Tags as an unordered set of labels."""
        return split_tags(self.tags)


class RuleResult(BaseModel):
    """Outcome of evaluating one rule against one resource."""

    rule: SecurityRule
    resource: str
    passed: bool = True
    message: str = ""
    value: Any = None


def split_tags(tags: str) -> frozenset[str]:
    return frozenset(tag.strip() for tag in tags.split(",") if tag.strip())


def join_tags(tags: Any) -> str:
    # Keep insertion order for lists; sets have none to keep
    seen: list[str] = []
    for tag in tags:
        tag = str(tag).strip()
        if tag and tag not in seen:
            seen.append(tag)
    return ",".join(seen)
