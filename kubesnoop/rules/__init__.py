# Rules package

from kubesnoop.rules.models import (
    RuleResult,
    RuleType,
    SecurityRule,
)

__all__ = [
    "RuleResult",
    "RuleType",
    "SecurityRule",
]
