"""String conditions."""

from enum import Enum

from kubesnoop.rules.conditions.base import ConditionNode, any_element
from kubesnoop.rules.values import Value, as_string


class StringOpKind(str, Enum):
    ENDS_WITH = "endsWith"
    NOT_CONTAINS = "NOT contains"


class StringOp(ConditionNode):
    """Fails when the value's string form ends with, or does not contain, the literal.

    The registry only builds these for image tags: ``:latest`` and ``:``.
    """

    def __init__(self, kind: StringOpKind, literal: str) -> None:
        self.kind = kind
        self.literal = literal

    def fails(self, value: Value) -> bool:
        return any_element(value, self._matches)

    def _matches(self, value: Value) -> bool:
        text = as_string(value)
        if self.kind == StringOpKind.ENDS_WITH:
            return text.endswith(self.literal)
        return self.literal not in text
