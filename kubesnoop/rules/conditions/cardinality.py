"""Conditions on collection size."""

from kubesnoop.rules.conditions.base import ConditionNode, any_element
from kubesnoop.rules.values import Array, Object, Value


class Count(ConditionNode):
    """Fails when the value is an Array with exactly ``expected`` elements."""

    def __init__(self, expected: int, operator: str = "==") -> None:
        self.operator = operator
        self.expected = expected

    def fails(self, value: Value) -> bool:
        return isinstance(value, Array) and len(value.items) == self.expected


class IsEmpty(ConditionNode):
    """Fails when the value is an Object with no keys (or, for Arrays, any element is)."""

    def fails(self, value: Value) -> bool:
        return any_element(value, lambda item: isinstance(item, Object) and not item.fields)
