"""Presence and disjunction conditions."""

from kubesnoop.rules.conditions.base import ConditionNode
from kubesnoop.rules.values import Absent, Value


class IsNull(ConditionNode):
    """Fails when the query path did not resolve."""

    def fails(self, value: Value) -> bool:
        return isinstance(value, Absent)


class Disjunction(ConditionNode):
    """Fails when either side fails."""

    def __init__(self, left: ConditionNode, right: ConditionNode) -> None:
        self.left = left
        self.right = right

    def fails(self, value: Value) -> bool:
        return self.left.fails(value) or self.right.fails(value)
