"""Base condition interface for rule evaluation.

Condition expressions are parsed into a small tree of nodes. Every node decides
whether an extracted value is a violation; none of them raise.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from kubesnoop.rules.values import Array, Value


class ConditionNode(ABC):
    """Abstract base class for all parsed condition nodes.

    Nodes compare equal when they are of the same kind with the same operands.
    """

    @abstractmethod
    def fails(self, value: Value) -> bool:
        """Return True when ``value`` violates the condition."""
        pass

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and vars(self) == vars(other)

    def __hash__(self) -> int:
        return hash((type(self), tuple(sorted(vars(self).items(), key=lambda item: item[0]))))

    def __repr__(self) -> str:
        fields = ", ".join(f"{key}={val!r}" for key, val in vars(self).items())
        return f"{type(self).__name__}({fields})"


class Unrecognized(ConditionNode):
    """Condition text that matches no known form. Never fails."""

    def __init__(self, text: str = "") -> None:
        self.text = text

    def fails(self, value: Value) -> bool:
        return False


def any_element(value: Value, predicate: Callable[[Value], bool]) -> bool:
    """Apply a scalar predicate to a value, or to each element when it is an Array."""
    if isinstance(value, Array):
        return any(predicate(item) for item in value.items)
    return predicate(value)
