"""Equality conditions (``== <literal>``)."""

from dataclasses import dataclass
from enum import Enum

from kubesnoop.rules.conditions.base import ConditionNode, any_element
from kubesnoop.rules.values import Absent, Value, as_number, as_string, is_truthy


class LiteralKind(str, Enum):
    TRUE = "true"
    FALSE = "false"
    NULL = "null"
    ZERO = "zero"
    QUOTED = "quoted"
    BARE = "bare"


@dataclass(frozen=True)
class Literal:
    kind: LiteralKind
    text: str = ""

    @classmethod
    def from_token(cls, text: str, quoted: bool) -> "Literal":
        if quoted:
            return cls(LiteralKind.QUOTED, text)
        if text == "true":
            return cls(LiteralKind.TRUE, text)
        if text == "false":
            return cls(LiteralKind.FALSE, text)
        if text == "null":
            return cls(LiteralKind.NULL, text)
        if text == "0":
            return cls(LiteralKind.ZERO, text)
        return cls(LiteralKind.BARE, text.strip("'\""))


class Equals(ConditionNode):
    """Fails when the value equals the literal.

    ``true``/``false`` compare truthiness, ``null`` checks absence, ``0`` compares
    the numeric form and anything else compares the string form. Arrays fail when
    any element matches, except for ``null`` which looks at the value itself.
    """

    def __init__(self, literal: Literal) -> None:
        self.literal = literal

    def fails(self, value: Value) -> bool:
        if self.literal.kind == LiteralKind.NULL:
            return isinstance(value, Absent)
        return any_element(value, self._matches)

    def _matches(self, value: Value) -> bool:
        kind = self.literal.kind
        if kind == LiteralKind.TRUE:
            return is_truthy(value)
        if kind == LiteralKind.FALSE:
            return not is_truthy(value)
        if kind == LiteralKind.ZERO:
            return as_number(value) == 0
        return as_string(value) == self.literal.text
