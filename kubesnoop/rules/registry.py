"""
Registry for condition expressions.

Condition text is matched against an ordered table of recognizers. Each
recognizer has a trigger phrase; the first recognizer whose trigger appears
anywhere in the text builds the node and handles the expression exclusively.
Text that no recognizer claims is unrecognized and never fails.

The table order is part of the rule format: existing rule definitions depend on
which recognizer wins when several phrases appear in one condition.

| Priority | Trigger          | Node                                                     |
|----------|------------------|----------------------------------------------------------|
| 1        | ``==``           | ``Equals`` on the first literal right of ``==``          |
| 2        | ``null OR``      | ``IsNull``, or'ed with ``== 0`` / ``empty`` when present |
| 3        | ``endsWith``     | ``StringOp`` for ``:latest`` only                        |
| 4        | ``NOT contains`` | ``StringOp`` for ``:`` only                              |
| 5        | ``count == 0``   | ``Count(0)``                                             |

``count == 0`` contains ``==``; the equality row skips that phrase so that
namespace network-policy checks reach the count row.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from kubesnoop.rules.conditions import (
    ConditionNode,
    Count,
    Disjunction,
    Equals,
    IsEmpty,
    IsNull,
    Literal,
    LiteralKind,
    StringOp,
    StringOpKind,
    Unrecognized,
)

logger = structlog.get_logger(__name__)

LATEST_TAG = ":latest"
TAG_SEPARATOR = ":"
NULL_OR_EMPTY = "null OR empty"

_TOKEN_PATTERN = re.compile(
    r"""
    \s*(?:
        (?P<op>==)
        | '(?P<single>[^']*)'
        | "(?P<double>[^"]*)"
        | (?P<word>[^\s'"=]+)
        | (?P<other>\S)
    )
    """,
    re.VERBOSE,
)

_COUNT_ZERO_PATTERN = re.compile(r"count\s*==\s*0(?![\w.])")
_EQUALS_ZERO_PATTERN = re.compile(r"==\s*0(?![\w.])")


@dataclass(frozen=True)
class Token:
    kind: str  # op | quoted | word
    text: str


def tokenize(condition: str) -> list[Token]:
    """Split condition text into tokens. Unterminated quotes fall back to single characters."""
    tokens: list[Token] = []
    position = 0
    text = condition.rstrip()
    while position < len(text):
        match = _TOKEN_PATTERN.match(text, position)
        if match is None:
            break
        if match.group("op") is not None:
            tokens.append(Token("op", match.group("op")))
        elif match.group("single") is not None:
            tokens.append(Token("quoted", match.group("single")))
        elif match.group("double") is not None:
            tokens.append(Token("quoted", match.group("double")))
        elif match.group("word") is not None:
            tokens.append(Token("word", match.group("word")))
        else:
            tokens.append(Token("word", match.group("other")))
        position = match.end()
    return tokens


# A builder receives the full condition text and the text after the trigger, and
# returns a node, or None when the clause has no effect.
Builder = Callable[[str, str], ConditionNode | None]


@dataclass(frozen=True)
class Recognizer:
    """One row of the dispatch table."""

    name: str
    trigger: str
    build: Builder
    description: str = ""
    examples: tuple[str, ...] = ()
    pattern: re.Pattern[str] | None = None  # overrides the literal trigger when set

    def locate(self, text: str) -> int | None:
        """Return the offset just past the trigger, or None when it does not occur."""
        if self.pattern is not None:
            match = self.pattern.search(text)
            return match.end() if match else None
        index = text.find(self.trigger)
        if index < 0:
            return None
        return index + len(self.trigger)

    def get_description(self) -> dict[str, object]:
        return {
            "name": self.name,
            "trigger": self.trigger,
            "description": self.description,
            "examples": list(self.examples),
        }


@dataclass(frozen=True)
class EqualityRecognizer(Recognizer):
    """Equality row; occurrences of ``==`` inside ``count == 0`` are not equality."""

    def locate(self, text: str) -> int | None:
        count_spans = [match.span() for match in _COUNT_ZERO_PATTERN.finditer(text)]
        start = 0
        while True:
            index = text.find(self.trigger, start)
            if index < 0:
                return None
            if not any(begin <= index < end for begin, end in count_spans):
                return index + len(self.trigger)
            start = index + len(self.trigger)


def _build_equals(text: str, rest: str) -> ConditionNode:
    tokens = tokenize(rest)
    if not tokens:
        return Equals(Literal.from_token("", quoted=False))
    first = tokens[0]
    return Equals(Literal.from_token(first.text, quoted=first.kind == "quoted"))


def _build_null_or(text: str, rest: str) -> ConditionNode:
    if text == NULL_OR_EMPTY:
        return Disjunction(IsNull(), IsEmpty())
    if _EQUALS_ZERO_PATTERN.search(text):
        return Disjunction(IsNull(), Equals(Literal(LiteralKind.ZERO, "0")))
    return IsNull()


def _build_ends_with(text: str, rest: str) -> ConditionNode | None:
    if LATEST_TAG not in text:
        return None
    return StringOp(StringOpKind.ENDS_WITH, LATEST_TAG)


def _build_not_contains(text: str, rest: str) -> ConditionNode | None:
    if TAG_SEPARATOR not in text:
        return None
    return StringOp(StringOpKind.NOT_CONTAINS, TAG_SEPARATOR)


def _build_count(text: str, rest: str) -> ConditionNode:
    return Count(0)


# Priority order matters: the first recognizer whose trigger occurs wins.
RECOGNIZERS: tuple[Recognizer, ...] = (
    EqualityRecognizer(
        "equals",
        "==",
        _build_equals,
        description="Value equals the first literal right of ==: true/false (truthiness), null (absent), "
        "0 (numeric zero), or a quoted/bare string",
        examples=("== true", "hostNetwork == true", "== 'NodePort'", "== 0"),
    ),
    Recognizer(
        "null_or",
        "null OR",
        _build_null_or,
        description="Value is absent; 'null OR empty' also matches an object with no keys, "
        "and a condition containing '== 0' also matches numeric zero",
        examples=(NULL_OR_EMPTY, "null OR missing"),
    ),
    Recognizer(
        "ends_with",
        "endsWith",
        _build_ends_with,
        description="String form ends with ':latest' (only when the condition names ':latest')",
        examples=("endsWith ':latest'",),
    ),
    Recognizer(
        "not_contains",
        "NOT contains",
        _build_not_contains,
        description="String form has no ':' (only when the condition names ':')",
        examples=("NOT contains ':'",),
    ),
    Recognizer(
        "count",
        "count == 0",
        _build_count,
        description="Value is an array with no elements",
        examples=("count == 0",),
        pattern=_COUNT_ZERO_PATTERN,
    ),
)


def _dispatch(text: str) -> ConditionNode:
    for recognizer in RECOGNIZERS:
        end = recognizer.locate(text)
        if end is None:
            continue
        node = recognizer.build(text, text[end:])
        # A claimed clause without effect is not handed to a lower-priority recognizer
        return node if node is not None else Unrecognized(text)
    return Unrecognized(text)


def parse_condition(condition: str) -> ConditionNode:
    """
    Parse condition text into a node tree. Never raises.

    Args:
        condition: Free-form condition text, e.g. ``"== true"`` or ``"count == 0"``.

    Returns:
        The node built by the first recognizer whose trigger occurs, or ``Unrecognized``.
    """
    text = condition.strip() if isinstance(condition, str) else ""
    node = _dispatch(text)
    if isinstance(node, Unrecognized):
        logger.debug("condition_unrecognized", condition=text)
    return node


def get_condition_catalogue() -> list[dict[str, object]]:
    """Describe the supported condition forms, in dispatch order."""
    return [recognizer.get_description() for recognizer in RECOGNIZERS]
