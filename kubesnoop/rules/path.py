"""
Path expressions over resource documents.

Supported syntax:
- ``$.a.b``: dotted field access (the leading ``$`` is optional)
- ``$.a[*].b``: wildcard traversal over every element of array ``a``
- ``$.labels['security.level']``: bracketed quoted key, for keys containing dots

Extraction never raises. Anything that does not resolve, including a path that
cannot be parsed, yields ``ABSENT``.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from kubesnoop.core.errors import MalformedResourceError
from kubesnoop.rules.values import ABSENT, VALUE_TYPES, Array, Object, Value, from_python

_TOKEN_PATTERN = re.compile(
    r"""
    \.(?P<field>[^.\[\]'"]+)         # .name
    | \[\*\]                          # [*]
    | \['(?P<single>[^']*)'\]         # ['key']
    | \["(?P<double>[^"]*)"\]         # ["key"]
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class FieldStep:
    name: str


@dataclass(frozen=True)
class WildcardStep:
    pass


PathStep = FieldStep | WildcardStep


class PathSyntaxError(ValueError):
    """Raised by parse_path for text that is not a valid path expression."""


@lru_cache(maxsize=512)
def parse_path(path: str) -> tuple[PathStep, ...]:
    """
    Parse a path expression into steps.

    Raises:
        PathSyntaxError: if the path contains text outside the supported syntax.
    """
    text = path.strip()
    if text.startswith("$"):
        text = text[1:]
    elif text and text[0] not in ".[":
        # Bare "a.b" is accepted as "$.a.b"
        text = "." + text

    steps: list[PathStep] = []
    position = 0
    while position < len(text):
        match = _TOKEN_PATTERN.match(text, position)
        if not match:
            raise PathSyntaxError(f"Invalid path expression {path!r} at offset {position}")
        if match.group("field") is not None:
            steps.append(FieldStep(match.group("field")))
        elif match.group("single") is not None:
            steps.append(FieldStep(match.group("single")))
        elif match.group("double") is not None:
            steps.append(FieldStep(match.group("double")))
        else:
            steps.append(WildcardStep())
        position = match.end()
    return tuple(steps)


def extract(document: Any, path: str) -> Value:
    """
    Extract the value at ``path`` from ``document``.

    ``document`` may already be a Value or plain Python data; plain data is
    converted first, and data that cannot be converted yields ``ABSENT``.

    Once a wildcard has been applied the result is always an Array of whatever
    the remaining steps matched (possibly empty). Elements the remaining steps
    cannot resolve are skipped.
    """
    try:
        steps = parse_path(path)
    except PathSyntaxError:
        return ABSENT

    if not isinstance(document, VALUE_TYPES):
        try:
            document = from_python(document)
        except MalformedResourceError:
            return ABSENT

    nodes: list[Value] = [document]
    fanned_out = False

    for step in steps:
        matched: list[Value] = []
        if isinstance(step, FieldStep):
            for node in nodes:
                if isinstance(node, Object) and step.name in node.fields:
                    matched.append(node.fields[step.name])
        else:
            for node in nodes:
                if isinstance(node, Array):
                    matched.extend(node.items)
            if not fanned_out and not any(isinstance(node, Array) for node in nodes):
                return ABSENT
            fanned_out = True
        nodes = matched
        if not nodes and not fanned_out:
            return ABSENT

    if fanned_out:
        return Array(tuple(nodes))
    return nodes[0]

