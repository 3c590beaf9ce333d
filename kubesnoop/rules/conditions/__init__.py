"""Conditions package for rule evaluation.

Each module holds the parsed node kinds for one family of condition expressions.
"""

from kubesnoop.rules.conditions.base import ConditionNode, Unrecognized
from kubesnoop.rules.conditions.cardinality import Count, IsEmpty
from kubesnoop.rules.conditions.comparison import Equals, Literal, LiteralKind
from kubesnoop.rules.conditions.logical import Disjunction, IsNull
from kubesnoop.rules.conditions.strings import StringOp, StringOpKind

__all__ = [
    # Base
    "ConditionNode",
    "Unrecognized",
    # Comparison
    "Equals",
    "Literal",
    "LiteralKind",
    # Strings
    "StringOp",
    "StringOpKind",
    # Cardinality
    "Count",
    "IsEmpty",
    # Logical
    "Disjunction",
    "IsNull",
]
