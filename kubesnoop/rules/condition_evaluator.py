"""
Condition evaluator for rule condition expressions.

Parses condition text through the recognizer table in ``registry`` and applies
the resulting node to an extracted value.
"""

import structlog
from cachetools import LRUCache

from kubesnoop.core.config import config
from kubesnoop.rules.conditions import ConditionNode
from kubesnoop.rules.registry import parse_condition
from kubesnoop.rules.values import Value

logger = structlog.get_logger(__name__)


class ConditionEvaluator:
    """
    Evaluates condition expressions against extracted values.

    Parsed expressions are cached by condition text, since the same few
    conditions are applied to every resource of a type.
    """

    def __init__(self, cache_size: int | None = None):
        self._cache: LRUCache[str, ConditionNode] = LRUCache(
            maxsize=cache_size or config.evaluation.condition_cache_size
        )

    def parse(self, condition: str) -> ConditionNode:
        node = self._cache.get(condition)
        if node is None:
            node = parse_condition(condition)
            self._cache[condition] = node
        return node

    def evaluate(self, value: Value, condition: str, description: str) -> tuple[bool, str]:
        """
        Evaluate a condition expression against a value.

        Args:
            value: Value extracted from the resource document
            condition: Condition text; satisfying it means a violation
            description: Rule description, returned as the message on failure

        Returns:
            Tuple of (fails: bool, message: str). The message is empty on pass.
        """
        node = self.parse(condition)
        try:
            fails = node.fails(value)
        except Exception as e:
            # Nodes are total over the value model; anything else is a bug in a node
            logger.error("condition_evaluation_error", condition=condition, node=repr(node), error=str(e))
            return False, ""

        if fails:
            return True, description
        return False, ""
