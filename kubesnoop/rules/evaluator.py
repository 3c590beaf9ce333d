"""
Rule evaluation against a single resource document.
"""

from typing import Any

import structlog

from kubesnoop.core.models import Finding
from kubesnoop.rules.condition_evaluator import ConditionEvaluator
from kubesnoop.rules.models import RuleResult, SecurityRule
from kubesnoop.rules.path import extract
from kubesnoop.rules.values import VALUE_TYPES, Absent, from_python, to_python

logger = structlog.get_logger(__name__)

# Conditions mentioning this keyword are evaluated even when the query is absent
ABSENCE_KEYWORD = "null"


def evaluate_rule(
    rule: SecurityRule,
    document: Any,
    resource_id: str,
    evaluator: ConditionEvaluator | None = None,
) -> RuleResult:
    """
    Evaluate one rule against one resource document.

    Args:
        rule: Rule to evaluate
        document: Resource document (plain data or an already converted Value)
        resource_id: Resource identifier used in the result
        evaluator: Shared condition evaluator; a fresh one is created when omitted

    Returns:
        RuleResult with passed=False when the rule's condition is satisfied.
    """
    evaluator = evaluator or ConditionEvaluator()
    result = RuleResult(rule=rule, resource=resource_id)

    value = extract(document, rule.query)
    if isinstance(value, Absent) and ABSENCE_KEYWORD not in rule.condition:
        # No value found, rule doesn't apply
        return result

    fails, message = evaluator.evaluate(value, rule.condition, rule.description)
    result.passed = not fails
    result.message = message
    result.value = to_python(value)

    logger.debug(
        "rule_evaluated",
        rule=rule.name,
        resource=resource_id,
        passed=result.passed,
    )
    return result


def evaluate_resource(
    document: Any,
    resource_id: str,
    rules: list[SecurityRule],
    evaluator: ConditionEvaluator | None = None,
) -> list[Finding]:
    """
    Apply a rule set to one resource, in rule order.

    Returns:
        One Finding per failing rule, ordered as ``rules``.

    Raises:
        MalformedResourceError: if a plain document cannot be converted to the value model.
    """
    evaluator = evaluator or ConditionEvaluator()
    if not isinstance(document, VALUE_TYPES):
        document = from_python(document)
    findings: list[Finding] = []

    for rule in rules:
        result = evaluate_rule(rule, document, resource_id, evaluator)
        if not result.passed:
            findings.append(
                Finding(
                    severity=rule.severity,
                    category=rule.category,
                    resource=resource_id,
                    message=result.message,
                    remediation=rule.remediation,
                )
            )

    return findings
