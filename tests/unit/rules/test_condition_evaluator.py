"""Tests for the cached condition evaluator."""

from kubesnoop.rules.condition_evaluator import ConditionEvaluator
from kubesnoop.rules.conditions import ConditionNode
from kubesnoop.rules.values import Bool, String, Value


class ExplodingNode(ConditionNode):
    name = "exploding"

    def fails(self, value: Value) -> bool:
        raise RuntimeError("boom")


class TestConditionEvaluator:
    def test_failing_condition_returns_description(self):
        evaluator = ConditionEvaluator()

        assert evaluator.evaluate(Bool(True), "== true", "Pod uses host network") == (True, "Pod uses host network")

    def test_passing_condition_returns_empty_message(self):
        evaluator = ConditionEvaluator()

        assert evaluator.evaluate(Bool(False), "== true", "Pod uses host network") == (False, "")

    def test_unrecognized_condition_passes(self):
        evaluator = ConditionEvaluator()

        assert evaluator.evaluate(Bool(True), "is dangerous", "desc") == (False, "")

    def test_parsed_conditions_are_cached(self):
        evaluator = ConditionEvaluator(cache_size=4)

        assert evaluator.parse("count == 0") is evaluator.parse("count == 0")

    def test_node_errors_are_contained(self):
        evaluator = ConditionEvaluator()
        evaluator._cache["explode"] = ExplodingNode()

        assert evaluator.evaluate(Bool(True), "explode", "desc") == (False, "")

    def test_trigger_after_field_name(self):
        evaluator = ConditionEvaluator()

        assert evaluator.evaluate(Bool(True), "hostNetwork == true", "desc") == (True, "desc")

    def test_string_checks_only_apply_to_image_tags(self):
        evaluator = ConditionEvaluator()

        assert evaluator.evaluate(String("app-dev"), "endsWith '-dev'", "desc") == (False, "")
        assert evaluator.evaluate(String("nginx"), "NOT contains 'z'", "desc") == (False, "")
        assert evaluator.evaluate(String("nginx"), "NOT contains ':'", "desc") == (True, "desc")
