"""Tests for parsed condition nodes against every value shape."""

import pytest

from kubesnoop.rules.conditions import (
    Count,
    Disjunction,
    Equals,
    IsEmpty,
    IsNull,
    Literal,
    LiteralKind,
    StringOp,
    StringOpKind,
)
from kubesnoop.rules.values import ABSENT, NULL, Array, Bool, Number, Object, String


class TestEquals:
    def test_true_compares_truthiness(self):
        node = Equals(Literal(LiteralKind.TRUE, "true"))

        assert node.fails(Bool(True)) is True
        assert node.fails(String("true")) is True
        assert node.fails(Bool(False)) is False
        assert node.fails(ABSENT) is False

    def test_false_literal(self):
        node = Equals(Literal(LiteralKind.FALSE, "false"))

        assert node.fails(Bool(False)) is True
        assert node.fails(Bool(True)) is False

    def test_zero_compares_numeric_form(self):
        node = Equals(Literal(LiteralKind.ZERO, "0"))

        assert node.fails(Number(0.0)) is True
        assert node.fails(Number(1000.0)) is False
        # Missing values read as zero
        assert node.fails(ABSENT) is True

    def test_null_literal_checks_absence(self):
        node = Equals(Literal(LiteralKind.NULL, "null"))

        assert node.fails(ABSENT) is True
        assert node.fails(NULL) is False
        assert node.fails(Array(())) is False

    def test_quoted_literal_compares_string_form(self):
        node = Equals(Literal(LiteralKind.QUOTED, "NodePort"))

        assert node.fails(String("NodePort")) is True
        assert node.fails(String("ClusterIP")) is False

    def test_arrays_fail_when_any_element_matches(self):
        node = Equals(Literal(LiteralKind.QUOTED, "*"))

        assert node.fails(Array((String("pods"), String("*")))) is True
        assert node.fails(Array((String("pods"),))) is False
        assert node.fails(Array(())) is False

    def test_nodes_compare_by_content(self):
        assert Equals(Literal(LiteralKind.ZERO, "0")) == Equals(Literal(LiteralKind.ZERO, "0"))
        assert Equals(Literal(LiteralKind.ZERO, "0")) != Count(0)
        assert len({Count(0), Count(0), Count(1)}) == 2


class TestStringOp:
    @pytest.mark.parametrize(
        ("image", "fails"),
        [("nginx:latest", True), ("nginx:1.25", False), ("nginx", False)],
    )
    def test_ends_with(self, image, fails):
        assert StringOp(StringOpKind.ENDS_WITH, ":latest").fails(String(image)) is fails

    @pytest.mark.parametrize(
        ("image", "fails"),
        [("nginx", True), ("nginx:1.25", False)],
    )
    def test_not_contains(self, image, fails):
        assert StringOp(StringOpKind.NOT_CONTAINS, ":").fails(String(image)) is fails

    def test_array_of_images(self):
        node = StringOp(StringOpKind.ENDS_WITH, ":latest")

        assert node.fails(Array((String("envoy:1.29"), String("nginx:latest")))) is True


class TestCardinality:
    def test_count_matches_array_length(self):
        assert Count(0).fails(Array(())) is True
        assert Count(0).fails(Array((Object({}),))) is False
        assert Count(1).fails(Array((Object({}),))) is True

    def test_count_ignores_non_arrays(self):
        assert Count(0).fails(ABSENT) is False
        assert Count(0).fails(Object({})) is False

    def test_is_empty(self):
        assert IsEmpty().fails(Object({})) is True
        assert IsEmpty().fails(Object({"cpu": String("1")})) is False
        assert IsEmpty().fails(Array((Object({"cpu": String("1")}), Object({})))) is True
        assert IsEmpty().fails(String("")) is False


class TestLogical:
    def test_is_null(self):
        assert IsNull().fails(ABSENT) is True
        assert IsNull().fails(NULL) is False

    def test_disjunction_fails_when_either_side_fails(self):
        node = Disjunction(IsNull(), IsEmpty())

        assert node.fails(ABSENT) is True
        assert node.fails(Object({})) is True
        assert node.fails(Object({"memory": String("256Mi")})) is False
