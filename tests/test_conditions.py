"""Unit tests for condition normalization and the condition compiler."""

from __future__ import annotations

import re
from datetime import date

import pytest

from pgfluent.errors import (
    InvalidConditionsTypeError,
    MissingConditionsError,
    UnknownModifierError,
    UnsupportedNullComparerError,
)
from pgfluent.schema.conditions import Group, Leaf, RawLeaf, normalize_conditions
from pgfluent.schema.expressions import Comparer, LogicalOperator


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


class TestNormalize:
    def test_mapping_becomes_leaves_in_order(self):
        assert normalize_conditions({"b": 2, "a": 1}) == (
            Leaf(column="b", value=2),
            Leaf(column="a", value=1),
        )

    def test_lists_are_flattened(self):
        assert normalize_conditions([{"a": 1}, [{"b": 2}]]) == (
            Leaf(column="a", value=1),
            Leaf(column="b", value=2),
        )

    def test_modifiers_become_groups(self):
        (group,) = normalize_conditions({"$or": [{"a": 1}, {"$gt": {"b": 2}}]})
        assert group.operator is LogicalOperator.OR
        assert group.comparer is None
        assert group.children[1] == Group(
            children=(Leaf(column="b", value=2),), comparer=Comparer.GT
        )

    def test_raw_key(self):
        assert normalize_conditions({":now() - created": "'1 day'"}) == (
            RawLeaf(expression="now() - created", value="'1 day'"),
        )

    def test_missing_conditions(self):
        with pytest.raises(MissingConditionsError):
            normalize_conditions(None)

    def test_invalid_conditions_type(self):
        with pytest.raises(InvalidConditionsTypeError):
            normalize_conditions("a = 1")

    def test_mapping_value_on_column_is_rejected(self):
        with pytest.raises(InvalidConditionsTypeError) as exc_info:
            normalize_conditions({"age": {"$gt": 18}})
        assert exc_info.value.details["key"] == "age"

    def test_unknown_modifier(self):
        with pytest.raises(UnknownModifierError) as exc_info:
            normalize_conditions({"$like": {"name": "a%"}})
        assert exc_info.value.code == "UNKNOWN_MODIFIER"
        assert "$regexp" in exc_info.value.details["known_modifiers"]


# ---------------------------------------------------------------------------
# Compilation
# ---------------------------------------------------------------------------


def test_implicit_and_list(compile_conditions):
    sql, params = compile_conditions([{"a": 1}, {"b": 2}])
    assert sql == '"a" = $1 AND "b" = $2'
    assert params == [1, 2]


def test_explicit_and_group(compile_conditions):
    sql, params = compile_conditions({"$and": [{"a": 1}, {"b": 2}]})
    assert sql == '("a" = $1 AND "b" = $2)'
    assert params == [1, 2]


def test_or_group(compile_conditions):
    sql, params = compile_conditions({"$or": [{"a": 1}, {"a": 2}]})
    assert sql == '("a" = $1 OR "a" = $2)'
    assert params == [1, 2]


def test_wrap_parenthesizes_top_level(compile_conditions):
    sql, _ = compile_conditions({"a": 1}, wrap=True)
    assert sql == '("a" = $1)'


def test_null_equality(compile_conditions):
    sql, params = compile_conditions({"deletedAt": None})
    assert sql == '"deleted_at" IS NULL'
    assert params == []


def test_null_inequality(compile_conditions):
    sql, params = compile_conditions({"$ne": {"deletedAt": None}})
    assert sql == '("deleted_at" IS NOT NULL)'
    assert params == []


def test_null_with_ordering_comparer_raises(compile_conditions):
    with pytest.raises(UnsupportedNullComparerError) as exc_info:
        compile_conditions({"$gt": {"a": None}})
    assert exc_info.value.details == {"comparer": "$gt", "key": "a"}


def test_comparer_symbols(compile_conditions):
    sql, _ = compile_conditions(
        [
            {"$lt": {"a": 1}},
            {"$lte": {"b": 1}},
            {"$gte": {"c": 1}},
            {"$regexp": {"d": "^x"}},
        ]
    )
    assert sql == '("a" < $1) AND ("b" <= $2) AND ("c" >= $3) AND ("d" ~* $4)'


def test_comparer_group_inherits_operator(compile_conditions):
    sql, params = compile_conditions(
        {"$or": [{"name": "Ann"}, {"$gte": {"age": 18, "score": 5}}]}
    )
    assert sql == '("name" = $1 OR ("age" >= $2 OR "score" >= $3))'
    assert params == ["Ann", 18, 5]


def test_operator_group_inherits_comparer(compile_conditions):
    sql, _ = compile_conditions({"$gt": {"$or": [{"a": 1}, {"b": 2}]}})
    assert sql == '(("a" > $1 OR "b" > $2))'


def test_raw_key_bypasses_quoting_and_binding(compile_conditions):
    sql, params = compile_conditions({":foo > 1": True})
    assert sql == "foo > 1 = TRUE"
    assert params == []


def test_raw_key_compares_against_cased_path(compile_conditions):
    sql, params = compile_conditions({':"users"."id"': "posts.authorId"})
    assert sql == '"users"."id" = posts.author_id'
    assert params == []


def test_raw_key_keeps_string_literals(compile_conditions):
    sql, _ = compile_conditions({":lower(email)": "'Ann@Example.com'"})
    assert sql == "lower(email) = 'Ann@Example.com'"


def test_raw_key_with_null(compile_conditions):
    sql, _ = compile_conditions({":coalesce(a, b)": None})
    assert sql == "coalesce(a, b) IS NULL"


def test_qualified_and_unquoted_columns(compile_conditions):
    sql, _ = compile_conditions([{"users.firstName": "Ann"}, {"!rawColumn": 1}])
    assert sql == "users.first_name = $1 AND raw_column = $2"


def test_date_values_are_bound(compile_conditions):
    day = date(2024, 1, 1)
    sql, params = compile_conditions({"createdAt": day})
    assert sql == '"created_at" = $1'
    assert params == [day]


def test_empty_groups_are_dropped(compile_conditions):
    sql, params = compile_conditions([{"$and": []}, {"a": 1}, {}])
    assert sql == '"a" = $1'
    assert params == [1]


def test_placeholders_match_parameters(compile_conditions):
    sql, params = compile_conditions(
        {
            "a": 1,
            "$or": [{"b": None}, {"$ne": {"c": 3, "d": None}}, {"$lt": {"e": 5}}],
            "$and": [{":x = y": True}, {"f": "six"}],
        }
    )
    numbers = [int(n) for n in re.findall(r"\$(\d+)", sql)]
    assert numbers == list(range(1, len(params) + 1))
    assert params == [1, 3, 5, "six"]


def test_same_input_compiles_identically(compile_conditions):
    conditions = {"$or": [{"a": 1}, {"$gt": {"b": 2}}]}
    assert compile_conditions(conditions) == compile_conditions(conditions)


def test_non_string_key_is_rejected():
    with pytest.raises(InvalidConditionsTypeError) as exc_info:
        normalize_conditions({1: 2})
    assert exc_info.value.details == {"key": "1", "type": "int"}
