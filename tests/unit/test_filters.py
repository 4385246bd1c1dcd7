from __future__ import annotations

from datetime import datetime, timezone

import pytest

from clients_service.errors import ValidationError
from clients_service.query.filters import (
    Contains,
    Equality,
    FilterPredicate,
    OneOf,
    Range,
    RangeOperator,
    escape_like,
)

JAN_1 = datetime(2000, 1, 1, tzinfo=timezone.utc)
DEC_31 = datetime(2000, 12, 31, tzinfo=timezone.utc)


def test_equality_binds_value() -> None:
    assert Equality("abc").clause("id") == ("id = %s", ("abc",))


@pytest.mark.parametrize(
    ("predicate", "expected_sql"),
    [
        (Range.eq(5), "score = %s"),
        (Range.lt(5), "score < %s"),
        (Range.lte(5), "score <= %s"),
        (Range.gt(5), "score > %s"),
        (Range.gte(5), "score >= %s"),
    ],
)
def test_single_value_range_operators(predicate: Range, expected_sql: str) -> None:
    sql, params = predicate.clause("score")
    assert sql == expected_sql
    assert params == (5,)


def test_between_binds_both_bounds_in_order() -> None:
    sql, params = Range.between(JAN_1, DEC_31).clause("birthday")
    assert sql == "birthday BETWEEN %s AND %s"
    assert params == (JAN_1, DEC_31)


def test_range_accepts_operator_names() -> None:
    predicate = Range.of("gte", 3)
    assert predicate.operator is RangeOperator.GTE
    assert predicate.values == (3,)


@pytest.mark.parametrize("values", [(), (1,), (1, 2, 3)])
def test_between_requires_exactly_two_values(values: tuple) -> None:
    with pytest.raises(ValidationError, match="between"):
        Range(RangeOperator.BETWEEN, values)


def test_single_value_operator_rejects_pair() -> None:
    with pytest.raises(ValidationError):
        Range(RangeOperator.LT, (1, 2))


def test_unknown_operator_is_rejected() -> None:
    with pytest.raises(ValidationError, match="unknown range operator"):
        Range.of("like", 1)


def test_none_values_are_rejected() -> None:
    with pytest.raises(ValidationError):
        Range.between(None, 5)
    with pytest.raises(ValidationError):
        Equality(None)


def test_contains_wraps_and_escapes_wildcards() -> None:
    sql, params = Contains("50%_off\\").clause("name")
    assert sql == "name LIKE %s"
    assert params == ("%50\\%\\_off\\\\%",)


def test_caller_values_never_reach_sql_text() -> None:
    hostile = "x'; DROP TABLE clients; --"
    for predicate in (Equality(hostile), Contains(hostile), Range.lt(hostile)):
        sql, params = predicate.clause("name")
        assert hostile not in sql
        assert any(hostile in str(p) for p in params)


def test_one_of_has_one_placeholder_per_value() -> None:
    assert OneOf(("a", "b", "c")).clause("id") == ("id IN (%s, %s, %s)", ("a", "b", "c"))


def test_one_of_rejects_empty() -> None:
    with pytest.raises(ValidationError):
        OneOf(())


def test_predicates_satisfy_protocol() -> None:
    for predicate in (Equality(1), Range.lt(1), Contains("a"), OneOf((1,))):
        assert isinstance(predicate, FilterPredicate)


def test_escape_like_leaves_plain_text_alone() -> None:
    assert escape_like("ann") == "ann"
