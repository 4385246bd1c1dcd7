"""
Filter predicates: optional, per-column constraints folded into a query.

Each predicate renders exactly one clause for the column it is bound to and
hands back the values to bind. Values never reach the SQL text; only the column
name (validated by the composer) and the operator (a closed enum) do.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Protocol, Tuple, runtime_checkable

from clients_service.errors import ValidationError

Clause = Tuple[str, Tuple[Any, ...]]


class RangeOperator(str, Enum):
    EQ = "eq"
    LT = "lt"
    LTE = "lte"
    GT = "gt"
    GTE = "gte"
    BETWEEN = "between"


_SQL_OPERATORS: Dict[RangeOperator, str] = {
    RangeOperator.EQ: "=",
    RangeOperator.LT: "<",
    RangeOperator.LTE: "<=",
    RangeOperator.GT: ">",
    RangeOperator.GTE: ">=",
}


@runtime_checkable
class FilterPredicate(Protocol):
    """Anything that can contribute one parameterized clause for a column."""

    def clause(self, column: str) -> Clause:
        """Return the SQL fragment for `column` and the values it binds."""
        ...


def _require_value(value: Any, kind: str) -> None:
    if value is None:
        raise ValidationError(f"{kind} filter needs a value, got None")


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so `text` matches literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass(frozen=True)
class Equality:
    """Exact match: ``col = %s``."""

    value: Any

    def __post_init__(self) -> None:
        _require_value(self.value, "equality")

    def clause(self, column: str) -> Clause:
        return f"{column} = %s", (self.value,)


@dataclass(frozen=True)
class Range:
    """
    Ordered comparison against one value, or ``BETWEEN`` two values.

    Construct through the classmethods (``Range.lt(10)``,
    ``Range.between(lo, hi)``) or directly with an operator and a tuple of
    values. A ``between`` range with anything other than two values is
    rejected immediately instead of being widened into an open range.
    """

    operator: RangeOperator
    values: Tuple[Any, ...]

    def __post_init__(self) -> None:
        try:
            operator = RangeOperator(self.operator)
        except ValueError as exc:
            raise ValidationError(f"unknown range operator {self.operator!r}") from exc
        values = tuple(self.values) if isinstance(self.values, (tuple, list)) else (self.values,)
        expected = 2 if operator is RangeOperator.BETWEEN else 1
        if len(values) != expected:
            raise ValidationError(
                f"range operator '{operator.value}' takes {expected} value(s), got {len(values)}"
            )
        for value in values:
            _require_value(value, f"range '{operator.value}'")
        object.__setattr__(self, "operator", operator)
        object.__setattr__(self, "values", values)

    @classmethod
    def of(cls, operator: RangeOperator | str, *values: Any) -> "Range":
        return cls(operator, values)  # type: ignore[arg-type]

    @classmethod
    def eq(cls, value: Any) -> "Range":
        return cls(RangeOperator.EQ, (value,))

    @classmethod
    def lt(cls, value: Any) -> "Range":
        return cls(RangeOperator.LT, (value,))

    @classmethod
    def lte(cls, value: Any) -> "Range":
        return cls(RangeOperator.LTE, (value,))

    @classmethod
    def gt(cls, value: Any) -> "Range":
        return cls(RangeOperator.GT, (value,))

    @classmethod
    def gte(cls, value: Any) -> "Range":
        return cls(RangeOperator.GTE, (value,))

    @classmethod
    def between(cls, lower: Any, upper: Any) -> "Range":
        return cls(RangeOperator.BETWEEN, (lower, upper))

    def clause(self, column: str) -> Clause:
        if self.operator is RangeOperator.BETWEEN:
            return f"{column} BETWEEN %s AND %s", self.values
        return f"{column} {_SQL_OPERATORS[self.operator]} %s", self.values


@dataclass(frozen=True)
class Contains:
    """Substring match: ``col LIKE %s`` bound to ``%text%``."""

    text: str

    def __post_init__(self) -> None:
        _require_value(self.text, "substring")

    def clause(self, column: str) -> Clause:
        return f"{column} LIKE %s", (f"%{escape_like(self.text)}%",)


@dataclass(frozen=True)
class OneOf:
    """Membership: ``col IN (%s, %s, ...)``, one placeholder per value."""

    values: Tuple[Any, ...]

    def __post_init__(self) -> None:
        values = tuple(self.values)
        if not values:
            raise ValidationError("membership filter needs at least one value")
        object.__setattr__(self, "values", values)

    def clause(self, column: str) -> Clause:
        placeholders = ", ".join(["%s"] * len(self.values))
        return f"{column} IN ({placeholders})", self.values


__all__ = [
    "Clause",
    "Contains",
    "Equality",
    "FilterPredicate",
    "OneOf",
    "Range",
    "RangeOperator",
    "escape_like",
]
