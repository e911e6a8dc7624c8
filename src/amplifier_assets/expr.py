"""Predicate expressions over object fields.

A predicate is a small tree of frozen nodes:

- literals: ``Valid`` / ``Invalid``
- comparisons on a value: ``Same``, ``Equals``, ``NotSame``, ``NotEquals``,
  ``StartsWith``, ``EndsWith``, ``In``, ``Matches``, ``IsNull``
- the field selector ``Key``
- logic: ``And``, ``Or``, ``Not``

Nodes compare by value, so two predicates built the same way are equal.
Combine nodes with ``&``, ``|`` and ``~``.

Example:
    >>> expr = same("local", "server_name") & ends_with(".css", "glob")
    >>> expr.evaluate({"server_name": "local", "glob": "/app/*.css"})
    True
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

_MISSING = object()


class Expression:
    """Base class of all predicate nodes."""

    def evaluate(self, value: Any) -> bool:
        raise NotImplementedError

    def __and__(self, other: "Expression") -> "And":
        if isinstance(self, And):
            return And(self.children + (other,))
        return And((self, other))

    def __or__(self, other: "Expression") -> "Or":
        if isinstance(self, Or):
            return Or(self.children + (other,))
        return Or((self, other))

    def __invert__(self) -> "Not":
        return Not(self)


@dataclass(frozen=True)
class Valid(Expression):
    """Matches every value."""

    def evaluate(self, value: Any) -> bool:
        return True


@dataclass(frozen=True)
class Invalid(Expression):
    """Matches no value."""

    def evaluate(self, value: Any) -> bool:
        return False


class Comparison(Expression):
    """A test applied directly to a value."""


@dataclass(frozen=True)
class Same(Comparison):
    """Value is equal to ``value`` and of the same type."""

    value: Any

    def evaluate(self, value: Any) -> bool:
        return type(value) is type(self.value) and value == self.value


@dataclass(frozen=True)
class Equals(Comparison):
    value: Any

    def evaluate(self, value: Any) -> bool:
        return value == self.value


@dataclass(frozen=True)
class NotSame(Comparison):
    value: Any

    def evaluate(self, value: Any) -> bool:
        return not Same(self.value).evaluate(value)


@dataclass(frozen=True)
class NotEquals(Comparison):
    value: Any

    def evaluate(self, value: Any) -> bool:
        return value != self.value


@dataclass(frozen=True)
class StartsWith(Comparison):
    prefix: str

    def evaluate(self, value: Any) -> bool:
        return isinstance(value, str) and value.startswith(self.prefix)


@dataclass(frozen=True)
class EndsWith(Comparison):
    suffix: str

    def evaluate(self, value: Any) -> bool:
        return isinstance(value, str) and value.endswith(self.suffix)


@dataclass(frozen=True)
class In(Comparison):
    values: tuple

    def evaluate(self, value: Any) -> bool:
        return value in self.values


@dataclass(frozen=True)
class Matches(Comparison):
    """Value is a string containing a match of the regular expression."""

    pattern: str

    def evaluate(self, value: Any) -> bool:
        return isinstance(value, str) and re.search(self.pattern, value) is not None


@dataclass(frozen=True)
class IsNull(Comparison):
    def evaluate(self, value: Any) -> bool:
        return value is None


@dataclass(frozen=True)
class Key(Expression):
    """Applies ``expr`` to the field ``key`` of the value.

    Mappings are indexed, other objects are read with ``getattr``. A missing
    field never matches.
    """

    key: str
    expr: Expression

    def evaluate(self, value: Any) -> bool:
        if isinstance(value, Mapping):
            field = value.get(self.key, _MISSING)
        else:
            field = getattr(value, self.key, _MISSING)

        if field is _MISSING:
            return False

        return self.expr.evaluate(field)


@dataclass(frozen=True)
class And(Expression):
    children: tuple[Expression, ...]

    def evaluate(self, value: Any) -> bool:
        return all(child.evaluate(value) for child in self.children)


@dataclass(frozen=True)
class Or(Expression):
    children: tuple[Expression, ...]

    def evaluate(self, value: Any) -> bool:
        return any(child.evaluate(value) for child in self.children)


@dataclass(frozen=True)
class Not(Expression):
    expr: Expression

    def evaluate(self, value: Any) -> bool:
        return not self.expr.evaluate(value)


def _wrap(expr: Expression, field: str | None) -> Expression:
    return Key(field, expr) if field is not None else expr


def key(field: str, expr: Expression) -> Key:
    return Key(field, expr)


def valid() -> Valid:
    return Valid()


def invalid() -> Invalid:
    return Invalid()


def same(value: Any, field: str | None = None) -> Expression:
    return _wrap(Same(value), field)


def equals(value: Any, field: str | None = None) -> Expression:
    return _wrap(Equals(value), field)


def not_same(value: Any, field: str | None = None) -> Expression:
    return _wrap(NotSame(value), field)


def not_equals(value: Any, field: str | None = None) -> Expression:
    return _wrap(NotEquals(value), field)


def starts_with(prefix: str, field: str | None = None) -> Expression:
    return _wrap(StartsWith(prefix), field)


def ends_with(suffix: str, field: str | None = None) -> Expression:
    return _wrap(EndsWith(suffix), field)


def in_(values, field: str | None = None) -> Expression:
    return _wrap(In(tuple(values)), field)


def matches(pattern: str, field: str | None = None) -> Expression:
    return _wrap(Matches(pattern), field)


def is_null(field: str | None = None) -> Expression:
    return _wrap(IsNull(), field)
