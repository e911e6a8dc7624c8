"""Translate asset mapping predicates into binding predicates.

Asset mappings are stored as bindings in the discovery store:

- ``glob`` becomes the binding query with the suffix ``{,/**/*}`` so that
  directories match together with their contents
- ``server_name`` and ``server_path`` become binding parameters
- ``uuid`` is shared

A predicate over mapping fields is rewritten bottom-up into a predicate over
binding fields and combined with a base predicate that selects enabled asset
bindings only.
"""

from collections.abc import Callable
from dataclasses import replace

from .discovery import BindingState
from .expr import And
from .expr import EndsWith
from .expr import Equals
from .expr import Expression
from .expr import Key
from .expr import Not
from .expr import NotEquals
from .expr import NotSame
from .expr import Or
from .expr import Same

BINDING_TYPE = "amplifier/asset-mapping"
SERVER_PARAMETER = "server"
PATH_PARAMETER = "path"
QUERY_SUFFIX = "{,/**/*}"

# Binding fields
QUERY = "query"
TYPE_NAME = "type_name"
STATE = "state"
PARAMETER_VALUES = "parameter_values"

# Comparison type -> field holding the compared string
_SUFFIXED_COMPARISONS: dict[type, str] = {
    Same: "value",
    Equals: "value",
    NotSame: "value",
    NotEquals: "value",
    EndsWith: "suffix",
}


def _rewrite_glob(expr: Expression) -> Expression:
    field = _SUFFIXED_COMPARISONS.get(type(expr))
    if field is not None and isinstance(getattr(expr, field), str):
        expr = replace(expr, **{field: getattr(expr, field) + QUERY_SUFFIX})
    return Key(QUERY, expr)


def _rewrite_parameter(parameter: str) -> Callable[[Expression], Expression]:
    return lambda expr: Key(PARAMETER_VALUES, Key(parameter, expr))


_FIELD_REWRITES: dict[str, Callable[[Expression], Expression]] = {
    "glob": _rewrite_glob,
    "server_name": _rewrite_parameter(SERVER_PARAMETER),
    "server_path": _rewrite_parameter(PATH_PARAMETER),
}


class BindingExpressionBuilder:
    """Builds binding predicates for asset mapping predicates."""

    def __init__(self):
        self._base = (
            Key(STATE, Same(BindingState.ENABLED))
            & Key(TYPE_NAME, Same(BINDING_TYPE))
            & Key(QUERY, EndsWith(QUERY_SUFFIX))
        )

    @property
    def base_expression(self) -> And:
        return self._base

    def build_expression(self, expr: Expression | None = None) -> Expression:
        """
        Build the binding predicate for an asset mapping predicate.

        Args:
            expr: Predicate over asset mapping fields, or None for all mappings

        Returns:
            The base predicate, conjoined with the rewritten ``expr`` if given
        """
        if expr is None:
            return self._base

        return self._base & self._rewrite(expr)

    def _rewrite(self, expr: Expression) -> Expression:
        if isinstance(expr, And):
            return And(tuple(self._rewrite(child) for child in expr.children))

        if isinstance(expr, Or):
            return Or(tuple(self._rewrite(child) for child in expr.children))

        if isinstance(expr, Not):
            return Not(self._rewrite(expr.expr))

        if isinstance(expr, Key):
            inner = self._rewrite(expr.expr)
            rewrite = _FIELD_REWRITES.get(expr.key)
            if rewrite is not None:
                return rewrite(inner)
            return Key(expr.key, inner)

        return expr
