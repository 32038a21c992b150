"""Condition-tree SQL compiler.

``ConditionBuilder`` turns the typed tree produced by
:func:`~pgfluent.schema.conditions.normalize_conditions` into a boolean SQL
expression.  It receives a :class:`~pgfluent.compile.context.CompilationContext`
(static rendering rules) and a
:class:`~pgfluent.compile.parameters.ParameterBinder` (per-statement state)
so that placeholders stay sequential across WHERE, JOIN ... ON and SET
clauses of the same statement.
"""
from __future__ import annotations

from collections.abc import Sequence

from pgfluent.compile.context import CompilationContext
from pgfluent.compile.parameters import ParameterBinder
from pgfluent.errors import (
    CompilationError,
    MissingConditionsError,
    UnsupportedNullComparerError,
)
from pgfluent.schema.conditions import Condition, Group, Leaf, RawLeaf
from pgfluent.schema.expressions import NO_QUOTE_MARKER, Comparer, LogicalOperator


class ConditionBuilder:
    """Compiles condition trees to SQL fragments.

    Args:
        ctx: Static compilation context.
        binder: Shared parameter accumulator for the statement.
    """

    def __init__(self, ctx: CompilationContext, binder: ParameterBinder) -> None:
        self._ctx = ctx
        self._binder = binder

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(
        self,
        conditions: Sequence[Condition] | None,
        operator: LogicalOperator = LogicalOperator.AND,
        comparer: Comparer = Comparer.EQ,
        wrap: bool = True,
    ) -> str:
        """Compile sibling conditions joined by ``operator``.

        Args:
            conditions: Conditions in the order they were given.
            operator: Logical operator joining the siblings.
            comparer: Comparer applied to leaves that do not override it.
            wrap: Parenthesize a non-empty result.

        Returns:
            The SQL fragment; an empty string when every sibling is empty.

        Raises:
            MissingConditionsError: If ``conditions`` is ``None``.
            UnsupportedNullComparerError: If a ``None`` leaf is compared with
                anything but ``$eq`` / ``$ne``.
        """
        if conditions is None:
            raise MissingConditionsError()
        keyword = f" {self._ctx.compiler.operator_keyword(operator)} "
        fragments = (self._build_condition(c, operator, comparer) for c in conditions)
        result = keyword.join(fragment for fragment in fragments if fragment)
        if wrap and result:
            return f"({result})"
        return result

    # ------------------------------------------------------------------
    # Variant dispatch
    # ------------------------------------------------------------------

    def _build_condition(
        self,
        condition: Condition,
        operator: LogicalOperator,
        comparer: Comparer,
    ) -> str:
        if isinstance(condition, Group):
            return self.build(
                condition.children,
                condition.operator if condition.operator is not None else operator,
                condition.comparer if condition.comparer is not None else comparer,
                wrap=True,
            )
        if isinstance(condition, RawLeaf):
            return self._build_raw(condition, comparer)
        if isinstance(condition, Leaf):
            return self._build_leaf(condition, comparer)
        raise CompilationError(
            f"Unknown condition type: {type(condition).__name__}", clause="WHERE"
        )

    def _build_leaf(self, leaf: Leaf, comparer: Comparer) -> str:
        column = self._column(leaf.column)
        if leaf.value is None:
            return f"{column} {self._null_check(comparer, leaf.column)}"
        placeholder = self._binder.bind(leaf.value)
        return f"{column} {self._ctx.compiler.comparer_symbol(comparer)} {placeholder}"

    def _build_raw(self, leaf: RawLeaf, comparer: Comparer) -> str:
        if leaf.value is None:
            return f"{leaf.expression} {self._null_check(comparer, leaf.expression)}"
        if isinstance(leaf.value, str):
            right = self._ctx.caser(leaf.value)
        else:
            right = self._ctx.compiler.literal(leaf.value)
        return f"{leaf.expression} {self._ctx.compiler.comparer_symbol(comparer)} {right}"

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _column(self, key: str) -> str:
        caser = self._ctx.caser
        if key.startswith(NO_QUOTE_MARKER):
            return caser(key[len(NO_QUOTE_MARKER):])
        if "." in key:
            return caser(key)
        return caser(key, quote=True)

    def _null_check(self, comparer: Comparer, key: str) -> str:
        check = self._ctx.compiler.null_check(comparer)
        if check is None:
            raise UnsupportedNullComparerError(comparer.value, key)
        return check
