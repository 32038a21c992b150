"""Clause-level SQL builders.

Each class handles exactly one SQL clause.  Builders that bind values
receive the statement's shared
:class:`~pgfluent.compile.parameters.ParameterBinder`, directly or through
the :class:`~pgfluent.compile.expression_builder.ConditionBuilder`, so
placeholder numbers follow clause assembly order.

Classes
-------
KeysClauseBuilder     — ``<keys>`` for SELECT / RETURNING / column lists
JoinClauseBuilder     — ``INNER|LEFT|RIGHT|FULL OUTER|CROSS JOIN …``
SortClauseBuilder     — ``ORDER BY …``
AssignmentBuilder     — ``"key" = $n`` pairs for SET
InsertClauseBuilder   — ``(cols) VALUES (…)`` / ``DEFAULT VALUES``
OnConflictBuilder     — ``ON CONFLICT (…) DO NOTHING|UPDATE SET …``
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pgfluent.compile.context import CompilationContext
from pgfluent.compile.expression_builder import ConditionBuilder
from pgfluent.compile.parameters import ParameterBinder
from pgfluent.errors import CompilationError
from pgfluent.schema.expressions import (
    DESCENDING_MARKER,
    RAW_MARKER,
    TOTAL_COLUMN,
    ConflictAction,
)
from pgfluent.schema.statement import Assignments, ConflictSpec, JoinSpec


def _can_quote(key: str) -> bool:
    if key == "*":
        return False
    if " as " in key.lower():
        return False
    return "(" not in key


class KeysClauseBuilder:
    """Builds comma-separated key lists.

    ``*`` and ``:raw`` keys are emitted verbatim, ``key:alias`` becomes
    ``"key" AS alias``, and keys that already look like expressions are
    cased but left unquoted.
    """

    def __init__(self, ctx: CompilationContext) -> None:
        self._ctx = ctx

    def build(
        self,
        keys: Sequence[str] | None,
        quote: bool = True,
        window_total: bool = False,
    ) -> str:
        items = [self._build_key(key, quote) for key in (keys or ("*",))]
        if window_total:
            items.append(f"COUNT(*) OVER() AS {TOTAL_COLUMN}")
        return ", ".join(items)

    def _build_key(self, key: str, quote: bool) -> str:
        if key.startswith(RAW_MARKER):
            return key[len(RAW_MARKER):]
        caser = self._ctx.caser
        name, sep, alias = key.partition(RAW_MARKER)
        if sep:
            return f"{caser(name, quote)} AS {caser(alias)}"
        return caser(name, quote and _can_quote(name))


class JoinClauseBuilder:
    """Builds the join fragments of a SELECT, in call order."""

    def __init__(self, ctx: CompilationContext, conditions: ConditionBuilder) -> None:
        self._ctx = ctx
        self._conditions = conditions

    def build(self, joins: Sequence[JoinSpec]) -> str:
        return " ".join(self._build_join(join) for join in joins)

    def _build_join(self, join: JoinSpec) -> str:
        table = self._ctx.caser(join.table, quote=True)
        if not join.conditions:
            return f"CROSS JOIN {table}"
        keyword = self._ctx.compiler.join_keyword(join.required)
        on_sql = self._conditions.build(join.conditions, wrap=False)
        return f"{keyword} {table} ON {on_sql}"


class SortClauseBuilder:
    """Builds ``ORDER BY``; ``-key`` sorts descending, ``:key`` is raw."""

    def __init__(self, ctx: CompilationContext) -> None:
        self._ctx = ctx

    def build(self, sort_keys: Sequence[str]) -> str:
        if not sort_keys:
            return ""
        return f"ORDER BY {', '.join(self._build_key(key) for key in sort_keys)}"

    def _build_key(self, key: str) -> str:
        if key.startswith(DESCENDING_MARKER):
            return f"{self._expression(key[len(DESCENDING_MARKER):])} DESC"
        return self._expression(key)

    def _expression(self, key: str) -> str:
        if key.startswith(RAW_MARKER):
            return key[len(RAW_MARKER):]
        return self._ctx.caser(key, quote=True)


class AssignmentBuilder:
    """Builds ``"key" = value`` pairs and individual value expressions.

    ``None`` becomes ``NULL``, ``:``-prefixed strings are emitted verbatim,
    everything else is bound.
    """

    def __init__(self, ctx: CompilationContext, binder: ParameterBinder) -> None:
        self._ctx = ctx
        self._binder = binder

    def build(self, assignments: Assignments) -> str:
        if not assignments:
            raise CompilationError("SET requires at least one key.", clause="SET")
        return ", ".join(
            f"{self._ctx.caser(key, quote=True)} = {self.value(value)}"
            for key, value in assignments
        )

    def value(self, value: Any) -> str:
        if value is None:
            return "NULL"
        if isinstance(value, str) and value.startswith(RAW_MARKER):
            return value[len(RAW_MARKER):]
        return self._binder.bind(value)


class InsertClauseBuilder:
    """Builds the column/value part of an INSERT."""

    def __init__(
        self,
        keys_builder: KeysClauseBuilder,
        assignment_builder: AssignmentBuilder,
    ) -> None:
        self._keys = keys_builder
        self._assign = assignment_builder

    def build(self, assignments: Assignments | None) -> str:
        if not assignments:
            return "DEFAULT VALUES"
        columns = self._keys.build([key for key, _ in assignments])
        values = ", ".join(self._assign.value(value) for _, value in assignments)
        return f"({columns}) VALUES ({values})"


class OnConflictBuilder:
    """Builds ``ON CONFLICT (…) DO NOTHING`` / ``DO UPDATE SET …``."""

    def __init__(
        self,
        keys_builder: KeysClauseBuilder,
        assignment_builder: AssignmentBuilder,
    ) -> None:
        self._keys = keys_builder
        self._assign = assignment_builder

    def build(self, spec: ConflictSpec | None) -> str:
        if spec is None:
            return ""
        target = f"ON CONFLICT ({self._keys.build(spec.keys)})"
        if spec.action is ConflictAction.NOTHING:
            return f"{target} DO NOTHING"
        return f"{target} DO UPDATE SET {self._assign.build(spec.assignments)}"
