"""Core Statement → SQL compilation logic.

``StatementCompiler`` is the top-level orchestrator.  It wires together the
focused clause-level and condition-level sub-builders, then assembles the
clauses in the order required by the statement's command.

Sub-builder hierarchy
---------------------
StatementCompiler
  ├── ConditionBuilder     (expression_builder.py)
  ├── KeysClauseBuilder    (clause_builders.py)
  ├── JoinClauseBuilder    (clause_builders.py)
  ├── SortClauseBuilder    (clause_builders.py)
  ├── AssignmentBuilder    (clause_builders.py)
  ├── InsertClauseBuilder  (clause_builders.py)
  └── OnConflictBuilder    (clause_builders.py)

Parameter sharing
-----------------
A single :class:`~pgfluent.compile.parameters.ParameterBinder` is created
per ``compile()`` call and threaded through every sub-builder, so ``$n``
numbering follows the textual order of the clauses.  Compilation reads the
statement and writes only to that binder: compiling the same statement
twice yields identical output.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from pgfluent.compile.base import CompiledSQL
from pgfluent.compile.clause_builders import (
    AssignmentBuilder,
    InsertClauseBuilder,
    JoinClauseBuilder,
    KeysClauseBuilder,
    OnConflictBuilder,
    SortClauseBuilder,
)
from pgfluent.compile.context import CompilationContext
from pgfluent.compile.expression_builder import ConditionBuilder
from pgfluent.compile.parameters import ParameterBinder
from pgfluent.errors import CompilationError
from pgfluent.schema.config import BuilderConfig
from pgfluent.schema.expressions import COUNT_COLUMN, RAW_MARKER, CommandKind
from pgfluent.schema.statement import Statement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _SubBuilders:
    conditions: ConditionBuilder
    keys: KeysClauseBuilder
    joins: JoinClauseBuilder
    sort: SortClauseBuilder
    assign: AssignmentBuilder
    insert: InsertClauseBuilder
    on_conflict: OnConflictBuilder


class StatementCompiler:
    """Compiles a :class:`~pgfluent.schema.statement.Statement` to parameterized SQL.

    Args:
        config: Builder configuration; only the database casing is used.
    """

    def __init__(self, config: BuilderConfig | None = None) -> None:
        self._config = config or BuilderConfig()
        self._ctx = CompilationContext.from_config(self._config)
        self._assemblers: dict[CommandKind, Callable[[Statement, _SubBuilders], list[str]]] = {
            CommandKind.SELECT: self._assemble_select,
            CommandKind.UPDATE: self._assemble_update,
            CommandKind.INSERT: self._assemble_insert,
            CommandKind.DELETE: self._assemble_delete,
        }

    @property
    def config(self) -> BuilderConfig:
        return self._config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compile(self, statement: Statement) -> CompiledSQL:
        """Compile ``statement`` to SQL text and its ordered parameters.

        Args:
            statement: A fully constructed statement.

        Returns:
            :class:`~pgfluent.compile.base.CompiledSQL` with ``$n``
            placeholders and the matching ``params`` list.

        Raises:
            UnsupportedNullComparerError: If a ``None`` value is compared with
                a non-equality comparer.
            CompilationError: If an unexpected statement shape is encountered.
        """
        binder = ParameterBinder(dialect=self._ctx.compiler)
        sub_builders = self._make_sub_builders(binder)
        assemble = self._assemblers.get(statement.command)
        if assemble is None:
            raise CompilationError(f"Unsupported command: {statement.command!r}")
        parts = assemble(statement, sub_builders)
        sql = " ".join(part for part in parts if part)
        logger.debug(
            "Compiled %s on %s with %d parameter(s)",
            statement.command.value,
            statement.table,
            len(binder.params),
        )
        return CompiledSQL(sql=sql, params=binder.params)

    # ------------------------------------------------------------------
    # Per-command assembly
    # ------------------------------------------------------------------

    def _assemble_select(self, statement: Statement, b: _SubBuilders) -> list[str]:
        if statement.count_rows:
            inner = self._assemble_select(statement.model_copy(update={"count_rows": False}), b)
            inner_sql = " ".join(part for part in inner if part)
            return [f"SELECT COUNT(*)::int AS {COUNT_COLUMN} FROM ({inner_sql}) AS counted"]
        keys = b.keys.build(statement.keys, window_total=statement.returns_page)
        return [
            f"SELECT {keys}",
            f"FROM {self._table(statement)}",
            b.joins.build(statement.joins),
            self._where(statement, b),
            self._group_by(statement),
            b.sort.build(statement.sort_keys),
            f"OFFSET {statement.offset}" if statement.offset else "",
            f"LIMIT {statement.limit}" if statement.limit is not None else "",
        ]

    def _assemble_update(self, statement: Statement, b: _SubBuilders) -> list[str]:
        if not statement.assignments:
            raise CompilationError("UPDATE requires at least one key.", clause="SET")
        return [
            f"UPDATE {self._table(statement)}",
            f"SET {b.assign.build(statement.assignments)}",
            self._where(statement, b),
            f"RETURNING {b.keys.build(statement.keys)}",
        ]

    def _assemble_insert(self, statement: Statement, b: _SubBuilders) -> list[str]:
        return [
            f"INSERT INTO {self._table(statement)}",
            b.insert.build(statement.assignments),
            b.on_conflict.build(statement.on_conflict),
            f"RETURNING {b.keys.build(statement.keys)}",
        ]

    def _assemble_delete(self, statement: Statement, b: _SubBuilders) -> list[str]:
        return [
            f"DELETE FROM {self._table(statement)}",
            self._where(statement, b),
        ]

    # ------------------------------------------------------------------
    # Shared clauses
    # ------------------------------------------------------------------

    def _table(self, statement: Statement) -> str:
        return self._ctx.caser(statement.table, quote=True)

    def _where(self, statement: Statement, b: _SubBuilders) -> str:
        if not statement.conditions:
            return ""
        # Top-level siblings are ANDed; OR groups parenthesize themselves.
        condition_sql = b.conditions.build(statement.conditions, wrap=False)
        return f"WHERE {condition_sql}" if condition_sql else ""

    def _group_by(self, statement: Statement) -> str:
        if not statement.group_by:
            return ""
        keys = ", ".join(
            key[len(RAW_MARKER):] if key.startswith(RAW_MARKER) else self._ctx.caser(key, quote=True)
            for key in statement.group_by
        )
        return f"GROUP BY {keys}"

    # ------------------------------------------------------------------
    # Sub-builder wiring
    # ------------------------------------------------------------------

    def _make_sub_builders(self, binder: ParameterBinder) -> _SubBuilders:
        """Construct the sub-builder graph for one compilation run."""
        conditions = ConditionBuilder(self._ctx, binder)
        keys = KeysClauseBuilder(self._ctx)
        assign = AssignmentBuilder(self._ctx, binder)
        return _SubBuilders(
            conditions=conditions,
            keys=keys,
            joins=JoinClauseBuilder(self._ctx, conditions),
            sort=SortClauseBuilder(self._ctx),
            assign=assign,
            insert=InsertClauseBuilder(keys, assign),
            on_conflict=OnConflictBuilder(keys, assign),
        )


def compile_statement(statement: Statement, config: BuilderConfig | None = None) -> CompiledSQL:
    """Compile ``statement`` with a fresh :class:`StatementCompiler`."""
    return StatementCompiler(config).compile(statement)
