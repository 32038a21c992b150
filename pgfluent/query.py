"""Fluent query builder.

``QueryBuilder`` accumulates an immutable
:class:`~pgfluent.schema.statement.Statement` through chained calls, then
either compiles it (:meth:`QueryBuilder.build`) or hands it to an executor
(:meth:`QueryBuilder.exec`, or simply ``await builder``)::

    page = await (
        pgfluent.query("users", executor)
        .select(["id", "firstName"])
        .where({"$or": [{"role": "admin"}, {"$gte": {"karma": 100}}]})
        .sorted("-createdAt")
        .paginated({"offset": 20, "limit": 10})
    )

Every call validates its own input and raises immediately; nothing reaches
the executor until ``exec()``.  A builder can be executed only once.
"""

from __future__ import annotations

import re
from collections.abc import Generator, Mapping, Sequence
from types import MappingProxyType
from typing import Any

from pgfluent.compile.base import CompiledSQL
from pgfluent.compile.builder import StatementCompiler
from pgfluent.errors import (
    BuilderConsumedError,
    InvalidJoinRequiredModeError,
    InvalidJoinSpecError,
    InvalidKeyValuesTypeError,
    MissingExecutorError,
    MissingJoinTableError,
    MissingKeyValuesError,
    OnConflictRequiresInsertError,
    UnsupportedConflictActionError,
)
from pgfluent.execute.base import Executor, RowMapping, column_key
from pgfluent.pagination import Page, fetch_page
from pgfluent.schema.conditions import normalize_conditions
from pgfluent.schema.config import BuilderConfig
from pgfluent.schema.expressions import (
    COUNT_COLUMN,
    RAW_MARKER,
    REQUIRED_MODES,
    CommandKind,
    ConflictAction,
    RequiredMode,
)
from pgfluent.schema.statement import Assignments, ConflictSpec, JoinSpec, Statement

_KEY_SEPARATOR = re.compile(r", ?")

_NO_VALUES: Mapping[str, Any] = MappingProxyType({})


def _split_keys(keys: str | Sequence[str]) -> tuple[str, ...]:
    if isinstance(keys, str):
        return tuple(_KEY_SEPARATOR.split(keys))
    return tuple(keys)


def _key_values(values: Any) -> Assignments:
    if values is None:
        raise MissingKeyValuesError()
    if not isinstance(values, Mapping):
        raise InvalidKeyValuesTypeError(values)
    return tuple(values.items())


class QueryBuilder:
    """Builds and runs a single statement against one table.

    Args:
        table: Target table, in the caller's naming convention.
        executor: Async callable running compiled statements; required only
            for :meth:`exec`.
        config: Casing and default primary key configuration.
        compiler: Statement compiler; defaults to one built from ``config``.
    """

    def __init__(
        self,
        table: str,
        executor: Executor | None = None,
        config: BuilderConfig | None = None,
        compiler: StatementCompiler | None = None,
    ) -> None:
        self._config = config or BuilderConfig()
        self._compiler = compiler or StatementCompiler(self._config)
        self._caser = self._config.db_caser()
        self._executor = executor
        self._statement = Statement(table=table)
        self._consumed = False

    @property
    def statement(self) -> Statement:
        """The statement accumulated so far."""
        return self._statement

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    def select(self, keys: str | Sequence[str] = "*") -> QueryBuilder:
        """Add keys to the SELECT (or RETURNING) list.

        ``"a, b"`` and ``["a", "b"]`` are equivalent.  ``key:alias`` aliases a
        key and a leading ``:`` emits the key as raw SQL.
        """
        return self._update(keys=(self._statement.keys or ()) + _split_keys(keys))

    def count(self, key: str = "id") -> QueryBuilder:
        """Select ``COUNT(<table>.<key>)`` and return it as a single integer."""
        if key == "*":
            expression = "*"
        else:
            expression = self._caser(f"{self._statement.table}.{key}", quote=True)
        self._update(keys=(f"{RAW_MARKER}COUNT({expression})::int AS {COUNT_COLUMN}",))
        return self.first(COUNT_COLUMN, select=False)

    def group_by(self, keys: str | Sequence[str]) -> QueryBuilder:
        return self._update(group_by=_split_keys(keys))

    def first(self, key: str | None = None, select: bool = True) -> QueryBuilder:
        """Limit to one row and return that row (or one of its keys) from ``exec``.

        Args:
            key: Return only this key's value instead of the whole row.
            select: Also add ``key`` to the SELECT list.
        """
        if key:
            if select:
                self.select(key)
            return self._update(limit=1, first=key)
        return self._update(limit=1, first=True)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def update(self, values: Mapping[str, Any]) -> QueryBuilder:
        """Turn the statement into an UPDATE returning the first updated row."""
        assignments = _key_values(values)
        self._update(command=CommandKind.UPDATE, assignments=assignments)
        return self.first()

    def insert(self, values: Mapping[str, Any] | None = _NO_VALUES) -> QueryBuilder:
        """Turn the statement into an INSERT returning the inserted row.

        Calling without arguments inserts ``DEFAULT VALUES``.
        """
        assignments = _key_values(values)
        self._update(command=CommandKind.INSERT, assignments=assignments)
        return self.first()

    def delete(self) -> QueryBuilder:
        return self._update(command=CommandKind.DELETE)

    def on_conflict(
        self,
        keys: str | Sequence[str],
        action: Mapping[str, Any] | None = None,
    ) -> QueryBuilder:
        """Add ``ON CONFLICT`` handling to an INSERT.

        Args:
            keys: Conflict target keys.
            action: ``None`` or ``{"nothing": True}`` for ``DO NOTHING``;
                ``{"update": {...}}`` for ``DO UPDATE SET ...``.

        Raises:
            OnConflictRequiresInsertError: If the statement is not an insert.
            UnsupportedConflictActionError: For any other action.
        """
        if self._statement.command is not CommandKind.INSERT:
            raise OnConflictRequiresInsertError(self._statement.command.value)
        if action is not None and not isinstance(action, Mapping):
            raise UnsupportedConflictActionError(action)

        action_name = ConflictAction.NOTHING.value
        if action:
            action_name = next(iter(action))
        if action_name == ConflictAction.NOTHING.value:
            spec = ConflictSpec(keys=_split_keys(keys))
        elif action_name == ConflictAction.UPDATE.value:
            spec = ConflictSpec(
                keys=_split_keys(keys),
                action=ConflictAction.UPDATE,
                assignments=_key_values(action[action_name]),
            )
        else:
            raise UnsupportedConflictActionError(action_name)
        return self._update(on_conflict=spec)

    # ------------------------------------------------------------------
    # Filtering and joins
    # ------------------------------------------------------------------

    def where(self, conditions: Any) -> QueryBuilder:
        """AND ``conditions`` onto the WHERE clause."""
        normalized = normalize_conditions(conditions)
        return self._update(conditions=self._statement.conditions + normalized)

    def join(self, options: Mapping[str, Any] | Sequence[Mapping[str, Any] | None]) -> QueryBuilder:
        """Add one or more joins.

        Each spec is ``{table, conditions?, local?, foreign?, required?}``.
        Without ``conditions`` the join equates ``<table>.<local>`` with
        ``<join table>.<foreign>``, both defaulting to the configured primary
        key.  Empty ``conditions`` produce a ``CROSS JOIN``.
        """
        specs = [options] if isinstance(options, Mapping) else list(options)
        joins = tuple(self._join_spec(spec) for spec in specs if spec is not None)
        return self._update(joins=self._statement.joins + joins)

    # ------------------------------------------------------------------
    # Ordering and paging
    # ------------------------------------------------------------------

    def sorted(self, keys: str | Sequence[str]) -> QueryBuilder:
        """Replace the ORDER BY keys; ``-key`` sorts descending."""
        return self._update(sort_keys=_split_keys(keys))

    def offset_by(self, offset: int = 0) -> QueryBuilder:
        return self._update(offset=offset)

    def limit_to(self, limit: int | None = None) -> QueryBuilder:
        """Cap the number of rows; ``None`` removes the cap."""
        return self._update(limit=limit)

    def paginated(self, options: Mapping[str, int | None] | None) -> QueryBuilder:
        """Return ``{total, items}`` from ``exec`` for the given page.

        Args:
            options: ``{"offset": ..., "limit": ...}``; ``count`` is accepted
                as an alias of ``limit``.  ``None`` leaves the query as is.
        """
        if not options:
            return self
        limit = options.get("limit", options.get("count"))
        return self._update(offset=options.get("offset") or 0, limit=limit, paginated=True)

    # ------------------------------------------------------------------
    # Terminal operations
    # ------------------------------------------------------------------

    def build(self) -> CompiledSQL:
        """Compile the statement to SQL and its ordered parameters."""
        return self._compiler.compile(self._statement)

    async def exec(self) -> Any:
        """Execute the statement.

        Returns:
            A :class:`~pgfluent.pagination.Page` for paginated selects, the
            first row for :meth:`first`, insert and update, a single value for
            ``first(key)`` and :meth:`count`, and the list of rows otherwise.

        Raises:
            MissingExecutorError: If the builder has no executor.
            BuilderConsumedError: If the builder was already executed.
        """
        if self._executor is None:
            raise MissingExecutorError(self._statement.table)
        self._check_unconsumed()
        self._consumed = True

        statement = self._statement
        if statement.returns_page:
            return await fetch_page(statement, self._compiler, self._executor)
        rows = await self._executor(self._compiler.compile(statement))
        return self._reduce(rows, statement.first)

    def __await__(self) -> Generator[Any, None, Any]:
        return self.exec().__await__()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _update(self, **changes: Any) -> QueryBuilder:
        self._check_unconsumed()
        self._statement = self._statement.model_copy(update=changes)
        return self

    def _check_unconsumed(self) -> None:
        if self._consumed:
            raise BuilderConsumedError(self._statement.table)

    def _join_spec(self, options: Any) -> JoinSpec:
        if not isinstance(options, Mapping):
            raise InvalidJoinSpecError(options)
        table = options.get("table")
        if not table:
            raise MissingJoinTableError()
        required = options.get("required") or RequiredMode.BOTH
        try:
            required = RequiredMode(required)
        except (ValueError, TypeError):
            raise InvalidJoinRequiredModeError(required, sorted(REQUIRED_MODES)) from None

        conditions = options.get("conditions")
        if conditions is None:
            conditions = self._default_join_condition(
                table, options.get("local"), options.get("foreign")
            )
        return JoinSpec(
            table=table,
            conditions=normalize_conditions(conditions),
            required=required,
        )

    def _default_join_condition(
        self,
        table: str,
        local: str | None,
        foreign: str | None,
    ) -> dict[str, str]:
        primary_key = self._config.default_primary_key
        local = local or primary_key
        foreign = foreign or primary_key
        if local.startswith(RAW_MARKER):
            left = local[len(RAW_MARKER):]
        else:
            left = self._caser(f"{self._statement.table}.{local}", quote=True)
        if foreign.startswith(RAW_MARKER):
            right = foreign[len(RAW_MARKER):]
        else:
            right = self._caser(f"{table}.{foreign}", quote=True)
        return {f"{RAW_MARKER}{left}": right}

    def _reduce(self, rows: Sequence[RowMapping], first: bool | str) -> Any:
        if first is False:
            return list(rows)
        if not rows:
            return None
        row = rows[0]
        if first is True:
            return row
        key = column_key(row, first, self._config.casing.external)
        return row[key] if key else None
