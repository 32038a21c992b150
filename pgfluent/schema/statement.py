"""Pydantic models for a statement under construction.

A :class:`Statement` is an immutable snapshot: the fluent
:class:`~pgfluent.query.QueryBuilder` produces a new snapshot with
``model_copy(update=...)`` on every call, and the compiler turns a finished
snapshot into SQL without touching any builder state.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from pgfluent.schema.conditions import Condition
from pgfluent.schema.expressions import (
    COUNT_COLUMN,
    CommandKind,
    ConflictAction,
    RequiredMode,
)

_FROZEN = ConfigDict(extra="forbid", frozen=True)

#: Ordered ``(key, value)`` pairs for INSERT / UPDATE / DO UPDATE SET.
Assignments = tuple[tuple[str, Any], ...]


class JoinSpec(BaseModel):
    """A normalized join.

    Attributes:
        table: Joined table name (caller convention).
        conditions: ON-clause conditions; empty means ``CROSS JOIN``.
        required: Which side's rows must be preserved.
    """

    model_config = _FROZEN

    table: str
    conditions: tuple[Condition, ...] = ()
    required: RequiredMode = RequiredMode.BOTH


class ConflictSpec(BaseModel):
    """An ``ON CONFLICT`` clause for inserts.

    Attributes:
        keys: Conflict target keys.
        action: ``DO NOTHING`` or ``DO UPDATE``.
        assignments: ``SET`` pairs for ``DO UPDATE``.
    """

    model_config = _FROZEN

    keys: tuple[str, ...]
    action: ConflictAction = ConflictAction.NOTHING
    assignments: Assignments = ()


class Statement(BaseModel):
    """Everything needed to compile one SQL statement.

    Attributes:
        table: Target table (caller convention).
        command: SQL command to emit.
        keys: SELECT / RETURNING keys; ``None`` means ``*``.
        conditions: WHERE conditions, ANDed at the top level.
        joins: Joins in call order.
        sort_keys: ORDER BY keys (``-`` prefix for descending).
        offset: Rows to skip; omitted from SQL when zero.
        limit: Row cap; ``None`` means unbounded.
        group_by: GROUP BY keys.
        assignments: INSERT / UPDATE key-value pairs.
        on_conflict: Insert conflict handling.
        paginated: Inject a window-function total and return a page.
        first: ``True`` to return the first row, a key name to return that
            key's value from the first row, ``False`` for all rows.
        count_rows: Select only ``COUNT(*)`` over the rows this statement
            would return (compiled as a subquery).
    """

    model_config = _FROZEN

    table: str
    command: CommandKind = CommandKind.SELECT
    keys: tuple[str, ...] | None = None
    conditions: tuple[Condition, ...] = ()
    joins: tuple[JoinSpec, ...] = ()
    sort_keys: tuple[str, ...] = ()
    offset: int = 0
    limit: int | None = None
    group_by: tuple[str, ...] = ()
    assignments: Assignments | None = None
    on_conflict: ConflictSpec | None = None
    paginated: bool = False
    first: bool | str = False
    count_rows: bool = False

    @property
    def returns_page(self) -> bool:
        """True when execution yields a ``{total, items}`` page."""
        return (
            self.paginated
            and self.first is False
            and self.command is CommandKind.SELECT
        )

    def count_statement(self) -> Statement:
        """Return the count-only twin used when a page comes back empty.

        Keeps the table, WHERE conditions and joins; drops offset, limit,
        sorting and pagination.  A grouped statement keeps its keys and
        grouping and is counted as a subquery, so the count is the number
        of groups, matching the window total of a non-empty page.
        """
        changes: dict[str, Any] = {
            "command": CommandKind.SELECT,
            "sort_keys": (),
            "offset": 0,
            "limit": None,
            "paginated": False,
            "first": COUNT_COLUMN,
        }
        if self.group_by:
            changes["count_rows"] = True
        else:
            changes["keys"] = (f":COUNT(*)::int AS {COUNT_COLUMN}",)
        return self.model_copy(update=changes)
