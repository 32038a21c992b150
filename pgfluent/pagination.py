"""Pagination with totals.

A paginated SELECT carries an extra ``COUNT(*) OVER() AS total`` column, so
every returned row reports the number of rows matching the WHERE/JOIN
clauses regardless of OFFSET/LIMIT.  When the requested page is empty no
row carries that total, so a count-only twin of the statement is executed
afterwards to obtain it.  The two round trips are strictly sequential.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pgfluent.compile.builder import StatementCompiler
from pgfluent.execute.base import Executor, RowMapping, column_key
from pgfluent.schema.casing import Casing
from pgfluent.schema.expressions import COUNT_COLUMN, TOTAL_COLUMN
from pgfluent.schema.statement import Statement

logger = logging.getLogger(__name__)


class Page(BaseModel):
    """One page of rows plus the total number of matching rows.

    Attributes:
        total: Rows matching the query without OFFSET/LIMIT.
        items: The rows of this page, without the injected total column.
    """

    model_config = ConfigDict(extra="forbid")

    total: int = Field(ge=0)
    items: list[dict[str, Any]] = Field(default_factory=list)


async def fetch_page(
    statement: Statement,
    compiler: StatementCompiler,
    executor: Executor,
) -> Page:
    """Execute a paginated statement and reconcile its rows into a :class:`Page`.

    Args:
        statement: A paginated SELECT statement.
        compiler: Compiles both the page and the fallback count statement.
        executor: Runs each compiled statement.

    Returns:
        The page with its total.
    """
    casing = compiler.config.casing.external
    rows = await executor(compiler.compile(statement))

    if rows:
        key = column_key(rows[0], TOTAL_COLUMN, casing)
        total = int(rows[0][key] or 0) if key else 0
        return Page(total=total, items=[_strip(row, key) for row in rows])

    logger.debug(
        "Empty page on %s (offset=%d, limit=%s); counting matches separately",
        statement.table,
        statement.offset,
        statement.limit,
    )
    count_rows = await executor(compiler.compile(statement.count_statement()))
    return Page(total=_first_count(count_rows, casing), items=[])


def _strip(row: RowMapping, key: str | None) -> dict[str, Any]:
    return {name: value for name, value in row.items() if name != key}


def _first_count(rows: Sequence[RowMapping], casing: Casing) -> int:
    if not rows:
        return 0
    key = column_key(rows[0], COUNT_COLUMN, casing)
    return int(rows[0][key] or 0) if key else 0
