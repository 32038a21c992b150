"""SQLAlchemy executor adapter.

Runs compiled statements through a SQLAlchemy ``AsyncEngine`` or
``AsyncConnection`` (for example with the ``postgresql+asyncpg`` driver).

Install the optional dependency before using this module::

    pip install "pgfluent[sqlalchemy]"

Example::

    from sqlalchemy.ext.asyncio import create_async_engine
    from pgfluent.execute.sqlalchemy_executor import SQLAlchemyExecutor

    engine = create_async_engine("postgresql+asyncpg://localhost/app")
    rows = await pgfluent.query("users", SQLAlchemyExecutor(engine)).exec()

``text()`` only understands named binds, so ``$n`` placeholders are
rewritten to ``:p<n>`` and the parameter list becomes a mapping.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Union

from sqlalchemy import TextClause, text
from sqlalchemy.engine import Result
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from pgfluent.compile.base import CompiledSQL
from pgfluent.schema.casing import recase_keys
from pgfluent.schema.config import BuilderConfig

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\$(\d+)")


def to_text_clause(compiled: CompiledSQL) -> tuple[TextClause, dict[str, Any]]:
    """Rewrite ``$n`` placeholders into SQLAlchemy named binds.

    Args:
        compiled: Output of the statement compiler.

    Returns:
        A ``(text_clause, params)`` pair where ``$k`` became ``:p<k>`` and
        ``params["p<k>"] == compiled.params[k - 1]``.
    """
    sql = _PLACEHOLDER.sub(lambda match: f":p{match.group(1)}", compiled.sql)
    params = {f"p{index}": value for index, value in enumerate(compiled.params, start=1)}
    return text(sql), params


class SQLAlchemyExecutor:
    """Runs compiled statements on a SQLAlchemy async engine or connection.

    An engine gets a fresh connection per statement inside ``begin()``, so
    writes are committed.  A connection is used as-is; the caller owns its
    transaction.

    Args:
        bind: :class:`~sqlalchemy.ext.asyncio.AsyncEngine` or
            :class:`~sqlalchemy.ext.asyncio.AsyncConnection`.
        config: Supplies the external casing applied to returned row keys.
    """

    def __init__(
        self,
        bind: Union[AsyncEngine, AsyncConnection],
        config: BuilderConfig | None = None,
    ) -> None:
        self._bind = bind
        self._casing = (config or BuilderConfig()).casing.external

    async def __call__(self, compiled: CompiledSQL) -> list[dict[str, Any]]:
        clause, params = to_text_clause(compiled)
        logger.debug("SQLAlchemy execute: %s (%d parameter(s))", clause.text, len(params))
        if isinstance(self._bind, AsyncEngine):
            async with self._bind.begin() as conn:
                return self._rows(await conn.execute(clause, params))
        return self._rows(await self._bind.execute(clause, params))

    def _rows(self, result: Result) -> list[dict[str, Any]]:
        if not result.returns_rows:
            return []
        return [recase_keys(row, self._casing) for row in result.mappings().all()]
