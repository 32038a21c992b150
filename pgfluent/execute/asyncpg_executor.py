"""asyncpg executor adapter.

asyncpg speaks PostgreSQL's native ``$n`` placeholders, so compiled
statements are passed through unchanged::

    pool = await asyncpg.create_pool(dsn)
    users = await pgfluent.query("users", AsyncpgExecutor(pool)).where({"active": True}).exec()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Union

from pgfluent.compile.base import CompiledSQL
from pgfluent.schema.casing import recase_keys
from pgfluent.schema.config import BuilderConfig

if TYPE_CHECKING:
    import asyncpg

    Connection = Union[asyncpg.Connection, asyncpg.Pool]

logger = logging.getLogger(__name__)


class AsyncpgExecutor:
    """Runs compiled statements on an asyncpg connection or pool.

    Args:
        connection: Anything with asyncpg's ``fetch(query, *args)`` coroutine,
            typically a :class:`asyncpg.Pool` or :class:`asyncpg.Connection`.
        config: Supplies the external casing applied to returned row keys.
    """

    def __init__(self, connection: Connection, config: BuilderConfig | None = None) -> None:
        self._connection = connection
        self._casing = (config or BuilderConfig()).casing.external

    async def __call__(self, compiled: CompiledSQL) -> list[dict[str, Any]]:
        logger.debug("asyncpg fetch: %s (%d parameter(s))", compiled.sql, len(compiled.params))
        records = await self._connection.fetch(compiled.sql, *compiled.params)
        return [recase_keys(record, self._casing) for record in records]
