"""Executor boundary and driver adapters."""
from pgfluent.execute.asyncpg_executor import AsyncpgExecutor
from pgfluent.execute.base import Executor, RowMapping, column_key

__all__ = [
    "AsyncpgExecutor",
    "Executor",
    "RowMapping",
    "column_key",
]
