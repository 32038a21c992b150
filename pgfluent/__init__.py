"""pgfluent – fluent, parameterized PostgreSQL statements from plain mappings.

Build Statements. Don't Concatenate Them.

Public API
----------
``query``
    Start a fluent :class:`QueryBuilder` on a table.

``compile_statement``
    Compile a :class:`Statement` snapshot to ``CompiledSQL(sql, params)``.

Re-exported types
-----------------
``QueryBuilder``, ``Statement``, ``BuilderConfig``, ``CasingConfig``,
``CompiledSQL``, ``Page``, ``AsyncpgExecutor``, and all error classes.

Example::

    import pgfluent

    compiled = (
        pgfluent.query("users")
        .where({"$or": [{"firstName": "Ann"}, {"$gt": {"age": 30}}]})
        .sorted(["-createdAt", "lastName"])
        .limit_to(10)
        .build()
    )
    # SELECT * FROM "users" WHERE ("first_name" = $1 OR ("age" > $2))
    #   ORDER BY "created_at" DESC, "last_name" LIMIT 10
    await connection.fetch(compiled.sql, *compiled.params)
"""

from __future__ import annotations

from pgfluent.compile.base import CompiledSQL
from pgfluent.compile.builder import StatementCompiler, compile_statement
from pgfluent.errors import (
    BuildError,
    BuilderConsumedError,
    CompilationError,
    InvalidConditionsTypeError,
    InvalidJoinRequiredModeError,
    InvalidJoinSpecError,
    InvalidKeyValuesTypeError,
    MissingConditionsError,
    MissingExecutorError,
    MissingJoinTableError,
    MissingKeyValuesError,
    OnConflictRequiresInsertError,
    PgFluentError,
    UnknownModifierError,
    UnsupportedConflictActionError,
    UnsupportedNullComparerError,
)
from pgfluent.execute.asyncpg_executor import AsyncpgExecutor
from pgfluent.execute.base import Executor
from pgfluent.pagination import Page
from pgfluent.query import QueryBuilder
from pgfluent.schema.config import BuilderConfig, CasingConfig
from pgfluent.schema.statement import Statement

__all__ = [
    # Entry points
    "query",
    "compile_statement",
    # Builders and compilers
    "QueryBuilder",
    "StatementCompiler",
    "Statement",
    "CompiledSQL",
    "Page",
    # Configuration
    "BuilderConfig",
    "CasingConfig",
    # Execution
    "Executor",
    "AsyncpgExecutor",
    # Errors
    "PgFluentError",
    "BuildError",
    "CompilationError",
    "MissingConditionsError",
    "InvalidConditionsTypeError",
    "UnknownModifierError",
    "UnsupportedNullComparerError",
    "InvalidJoinSpecError",
    "MissingJoinTableError",
    "InvalidJoinRequiredModeError",
    "OnConflictRequiresInsertError",
    "UnsupportedConflictActionError",
    "MissingKeyValuesError",
    "InvalidKeyValuesTypeError",
    "BuilderConsumedError",
    "MissingExecutorError",
]


def query(
    table: str,
    executor: Executor | None = None,
    config: BuilderConfig | None = None,
) -> QueryBuilder:
    """Start a fluent statement on ``table``.

    Args:
        table: Target table in the caller's naming convention.
        executor: Async callable that runs compiled statements; only needed
            for ``exec()`` / ``await``.
        config: Casing and default primary key; defaults to
            ``BuilderConfig()`` (snake_case in the database, camelCase
            outside, primary key ``id``).

    Returns:
        A new single-use :class:`QueryBuilder`.
    """
    return QueryBuilder(table, executor=executor, config=config)
