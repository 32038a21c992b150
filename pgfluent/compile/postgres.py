"""PostgreSQL rendering rules."""

from __future__ import annotations

from pgfluent.errors import CompilationError
from pgfluent.schema.expressions import (
    Comparer,
    LogicalOperator,
    RequiredMode,
)


class PostgresCompiler:
    """Token-level rendering for PostgreSQL.

    Parameter style: ``$1, $2, ...`` – compatible with ``asyncpg`` positional
    execution.
    """

    _COMPARERS: dict[Comparer, str] = {
        Comparer.EQ: "=",
        Comparer.NE: "!=",
        Comparer.LT: "<",
        Comparer.LTE: "<=",
        Comparer.GT: ">",
        Comparer.GTE: ">=",
        Comparer.REGEXP: "~*",
    }

    _OPERATORS: dict[LogicalOperator, str] = {
        LogicalOperator.AND: "AND",
        LogicalOperator.OR: "OR",
    }

    _JOIN_TYPES: dict[RequiredMode, str] = {
        RequiredMode.BOTH: "INNER JOIN",
        RequiredMode.LOCAL: "LEFT JOIN",
        RequiredMode.FOREIGN: "RIGHT JOIN",
        RequiredMode.NONE: "FULL OUTER JOIN",
    }

    def param_placeholder(self, index: int) -> str:
        return f"${index}"

    def comparer_symbol(self, comparer: Comparer) -> str:
        try:
            return self._COMPARERS[comparer]
        except KeyError:
            raise CompilationError(f"Unknown comparer {comparer!r}.", clause="WHERE") from None

    def operator_keyword(self, operator: LogicalOperator) -> str:
        return self._OPERATORS[operator]

    def join_keyword(self, required: RequiredMode) -> str:
        return self._JOIN_TYPES[required]

    def null_check(self, comparer: Comparer) -> str | None:
        """Return ``IS NULL`` / ``IS NOT NULL`` for ``comparer``, or ``None``."""
        if comparer is Comparer.EQ:
            return "IS NULL"
        if comparer is Comparer.NE:
            return "IS NOT NULL"
        return None

    def literal(self, value: object) -> str:
        """Render a non-string raw comparison value as inline SQL."""
        if value is True:
            return "TRUE"
        if value is False:
            return "FALSE"
        if isinstance(value, (int, float)):
            return str(value)
        raise CompilationError(
            f"Raw expressions can only be compared against strings, booleans or "
            f"numbers, got {type(value).__name__}.",
            clause="WHERE",
        )
