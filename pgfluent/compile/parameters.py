"""Ordered parameter accumulator shared by every clause of one statement."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pgfluent.compile.postgres import PostgresCompiler


@dataclass
class ParameterBinder:
    """Append-only list of bound values for a single compilation run.

    A single instance is threaded through every clause builder so that
    placeholders are numbered in the order the clauses are assembled.
    Every call to :meth:`bind` pushes exactly one value and returns exactly
    one placeholder.
    """

    dialect: PostgresCompiler = field(default_factory=PostgresCompiler)
    params: list[Any] = field(default_factory=list)

    def bind(self, value: Any) -> str:
        """Store ``value`` and return the placeholder that refers to it."""
        self.params.append(value)
        return self.dialect.param_placeholder(len(self.params))
