"""Compiler output: CompiledSQL."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CompiledSQL:
    """The output of a successful compilation.

    Attributes:
        sql: The compiled SQL string with ``$n`` placeholders.
        params: Bound values; ``$k`` in ``sql`` refers to ``params[k - 1]``.
    """

    sql: str
    params: list[Any] = field(default_factory=list)

    def __iter__(self):
        # Allows ``sql, params = compiled``.
        yield self.sql
        yield self.params
