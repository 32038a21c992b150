"""Executor boundary.

An executor is any async callable that sends a
:class:`~pgfluent.compile.base.CompiledSQL` to the database and returns the
resulting rows as mappings.  Executors are responsible for converting the
returned row keys to the caller's naming convention; the adapters in this
package do so with :func:`~pgfluent.schema.casing.recase_keys`.

Driver and network errors raised by an executor propagate unmodified.
"""
from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any

from pgfluent.compile.base import CompiledSQL
from pgfluent.schema.casing import Casing, convert_case

#: A single returned row.
RowMapping = Mapping[str, Any]

#: ``(compiled) -> rows``; exactly one database round trip per call.
Executor = Callable[[CompiledSQL], Awaitable[Sequence[RowMapping]]]


def column_key(row: RowMapping, name: str, convention: Casing) -> str | None:
    """Return the key under which ``name`` appears in ``row``.

    Rows come back re-cased by the executor, so ``name`` is looked up in the
    external convention first and verbatim second.
    """
    for candidate in (convert_case(name, convention), name):
        if candidate in row:
            return candidate
    return None
