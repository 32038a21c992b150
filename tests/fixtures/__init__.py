"""Test fixtures: a recording fake executor and sample rows."""

from __future__ import annotations

from typing import Any

from pgfluent.compile.base import CompiledSQL


class RecordingExecutor:
    """Async executor double that replays canned responses in order.

    Every call records the compiled statement it received.  Once the canned
    responses run out, further calls return no rows.
    """

    def __init__(self, *responses: list[dict[str, Any]] | Exception) -> None:
        self.responses = list(responses)
        self.calls: list[CompiledSQL] = []

    async def __call__(self, compiled: CompiledSQL) -> list[dict[str, Any]]:
        self.calls.append(compiled)
        if not self.responses:
            return []
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def statements(self) -> list[str]:
        return [call.sql for call in self.calls]


def user_rows(count: int, total: int | None = None, start: int = 1) -> list[dict[str, Any]]:
    """Return ``count`` user rows, each carrying ``total`` when given."""
    rows = []
    for user_id in range(start, start + count):
        row: dict[str, Any] = {"id": user_id, "firstName": f"user{user_id}"}
        if total is not None:
            row["total"] = total
        rows.append(row)
    return rows
