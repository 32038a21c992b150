"""Tests for executing builders through an executor."""

from __future__ import annotations

import pytest

import pgfluent
from pgfluent.errors import (
    BuilderConsumedError,
    MissingExecutorError,
    UnknownModifierError,
)
from pgfluent.schema.config import BuilderConfig, CasingConfig
from tests.fixtures import RecordingExecutor, user_rows


@pytest.mark.asyncio
async def test_exec_returns_rows():
    executor = RecordingExecutor(user_rows(2))
    rows = await pgfluent.query("users", executor).where({"active": True}).exec()
    assert rows == user_rows(2)
    assert executor.statements == ['SELECT * FROM "users" WHERE "active" = $1']
    assert executor.calls[0].params == [True]


@pytest.mark.asyncio
async def test_awaiting_the_builder_executes_it():
    executor = RecordingExecutor(user_rows(1))
    rows = await pgfluent.query("users", executor).select("id")
    assert rows == user_rows(1)
    assert len(executor.calls) == 1


@pytest.mark.asyncio
async def test_first_returns_single_row():
    executor = RecordingExecutor(user_rows(1))
    row = await pgfluent.query("users", executor).where({"id": 1}).first()
    assert row == {"id": 1, "firstName": "user1"}


@pytest.mark.asyncio
async def test_first_without_rows_returns_none():
    executor = RecordingExecutor([])
    assert await pgfluent.query("users", executor).where({"id": 99}).first() is None


@pytest.mark.asyncio
async def test_first_key_returns_value_in_external_casing():
    executor = RecordingExecutor([{"firstName": "Ann"}])
    name = await pgfluent.query("users", executor).where({"id": 1}).first("firstName")
    assert name == "Ann"
    assert executor.statements == ['SELECT "first_name" FROM "users" WHERE "id" = $1 LIMIT 1']


@pytest.mark.asyncio
async def test_count_returns_integer():
    executor = RecordingExecutor([{"count": 42}])
    assert await pgfluent.query("users", executor).count() == 42


@pytest.mark.asyncio
async def test_count_key_found_in_configured_casing():
    config = BuilderConfig(casing=CasingConfig(external="constant"))
    executor = RecordingExecutor([{"COUNT": 7}])
    assert await pgfluent.query("users", executor, config).count() == 7


@pytest.mark.asyncio
async def test_insert_returns_inserted_row():
    executor = RecordingExecutor([{"id": 5, "email": "a@b.c"}])
    row = await pgfluent.query("users", executor).insert({"email": "a@b.c"})
    assert row == {"id": 5, "email": "a@b.c"}
    assert executor.statements == [
        'INSERT INTO "users" ("email") VALUES ($1) RETURNING *'
    ]


@pytest.mark.asyncio
async def test_delete_returns_row_list():
    executor = RecordingExecutor()
    assert await pgfluent.query("sessions", executor).delete() == []


@pytest.mark.asyncio
async def test_builder_executes_once():
    executor = RecordingExecutor(user_rows(1))
    builder = pgfluent.query("users", executor)
    await builder.exec()
    with pytest.raises(BuilderConsumedError) as exc_info:
        await builder.exec()
    assert exc_info.value.code == "BUILDER_CONSUMED"
    assert len(executor.calls) == 1


@pytest.mark.asyncio
async def test_consumed_builder_rejects_further_chaining():
    builder = pgfluent.query("users", RecordingExecutor())
    await builder
    with pytest.raises(BuilderConsumedError):
        builder.where({"id": 1})


@pytest.mark.asyncio
async def test_consumed_builder_still_builds():
    builder = pgfluent.query("users", RecordingExecutor()).where({"id": 1})
    await builder
    assert builder.build().sql == 'SELECT * FROM "users" WHERE "id" = $1'


@pytest.mark.asyncio
async def test_exec_without_executor():
    with pytest.raises(MissingExecutorError):
        await pgfluent.query("users").exec()


@pytest.mark.asyncio
async def test_executor_errors_propagate():
    executor = RecordingExecutor(ConnectionError("server closed the connection"))
    with pytest.raises(ConnectionError, match="server closed"):
        await pgfluent.query("users", executor)


def test_invalid_input_fails_before_execution():
    executor = RecordingExecutor()
    with pytest.raises(UnknownModifierError):
        pgfluent.query("users", executor).where({"$in": {"id": [1, 2]}})
    assert executor.calls == []
