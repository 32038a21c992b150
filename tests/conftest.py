"""Shared pytest fixtures for pgfluent unit and integration tests."""
from __future__ import annotations

import pytest

from pgfluent.compile.builder import StatementCompiler
from pgfluent.compile.context import CompilationContext
from pgfluent.compile.expression_builder import ConditionBuilder
from pgfluent.compile.parameters import ParameterBinder
from pgfluent.schema.conditions import normalize_conditions
from pgfluent.schema.config import BuilderConfig


@pytest.fixture(scope="session")
def config() -> BuilderConfig:
    """Default configuration: snake_case database, camelCase callers, ``id`` keys."""
    return BuilderConfig()


@pytest.fixture(scope="session")
def compiler(config: BuilderConfig) -> StatementCompiler:
    return StatementCompiler(config)


@pytest.fixture
def compile_conditions(config: BuilderConfig):
    """Compile raw condition input on a fresh binder; returns ``(sql, params)``."""

    def _compile(conditions, wrap: bool = False, **kwargs):
        binder = ParameterBinder()
        builder = ConditionBuilder(CompilationContext.from_config(config), binder)
        sql = builder.build(normalize_conditions(conditions), wrap=wrap, **kwargs)
        return sql, binder.params

    return _compile
