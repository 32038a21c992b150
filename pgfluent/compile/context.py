"""Compilation context value object.

Packages the ``(compiler, caser)`` pair shared by the statement compiler and
all clause-level sub-builders into a single cohesive object.
"""
from __future__ import annotations

from dataclasses import dataclass

from pgfluent.compile.postgres import PostgresCompiler
from pgfluent.schema.casing import IdentifierCaser
from pgfluent.schema.config import BuilderConfig


@dataclass(frozen=True)
class CompilationContext:
    """Immutable context shared by every compilation run of one compiler.

    Attributes:
        compiler: PostgreSQL rendering rules.
        caser: Converts caller identifiers to the database convention.
    """

    compiler: PostgresCompiler
    caser: IdentifierCaser

    @classmethod
    def from_config(cls, config: BuilderConfig) -> CompilationContext:
        return cls(compiler=PostgresCompiler(), caser=config.db_caser())
