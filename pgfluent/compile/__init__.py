"""pgfluent compilation layer: Statement → parameterized SQL."""
from pgfluent.compile.base import CompiledSQL
from pgfluent.compile.builder import StatementCompiler, compile_statement
from pgfluent.compile.postgres import PostgresCompiler

__all__ = [
    "CompiledSQL",
    "StatementCompiler",
    "compile_statement",
    "PostgresCompiler",
]
