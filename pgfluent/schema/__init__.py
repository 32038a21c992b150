"""pgfluent schema models: conditions, statements and configuration."""
from pgfluent.schema.casing import IdentifierCaser, convert_case, recase_keys
from pgfluent.schema.conditions import (
    Condition,
    Group,
    Leaf,
    RawLeaf,
    normalize_conditions,
)
from pgfluent.schema.config import BuilderConfig, CasingConfig
from pgfluent.schema.expressions import (
    CommandKind,
    Comparer,
    ConflictAction,
    LogicalOperator,
    RequiredMode,
)
from pgfluent.schema.statement import ConflictSpec, JoinSpec, Statement

__all__ = [
    "IdentifierCaser",
    "convert_case",
    "recase_keys",
    "Condition",
    "Group",
    "Leaf",
    "RawLeaf",
    "normalize_conditions",
    "BuilderConfig",
    "CasingConfig",
    "CommandKind",
    "Comparer",
    "ConflictAction",
    "LogicalOperator",
    "RequiredMode",
    "ConflictSpec",
    "JoinSpec",
    "Statement",
]
