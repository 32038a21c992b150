"""Custom exception hierarchy for pgfluent.

All public errors inherit from PgFluentError so callers can catch the base
class for any pgfluent-specific failure.  Builder and compile errors are
programmer errors: they are raised before any statement reaches the
executor and are never retried.
"""
from __future__ import annotations

from typing import Any


class PgFluentError(Exception):
    """Base exception for all pgfluent errors."""


class BuildError(PgFluentError):
    """Raised when a builder call or statement compilation is invalid.

    Args:
        message: Human-readable description.
        code: Machine-readable error code (e.g. UNKNOWN_MODIFIER).
        details: Extra context about the offending input.
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details: dict[str, Any] = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Return a structured representation of the error."""
        return {
            "error": self.code,
            "message": str(self),
            "details": self.details,
        }


class MissingConditionsError(BuildError):
    """Raised when ``where`` or a join receives no condition input."""

    def __init__(self) -> None:
        super().__init__("Conditions must be provided.", code="MISSING_CONDITIONS")


class InvalidConditionsTypeError(BuildError):
    """Raised when condition input is neither a mapping nor a sequence of mappings."""

    def __init__(self, value: Any, key: str | None = None) -> None:
        where = f" for key '{key}'" if key else ""
        super().__init__(
            f"Conditions must be a mapping with string keys or a list of such mappings{where}, "
            f"got {type(value).__name__}.",
            code="INVALID_CONDITIONS_TYPE",
            details={"key": key, "type": type(value).__name__},
        )


class UnknownModifierError(BuildError):
    """Raised when a condition key starts with ``$`` but is not a known modifier."""

    def __init__(self, modifier: str, known: list[str]) -> None:
        super().__init__(
            f"Unknown modifier '{modifier}'.",
            code="UNKNOWN_MODIFIER",
            details={"modifier": modifier, "known_modifiers": known},
        )


class UnsupportedNullComparerError(BuildError):
    """Raised when a non-equality comparer is applied to a ``None`` value."""

    def __init__(self, comparer: str, key: str) -> None:
        super().__init__(
            f"Modifier '{comparer}' is not usable with null values (key '{key}').",
            code="UNSUPPORTED_NULL_COMPARER",
            details={"comparer": comparer, "key": key},
        )


class InvalidJoinSpecError(BuildError):
    """Raised when a join specification is not a mapping."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            f"Join options must be a mapping, got {type(value).__name__}.",
            code="INVALID_JOIN_SPEC",
            details={"type": type(value).__name__},
        )


class MissingJoinTableError(BuildError):
    """Raised when a join specification has no ``table``."""

    def __init__(self) -> None:
        super().__init__("Join is missing a table.", code="MISSING_JOIN_TABLE")


class InvalidJoinRequiredModeError(BuildError):
    """Raised when a join's ``required`` value is not a supported mode."""

    def __init__(self, required: Any, allowed: list[str]) -> None:
        super().__init__(
            f"Unsupported join required mode {required!r}; "
            f"expected one of {', '.join(allowed)}.",
            code="INVALID_JOIN_REQUIRED_MODE",
            details={"required": required, "allowed": allowed},
        )


class OnConflictRequiresInsertError(BuildError):
    """Raised when ``on_conflict`` is used on a statement that is not an insert."""

    def __init__(self, command: str) -> None:
        super().__init__(
            "`on_conflict` is only available when inserting.",
            code="ON_CONFLICT_REQUIRES_INSERT",
            details={"command": command},
        )


class UnsupportedConflictActionError(BuildError):
    """Raised when the conflict action is neither ``nothing`` nor ``update``."""

    def __init__(self, action: Any) -> None:
        super().__init__(
            f"Unsupported conflict action {action!r}; use 'nothing' or 'update'.",
            code="UNSUPPORTED_CONFLICT_ACTION",
            details={"action": action},
        )


class MissingKeyValuesError(BuildError):
    """Raised when insert/update payloads are absent."""

    def __init__(self) -> None:
        super().__init__("Keys and values must be provided.", code="MISSING_KEY_VALUES")


class InvalidKeyValuesTypeError(BuildError):
    """Raised when insert/update payloads are not mappings."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            f"Keys and values must be a mapping, got {type(value).__name__}.",
            code="INVALID_KEY_VALUES_TYPE",
            details={"type": type(value).__name__},
        )


class BuilderConsumedError(BuildError):
    """Raised when a builder is used again after it has been executed."""

    def __init__(self, table: str) -> None:
        super().__init__(
            f"Query on '{table}' has already been executed; builders are single-use.",
            code="BUILDER_CONSUMED",
            details={"table": table},
        )


class MissingExecutorError(BuildError):
    """Raised when ``exec`` is called on a builder created without an executor."""

    def __init__(self, table: str) -> None:
        super().__init__(
            f"Query on '{table}' has no executor; use build() to get the SQL instead.",
            code="MISSING_EXECUTOR",
            details={"table": table},
        )


class CompilationError(PgFluentError):
    """Raised when statement compilation fails for an unexpected reason.

    Args:
        message: Human-readable description.
        clause: The clause being compiled when the error occurred.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause
