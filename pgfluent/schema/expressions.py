"""Constants and enums for the condition DSL and statement shape.

The condition DSL uses ``$``-prefixed modifier keys (``$and``, ``$gt`` ...)
inside otherwise plain mappings.  This module defines the allowable key
sets and markers shared by the normalizer, the builder and the compiler.
"""

from __future__ import annotations

from enum import Enum

# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

#: Leading character that marks a key or value as raw SQL.
RAW_MARKER = ":"

#: Leading character that suppresses identifier quoting.
NO_QUOTE_MARKER = "!"

#: Leading character of every DSL modifier key.
MODIFIER_MARKER = "$"

#: Leading character of a descending sort key.
DESCENDING_MARKER = "-"

#: Name of the window-function column injected into paginated selects.
TOTAL_COLUMN = "total"

#: Name of the column produced by ``count()`` projections.
COUNT_COLUMN = "count"


# ---------------------------------------------------------------------------
# Statement enums
# ---------------------------------------------------------------------------


class CommandKind(str, Enum):
    """The SQL command a statement compiles to."""

    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


class RequiredMode(str, Enum):
    """Join inclusivity: which side's rows are preserved."""

    NONE = "none"
    LOCAL = "local"
    FOREIGN = "foreign"
    BOTH = "both"


class ConflictAction(str, Enum):
    """What an insert does when it hits a conflict target."""

    NOTHING = "nothing"
    UPDATE = "update"


# ---------------------------------------------------------------------------
# Condition modifiers
# ---------------------------------------------------------------------------


class LogicalOperator(str, Enum):
    """Logical connectives joining sibling conditions."""

    AND = "$and"
    OR = "$or"


class Comparer(str, Enum):
    """Comparison applied at a condition leaf."""

    EQ = "$eq"
    NE = "$ne"
    LT = "$lt"
    LTE = "$lte"
    GT = "$gt"
    GTE = "$gte"
    REGEXP = "$regexp"


#: Logical modifier keys: value is condition input compiled with that operator.
LOGICAL_MODIFIERS: frozenset[str] = frozenset(op.value for op in LogicalOperator)

#: Comparison modifier keys: value is condition input compiled with that comparer.
COMPARISON_MODIFIERS: frozenset[str] = frozenset(c.value for c in Comparer)

#: Every modifier the normalizer accepts.
ALL_MODIFIERS: frozenset[str] = LOGICAL_MODIFIERS | COMPARISON_MODIFIERS

#: Comparers that remain meaningful against a ``None`` value.
NULL_COMPARERS: frozenset[Comparer] = frozenset({Comparer.EQ, Comparer.NE})

#: Accepted ``required`` values for joins.
REQUIRED_MODES: frozenset[str] = frozenset(m.value for m in RequiredMode)
