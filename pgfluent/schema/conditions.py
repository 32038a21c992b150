"""Typed condition tree for WHERE and JOIN ... ON clauses.

Callers describe conditions as plain mappings::

    {"name": "Ann", "$or": [{"age": None}, {"$gt": {"age": 18}}]}

:func:`normalize_conditions` turns that input into an explicit tagged tree
in a single pass, so the compiler never re-inspects raw mapping shapes:

* :class:`Leaf` – ``column <comparer> value``
* :class:`RawLeaf` – ``:``-marked raw left-hand side, emitted verbatim
* :class:`Group` – children compiled with a new logical operator *or* a new
  comparer; the other one is inherited from the enclosing group.

Insertion order is preserved everywhere; it determines both the clause text
and the placeholder numbering.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union

from pydantic import BaseModel, ConfigDict

from pgfluent.errors import (
    InvalidConditionsTypeError,
    MissingConditionsError,
    UnknownModifierError,
)
from pgfluent.schema.expressions import (
    ALL_MODIFIERS,
    COMPARISON_MODIFIERS,
    LOGICAL_MODIFIERS,
    MODIFIER_MARKER,
    RAW_MARKER,
    Comparer,
    LogicalOperator,
)

_FROZEN = ConfigDict(extra="forbid", frozen=True)


class Leaf(BaseModel):
    """A column compared against a bound value: ``{"age": 18}``."""

    model_config = _FROZEN

    column: str
    value: Any = None


class RawLeaf(BaseModel):
    """A raw SQL expression compared against a literal: ``{":lower(name)": "'ann'"}``.

    Neither side is quoted and no parameter is bound.
    """

    model_config = _FROZEN

    expression: str
    value: Any = None


class Group(BaseModel):
    """A nested condition list.

    Attributes:
        children: Ordered child conditions.
        operator: Logical operator for the children, or ``None`` to inherit.
        comparer: Comparer for the children's leaves, or ``None`` to inherit.
    """

    model_config = _FROZEN

    children: tuple[Condition, ...] = ()
    operator: LogicalOperator | None = None
    comparer: Comparer | None = None


Condition = Union[Leaf, RawLeaf, Group]

Group.model_rebuild()


def normalize_conditions(conditions: Any) -> tuple[Condition, ...]:
    """Convert raw condition input into a tuple of typed conditions.

    Args:
        conditions: A mapping, or a list/tuple of mappings (implicitly
            ANDed).  Nested lists are flattened.

    Returns:
        The conditions in input order.

    Raises:
        MissingConditionsError: If ``conditions`` is ``None``.
        InvalidConditionsTypeError: If the input (or a column's value) has
            the wrong shape.
        UnknownModifierError: If a ``$`` key is not a known modifier.
    """
    if conditions is None:
        raise MissingConditionsError()
    if isinstance(conditions, (list, tuple)):
        result: list[Condition] = []
        for item in conditions:
            result.extend(normalize_conditions(item))
        return tuple(result)
    if not isinstance(conditions, Mapping):
        raise InvalidConditionsTypeError(conditions)
    return tuple(_normalize_entry(key, value) for key, value in conditions.items())


def _normalize_entry(key: Any, value: Any) -> Condition:
    if not isinstance(key, str):
        raise InvalidConditionsTypeError(key, key=repr(key))
    if key.startswith(MODIFIER_MARKER):
        if key in LOGICAL_MODIFIERS:
            return Group(
                children=normalize_conditions(value),
                operator=LogicalOperator(key),
            )
        if key in COMPARISON_MODIFIERS:
            return Group(
                children=normalize_conditions(value),
                comparer=Comparer(key),
            )
        raise UnknownModifierError(key, sorted(ALL_MODIFIERS))

    if key.startswith(RAW_MARKER):
        return RawLeaf(expression=key[len(RAW_MARKER):], value=value)

    if isinstance(value, Mapping):
        raise InvalidConditionsTypeError(value, key=key)
    return Leaf(column=key, value=value)
