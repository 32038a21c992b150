"""Unit tests for the structured error hierarchy."""

from __future__ import annotations

import pytest

import pgfluent
from pgfluent.errors import BuildError, PgFluentError, UnsupportedNullComparerError


def test_to_dict_carries_code_message_and_details():
    with pytest.raises(UnsupportedNullComparerError) as exc_info:
        pgfluent.query("users").where({"$lt": {"deletedAt": None}}).build()
    payload = exc_info.value.to_dict()
    assert payload["error"] == "UNSUPPORTED_NULL_COMPARER"
    assert payload["details"] == {"comparer": "$lt", "key": "deletedAt"}
    assert payload["message"] == str(exc_info.value)


def test_build_errors_share_the_base_class():
    with pytest.raises(PgFluentError) as exc_info:
        pgfluent.query("users").on_conflict("id")
    assert isinstance(exc_info.value, BuildError)
    assert exc_info.value.to_dict()["error"] == "ON_CONFLICT_REQUIRES_INSERT"


def test_details_default_to_empty():
    assert BuildError("boom", code="BOOM").to_dict() == {
        "error": "BOOM",
        "message": "boom",
        "details": {},
    }
