"""Unit tests for identifier casing and quoting."""

from __future__ import annotations

import pytest

from pgfluent.schema.casing import IdentifierCaser, convert_case, recase_keys


class TestConvertCase:
    @pytest.mark.parametrize(
        ("word", "convention", "expected"),
        [
            ("createdAt", "snake", "created_at"),
            ("HTTPServer", "snake", "http_server"),
            ("address2Line", "snake", "address2_line"),
            ("user_id", "camel", "userId"),
            ("user_id", "pascal", "UserId"),
            ("firstName", "kebab", "first-name"),
            ("firstName", "constant", "FIRST_NAME"),
            ("firstName", "preserve", "firstName"),
        ],
    )
    def test_conventions(self, word, convention, expected):
        assert convert_case(word, convention) == expected

    def test_edge_underscores_are_kept(self):
        assert convert_case("_privateKey", "snake") == "_private_key"
        assert convert_case("__", "camel") == "__"

    def test_unknown_convention_raises(self):
        with pytest.raises(ValueError):
            convert_case("name", "title")  # type: ignore[arg-type]


class TestIdentifierCaser:
    caser = IdentifierCaser("snake")

    def test_dotted_path_cases_every_segment(self):
        assert self.caser("publicSchema.userAccounts.createdAt") == (
            "public_schema.user_accounts.created_at"
        )

    def test_quoting_each_segment(self):
        assert self.caser("users.createdAt", quote=True) == '"users"."created_at"'

    def test_bang_suppresses_quoting_for_one_segment(self):
        assert self.caser("users.!createdAt", quote=True) == '"users".created_at'

    def test_star_is_never_quoted(self):
        assert self.caser("users.*", quote=True) == '"users".*'

    def test_quoted_spans_pass_through(self):
        assert self.caser("lower('MixedCase')") == "lower('MixedCase')"
        assert self.caser('"CamelTable".someColumn') == '"CamelTable".some_column'

    def test_expressions_are_left_alone(self):
        assert self.caser("count(*)", quote=True) == "count(*)"


def test_recase_keys_converts_to_external_convention():
    row = {"first_name": "Ann", "total": 3}
    assert recase_keys(row, "camel") == {"firstName": "Ann", "total": 3}


class TestUnicodeIdentifiers:
    @pytest.mark.parametrize(
        ("word", "convention", "expected"),
        [
            ("größe", "snake", "größe"),
            ("naïveScore", "snake", "naïve_score"),
            ("straßeName", "kebab", "straße-name"),
            ("größe_wert", "camel", "größeWert"),
            ("HTTP2Server", "snake", "http2_server"),
        ],
    )
    def test_non_ascii_letters_are_kept(self, word, convention, expected):
        assert convert_case(word, convention) == expected

    def test_quoted_non_ascii_column(self):
        assert IdentifierCaser("snake")("größe", quote=True) == '"größe"'
