"""Identifier casing between the caller's and the database's naming conventions.

Callers write keys in their own convention (``createdAt``) while the
database stores them in another (``created_at``).  :class:`IdentifierCaser`
applies the database convention to every segment of a dotted path and
optionally double-quotes the result::

    caser = IdentifierCaser("snake")
    caser("users.createdAt", quote=True)   # '"users"."created_at"'
    caser("users.!createdAt", quote=True)  # '"users".created_at'
    caser("lower('MixedCase')")            # "lower('MixedCase')"

Quoted spans (``"..."`` / ``'...'``) are treated as literal SQL and pass
through untouched, quotes included.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from pgfluent.schema.expressions import NO_QUOTE_MARKER

#: Supported naming conventions.
Casing = Literal["snake", "camel", "pascal", "kebab", "constant", "preserve"]

# Runs of Unicode letters and digits; separators are everything else.
_RUN = re.compile(r"[^\W_]+")
_IDENTIFIER = re.compile(r"^\w+$")
_QUOTED_SPAN = re.compile(r"(\"[^\"]*\"|'[^']*')")
_EDGE_UNDERSCORES = re.compile(r"^(_*)(.*?)(_*)$", re.DOTALL)


def split_words(word: str) -> list[str]:
    """Split an identifier into its words, whatever convention it uses.

    Words break before an upper-case letter that follows a lower-case letter
    or a digit, before the last capital of an acronym (``HTTPServer``), and
    before a letter that follows a digit.  Digits stick to the word they
    follow.  Letters without case, as in most non-Latin scripts, behave
    like lower-case letters.
    """
    words: list[str] = []
    for run in _RUN.findall(word):
        start = 0
        for idx in range(1, len(run)):
            if _starts_word(run, idx):
                words.append(run[start:idx])
                start = idx
        words.append(run[start:])
    return words


def _starts_word(run: str, idx: int) -> bool:
    char, prev = run[idx], run[idx - 1]
    if prev.isdigit():
        return not char.isdigit()
    if not char.isupper():
        return False
    if not prev.isupper():
        return True
    following = run[idx + 1] if idx + 1 < len(run) else ""
    return bool(following) and not following.isupper() and not following.isdigit()


def convert_case(word: str, convention: Casing) -> str:
    """Re-case a single identifier to ``convention``.

    Leading and trailing underscores are preserved; everything in between is
    re-joined according to the convention.  Words that contain no letters or
    digits are returned unchanged.
    """
    if convention == "preserve":
        return word
    prefix, core, suffix = _EDGE_UNDERSCORES.match(word).groups()
    words = split_words(core)
    if not words:
        return word

    if convention == "snake":
        cased = "_".join(w.lower() for w in words)
    elif convention == "kebab":
        cased = "-".join(w.lower() for w in words)
    elif convention == "constant":
        cased = "_".join(w.upper() for w in words)
    elif convention == "camel":
        cased = words[0].lower() + "".join(w.capitalize() for w in words[1:])
    elif convention == "pascal":
        cased = "".join(w.capitalize() for w in words)
    else:
        raise ValueError(f"Unsupported casing convention: {convention!r}")
    return f"{prefix}{cased}{suffix}"


def quote_identifier(name: str) -> str:
    """Return ``name`` as a double-quoted PostgreSQL identifier."""
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


def recase_keys(row: Mapping[str, Any], convention: Casing) -> dict[str, Any]:
    """Return a copy of ``row`` with every key converted to ``convention``."""
    return {convert_case(key, convention): value for key, value in row.items()}


@dataclass(frozen=True)
class IdentifierCaser:
    """Applies a naming convention to dotted identifier paths.

    Attributes:
        convention: The convention identifiers are converted to.
    """

    convention: Casing = "snake"

    def __call__(self, name: str, quote: bool = False) -> str:
        """Case (and optionally quote) every segment of a dotted path.

        Args:
            name: Identifier path such as ``"schema.table.column"``.  May
                embed quoted literal spans, which are kept verbatim.
            quote: Double-quote each cased segment.  A segment prefixed with
                ``!`` is never quoted.

        Returns:
            The cased path.
        """
        parts = _QUOTED_SPAN.split(name)
        return "".join(
            part if idx % 2 == 1 else self._case_path(part, quote)
            for idx, part in enumerate(parts)
        )

    def _case_path(self, path: str, quote: bool) -> str:
        return ".".join(self._case_segment(segment, quote) for segment in path.split("."))

    def _case_segment(self, segment: str, quote: bool) -> str:
        do_quote = quote
        if segment.startswith(NO_QUOTE_MARKER):
            segment = segment[len(NO_QUOTE_MARKER):]
            do_quote = False
        # "*", expressions and empty segments around quoted spans stay as-is.
        if not _IDENTIFIER.match(segment):
            return segment
        cased = convert_case(segment, self.convention)
        return quote_identifier(cased) if do_quote else cased
