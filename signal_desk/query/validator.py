"""Syntactic checks on raw user input, run before any network call."""

import re

from signal_desk.errors import EmptyQuery, InvalidCharacters, QueryTooLong

MAX_QUERY_LENGTH = 50
_ALLOWED = re.compile(r"[A-Za-z0-9 .\-]+")


def validate_query(raw: str) -> str:
    """Return the trimmed query or raise the first rule it breaks.

    Rules, in order: non-empty, at most 50 characters, only letters,
    digits, space, dot and dash. The result is not case-folded.
    """
    trimmed = raw.strip()
    if not trimmed:
        raise EmptyQuery()
    if len(trimmed) > MAX_QUERY_LENGTH:
        raise QueryTooLong()
    if not _ALLOWED.fullmatch(trimmed):
        raise InvalidCharacters()
    return trimmed
