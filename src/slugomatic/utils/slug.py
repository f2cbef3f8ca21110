"""Text to slug token helpers."""

from __future__ import annotations

import re

from unidecode import unidecode

_NON_WORD_REGEX = re.compile(r"\W+", re.ASCII)
_SPACE_REGEX = re.compile(r" +")


def normalize(value: str | None) -> str:
    """Escape ``value`` into a lowercase, hyphen-joined ASCII token.

    Non-ASCII characters are transliterated to their nearest approximation
    ("Crème brûlée" -> "creme-brulee"). Underscores are word characters and
    pass through untouched.
    """

    if not value:
        return ""
    ascii_text = unidecode(value)
    ascii_text = _NON_WORD_REGEX.sub(" ", ascii_text)
    ascii_text = ascii_text.strip().lower()
    return _SPACE_REGEX.sub("-", ascii_text)


escape = normalize


def truncate(token: str, max_length: int) -> str:
    """Cut ``token`` to ``max_length`` without leaving a dangling hyphen."""

    if max_length <= 0:
        return ""
    return token[:max_length].rstrip("-")
