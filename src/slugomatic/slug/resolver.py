"""Collision resolution for slug candidates."""

from __future__ import annotations

import re

from slugomatic.errors import SlugLengthError
from slugomatic.slug.types import ScopedSlugLookup, SlugCandidate
from slugomatic.utils.slug import truncate

# Assuming that 5 digits is more than enough.
INDEX_DIGITS = 5


def _prefix_stems(base: str, max_length: int) -> list[str]:
    """Return the stems a disambiguated copy of ``base`` may have been cut to."""

    variations = max_length - len(base) - 1
    if variations > INDEX_DIGITS + 1:
        return [base]

    stems: list[str] = []
    for n in range(variations - 1, INDEX_DIGITS + 1):
        stem = truncate(base, max_length - n - 1)
        if stem and stem not in stems:
            stems.append(stem)
    return stems


def _collect_indexes(stems: list[str], lookup: ScopedSlugLookup) -> list[int]:
    pattern = re.compile(
        r"(?:%s)-(?P<index>\d+)" % "|".join(re.escape(stem) for stem in stems)
    )
    seen: set[str] = set()
    indexes: list[int] = []
    for stem in stems:
        for record in lookup.find_by_prefix(f"{stem}-"):
            if record.slug in seen:
                continue
            seen.add(record.slug)
            match = pattern.fullmatch(record.slug)
            if match:
                index = int(match.group("index"))
                # Disambiguators start at 2.
                if index >= 2:
                    indexes.append(index)
    return indexes


def _next_index(indexes: list[int]) -> int:
    max_index = max(indexes)
    if max_index > len(indexes) + 1:
        # Sparse sequence, reuse the lowest free index.
        used = set(indexes)
        for index in range(2, max_index + 1):
            if index not in used:
                return index
    return max_index + 1


def resolve(base_token: str, max_length: int, lookup: ScopedSlugLookup) -> str:
    """Return a slug derived from ``base_token`` that ``lookup`` does not know.

    ``lookup`` must already be filtered to the active scope and exclude the
    entity being saved. The first copy keeps the bare token; later copies get
    a ``-N`` suffix, reusing gaps in the sequence before extending it. The
    stem is shortened as needed so the result never exceeds ``max_length``.
    """

    base = truncate(base_token, max_length)
    if not base:
        raise SlugLengthError(
            f"Cannot build a slug from {base_token!r} within {max_length} characters"
        )

    indexes = _collect_indexes(_prefix_stems(base, max_length), lookup)
    if indexes:
        new_index = _next_index(indexes)
    else:
        new_index = 2 if lookup.exists_exact(base) else 1

    if new_index <= 1:
        return base

    suffix = str(new_index)
    stem = truncate(base, max_length - len(suffix) - 1)
    if not stem:
        raise SlugLengthError(
            f"max_length={max_length} leaves no room for the disambiguator -{suffix}"
        )
    return f"{stem}-{suffix}"


def resolve_candidate(candidate: SlugCandidate, lookup: ScopedSlugLookup) -> str:
    return resolve(candidate.base_token, candidate.max_length, lookup)
