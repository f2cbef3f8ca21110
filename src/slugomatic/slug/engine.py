from __future__ import annotations

from slugomatic.errors import InvalidSlugSourceError
from slugomatic.slug.resolver import resolve_candidate
from slugomatic.slug.staleness import is_stale
from slugomatic.slug.types import EntityView, ScopedSlugLookup, SlugCandidate, SlugConfig
from slugomatic.utils.slug import normalize, truncate


def build_candidate(view: EntityView, config: SlugConfig) -> SlugCandidate:
    base_token = truncate(normalize(view.source_value), config.max_length)
    return SlugCandidate(base_token=base_token, max_length=config.max_length)


def compute_slug(
    view: EntityView, config: SlugConfig, lookup: ScopedSlugLookup
) -> str | None:
    """Return the slug to store for ``view``.

    When the slug is not stale the current value comes back unchanged and the
    host has nothing to write. ``lookup`` is only queried for stale slugs.
    """

    if not config.source:
        raise InvalidSlugSourceError("Invalid slug source.")
    if not is_stale(view, config):
        return view.current_slug

    candidate = build_candidate(view, config)
    if not candidate.base_token:
        if view.current_slug:
            return view.current_slug
        raise InvalidSlugSourceError(
            f"Source {config.source!r} is empty and there is no existing slug."
        )
    return resolve_candidate(candidate, lookup)


def to_param(slug: str | None) -> list[str | None]:
    """Route parameters identifying an entity by its slug."""

    return [slug]
