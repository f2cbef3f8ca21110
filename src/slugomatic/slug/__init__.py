"""Slug engine: normalization, staleness and collision resolution."""

from .engine import build_candidate, compute_slug, to_param
from .resolver import INDEX_DIGITS, resolve
from .staleness import is_stale
from .types import (
    EntityView,
    ExistingSlugRecord,
    ScopedSlugLookup,
    SlugCandidate,
    SlugConfig,
)

__all__ = [
    "INDEX_DIGITS",
    "EntityView",
    "ExistingSlugRecord",
    "ScopedSlugLookup",
    "SlugCandidate",
    "SlugConfig",
    "build_candidate",
    "compute_slug",
    "is_stale",
    "resolve",
    "to_param",
]
