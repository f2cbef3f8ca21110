"""Slugomatic public API."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from slugomatic.registry import SlugRegistry
from slugomatic.slug import (
    EntityView,
    ExistingSlugRecord,
    ScopedSlugLookup,
    SlugConfig,
    compute_slug,
    is_stale,
    resolve,
    to_param,
)
from slugomatic.utils.slug import normalize

try:
    __version__ = version("slugomatic")
except PackageNotFoundError:  # pragma: no cover - during source-only use
    __version__ = "unknown"

__all__ = [
    "EntityView",
    "ExistingSlugRecord",
    "ScopedSlugLookup",
    "SlugConfig",
    "SlugRegistry",
    "__version__",
    "compute_slug",
    "is_stale",
    "normalize",
    "resolve",
    "to_param",
]
