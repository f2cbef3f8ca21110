"""Public interface for slugomatic slug stores."""

from .memory import InMemorySlugLookup, InMemorySlugStore
from .repository import SlugStore
from .sqlite.repository import SqliteSlugLookup, SqliteSlugStore
from .types import SlugRecord, SlugStoreConfig

__all__ = [
    "InMemorySlugLookup",
    "InMemorySlugStore",
    "SlugRecord",
    "SlugStore",
    "SlugStoreConfig",
    "SqliteSlugLookup",
    "SqliteSlugStore",
]
