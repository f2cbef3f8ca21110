from .repository import SqliteSlugLookup, SqliteSlugStore, encode_scope_key

__all__ = ["SqliteSlugLookup", "SqliteSlugStore", "encode_scope_key"]
