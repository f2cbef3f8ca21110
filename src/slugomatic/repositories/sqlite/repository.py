"""
スラッグの保存と既存スラッグ検索を担うRepository

想定：SQLite
"""

from __future__ import annotations

import json
import sqlite3
import time
from collections.abc import Hashable, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

from slugomatic.errors import (
    SlugLookupError,
    SlugomaticError,
    SlugStoreError,
    UniquenessRaceError,
)
from slugomatic.slug.types import ExistingSlugRecord

from ..types import SlugRecord, SlugStoreConfig

_SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"


def encode_scope_key(scope_key: Sequence[Any]) -> str:
    return json.dumps(list(scope_key), default=str, separators=(",", ":"))


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass(slots=True)
class SqliteSlugStore:
    """SQLiteに保存するスラッグの読み書きを司る。

    identity はTEXT列に str() で保存するため、get() が返す identity は文字列になる。
    """

    config: SlugStoreConfig
    _schema_path: Path = field(init=False, repr=False, default=_SCHEMA_PATH)

    def __post_init__(self) -> None:
        self._ensure_initialized()

    @classmethod
    def from_settings(
        cls, settings: Mapping[str, object], entity_type: str
    ) -> SqliteSlugStore:
        return cls(SlugStoreConfig.from_settings(settings, entity_type))

    def lookup(
        self, scope_key: tuple[Any, ...], exclude_identity: Hashable | None = None
    ) -> SqliteSlugLookup:
        return SqliteSlugLookup(
            store=self,
            scope_key=encode_scope_key(scope_key),
            exclude_identity=None if exclude_identity is None else str(exclude_identity),
        )

    def get(self, identity: Hashable) -> SlugRecord | None:
        """指定identityのスラッグを読み出す。"""

        query = """
            SELECT identity, slug, scope_key, enforce_unique
            FROM slugs
            WHERE entity_type = ? AND identity = ?
        """
        with self._connect(SlugStoreError) as conn:
            row = conn.execute(
                query, (self.config.entity_type, str(identity))
            ).fetchone()
        if row is None:
            return None
        return SlugRecord(
            identity=row["identity"],
            slug=row["slug"],
            scope_key=tuple(json.loads(row["scope_key"])),
            enforce_unique=bool(row["enforce_unique"]),
        )

    def save(self, record: SlugRecord) -> None:
        """スラッグを書き込む（存在すれば更新）。スコープ内重複は UniquenessRaceError。"""

        query = """
            INSERT INTO slugs (entity_type, identity, scope_key, slug, enforce_unique, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(entity_type, identity) DO UPDATE SET
                scope_key=excluded.scope_key,
                slug=excluded.slug,
                enforce_unique=excluded.enforce_unique,
                updated_at=excluded.updated_at
        """
        params = (
            self.config.entity_type,
            str(record.identity),
            encode_scope_key(record.scope_key),
            record.slug,
            int(record.enforce_unique),
            int(time.time()),
        )
        with self._connect(SlugStoreError) as conn:
            try:
                conn.execute(query, params)
            except sqlite3.IntegrityError as exc:
                conn.rollback()
                raise UniquenessRaceError(record.slug) from exc

    def delete(self, identity: Hashable) -> None:
        with self._connect(SlugStoreError) as conn:
            conn.execute(
                "DELETE FROM slugs WHERE entity_type = ? AND identity = ?",
                (self.config.entity_type, str(identity)),
            )

    def _ensure_initialized(self) -> None:
        sqlite_path = self.config.sqlite_path
        sqlite_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with sqlite3.connect(sqlite_path) as conn:
                conn.execute("PRAGMA journal_mode=WAL")
                if not self._has_table(conn, "slugs"):
                    self._apply_schema(conn)
        except sqlite3.Error as exc:
            raise SlugStoreError(
                f"Failed to initialize SQLite database: {sqlite_path}"
            ) from exc

    def _apply_schema(self, conn: sqlite3.Connection) -> None:
        if not self._schema_path.exists():
            raise SlugStoreError(f"Schema file not found: {self._schema_path}")
        schema_sql = self._schema_path.read_text(encoding="utf-8")
        conn.executescript(schema_sql)

    def _has_table(self, conn: sqlite3.Connection, name: str) -> bool:
        row = conn.execute(
            "SELECT 1 FROM sqlite_master WHERE type='table' AND name = ?",
            (name,),
        ).fetchone()
        return row is not None

    @contextmanager
    def _connect(
        self, error_cls: type[SlugomaticError]
    ) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.config.sqlite_path)
            conn.row_factory = sqlite3.Row
        except sqlite3.Error as exc:
            raise error_cls(
                f"Failed to open SQLite database: {self.config.sqlite_path}"
            ) from exc
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise error_cls(
                f"SQLite operation failed: {self.config.sqlite_path}"
            ) from exc
        finally:
            conn.close()


@dataclass(frozen=True, slots=True)
class SqliteSlugLookup:
    """1スコープ分の既存スラッグ検索。自分自身の行は除外する。"""

    store: SqliteSlugStore
    scope_key: str
    exclude_identity: str | None = None

    def find_by_prefix(self, prefix: str) -> Sequence[ExistingSlugRecord]:
        query = """
            SELECT slug, identity
            FROM slugs
            WHERE entity_type = ? AND scope_key = ? AND slug LIKE ? ESCAPE '\\'
        """
        params: list[object] = [
            self.store.config.entity_type,
            self.scope_key,
            _escape_like(prefix) + "%",
        ]
        query, params = self._exclude_self(query, params)
        with self.store._connect(SlugLookupError) as conn:
            rows = conn.execute(query, params).fetchall()
        # LIKE ignores ASCII case.
        return [
            ExistingSlugRecord(slug=row["slug"], identity=row["identity"])
            for row in rows
            if row["slug"].startswith(prefix)
        ]

    def exists_exact(self, slug: str) -> bool:
        query = """
            SELECT 1
            FROM slugs
            WHERE entity_type = ? AND scope_key = ? AND slug = ?
        """
        params: list[object] = [self.store.config.entity_type, self.scope_key, slug]
        query, params = self._exclude_self(query, params)
        with self.store._connect(SlugLookupError) as conn:
            row = conn.execute(query + " LIMIT 1", params).fetchone()
        return row is not None

    def _exclude_self(
        self, query: str, params: list[object]
    ) -> tuple[str, list[object]]:
        if self.exclude_identity is None:
            return query, params
        return query + " AND identity != ?", [*params, self.exclude_identity]
