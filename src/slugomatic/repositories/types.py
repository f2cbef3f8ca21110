"""リポジトリデータクラス"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from slugomatic.errors import MissingSettingError


# --- Config. ---
@dataclass(frozen=True, slots=True)
class SlugStoreConfig:
    """
    スラッグ保存先の設定値を束ねる。
    バックエンドは今の所SQLiteを想定。エンティティ型ごとに行を分ける。
    """

    sqlite_path: Path
    entity_type: str

    def __post_init__(self) -> None:  # type: ignore[override]
        object.__setattr__(self, "sqlite_path", Path(self.sqlite_path).expanduser())

    @classmethod
    def from_settings(
        cls, settings: Mapping[str, Any], entity_type: str
    ) -> SlugStoreConfig:
        sqlite_path = settings.get("sqlite_path")
        if not sqlite_path:
            raise MissingSettingError("sqlite_path")
        if not entity_type:
            raise MissingSettingError("entity_type")
        return cls(sqlite_path=Path(str(sqlite_path)), entity_type=entity_type)


@dataclass(frozen=True, slots=True)
class SlugRecord:
    """保存済みのスラッグ1件。scope_key はスコープ値のタプル。

    SQLiteストアでは identity は文字列として保存・返却される。
    """

    identity: Hashable
    slug: str
    scope_key: tuple[Any, ...] = ()
    enforce_unique: bool = False

    def __post_init__(self) -> None:  # type: ignore[override]
        object.__setattr__(self, "scope_key", tuple(self.scope_key))
