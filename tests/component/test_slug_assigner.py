from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from slugomatic import config as slug_config
from slugomatic.errors import UniquenessRaceError
from slugomatic.registry import SlugRegistry
from slugomatic.repositories import InMemorySlugStore, SlugRecord, SqliteSlugStore
from slugomatic.services import SlugAssigner, SlugAssignerConfig
from slugomatic.slug.types import EntityView, SlugConfig


class _RacingStore(InMemorySlugStore):
    """Loses the first save to a concurrent writer holding the same slug."""

    def __init__(self, races: int = 1) -> None:
        super().__init__()
        self.races = races
        self.saves = 0

    def save(self, record: SlugRecord) -> None:
        self.saves += 1
        if self.races > 0:
            self.races -= 1
            super().save(
                SlugRecord(
                    identity=f"rival-{self.saves}",
                    slug=record.slug,
                    scope_key=record.scope_key,
                    enforce_unique=True,
                )
            )
            raise UniquenessRaceError(record.slug)
        super().save(record)


class _AlwaysTakenStore(InMemorySlugStore):
    def __init__(self) -> None:
        super().__init__()
        self.saves = 0

    def save(self, record: SlugRecord) -> None:
        self.saves += 1
        raise UniquenessRaceError(record.slug)


def _new_post(title: str, **scope: Any) -> EntityView:
    return EntityView(source_value=title, scope_values=scope, is_new=True)


def test_assign_new_entities_in_scope() -> None:
    store = InMemorySlugStore()
    config = SlugConfig(
        source="title", scope_fields=("blog_id",), unique_within_scope=True, max_length=20
    )
    assigner = SlugAssigner(config, store)

    first = assigner.assign(_new_post("Hot deals on Boxing Day!", blog_id=1), identity=1)
    second = assigner.assign(_new_post("Hot deals on Boxing Day!", blog_id=1), identity=2)
    other_blog = assigner.assign(_new_post("Hot deals on Boxing Day!", blog_id=2), identity=3)

    assert first.slug == "hot-deals-on-boxing"
    assert first.written is True
    assert second.slug == "hot-deals-on-boxin-2"
    assert other_blog.slug == "hot-deals-on-boxing"


def test_assign_skips_write_when_fresh() -> None:
    store = InMemorySlugStore()
    assigner = SlugAssigner(SlugConfig(source="title"), store)
    view = EntityView(current_slug="kept", source_value="Renamed", identity=9)
    result = assigner.assign(view, identity=9)
    assert result.slug == "kept"
    assert result.written is False
    assert store.get(9) is None


def test_assign_update_excludes_own_record() -> None:
    store = InMemorySlugStore()
    config = SlugConfig(source="title", permanent_slug=False)
    assigner = SlugAssigner(config, store)
    assigner.assign(_new_post("Hello"), identity=1)

    view = EntityView(
        current_slug="hello",
        source_value="hello!",
        changed_fields=frozenset({"title"}),
        identity=1,
    )
    result = assigner.assign(view, identity=1)
    assert result.slug == "hello"
    assert result.written is True


def test_assign_moves_record_on_scope_change() -> None:
    store = InMemorySlugStore()
    config = SlugConfig(source="title", scope_fields=("blog_id",))
    assigner = SlugAssigner(config, store)
    assigner.assign(_new_post("Hello", blog_id=1), identity=1)
    assigner.assign(_new_post("Hello", blog_id=2), identity=2)

    moved = EntityView(
        current_slug="hello",
        source_value="Hello",
        scope_values={"blog_id": 2},
        changed_fields=frozenset({"blog_id"}),
        identity=1,
    )
    result = assigner.assign(moved, identity=1)
    assert result.slug == "hello-2"
    record = store.get(1)
    assert record is not None
    assert record.scope_key == (2,)


def test_assign_retries_after_race() -> None:
    store = _RacingStore(races=1)
    config = SlugConfig(source="title", unique_within_scope=True)
    assigner = SlugAssigner(config, store)

    result = assigner.assign(_new_post("Title"), identity=1)
    assert result.slug == "title-2"
    assert store.saves == 2


def test_assign_gives_up_after_max_retries() -> None:
    store = _AlwaysTakenStore()
    assigner = SlugAssigner(
        SlugConfig(source="title", unique_within_scope=True),
        store,
        config=SlugAssignerConfig(max_retries=2),
    )
    with pytest.raises(UniquenessRaceError):
        assigner.assign(_new_post("Title"), identity=1)
    assert store.saves == 3


def test_assigner_config_from_settings() -> None:
    config = SlugAssignerConfig.from_settings(
        {"max_save_retries": "4", "verbose_logging": True}
    )
    assert config.max_retries == 4
    assert config.verbose is True
    assert SlugAssignerConfig.from_settings({"max_save_retries": True}).max_retries == 3


def test_end_to_end_with_settings_and_sqlite(tmp_path: Path) -> None:
    settings = slug_config.get_config(
        {
            "config_path": str(tmp_path / "config.toml"),
            "sqlite_path": str(tmp_path / "slugs.db"),
        }
    )
    registry = SlugRegistry.from_settings(settings)
    post_config = registry.register(
        "post",
        {"source": "title", "scope": "blog_id", "unique": True},
        field_lengths={"title": 20},
    )
    store = SqliteSlugStore.from_settings(settings, "post")
    assigner = SlugAssigner(
        post_config, store, config=SlugAssignerConfig.from_settings(settings)
    )

    slugs: list[str | None] = []
    for identity in range(1, 4):
        view = _new_post("Hot deals on Boxing Day!", blog_id=7)
        slugs.append(assigner.assign(view, identity=identity).slug)

    assert slugs == ["hot-deals-on-boxing", "hot-deals-on-boxin-2", "hot-deals-on-boxin-3"]
    record = store.get(2)
    assert record is not None
    assert record.slug == "hot-deals-on-boxin-2"


def test_assign_update_without_view_identity_excludes_saved_row() -> None:
    store = InMemorySlugStore()
    assigner = SlugAssigner(SlugConfig(source="title", permanent_slug=False), store)
    assigner.assign(_new_post("Hello"), identity=1)

    view = EntityView(
        current_slug="hello",
        source_value="Hello!",
        changed_fields=frozenset({"title"}),
    )
    result = assigner.assign(view, identity=1)
    assert result.slug == "hello"
    assert result.written is True


def test_assign_rejects_mismatched_identity() -> None:
    assigner = SlugAssigner(SlugConfig(source="title"), InMemorySlugStore())
    view = EntityView(current_slug="", source_value="Hello", identity=2)
    with pytest.raises(ValueError):
        assigner.assign(view, identity=1)


def test_assign_zero_suffixed_title_does_not_block_base() -> None:
    store = InMemorySlugStore()
    assigner = SlugAssigner(SlugConfig(source="title", unique_within_scope=True), store)

    slugs = [
        assigner.assign(_new_post(title), identity=identity).slug
        for identity, title in enumerate(["Foo 0", "Foo", "Foo"], start=1)
    ]
    assert slugs == ["foo-0", "foo", "foo-2"]
