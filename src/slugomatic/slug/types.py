"""Shared types for the slug engine."""

from __future__ import annotations

import warnings
from collections.abc import Hashable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from slugomatic.config import DEFAULT_SLUG_LENGTH
from slugomatic.errors import ConfigError, InvalidSlugSourceError


# --- Config. ---
@dataclass(frozen=True, slots=True)
class SlugConfig:
    """エンティティ型ごとのスラッグ生成設定。登録後は変更しない。"""

    source: str
    permanent_slug: bool = True
    scope_fields: tuple[str, ...] = ()
    unique_within_scope: bool = False
    max_length: int = DEFAULT_SLUG_LENGTH
    # Fields feeding the source value; defaults to the source field itself.
    source_fields: tuple[str, ...] = ()

    def __post_init__(self) -> None:  # type: ignore[override]
        if not self.source:
            raise InvalidSlugSourceError("You must specify a source to generate slug.")
        if isinstance(self.max_length, bool) or self.max_length <= 0:
            raise ConfigError(f"max_length must be a positive integer: {self.max_length!r}")
        object.__setattr__(self, "scope_fields", tuple(self.scope_fields))
        source_fields = tuple(self.source_fields) or (self.source,)
        object.__setattr__(self, "source_fields", source_fields)

    @classmethod
    def from_options(
        cls,
        options: Mapping[str, Any],
        *,
        field_lengths: Mapping[str, int] | None = None,
        default_length: int = DEFAULT_SLUG_LENGTH,
    ) -> SlugConfig:
        """Build a config from registration options.

        ``field_lengths`` holds the declared maximum lengths of the host's
        string fields. The slug length falls back to the declared length of a
        ``slug`` field, then of the source field, then to ``default_length``.
        """

        options = dict(options)
        if "size" in options:
            warnings.warn(
                "Slug with `size` option is deprecated, use `length` instead",
                DeprecationWarning,
                stacklevel=2,
            )
            options["length"] = options.pop("size")

        source = options.get("source")
        if not source:
            raise InvalidSlugSourceError("You must specify a source to generate slug.")
        source = str(source)

        permanent_slug = options.get("permanent_slug")
        if permanent_slug is None:
            permanent_slug = True

        scope = options.get("scope") or ()
        if isinstance(scope, str):
            scope = (scope,)
        source_fields = options.get("source_fields") or ()
        if isinstance(source_fields, str):
            source_fields = (source_fields,)

        lengths = dict(field_lengths or {})
        length = options.get("length")
        if length is None:
            length = lengths.get("slug") or lengths.get(source) or default_length

        return cls(
            source=source,
            permanent_slug=bool(permanent_slug),
            scope_fields=tuple(str(name) for name in scope),
            unique_within_scope=bool(options.get("unique", False)),
            max_length=int(length),
            source_fields=tuple(str(name) for name in source_fields),
        )


@dataclass(frozen=True, slots=True)
class SlugCandidate:
    """正規化済み・サフィックスなしのスラッグ候補。"""

    base_token: str
    max_length: int


@dataclass(frozen=True, slots=True)
class ExistingSlugRecord:
    """スコープ内で既に使われているスラッグ。"""

    slug: str
    identity: Hashable | None = None


@dataclass(frozen=True, slots=True)
class EntityView:
    """What the engine needs to know about an entity about to be saved."""

    current_slug: str | None = None
    source_value: str | None = None
    scope_values: Mapping[str, Any] = field(default_factory=dict)
    changed_fields: frozenset[str] = frozenset()
    is_new: bool = False
    identity: Hashable | None = None

    def __post_init__(self) -> None:  # type: ignore[override]
        object.__setattr__(self, "changed_fields", frozenset(self.changed_fields))

    def scope_key(self, config: SlugConfig) -> tuple[Any, ...]:
        """Return the scope values ordered as ``config.scope_fields``."""

        return tuple(self.scope_values.get(name) for name in config.scope_fields)


@runtime_checkable
class ScopedSlugLookup(Protocol):
    """Existing slugs of one scope, excluding the entity being saved."""

    def find_by_prefix(self, prefix: str) -> Sequence[ExistingSlugRecord]: ...

    def exists_exact(self, slug: str) -> bool: ...
