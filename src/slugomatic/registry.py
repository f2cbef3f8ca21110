from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from slugomatic.config import DEFAULT_SLUG_LENGTH
from slugomatic.errors import ConfigError
from slugomatic.slug.types import SlugConfig


@dataclass(slots=True)
class SlugRegistry:
    """エンティティ型名 → SlugConfig の対応表。型ごとに一度だけ登録する。"""

    default_length: int = DEFAULT_SLUG_LENGTH
    _configs: dict[str, SlugConfig] = field(init=False, default_factory=dict, repr=False)

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> SlugRegistry:
        return cls(default_length=int(settings.get("default_length", DEFAULT_SLUG_LENGTH)))

    def register(
        self,
        entity_type: str,
        options: Mapping[str, Any],
        *,
        field_lengths: Mapping[str, int] | None = None,
    ) -> SlugConfig:
        if entity_type in self._configs:
            raise ConfigError(f"Slug already registered for {entity_type!r}")
        config = SlugConfig.from_options(
            options, field_lengths=field_lengths, default_length=self.default_length
        )
        self._configs[entity_type] = config
        return config

    def get(self, entity_type: str) -> SlugConfig:
        try:
            return self._configs[entity_type]
        except KeyError:
            raise ConfigError(f"No slug registered for {entity_type!r}") from None

    def __contains__(self, entity_type: object) -> bool:
        return entity_type in self._configs

    def __iter__(self) -> Iterator[str]:
        return iter(self._configs)
