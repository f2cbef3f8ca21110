from __future__ import annotations

from collections.abc import Hashable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from slugomatic.errors import UniquenessRaceError
from slugomatic.slug.types import ExistingSlugRecord

from .types import SlugRecord


@dataclass(frozen=True, slots=True)
class InMemorySlugLookup:
    """Snapshot of one scope's slugs, taken when the lookup is created."""

    records: tuple[ExistingSlugRecord, ...] = ()

    @classmethod
    def of(cls, slugs: Iterable[str]) -> InMemorySlugLookup:
        return cls(tuple(ExistingSlugRecord(slug=slug) for slug in slugs))

    def find_by_prefix(self, prefix: str) -> Sequence[ExistingSlugRecord]:
        return [record for record in self.records if record.slug.startswith(prefix)]

    def exists_exact(self, slug: str) -> bool:
        return any(record.slug == slug for record in self.records)


@dataclass(slots=True)
class InMemorySlugStore:
    """dictで保持するスラッグストア。テストや永続化不要なホスト向け。"""

    _records: dict[Hashable, SlugRecord] = field(default_factory=dict, repr=False)

    def lookup(
        self, scope_key: tuple[Any, ...], exclude_identity: Hashable | None = None
    ) -> InMemorySlugLookup:
        scope_key = tuple(scope_key)
        return InMemorySlugLookup(
            tuple(
                ExistingSlugRecord(slug=record.slug, identity=record.identity)
                for record in self._records.values()
                if record.scope_key == scope_key
                and (exclude_identity is None or record.identity != exclude_identity)
            )
        )

    def get(self, identity: Hashable) -> SlugRecord | None:
        return self._records.get(identity)

    def save(self, record: SlugRecord) -> None:
        if record.enforce_unique:
            for other in self._records.values():
                if (
                    other.enforce_unique
                    and other.identity != record.identity
                    and other.scope_key == record.scope_key
                    and other.slug == record.slug
                ):
                    raise UniquenessRaceError(record.slug)
        self._records[record.identity] = record

    def delete(self, identity: Hashable) -> None:
        self._records.pop(identity, None)
