from __future__ import annotations

from collections.abc import Hashable
from typing import Any, Protocol, runtime_checkable

from slugomatic.slug.types import ScopedSlugLookup

from .types import SlugRecord


@runtime_checkable
class SlugStore(Protocol):
    def lookup(
        self, scope_key: tuple[Any, ...], exclude_identity: Hashable | None = None
    ) -> ScopedSlugLookup: ...

    def get(self, identity: Hashable) -> SlugRecord | None: ...

    def save(self, record: SlugRecord) -> None: ...

    def delete(self, identity: Hashable) -> None: ...
