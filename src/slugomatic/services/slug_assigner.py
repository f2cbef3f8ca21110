from __future__ import annotations

from collections.abc import Hashable

from slugomatic.errors import UniquenessRaceError
from slugomatic.logging import get_logger
from slugomatic.repositories.repository import SlugStore
from slugomatic.repositories.types import SlugRecord
from slugomatic.slug.engine import compute_slug
from slugomatic.slug.staleness import is_stale
from slugomatic.slug.types import EntityView, SlugConfig

from .types import SlugAssignerConfig, SlugAssignment


class SlugAssigner:
    """保存直前にスラッグを計算し、ストアへ書き込む。"""

    def __init__(
        self,
        slug_config: SlugConfig,
        store: SlugStore,
        *,
        config: SlugAssignerConfig | None = None,
    ) -> None:
        self._slug_config = slug_config
        self._store = store
        self._config = config or SlugAssignerConfig()
        self._logger = get_logger(self._config.logger_name, self._config.verbose)

    def assign(self, view: EntityView, identity: Hashable) -> SlugAssignment:
        """Compute and persist the slug for the entity saved as ``identity``.

        A fresh lookup snapshot is taken for every attempt, so a slug lost to
        a concurrent save is re-disambiguated on the next one. Unless the
        entity is new, its own row ``identity`` is left out of the lookup.
        """

        if view.identity is not None and view.identity != identity:
            raise ValueError(
                f"EntityView identity {view.identity!r} does not match {identity!r}"
            )
        exclude_identity = None if view.is_new else identity

        if not is_stale(view, self._slug_config):
            self._logger.debug("Slug unchanged for %s: %s", identity, view.current_slug)
            return SlugAssignment(slug=view.current_slug, written=False)

        scope_key = view.scope_key(self._slug_config)
        attempt = 0
        while True:
            lookup = self._store.lookup(scope_key, exclude_identity=exclude_identity)
            slug = compute_slug(view, self._slug_config, lookup)
            record = SlugRecord(
                identity=identity,
                slug=slug or "",
                scope_key=scope_key,
                enforce_unique=self._slug_config.unique_within_scope,
            )
            try:
                self._store.save(record)
            except UniquenessRaceError:
                attempt += 1
                if attempt > self._config.max_retries:
                    self._logger.error(
                        "Slug %s still taken after %s retries", slug, self._config.max_retries
                    )
                    raise
                self._logger.info(
                    "Slug race for %s (attempt=%s): %s", identity, attempt, slug
                )
                continue
            self._logger.debug("Slug assigned for %s: %s", identity, slug)
            return SlugAssignment(slug=slug, written=True)
