from __future__ import annotations

from slugomatic.slug.types import EntityView, SlugConfig


def is_stale(view: EntityView, config: SlugConfig) -> bool:
    """Return True when the slug of ``view`` must be recomputed before saving.

    The slug is stale if
    1. the entity is new
    2. the slug is empty while permanent, or the source value is empty
    3. a field feeding the source value changed (non-permanent slugs only)
    4. a scope field changed
    """

    if view.is_new:
        return True

    if (config.permanent_slug and not view.current_slug) or not view.source_value:
        return True

    changed = view.changed_fields
    if not changed:
        return False

    if not config.permanent_slug and not changed.isdisjoint(config.source_fields):
        return True

    return not changed.isdisjoint(config.scope_fields)
