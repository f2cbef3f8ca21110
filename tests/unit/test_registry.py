from __future__ import annotations

import pytest

from slugomatic.errors import ConfigError
from slugomatic.registry import SlugRegistry


def test_register_and_get() -> None:
    registry = SlugRegistry()
    config = registry.register("post", {"source": "title", "scope": ["blog_id"]})
    assert registry.get("post") is config
    assert "post" in registry
    assert list(registry) == ["post"]


def test_register_twice_fails() -> None:
    registry = SlugRegistry()
    registry.register("post", {"source": "title"})
    with pytest.raises(ConfigError):
        registry.register("post", {"source": "name"})


def test_get_unknown_type_fails() -> None:
    with pytest.raises(ConfigError):
        SlugRegistry().get("missing")


def test_registry_default_length_from_settings() -> None:
    registry = SlugRegistry.from_settings({"default_length": 25})
    assert registry.register("post", {"source": "title"}).max_length == 25
    config = registry.register(
        "page", {"source": "title"}, field_lengths={"title": 200}
    )
    assert config.max_length == 200
