# src/slugomatic/errors.py
from __future__ import annotations
class SlugomaticError(Exception):
    """Base exception for all slugomatic errors."""


class ConfigError(SlugomaticError):
    """Raised when config is missing or invalid."""


class MissingSettingError(ConfigError):
    """Raised when a required configuration value is absent."""

    def __init__(self, setting_name: str, message: str | None = None) -> None:
        detail = message or f"Missing required setting: {setting_name}"
        super().__init__(detail)
        self.setting_name = setting_name


class InvalidSlugSourceError(SlugomaticError):
    """Raised when neither a slug source nor an existing slug is available."""


class SlugLengthError(ConfigError):
    """Raised when the maximum length leaves no room for a disambiguated slug."""


class SlugLookupError(SlugomaticError):
    """Raised when existing slugs cannot be looked up."""


class UniquenessRaceError(SlugomaticError):
    """Raised when storage rejects a slug already taken in its scope."""

    def __init__(self, slug: str, message: str | None = None) -> None:
        detail = message or f"Slug already taken in scope: {slug}"
        super().__init__(detail)
        self.slug = slug


class RepositoryError(SlugomaticError):
    """Base error for repository related failures."""


class SlugStoreError(RepositoryError):
    """Raised when slug store cannot complete an operation."""
