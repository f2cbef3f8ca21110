from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SlugAssignerConfig:
    max_retries: int = 3
    verbose: bool = False
    logger_name: str = "slugomatic.assigner"

    @classmethod
    def from_settings(cls, settings: Mapping[str, object]) -> "SlugAssignerConfig":
        def _get_int(key: str, default: int) -> int:
            value = settings.get(key, default)
            if isinstance(value, bool):
                return default
            if isinstance(value, int):
                return value
            if isinstance(value, str):
                try:
                    return int(value.strip())
                except ValueError:
                    return default
            return default

        return cls(
            max_retries=max(_get_int("max_save_retries", 3), 0),
            verbose=bool(settings.get("verbose_logging", False)),
            logger_name=str(settings.get("assigner_logger_name", "slugomatic.assigner")),
        )


@dataclass(frozen=True, slots=True)
class SlugAssignment:
    slug: str | None
    written: bool
