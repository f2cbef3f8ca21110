"""Service layer for slugomatic."""

from .slug_assigner import SlugAssigner
from .types import SlugAssignerConfig, SlugAssignment

__all__ = [
    "SlugAssigner",
    "SlugAssignerConfig",
    "SlugAssignment",
]
