from .slug import escape, normalize, truncate

__all__ = ["escape", "normalize", "truncate"]
