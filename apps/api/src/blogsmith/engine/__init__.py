"""Blog generation engine."""

from blogsmith.engine.writer import BlogWriter

__all__ = ["BlogWriter"]
