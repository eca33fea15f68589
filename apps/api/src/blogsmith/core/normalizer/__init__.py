"""Response Normalizer - Isolate the JSON object in model output."""

from blogsmith.core.normalizer.normalizer import ResponseNormalizer, normalize

__all__ = ["ResponseNormalizer", "normalize"]
