"""Blogsmith Core - Structured-output pipeline and domain models."""

from blogsmith.core.extractor import (
    ARTICLE_SHAPE,
    ENGLISH_ARTICLE_SHAPE,
    ExpectedShape,
    MalformedOutput,
    StructuredRecord,
    parse_model_output,
)
from blogsmith.core.models import Article, Blog
from blogsmith.core.normalizer import normalize

__all__ = [
    "ARTICLE_SHAPE",
    "ENGLISH_ARTICLE_SHAPE",
    "Article",
    "Blog",
    "ExpectedShape",
    "MalformedOutput",
    "StructuredRecord",
    "normalize",
    "parse_model_output",
]
