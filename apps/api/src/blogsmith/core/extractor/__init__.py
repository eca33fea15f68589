"""Structured Extractor - Parse and repair model output into records."""

from blogsmith.core.extractor.extractor import (
    ARTICLE_SHAPE,
    ENGLISH_ARTICLE_SHAPE,
    EmptyInput,
    ExpectedShape,
    MalformedOutput,
    MissingField,
    StructuredExtractor,
    StructuredRecord,
    extract,
    parse_model_output,
)
from blogsmith.core.extractor.repair import JSONRepairer

__all__ = [
    "ARTICLE_SHAPE",
    "ENGLISH_ARTICLE_SHAPE",
    "EmptyInput",
    "ExpectedShape",
    "JSONRepairer",
    "MalformedOutput",
    "MissingField",
    "StructuredExtractor",
    "StructuredRecord",
    "extract",
    "parse_model_output",
]
