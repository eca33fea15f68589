"""
Structured Extractor - Parse normalized model output into a record.

The extractor is the second half of the structured-output pipeline.
The upstream generator does not guarantee well-formed JSON. There is
no re-prompting, only one local repair pass:

1. Parse and validate against the expected shape
2. On failure, run the repair sequence once
3. Parse and validate again, then give up with MalformedOutput

Only MalformedOutput (or a subclass) ever leaves this module.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from blogsmith.core.extractor.repair import JSONRepairer
from blogsmith.core.normalizer import normalize

logger = logging.getLogger(__name__)


# =============================================================================
# Errors
# =============================================================================


class MalformedOutput(Exception):
    """Model output could not be turned into a record of the expected shape."""

    def __init__(
        self,
        message: str,
        raw: str | None = None,
        repaired: str | None = None,
    ):
        super().__init__(message)
        self.raw = raw
        self.repaired = repaired


class MissingField(MalformedOutput):
    """Output parsed, but a required field is absent or blank."""

    def __init__(self, field: str, raw: str | None = None, repaired: str | None = None):
        super().__init__(f"Missing or empty required field: {field}", raw, repaired)
        self.field = field


class EmptyInput(MalformedOutput):
    """Nothing left to parse after normalization."""

    def __init__(self, raw: str | None = None):
        super().__init__("Model output is empty", raw=raw, repaired="")


# =============================================================================
# Shapes and records
# =============================================================================


@dataclass(frozen=True)
class ExpectedShape:
    """
    Required fields of a structured record.

    Each field is a dotted path to a string value, e.g. "title" or
    "english.title".
    """

    fields: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.fields:
            raise ValueError("ExpectedShape needs at least one field")
        for path in self.fields:
            if not path or any(not part for part in path.split(".")):
                raise ValueError(f"Invalid field path: {path!r}")

    @property
    def keys(self) -> list[str]:
        """Every key name used by the shape, parents first, without duplicates."""
        names: list[str] = []
        for path in self.fields:
            for part in path.split("."):
                if part not in names:
                    names.append(part)
        return names


ARTICLE_SHAPE = ExpectedShape(("title", "content"))
ENGLISH_ARTICLE_SHAPE = ExpectedShape(("english.title", "english.content"))


@dataclass(frozen=True)
class StructuredRecord:
    """Validated mapping of field path to trimmed string value."""

    values: dict[str, str] = field(default_factory=dict)

    def __getitem__(self, path: str) -> str:
        return self.values[path]

    def __contains__(self, path: object) -> bool:
        return path in self.values

    def get(self, path: str, default: str | None = None) -> str | None:
        return self.values.get(path, default)

    def to_dict(self) -> dict[str, Any]:
        """Rebuild the nested object, e.g. {"english": {"title": ...}}."""
        result: dict[str, Any] = {}
        for path, value in self.values.items():
            *parents, leaf = path.split(".")
            node = result
            for parent in parents:
                node = node.setdefault(parent, {})
            node[leaf] = value
        return result


# =============================================================================
# Extractor
# =============================================================================


class StructuredExtractor:
    """Parse, repair once, and validate normalized model output."""

    def extract(
        self,
        normalized: str,
        shape: ExpectedShape,
        raw: str | None = None,
    ) -> StructuredRecord:
        """
        Extract a record matching shape from normalized text.

        Args:
            normalized: Output of the response normalizer
            shape: Required fields
            raw: Original model output, kept for diagnostics

        Returns:
            StructuredRecord with trimmed values

        Raises:
            MalformedOutput: parse or validation failed after repair
        """
        raw = normalized if raw is None else raw
        text = normalized or ""
        if not text.strip():
            raise EmptyInput(raw=raw)

        # Attempt 1
        values, _ = self._parse_and_validate(text, shape)
        if values is not None:
            return StructuredRecord(values)

        # Attempt 2
        repaired, repairs = JSONRepairer(shape.keys).repair(text)
        logger.debug(f"Repairs applied: {repairs}")
        logger.debug(f"Repaired model output: {repaired!r}")

        values, problem = self._parse_and_validate(repaired, shape)
        if values is not None:
            return StructuredRecord(values)

        logger.warning(f"Could not extract structured output: {problem}")
        logger.debug(f"Raw model output: {raw!r}")

        if problem in shape.fields:
            raise MissingField(problem, raw=raw, repaired=repaired)
        raise MalformedOutput(
            f"Failed to parse model output after repairs {repairs}: {problem}",
            raw=raw,
            repaired=repaired,
        )

    def _parse_and_validate(
        self, text: str, shape: ExpectedShape
    ) -> tuple[dict[str, str] | None, str | None]:
        """
        Parse text and check every field of shape.

        Returns:
            (values, None) on success, otherwise (None, problem) where
            problem is the failing field path or the parse error
        """
        try:
            data = json.loads(text)
        except (ValueError, RecursionError) as e:
            return None, str(e)

        if not isinstance(data, dict):
            return None, f"Expected a JSON object, got: {type(data).__name__}"

        values: dict[str, str] = {}
        for path in shape.fields:
            value = self._lookup(data, path)
            if not isinstance(value, str) or not value.strip():
                return None, path
            values[path] = value.strip()

        return values, None

    @staticmethod
    def _lookup(data: dict[str, Any], path: str) -> Any:
        current: Any = data
        for part in path.split("."):
            if not isinstance(current, dict) or part not in current:
                return None
            current = current[part]
        return current


_default_extractor = StructuredExtractor()


def extract(
    normalized: str, shape: ExpectedShape, raw: str | None = None
) -> StructuredRecord:
    """Extract a record with the default extractor."""
    return _default_extractor.extract(normalized, shape, raw=raw)


def parse_model_output(raw: str, shape: ExpectedShape) -> StructuredRecord:
    """Normalize raw model output and extract a record matching shape."""
    return extract(normalize(raw), shape, raw=raw)
