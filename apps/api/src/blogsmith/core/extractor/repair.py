"""
Repair heuristics for near-JSON model output.

Each step is deterministic and idempotent: running it on its own output
changes nothing. Steps run in a fixed order and the last one only runs
when the text still is not valid JSON.

1. close_values   - insert the closing quote a value lost before the
                    next required key
2. close_object   - terminate a truncated string and any open objects,
                    dropping a dangling comma
3. rebuild        - collapse whitespace, escape interior quotes and
                    rewrite separators around the known keys; a key
                    seen twice leaves the text as is
"""

import json
import re
from collections.abc import Sequence


def _ends_with_quote(value: str) -> bool:
    """True if value ends with a double quote that is not escaped."""
    if not value.endswith('"'):
        return False
    body = value[:-1]
    backslashes = len(body) - len(body.rstrip("\\"))
    return backslashes % 2 == 0


def _scan(text: str) -> tuple[bool, int]:
    """Return (inside_string, open_object_depth) at the end of text."""
    in_string = False
    escaped = False
    depth = 0
    for char in text:
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = in_string
        elif char == '"':
            in_string = not in_string
        elif not in_string:
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
    return in_string, max(depth, 0)


def _parses(text: str) -> bool:
    try:
        json.loads(text)
    except (ValueError, RecursionError):
        return False
    return True


def _escape_value(value: str) -> str:
    # Backslashes that do not start a valid JSON escape are literal
    value = re.sub(r'\\(?!["\\/bfnrtu])', r"\\\\", value)
    return re.sub(r'(?<!\\)"', r'\\"', value)


class JSONRepairer:
    """
    Apply the bounded repair sequence for a known set of keys.

    Keys are every name appearing in the expected shape, parents
    included, in declaration order.
    """

    CLOSED_TAIL_PATTERN = re.compile(r'"\s*(?:\}\s*)+$')
    TRAILING_BRACES_PATTERN = re.compile(r"[\s}]*$")
    TRAILING_COMMA_PATTERN = re.compile(r"[\s,]*$")
    WHITESPACE_PATTERN = re.compile(r"\s+")
    VALUE_TAIL_PATTERN = re.compile(r'^(.*?)"?\s*,?\s*((?:\}\s*)*),?\s*$', re.DOTALL)

    def __init__(self, keys: Sequence[str]):
        if not keys:
            raise ValueError("JSONRepairer needs at least one key")
        self.keys = list(keys)
        alternation = "|".join(re.escape(key) for key in self.keys)
        self._separator = re.compile(rf'\s*,\s*"(?:{alternation})"\s*:')
        self._key_token = re.compile(rf'"({alternation})"\s*:\s*')
        self._openings = [
            re.compile(rf'"{re.escape(key)}"\s*:\s*"') for key in self.keys
        ]

    def repair(self, text: str) -> tuple[str, list[str]]:
        """
        Run the repair sequence.

        Args:
            text: Normalized text that failed to parse or validate

        Returns:
            Tuple of (repaired text, names of the steps that changed it)
        """
        repairs: list[str] = []
        result = text

        closed = self.close_values(result)
        if closed != result:
            repairs.append("closed_values")
            result = closed

        closed = self.close_object(result)
        if closed != result:
            repairs.append("closed_object")
            result = closed

        if not _parses(result):
            rebuilt = self.rebuild(result)
            if rebuilt != result:
                repairs.append("rebuilt")
                result = rebuilt

        return result, repairs

    def close_values(self, text: str) -> str:
        """Insert a missing closing quote before the next required key."""
        for opening in self._openings:
            match = opening.search(text)
            if not match:
                continue
            boundary = self._separator.search(text, match.end())
            if not boundary:
                continue
            value = text[match.end() : boundary.start()]
            if not _ends_with_quote(value):
                text = text[: boundary.start()] + '"' + text[boundary.start() :]
        return text

    def close_object(self, text: str) -> str:
        """Append the minimal quote and braces to terminate the object."""
        start = text.find("{")
        if start > 0:
            text = text[start:]
        text = text.rstrip()
        if not text or self.CLOSED_TAIL_PATTERN.search(text):
            return text

        # Trailing braces after an unterminated value belong to the string
        body = self.TRAILING_BRACES_PATTERN.sub("", text)
        in_string, depth = _scan(body)
        if not in_string:
            body = self.TRAILING_COMMA_PATTERN.sub("", body)
        return body + ('"' if in_string else "") + "}" * depth

    def rebuild(self, text: str) -> str:
        """
        Rewrite the text around the known keys as well-formed JSON.

        Text where a key occurs more than once (e.g. two objects) is
        returned unchanged.
        """
        original = text
        text = self.WHITESPACE_PATTERN.sub(" ", text).strip()
        matches = list(self._key_token.finditer(text))
        if not matches:
            return text

        names = [match.group(1) for match in matches]
        if len(names) != len(set(names)):
            return original

        parts = [text[: matches[0].start()].strip()]
        for index, match in enumerate(matches):
            is_last = index + 1 == len(matches)
            end = len(text) if is_last else matches[index + 1].start()
            body = text[match.end() : end]
            parts.append(f'"{match.group(1)}":')

            if not body.startswith('"'):
                # Nested object or a non-string value
                parts.append(body.strip())
                continue

            tail = self.VALUE_TAIL_PATTERN.match(body[1:])
            value = tail.group(1) if tail else body[1:]
            closers = tail.group(2).replace(" ", "") if tail else ""
            separator = "" if is_last else ","
            parts.append(f'"{_escape_value(value.strip())}"{closers}{separator}')

        return "".join(parts)
