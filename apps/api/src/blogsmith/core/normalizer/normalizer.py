"""
Response Normalizer - Strip incidental formatting from model output.

Generative models are asked for a bare JSON object but routinely wrap it
in markdown fences, prepend commentary, or leak control characters.
The normalizer removes that noise and isolates the object so the
extractor can parse it.

Flow:
1. Remove code-fence markers (with optional language tag)
2. Remove C0/C1 control characters
3. Trim surrounding whitespace
4. Slice from the first "{" to the last "}"
"""

import re


class ResponseNormalizer:
    """Isolate the JSON-looking payload in raw model output."""

    CODE_FENCE_PATTERN = re.compile(r"```[A-Za-z0-9_+-]*")
    CONTROL_CHAR_PATTERN = re.compile(r"[\u0000-\u001F\u007F-\u009F]")

    def normalize(self, raw_output: str) -> str:
        """
        Normalize raw model output.

        Never fails: text without a usable object is returned trimmed
        and left for the extractor to reject.

        Args:
            raw_output: Raw string output from the model

        Returns:
            The substring between the first "{" and the last "}" when
            both exist in that order, otherwise the cleaned text
        """
        text = self.CODE_FENCE_PATTERN.sub("", raw_output or "")
        text = self.CONTROL_CHAR_PATTERN.sub("", text)
        text = text.strip()

        start = text.find("{")
        end = text.rfind("}")
        if start != -1 and end != -1 and start < end:
            return text[start : end + 1]
        return text


_default_normalizer = ResponseNormalizer()


def normalize(raw_output: str) -> str:
    """Normalize raw model output with the default normalizer."""
    return _default_normalizer.normalize(raw_output)
