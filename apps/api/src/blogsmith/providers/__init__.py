"""Text-generation adapters."""

from blogsmith.providers.base import (
    CompletionRequest,
    CompletionResponse,
    GenerationError,
    ProviderAdapter,
    ProviderError,
    ProviderHealth,
)
from blogsmith.providers.gemini import GeminiAdapter

__all__ = [
    "CompletionRequest",
    "CompletionResponse",
    "GeminiAdapter",
    "GenerationError",
    "ProviderAdapter",
    "ProviderError",
    "ProviderHealth",
]
