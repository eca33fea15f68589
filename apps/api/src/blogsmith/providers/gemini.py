"""Gemini provider adapter for the Google Generative Language API."""

import logging
import time
from datetime import datetime, timezone
from typing import Any

import httpx

from blogsmith.providers.base import (
    CompletionRequest,
    CompletionResponse,
    GenerationError,
    HealthStatus,
    ProviderAdapter,
    ProviderDownError,
    ProviderHealth,
    RateLimitError,
)

logger = logging.getLogger(__name__)


class GeminiAdapter(ProviderAdapter):
    """
    Adapter for the Gemini REST API (generateContent).

    Requires an API key (GOOGLE_GENERATIVE_AI_KEY).
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gemini-1.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 120.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def name(self) -> str:
        return "gemini"

    def _get_headers(self) -> dict[str, str]:
        """Get request headers with auth."""
        if not self.api_key:
            raise ProviderDownError(self.name, "Gemini API key not configured")

        return {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }

    @staticmethod
    def _retry_after(value: str | None) -> int | None:
        """Seconds from a Retry-After header, None for HTTP-dates or junk."""
        try:
            return int(value) if value else None
        except ValueError:
            return None

    @staticmethod
    def _model_path(model: str) -> str:
        return model if model.startswith("models/") else f"models/{model}"

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Send completion request to Gemini."""
        start_time = time.monotonic()
        model = request.model or self.model

        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": request.prompt}]}],
        }

        generation_config: dict[str, Any] = {}
        if request.temperature is not None:
            generation_config["temperature"] = request.temperature
        if request.max_tokens is not None:
            generation_config["maxOutputTokens"] = request.max_tokens
        if request.json_mode:
            generation_config["responseMimeType"] = "application/json"
        if generation_config:
            payload["generationConfig"] = generation_config

        try:
            response = await self._client.post(
                f"{self.base_url}/{self._model_path(model)}:generateContent",
                headers=self._get_headers(),
                json=payload,
            )

            latency_ms = int((time.monotonic() - start_time) * 1000)

            if response.status_code == 429:
                raise RateLimitError(
                    self.name,
                    retry_after=self._retry_after(response.headers.get("retry-after")),
                )

            response.raise_for_status()
            data = response.json()

        except httpx.ConnectError:
            raise ProviderDownError(self.name, "Cannot connect to Gemini API")
        except httpx.TimeoutException:
            raise ProviderDownError(self.name, "Gemini API timed out")
        except httpx.HTTPStatusError as e:
            if e.response.status_code in (401, 403):
                raise ProviderDownError(self.name, "Invalid Gemini API key")
            raise ProviderDownError(self.name, f"Gemini error: {e.response.status_code}")
        except ValueError:
            raise GenerationError(self.name, "Gemini returned a non-JSON response")

        content, finish_reason = self._extract_text(data)
        logger.debug(f"Gemini {model} answered in {latency_ms} ms ({finish_reason})")

        usage = data.get("usageMetadata") or {}
        return CompletionResponse(
            content=content,
            model=data.get("modelVersion", model),
            provider=self.name,
            latency_ms=latency_ms,
            usage={
                "prompt_tokens": usage.get("promptTokenCount", 0),
                "completion_tokens": usage.get("candidatesTokenCount", 0),
                "total_tokens": usage.get("totalTokenCount", 0),
            }
            if usage
            else None,
            finish_reason=finish_reason,
        )

    def _extract_text(self, data: Any) -> tuple[str, str | None]:
        """Pull the candidate text out of a generateContent response."""
        if not isinstance(data, dict):
            raise GenerationError(self.name)

        candidates = data.get("candidates") or []
        if not candidates:
            block_reason = (data.get("promptFeedback") or {}).get("blockReason")
            if block_reason:
                raise GenerationError(self.name, f"Prompt blocked: {block_reason}")
            raise GenerationError(self.name, "No candidates in Gemini response")

        candidate = candidates[0] if isinstance(candidates[0], dict) else {}
        parts = (candidate.get("content") or {}).get("parts") or []
        texts = [
            str(part.get("text") or "")
            for part in parts
            if isinstance(part, dict)
        ]
        content = "".join(texts)
        if not content.strip():
            raise GenerationError(self.name, "Gemini response has no text")

        return content, candidate.get("finishReason")

    async def health_check(self) -> ProviderHealth:
        """Check Gemini API availability."""
        now = datetime.now(timezone.utc)
        if not self.api_key:
            return ProviderHealth(
                status=HealthStatus.UNHEALTHY,
                last_check=now,
                error="API key not configured",
            )

        start_time = time.monotonic()

        try:
            response = await self._client.get(
                f"{self.base_url}/models",
                headers=self._get_headers(),
            )
            latency_ms = int((time.monotonic() - start_time) * 1000)

            if response.status_code == 200:
                data = response.json()
                models = [m.get("name", "") for m in data.get("models", [])]
                gemini_models = [m for m in models if "gemini" in m.lower()]

                return ProviderHealth(
                    status=HealthStatus.HEALTHY,
                    latency_ms=latency_ms,
                    last_check=now,
                    models_available=gemini_models[:10],
                )

            return ProviderHealth(
                status=HealthStatus.DEGRADED,
                latency_ms=latency_ms,
                last_check=now,
                error=f"Unexpected status: {response.status_code}",
            )

        except httpx.ConnectError:
            return ProviderHealth(
                status=HealthStatus.UNHEALTHY,
                last_check=now,
                error="Cannot connect to Gemini API",
            )
        except httpx.HTTPError as e:
            return ProviderHealth(
                status=HealthStatus.UNHEALTHY,
                last_check=now,
                error=str(e),
            )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
