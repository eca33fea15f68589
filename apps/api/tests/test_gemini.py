"""Tests for the Gemini adapter."""

import json

import httpx
import pytest

from blogsmith.providers import CompletionRequest, GeminiAdapter, GenerationError
from blogsmith.providers.base import HealthStatus, ProviderDownError, RateLimitError

BASE_URL = "https://gemini.test/v1beta"


def _adapter(handler, api_key: str | None = "test-key") -> GeminiAdapter:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeminiAdapter(
        api_key=api_key,
        model="gemini-test",
        base_url=BASE_URL,
        client=client,
    )


def _answer(*texts: str, finish_reason: str = "STOP") -> dict:
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": t} for t in texts]},
                "finishReason": finish_reason,
            }
        ],
        "usageMetadata": {
            "promptTokenCount": 10,
            "candidatesTokenCount": 5,
            "totalTokenCount": 15,
        },
    }


class TestGeminiComplete:
    """Test generateContent calls."""

    @pytest.mark.asyncio
    async def test_complete_success(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_answer('{"title":"A","content":"B"}'))

        adapter = _adapter(handler)
        response = await adapter.complete(CompletionRequest(prompt="Write a blog"))

        assert response.content == '{"title":"A","content":"B"}'
        assert response.provider == "gemini"
        assert response.finish_reason == "STOP"
        assert response.usage == {
            "prompt_tokens": 10,
            "completion_tokens": 5,
            "total_tokens": 15,
        }

        request = seen[0]
        assert str(request.url) == f"{BASE_URL}/models/gemini-test:generateContent"
        assert request.headers["x-goog-api-key"] == "test-key"
        body = json.loads(request.content)
        assert body["contents"][0]["parts"][0]["text"] == "Write a blog"
        assert "generationConfig" not in body

    @pytest.mark.asyncio
    async def test_parts_are_joined(self) -> None:
        adapter = _adapter(lambda request: httpx.Response(200, json=_answer('{"a":', '"b"}')))

        response = await adapter.complete(CompletionRequest(prompt="p"))

        assert response.content == '{"a":"b"}'

    @pytest.mark.asyncio
    async def test_generation_config(self) -> None:
        seen: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json=_answer("{}"))

        adapter = _adapter(handler)
        await adapter.complete(
            CompletionRequest(prompt="p", temperature=0.2, max_tokens=256, json_mode=True)
        )

        assert seen[0]["generationConfig"] == {
            "temperature": 0.2,
            "maxOutputTokens": 256,
            "responseMimeType": "application/json",
        }

    @pytest.mark.asyncio
    async def test_rate_limited(self) -> None:
        adapter = _adapter(
            lambda request: httpx.Response(429, headers={"retry-after": "7"}, json={})
        )

        with pytest.raises(RateLimitError) as exc_info:
            await adapter.complete(CompletionRequest(prompt="p"))

        assert exc_info.value.retry_after == 7

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403])
    async def test_invalid_key(self, status: int) -> None:
        adapter = _adapter(lambda request: httpx.Response(status, json={}))

        with pytest.raises(ProviderDownError, match="Invalid Gemini API key"):
            await adapter.complete(CompletionRequest(prompt="p"))

    @pytest.mark.asyncio
    async def test_server_error(self) -> None:
        adapter = _adapter(lambda request: httpx.Response(500, json={}))

        with pytest.raises(ProviderDownError, match="Gemini error: 500"):
            await adapter.complete(CompletionRequest(prompt="p"))

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        adapter = _adapter(handler)

        with pytest.raises(ProviderDownError, match="Cannot connect"):
            await adapter.complete(CompletionRequest(prompt="p"))

    @pytest.mark.asyncio
    async def test_non_json_body(self) -> None:
        adapter = _adapter(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(GenerationError):
            await adapter.complete(CompletionRequest(prompt="p"))

    @pytest.mark.asyncio
    async def test_no_candidates(self) -> None:
        adapter = _adapter(lambda request: httpx.Response(200, json={"candidates": []}))

        with pytest.raises(GenerationError, match="No candidates"):
            await adapter.complete(CompletionRequest(prompt="p"))

    @pytest.mark.asyncio
    async def test_blocked_prompt(self) -> None:
        adapter = _adapter(
            lambda request: httpx.Response(
                200, json={"promptFeedback": {"blockReason": "SAFETY"}}
            )
        )

        with pytest.raises(GenerationError, match="Prompt blocked: SAFETY"):
            await adapter.complete(CompletionRequest(prompt="p"))

    @pytest.mark.asyncio
    async def test_empty_text(self) -> None:
        adapter = _adapter(lambda request: httpx.Response(200, json=_answer("  ")))

        with pytest.raises(GenerationError, match="no text"):
            await adapter.complete(CompletionRequest(prompt="p"))

    @pytest.mark.asyncio
    async def test_missing_key(self) -> None:
        adapter = _adapter(lambda request: httpx.Response(200, json=_answer("{}")), api_key=None)

        with pytest.raises(ProviderDownError, match="not configured"):
            await adapter.complete(CompletionRequest(prompt="p"))

    @pytest.mark.asyncio
    async def test_rate_limited_with_http_date(self) -> None:
        """A Retry-After date is not a number of seconds."""
        adapter = _adapter(
            lambda request: httpx.Response(
                429, headers={"retry-after": "Wed, 21 Oct 2026 07:28:00 GMT"}, json={}
            )
        )

        with pytest.raises(RateLimitError) as exc_info:
            await adapter.complete(CompletionRequest(prompt="p"))

        assert exc_info.value.retry_after is None


class TestGeminiHealth:
    """Test health checks."""

    @pytest.mark.asyncio
    async def test_healthy(self) -> None:
        models = {"models": [{"name": "models/gemini-test"}, {"name": "models/embedding-001"}]}
        adapter = _adapter(lambda request: httpx.Response(200, json=models))

        health = await adapter.health_check()

        assert health.status == HealthStatus.HEALTHY
        assert health.models_available == ["models/gemini-test"]

    @pytest.mark.asyncio
    async def test_degraded(self) -> None:
        adapter = _adapter(lambda request: httpx.Response(503, json={}))

        health = await adapter.health_check()

        assert health.status == HealthStatus.DEGRADED

    @pytest.mark.asyncio
    async def test_unreachable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        health = await _adapter(handler).health_check()

        assert health.status == HealthStatus.UNHEALTHY

    @pytest.mark.asyncio
    async def test_missing_key(self) -> None:
        adapter = _adapter(lambda request: httpx.Response(200, json={}), api_key=None)

        health = await adapter.health_check()

        assert health.status == HealthStatus.UNHEALTHY
        assert health.error == "API key not configured"
