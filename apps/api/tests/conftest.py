"""Shared test doubles for external collaborators."""

from pathlib import Path
from typing import Callable

import pytest

from blogsmith.core.models import Blog
from blogsmith.media.speech import SpeechTranscriber
from blogsmith.media.transcoder import AudioTranscoder
from blogsmith.providers.base import (
    CompletionRequest,
    CompletionResponse,
    HealthStatus,
    ProviderAdapter,
    ProviderHealth,
)


class FakeGenerator(ProviderAdapter):
    """Text generator returning canned outputs in order."""

    def __init__(self, outputs: list[str] | None = None, error: Exception | None = None):
        self.outputs = list(outputs or [])
        self.error = error
        self.requests: list[CompletionRequest] = []

    @property
    def name(self) -> str:
        return "fake"

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        self.requests.append(request)
        if self.error:
            raise self.error
        return CompletionResponse(
            content=self.outputs.pop(0),
            model="fake-model",
            provider=self.name,
        )

    async def health_check(self) -> ProviderHealth:
        return ProviderHealth(status=HealthStatus.HEALTHY, latency_ms=1)


class FakeTranscoder(AudioTranscoder):
    """Writes placeholder audio instead of running ffmpeg."""

    def __init__(self, error: Exception | None = None):
        super().__init__()
        self.error = error
        self.calls: list[tuple[Path, Path]] = []

    async def extract_audio(self, video_path, audio_path) -> Path:
        self.calls.append((Path(video_path), Path(audio_path)))
        if self.error:
            raise self.error
        Path(audio_path).write_bytes(b"RIFF-fake-wav")
        return Path(audio_path)


class FakeTranscriber(SpeechTranscriber):
    """Returns a fixed transcript."""

    def __init__(self, transcript: str = "hello world", error: Exception | None = None):
        super().__init__()
        self.transcript = transcript
        self.error = error
        self.audio: list[bytes] = []

    async def transcribe(self, audio_bytes: bytes) -> str:
        self.audio.append(audio_bytes)
        if self.error:
            raise self.error
        return self.transcript


class FakeBlogsStore:
    """In-memory stand-in for BlogsStore."""

    def __init__(self, error: Exception | None = None) -> None:
        self.blogs: list[Blog] = []
        self.error = error

    async def create(self, title: str, content: str) -> Blog:
        if self.error:
            raise self.error
        blog = Blog(title=title, content=content)
        self.blogs.append(blog)
        return blog

    async def list(self) -> list[Blog]:
        if self.error:
            raise self.error
        return list(self.blogs)

    async def count(self) -> int:
        return len(self.blogs)


@pytest.fixture
def make_generator() -> Callable[..., FakeGenerator]:
    return FakeGenerator


@pytest.fixture
def make_transcoder() -> Callable[..., FakeTranscoder]:
    return FakeTranscoder


@pytest.fixture
def make_transcriber() -> Callable[..., FakeTranscriber]:
    return FakeTranscriber


@pytest.fixture
def make_blogs_store() -> Callable[..., FakeBlogsStore]:
    return FakeBlogsStore


@pytest.fixture
def blogs_store() -> FakeBlogsStore:
    return FakeBlogsStore()
