"""
Blogsmith API - Main FastAPI application.

Entry point for the Blogsmith backend server.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from blogsmith import __version__
from blogsmith.config import get_settings
from blogsmith.core.extractor import MalformedOutput
from blogsmith.core.models import Blog, utc_now
from blogsmith.engine import BlogWriter
from blogsmith.media import (
    AudioTranscoder,
    RecognitionError,
    SpeechTranscriber,
    TranscodingError,
    TranscriptionService,
    UploadHandler,
    UploadRejected,
    UploadTooLarge,
)
from blogsmith.providers import GeminiAdapter, ProviderAdapter, ProviderError
from blogsmith.storage import BlogsStore, open_database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - setup and teardown."""
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    database = await open_database(settings.database_url)
    generator = GeminiAdapter(
        api_key=settings.google_generative_ai_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
        timeout=settings.generation_timeout_s,
    )

    app.state.blogs_store = BlogsStore(database)
    app.state.generator = generator
    app.state.blog_writer = BlogWriter(generator)
    app.state.upload_handler = UploadHandler(
        upload_dir=settings.upload_dir,
        max_bytes=settings.max_upload_bytes,
        allowed_type=settings.allowed_upload_type,
    )
    app.state.transcription_service = TranscriptionService(
        AudioTranscoder(settings.ffmpeg_binary, settings.audio_sample_rate_hz),
        SpeechTranscriber(
            credentials_info=settings.service_account_info()
            if settings.has_speech_credentials
            else None,
            language_code=settings.speech_language_code,
            sample_rate_hz=settings.audio_sample_rate_hz,
            model=settings.speech_model,
            use_enhanced=settings.speech_use_enhanced,
        ),
    )

    logger.info(f"{settings.app_name} {__version__} started")
    logger.info(f"Credentials configured: {settings.credentials_summary()}")

    yield

    await generator.close()
    await database.disconnect()


app = FastAPI(
    title="Blogsmith API",
    description="Turn videos and notes into blog articles",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins_list,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Dependencies
# =============================================================================


def _from_state(request: Request, name: str) -> Any:
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return value


def get_blogs_store(request: Request) -> BlogsStore:
    return _from_state(request, "blogs_store")


def get_generator(request: Request) -> ProviderAdapter:
    return _from_state(request, "generator")


def get_blog_writer(request: Request) -> BlogWriter:
    return _from_state(request, "blog_writer")


def get_upload_handler(request: Request) -> UploadHandler:
    return _from_state(request, "upload_handler")


def get_transcription_service(request: Request) -> TranscriptionService:
    return _from_state(request, "transcription_service")


def _generation_error(label: str, error: Exception) -> HTTPException:
    """500 carrying a user-facing label and the underlying reason."""
    return HTTPException(status_code=500, detail={"error": label, "details": str(error)})


# =============================================================================
# Request/Response Models
# =============================================================================


class TranscriptRequest(BaseModel):
    """Request body for /generate-blog."""
    transcript: str | None = None


class TextRequest(BaseModel):
    """Request body for /generate-text-blog."""
    text: str | None = None


class TranslateRequest(BaseModel):
    """Request body for /translate-blog."""
    title: str | None = None
    content: str | None = None
    language: str | None = None


class SaveBlogRequest(BaseModel):
    """Request body for /save-blog."""
    title: str | None = None
    content: str | None = None


class TranscriptResponse(BaseModel):
    transcript: str


class ArticleResponse(BaseModel):
    title: str
    content: str


class EnglishArticleResponse(BaseModel):
    english: ArticleResponse


class BlogResponse(BaseModel):
    """Response model for stored blogs."""
    blog_id: str
    title: str
    content: str
    created_at: str

    @classmethod
    def from_blog(cls, blog: Blog) -> "BlogResponse":
        return cls(
            blog_id=str(blog.blog_id),
            title=blog.title,
            content=blog.content,
            created_at=blog.created_at.isoformat(),
        )


class SaveBlogResponse(BaseModel):
    message: str
    blog: BlogResponse


def _is_blank(*values: str | None) -> bool:
    return any(not value or not value.strip() for value in values)


# =============================================================================
# Health & Status Endpoints
# =============================================================================


@app.get("/health")
async def health() -> dict[str, str]:
    """Basic health check."""
    return {"status": "ok", "timestamp": utc_now().isoformat(), "version": __version__}


@app.get("/api/status")
async def status(
    store: BlogsStore = Depends(get_blogs_store),
    generator: ProviderAdapter = Depends(get_generator),
) -> dict[str, Any]:
    """Detailed system status including the text generator."""
    generator_health = await generator.health_check()
    return {
        "version": __version__,
        "blogs_count": await store.count(),
        "generator": {
            "provider": generator.name,
            "status": generator_health.status.value,
            "latency_ms": generator_health.latency_ms,
            "error": generator_health.error,
        },
    }


# =============================================================================
# Transcription Endpoint
# =============================================================================


@app.post("/transcribe", response_model=TranscriptResponse)
async def transcribe(
    video: UploadFile | None = File(default=None),
    uploads: UploadHandler = Depends(get_upload_handler),
    service: TranscriptionService = Depends(get_transcription_service),
) -> TranscriptResponse:
    """
    Transcribe the audio of an uploaded MP4 video.

    Pipeline: Upload → ffmpeg (mono 16 kHz WAV) → Speech-to-Text
    """
    if video is None:
        raise HTTPException(status_code=400, detail="No video file uploaded")

    try:
        video_path = await uploads.save(video)
    except UploadTooLarge as e:
        raise HTTPException(status_code=413, detail=str(e))
    except UploadRejected as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        transcript = await service.transcribe_video(video_path)
    except (TranscodingError, RecognitionError) as e:
        logger.error(f"Transcription error: {e}")
        raise HTTPException(
            status_code=500,
            detail={"error": "Transcription failed", "details": str(e)},
        )

    return TranscriptResponse(transcript=transcript)


# =============================================================================
# Generation Endpoints
# =============================================================================


@app.post("/generate-blog", response_model=EnglishArticleResponse)
async def generate_blog(
    request: TranscriptRequest,
    writer: BlogWriter = Depends(get_blog_writer),
) -> dict[str, Any]:
    """Generate an English blog article from a transcript."""
    if _is_blank(request.transcript):
        raise HTTPException(status_code=400, detail="No transcript provided")

    try:
        record = await writer.generate_from_transcript(request.transcript)
    except (ProviderError, MalformedOutput) as e:
        logger.error(f"Error in /generate-blog: {e}")
        raise _generation_error("Error generating blog articles", e)

    return record.to_dict()


@app.post("/generate-text-blog", response_model=ArticleResponse)
async def generate_text_blog(
    request: TextRequest,
    writer: BlogWriter = Depends(get_blog_writer),
) -> dict[str, Any]:
    """Generate a blog article from free text."""
    if _is_blank(request.text):
        raise HTTPException(status_code=400, detail="No text content provided")

    try:
        record = await writer.generate_from_text(request.text)
    except (ProviderError, MalformedOutput) as e:
        logger.error(f"Error in /generate-text-blog: {e}")
        raise _generation_error("Error generating blog content", e)

    return record.to_dict()


@app.post("/translate-blog", response_model=ArticleResponse)
async def translate_blog(
    request: TranslateRequest,
    writer: BlogWriter = Depends(get_blog_writer),
) -> dict[str, Any]:
    """Translate a blog article into another language."""
    if _is_blank(request.title, request.content, request.language):
        raise HTTPException(
            status_code=400, detail="Title, content, and language are required"
        )

    try:
        record = await writer.translate(request.title, request.content, request.language)
    except (ProviderError, MalformedOutput) as e:
        logger.error(f"Translation error: {e}")
        raise _generation_error("Translation failed", e)

    return record.to_dict()


# =============================================================================
# Blogs Endpoints
# =============================================================================


@app.post("/save-blog", status_code=201, response_model=SaveBlogResponse)
async def save_blog(
    request: SaveBlogRequest,
    store: BlogsStore = Depends(get_blogs_store),
) -> SaveBlogResponse:
    """Persist a blog article."""
    if _is_blank(request.title, request.content):
        raise HTTPException(status_code=400, detail="Title and content are required.")

    try:
        blog = await store.create(request.title, request.content)
    except Exception as e:
        logger.error(f"Error saving blog: {e}")
        raise HTTPException(status_code=500, detail={"error": "Internal server error"}) from e

    logger.info(f"Saved blog {blog.blog_id}")

    return SaveBlogResponse(
        message="Blog saved successfully!",
        blog=BlogResponse.from_blog(blog),
    )


@app.get("/blogs", response_model=list[BlogResponse])
async def list_blogs(
    store: BlogsStore = Depends(get_blogs_store),
) -> list[BlogResponse]:
    """List every stored blog in insertion order."""
    try:
        blogs = await store.list()
    except Exception as e:
        logger.error(f"Error fetching blogs: {e}")
        raise HTTPException(status_code=500, detail={"error": "Failed to fetch blogs."}) from e

    return [BlogResponse.from_blog(blog) for blog in blogs]
