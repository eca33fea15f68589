"""Blogsmith configuration management."""

from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "Blogsmith"
    debug: bool = False

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 3000

    # Database - supports SQLite (local) or Postgres (production)
    database_url: str = "sqlite+aiosqlite:///./blogsmith.db"

    # CORS - comma-separated list of allowed origins, "*" for any
    cors_origins: str = "*"

    # Text generation (Google Generative Language API)
    google_generative_ai_key: str | None = None
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    generation_timeout_s: float = 120.0

    # Speech-to-text service account
    google_project_id: str | None = None
    google_private_key_id: str | None = None
    google_private_key: str | None = None
    google_client_email: str | None = None
    google_client_id: str | None = None
    google_auth_uri: str = "https://accounts.google.com/o/oauth2/auth"
    google_token_uri: str = "https://oauth2.googleapis.com/token"
    google_auth_provider_x509_cert_url: str = "https://www.googleapis.com/oauth2/v1/certs"
    google_client_x509_cert_url: str | None = None

    # Speech recognition
    speech_language_code: str = "en-US"
    speech_model: str = "video"
    speech_use_enhanced: bool = True
    audio_sample_rate_hz: int = 16000

    # Uploads
    upload_dir: Path = Path("./uploads")
    max_upload_bytes: int = 25 * 1024 * 1024
    allowed_upload_type: str = "video/mp4"
    ffmpeg_binary: str = "ffmpeg"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_postgres(self) -> bool:
        """Check if using Postgres (production) vs SQLite (local)."""
        return self.database_url.startswith("postgres")

    @property
    def has_speech_credentials(self) -> bool:
        return bool(self.google_private_key and self.google_client_email)

    def service_account_info(self) -> dict[str, Any]:
        """Service-account mapping for google-auth."""
        return {
            "type": "service_account",
            "project_id": self.google_project_id,
            "private_key_id": self.google_private_key_id,
            # Keys pasted into .env usually carry literal "\n"
            "private_key": (self.google_private_key or "").replace("\\n", "\n"),
            "client_email": self.google_client_email,
            "client_id": self.google_client_id,
            "auth_uri": self.google_auth_uri,
            "token_uri": self.google_token_uri,
            "auth_provider_x509_cert_url": self.google_auth_provider_x509_cert_url,
            "client_x509_cert_url": self.google_client_x509_cert_url,
        }

    def credentials_summary(self) -> dict[str, bool]:
        """Which credentials are configured, without their values."""
        return {
            "GOOGLE_PROJECT_ID": bool(self.google_project_id),
            "GOOGLE_PRIVATE_KEY": bool(self.google_private_key),
            "GOOGLE_CLIENT_EMAIL": bool(self.google_client_email),
            "GOOGLE_GENERATIVE_AI_KEY": bool(self.google_generative_ai_key),
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
