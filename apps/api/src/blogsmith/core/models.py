"""Core domain models for Blogsmith.

These models define what crosses the HTTP and storage boundaries:
- Articles produced or translated by the text generator
- Blogs persisted by the store
"""

from datetime import datetime, timezone
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator


def utc_now() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(timezone.utc)


class Article(BaseModel):
    """A blog article: title plus body text."""

    title: str
    content: str

    @field_validator("title", "content")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Articles never carry blank fields."""
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class Blog(Article):
    """A stored blog article."""

    blog_id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=utc_now)
