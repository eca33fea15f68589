"""
Blogs Store - Persistence layer for saved blog articles.

Blogs are append-only: they can be created and listed in insertion
order, nothing else.
"""

from datetime import datetime
from uuid import UUID

from blogsmith.core.models import Blog
from blogsmith.storage.database import Database


class BlogsStore:
    """Create and list stored blogs."""

    def __init__(self, database: Database):
        self.db = database

    async def create(self, title: str, content: str) -> Blog:
        """
        Persist a new blog.

        Args:
            title: Blog title
            content: Blog body

        Returns:
            The stored blog with its id and creation time

        Raises:
            pydantic.ValidationError: title or content is blank
        """
        blog = Blog(title=title, content=content)

        await self.db.execute(
            """
            INSERT INTO blogs (blog_id, title, content, created_at)
            VALUES (?, ?, ?, ?)
            """,
            (
                str(blog.blog_id),
                blog.title,
                blog.content,
                blog.created_at.isoformat(),
            ),
        )

        return blog

    async def list(self) -> list[Blog]:
        """Return every stored blog, oldest first."""
        rows = await self.db.fetch_all(
            "SELECT blog_id, title, content, created_at FROM blogs ORDER BY id ASC"
        )

        return [
            Blog(
                blog_id=UUID(row["blog_id"]),
                title=row["title"],
                content=row["content"],
                created_at=datetime.fromisoformat(row["created_at"]),
            )
            for row in rows
        ]

    async def count(self) -> int:
        """Count stored blogs."""
        row = await self.db.fetch_one("SELECT COUNT(*) AS count FROM blogs")
        return row["count"] if row else 0
