"""
Database Setup and Connection Management.

Supports both SQLite (local dev) and PostgreSQL (production).
Uses aiosqlite for SQLite and asyncpg for Postgres.
Queries are written with "?" placeholders for both backends.
"""

import logging
from pathlib import Path
from typing import Any

from blogsmith.config import get_settings

logger = logging.getLogger(__name__)


class SQLiteDatabase:
    """Async SQLite database manager for local development."""

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)
        self._connection: Any = None

    async def connect(self) -> None:
        """Initialize database connection and run migrations."""
        import aiosqlite

        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._connection = await aiosqlite.connect(self.db_path)
        self._connection.row_factory = aiosqlite.Row
        await self._connection.execute("PRAGMA journal_mode = WAL")

        await self._run_migrations()
        logger.info(f"Connected to SQLite database at {self.db_path}")

    async def disconnect(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    async def _run_migrations(self) -> None:
        """Run database schema migrations."""
        if not self._connection:
            raise RuntimeError("Database not connected")

        await self._connection.execute("""
            CREATE TABLE IF NOT EXISTS _migrations (
                id INTEGER PRIMARY KEY,
                name TEXT UNIQUE NOT NULL,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        migrations = [
            ("001_create_blogs", self._migration_001_create_blogs),
        ]

        for name, migration_fn in migrations:
            cursor = await self._connection.execute(
                "SELECT 1 FROM _migrations WHERE name = ?", (name,)
            )
            if await cursor.fetchone():
                continue

            await migration_fn()
            await self._connection.execute(
                "INSERT INTO _migrations (name) VALUES (?)", (name,)
            )
            await self._connection.commit()

    async def _migration_001_create_blogs(self) -> None:
        """Create the blogs table."""
        if not self._connection:
            return

        # id preserves insertion order
        await self._connection.execute("""
            CREATE TABLE IF NOT EXISTS blogs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                blog_id TEXT UNIQUE NOT NULL,
                title TEXT NOT NULL,
                content TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
        """)

    async def execute(
        self, query: str, params: tuple[Any, ...] | None = None
    ) -> Any:
        """Execute a query and commit it."""
        if not self._connection:
            raise RuntimeError("Database not connected")

        if params:
            cursor = await self._connection.execute(query, params)
        else:
            cursor = await self._connection.execute(query)
        await self._connection.commit()
        return cursor

    async def fetch_one(
        self, query: str, params: tuple[Any, ...] | None = None
    ) -> dict[str, Any] | None:
        """Fetch a single row as dict."""
        if not self._connection:
            raise RuntimeError("Database not connected")

        cursor = await self._connection.execute(query, params or ())
        row = await cursor.fetchone()

        if row:
            return dict(row)
        return None

    async def fetch_all(
        self, query: str, params: tuple[Any, ...] | None = None
    ) -> list[dict[str, Any]]:
        """Fetch all rows as list of dicts."""
        if not self._connection:
            raise RuntimeError("Database not connected")

        cursor = await self._connection.execute(query, params or ())
        rows = await cursor.fetchall()

        return [dict(row) for row in rows]


class PostgresDatabase:
    """Async PostgreSQL database manager for production."""

    def __init__(self, database_url: str):
        self.database_url = database_url
        self._pool: Any = None

    async def connect(self) -> None:
        """Initialize database connection pool and run migrations."""
        import asyncpg

        self._pool = await asyncpg.create_pool(self.database_url, min_size=2, max_size=10)
        await self._run_migrations()
        logger.info("Connected to PostgreSQL database")

    async def disconnect(self) -> None:
        """Close database connection pool."""
        if self._pool:
            await self._pool.close()
            self._pool = None

    async def _run_migrations(self) -> None:
        """Run database schema migrations."""
        if not self._pool:
            raise RuntimeError("Database not connected")

        async with self._pool.acquire() as conn:
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS _migrations (
                    id SERIAL PRIMARY KEY,
                    name TEXT UNIQUE NOT NULL,
                    applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            migrations = [
                ("001_create_blogs", self._migration_001_create_blogs),
            ]

            for name, migration_fn in migrations:
                row = await conn.fetchrow(
                    "SELECT 1 FROM _migrations WHERE name = $1", name
                )
                if row:
                    continue

                await migration_fn(conn)
                await conn.execute(
                    "INSERT INTO _migrations (name) VALUES ($1)", name
                )

    async def _migration_001_create_blogs(self, conn: Any) -> None:
        """Create the blogs table."""
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS blogs (
                id SERIAL PRIMARY KEY,
                blog_id TEXT UNIQUE NOT NULL,
                title TEXT NOT NULL,
                content TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
        """)

    async def execute(
        self, query: str, params: tuple[Any, ...] | None = None
    ) -> Any:
        """Execute a query."""
        if not self._pool:
            raise RuntimeError("Database not connected")

        pg_query = self._convert_placeholders(query)

        async with self._pool.acquire() as conn:
            if params:
                return await conn.execute(pg_query, *params)
            return await conn.execute(pg_query)

    async def fetch_one(
        self, query: str, params: tuple[Any, ...] | None = None
    ) -> dict[str, Any] | None:
        """Fetch a single row as dict."""
        if not self._pool:
            raise RuntimeError("Database not connected")

        pg_query = self._convert_placeholders(query)

        async with self._pool.acquire() as conn:
            if params:
                row = await conn.fetchrow(pg_query, *params)
            else:
                row = await conn.fetchrow(pg_query)

        if row:
            return dict(row)
        return None

    async def fetch_all(
        self, query: str, params: tuple[Any, ...] | None = None
    ) -> list[dict[str, Any]]:
        """Fetch all rows as list of dicts."""
        if not self._pool:
            raise RuntimeError("Database not connected")

        pg_query = self._convert_placeholders(query)

        async with self._pool.acquire() as conn:
            if params:
                rows = await conn.fetch(pg_query, *params)
            else:
                rows = await conn.fetch(pg_query)

        return [dict(row) for row in rows]

    @staticmethod
    def _convert_placeholders(query: str) -> str:
        """Convert ? placeholders to $1, $2, etc. for Postgres."""
        parts = query.split("?")
        result = [parts[0]]
        for index, part in enumerate(parts[1:], start=1):
            result.append(f"${index}{part}")
        return "".join(result)


# Type alias for database
Database = SQLiteDatabase | PostgresDatabase


def create_database(database_url: str) -> Database:
    """Pick the backend for database_url."""
    if database_url.startswith("postgres"):
        return PostgresDatabase(database_url)

    if database_url.startswith("sqlite"):
        db_path = database_url.split("///")[-1]
    else:
        db_path = "./blogsmith.db"
    return SQLiteDatabase(db_path)


async def open_database(database_url: str | None = None) -> Database:
    """Create and connect the database for the configured URL."""
    database = create_database(database_url or get_settings().database_url)
    await database.connect()
    return database
