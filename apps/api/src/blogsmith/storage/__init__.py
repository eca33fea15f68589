"""Blogsmith Storage Layer - Database and persistence."""

from blogsmith.storage.blogs import BlogsStore
from blogsmith.storage.database import Database, create_database, open_database

__all__ = ["BlogsStore", "Database", "create_database", "open_database"]
