"""Storage layer for the Tatar tutor application.

Provides repository interfaces and SQLite implementations for exercise
content (word pairs, fill-in-blank sentences, image records) and learner
progress (module completion, final test results).
"""

from pathlib import Path

from .base import ContentSource, ProgressRepository
from .sqlite import SQLiteContentSource, SQLiteProgressRepository, image_ref_for
from .connection import get_connection, init_schema, DEFAULT_DB_PATH
from .seed import ContentBundle, DEFAULT_CONTENT_PATH, seed_content

__all__ = [
    # Abstract interfaces
    "ContentSource",
    "ProgressRepository",
    # SQLite implementations
    "SQLiteContentSource",
    "SQLiteProgressRepository",
    "image_ref_for",
    # Connection utilities
    "get_connection",
    "init_schema",
    "DEFAULT_DB_PATH",
    # Content seeding
    "ContentBundle",
    "DEFAULT_CONTENT_PATH",
    "seed_content",
    # Factory functions
    "get_content_source",
    "get_progress_repo",
]


def get_content_source(db_path: Path = DEFAULT_DB_PATH) -> ContentSource:
    """Get a ContentSource instance backed by SQLite."""
    return SQLiteContentSource(db_path)


def get_progress_repo(db_path: Path = DEFAULT_DB_PATH) -> ProgressRepository:
    """Get a ProgressRepository instance backed by SQLite."""
    return SQLiteProgressRepository(db_path)
