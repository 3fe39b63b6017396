"""Loading bundled lesson content into the content tables."""

import sqlite3
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field, field_validator

from .connection import get_connection, init_schema, DEFAULT_DB_PATH
from models import BLANK_MARKER, MatchingPair

DEFAULT_CONTENT_PATH = Path(__file__).parent.parent / "data" / "content.json"

CONTENT_TABLES = ("match_pairs", "fill_blank_sentences", "image_choices")


class FillBlankRecord(BaseModel):
    template: str
    answer: str

    @field_validator("template")
    @classmethod
    def _has_blank(cls, value: str) -> str:
        if BLANK_MARKER not in value:
            raise ValueError(f"Template has no {BLANK_MARKER!r} blank: {value!r}")
        return value


class ImageRecord(BaseModel):
    image: str  # File stem, without category or extension
    word: str


class ContentBundle(BaseModel):
    """Lesson content keyed by category."""

    match_pairs: dict[str, list[MatchingPair]] = Field(default_factory=dict)
    fill_blank: dict[str, list[FillBlankRecord]] = Field(default_factory=dict)
    image_choices: dict[str, list[ImageRecord]] = Field(default_factory=dict)

    @classmethod
    def from_file(cls, path: Path = DEFAULT_CONTENT_PATH) -> "ContentBundle":
        return cls.model_validate_json(path.read_text(encoding="utf-8"))


def has_content(conn: sqlite3.Connection) -> bool:
    for table in CONTENT_TABLES:
        if conn.execute(f"SELECT 1 FROM {table} LIMIT 1").fetchone() is not None:
            return True
    return False


def load_content(conn: sqlite3.Connection, bundle: ContentBundle) -> dict[str, int]:
    """Insert every record of the bundle. The caller commits.

    Returns:
        Number of rows inserted per table.
    """
    counts = dict.fromkeys(CONTENT_TABLES, 0)

    for category, pairs in bundle.match_pairs.items():
        conn.executemany(
            """INSERT INTO match_pairs (category, source_word, target_word)
            VALUES (?, ?, ?)""",
            [(category, pair.source, pair.target) for pair in pairs],
        )
        counts["match_pairs"] += len(pairs)

    for category, sentences in bundle.fill_blank.items():
        conn.executemany(
            """INSERT INTO fill_blank_sentences (category, sentence_template, correct_word)
            VALUES (?, ?, ?)""",
            [(category, s.template, s.answer) for s in sentences],
        )
        counts["fill_blank_sentences"] += len(sentences)

    for category, images in bundle.image_choices.items():
        conn.executemany(
            """INSERT INTO image_choices (category, image, word)
            VALUES (?, ?, ?)""",
            [(category, record.image, record.word) for record in images],
        )
        counts["image_choices"] += len(images)

    return counts


def seed_content(
    bundle: ContentBundle,
    db_path: Path = DEFAULT_DB_PATH,
    force: bool = False,
) -> dict[str, int]:
    """Fill the content tables of a database from a bundle.

    Learner progress is never touched. With force, existing content rows are
    replaced; without it, a database that already has content is an error.

    Raises:
        FileExistsError: Content is already present and force is False.
    """
    init_schema(db_path)

    conn = get_connection(db_path)
    try:
        if has_content(conn):
            if not force:
                raise FileExistsError(f"Content already seeded in {db_path}")
            for table in CONTENT_TABLES:
                conn.execute(f"DELETE FROM {table}")
            logger.info(f"Cleared existing content in {db_path}")

        counts = load_content(conn, bundle)
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()

    logger.info(f"Seeded {db_path}: {counts}")
    return counts
