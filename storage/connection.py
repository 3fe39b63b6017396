"""Database connection management and schema initialization."""

import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = Path(__file__).parent.parent / "data" / "tutor.db"

SCHEMA_SQL = """
-- ==========================================================================
-- Content tables (one row per record, grouped by category)
-- ==========================================================================

-- Word pairs for matching exercises (e.g. category 'FoodMatch')
CREATE TABLE IF NOT EXISTS match_pairs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    category TEXT NOT NULL,
    source_word TEXT NOT NULL,
    target_word TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_match_pairs_category ON match_pairs(category);

-- Sentences with one blank for fill-in-blank exercises
CREATE TABLE IF NOT EXISTS fill_blank_sentences (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    category TEXT NOT NULL,
    sentence_template TEXT NOT NULL,
    correct_word TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_fill_blank_category ON fill_blank_sentences(category);

-- Image name + word records for image choice exercises
CREATE TABLE IF NOT EXISTS image_choices (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    category TEXT NOT NULL,
    image TEXT NOT NULL,
    word TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_image_choices_category ON image_choices(category);

-- ==========================================================================
-- Learner progress tables
-- ==========================================================================

CREATE TABLE IF NOT EXISTS learners (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT NOT NULL UNIQUE,
    email TEXT NOT NULL DEFAULT ''
);

-- One row per completed module; topic is the Topic enum value
CREATE TABLE IF NOT EXISTS module_progress (
    learner_id INTEGER NOT NULL,
    topic TEXT NOT NULL,
    module_number INTEGER NOT NULL,
    completed_on TEXT NOT NULL,
    PRIMARY KEY (learner_id, topic),
    FOREIGN KEY (learner_id) REFERENCES learners(id) ON DELETE CASCADE
);

-- Final test results, newest last
CREATE TABLE IF NOT EXISTS test_results (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    learner_id INTEGER NOT NULL,
    score INTEGER NOT NULL,
    test_date TEXT NOT NULL,
    FOREIGN KEY (learner_id) REFERENCES learners(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_test_results_learner ON test_results(learner_id);
"""


def get_connection(db_path: Path = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Get a database connection with appropriate settings.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        A configured sqlite3 Connection object.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_schema(db_path: Path = DEFAULT_DB_PATH) -> None:
    """Initialize the database schema if it doesn't exist.

    Args:
        db_path: Path to the SQLite database file.
    """
    # Ensure the parent directory exists
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = get_connection(db_path)
    try:
        conn.executescript(SCHEMA_SQL)
        conn.commit()
    finally:
        conn.close()
