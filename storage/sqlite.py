"""SQLite implementations of repository interfaces."""

from datetime import date
from pathlib import Path

from loguru import logger

from .base import ContentSource, ProgressRepository
from .connection import get_connection, DEFAULT_DB_PATH
from models import (
    FillBlankPayload,
    ImageChoicePayload,
    LearnerContext,
    MatchingPair,
    Topic,
)


def image_ref_for(category: str, image: str) -> str:
    """Build the asset reference for an image record."""
    return f"{category}/{image}.png"


class SQLiteContentSource(ContentSource):
    """SQLite implementation of ContentSource."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def fetch_random_pairs(self, category: str, n: int) -> list[MatchingPair]:
        """Load up to n random word pairs."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                """SELECT source_word, target_word FROM match_pairs
                WHERE category = ? ORDER BY RANDOM() LIMIT ?""",
                (category, n),
            )
            return [
                MatchingPair(source=row["source_word"], target=row["target_word"])
                for row in cursor.fetchall()
            ]
        finally:
            conn.close()

    def fetch_random_fill_blank(
        self, category: str, distractor_count: int = 3
    ) -> FillBlankPayload | None:
        """Load one random sentence plus distractor words."""
        conn = get_connection(self.db_path)
        try:
            row = conn.execute(
                """SELECT id, sentence_template, correct_word FROM fill_blank_sentences
                WHERE category = ? ORDER BY RANDOM() LIMIT 1""",
                (category,),
            ).fetchone()
            if row is None:
                return None

            cursor = conn.execute(
                """SELECT word FROM (
                    SELECT DISTINCT correct_word AS word FROM fill_blank_sentences
                    WHERE category = ? AND correct_word != ?
                ) ORDER BY RANDOM() LIMIT ?""",
                (category, row["correct_word"], distractor_count),
            )
            distractors = [r["word"] for r in cursor.fetchall()]
            if len(distractors) < distractor_count:
                logger.debug(
                    f"{category}: only {len(distractors)} distractor(s) available"
                )

            return FillBlankPayload(
                template=row["sentence_template"],
                correct_answer=row["correct_word"],
                distractors=distractors,
            )
        finally:
            conn.close()

    def fetch_random_image_choices(
        self, category: str, n: int
    ) -> list[ImageChoicePayload]:
        """Load up to n random image records."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                """SELECT image, word FROM image_choices
                WHERE category = ? ORDER BY RANDOM() LIMIT ?""",
                (category, n),
            )
            return [
                ImageChoicePayload(
                    image_ref=image_ref_for(category, row["image"]),
                    correct_answer=row["word"],
                )
                for row in cursor.fetchall()
            ]
        finally:
            conn.close()


class SQLiteProgressRepository(ProgressRepository):
    """SQLite implementation of ProgressRepository."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def get_or_create_learner(self, username: str, email: str = "") -> LearnerContext:
        """Load a learner by username, creating the profile if missing."""
        conn = get_connection(self.db_path)
        try:
            row = conn.execute(
                "SELECT id, username, email FROM learners WHERE username = ?",
                (username,),
            ).fetchone()

            if row is None:
                cursor = conn.execute(
                    "INSERT INTO learners (username, email) VALUES (?, ?)",
                    (username, email),
                )
                conn.commit()
                logger.info(f"Created learner profile '{username}'")
                return LearnerContext(
                    user_id=cursor.lastrowid, username=username, email=email
                )

            if email and email != row["email"]:
                conn.execute(
                    "UPDATE learners SET email = ? WHERE id = ?", (email, row["id"])
                )
                conn.commit()
                return LearnerContext(user_id=row["id"], username=username, email=email)

            return LearnerContext(
                user_id=row["id"], username=row["username"], email=row["email"]
            )
        finally:
            conn.close()

    def mark_module_complete(self, user_id: int, topic: Topic) -> bool:
        """Record that the learner passed a module."""
        conn = get_connection(self.db_path)
        try:
            exists = conn.execute(
                "SELECT 1 FROM learners WHERE id = ?", (user_id,)
            ).fetchone()
            if exists is None:
                logger.warning(f"Cannot mark {topic.value} complete: no learner {user_id}")
                return False

            conn.execute(
                """INSERT OR REPLACE INTO module_progress
                (learner_id, topic, module_number, completed_on)
                VALUES (?, ?, ?, ?)""",
                (user_id, topic.value, topic.module_number, date.today().isoformat()),
            )
            conn.commit()
            return True
        finally:
            conn.close()

    def completed_modules(self, user_id: int) -> set[Topic]:
        """Get the modules the learner has completed."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT topic FROM module_progress WHERE learner_id = ?", (user_id,)
            )
            return {Topic(row["topic"]) for row in cursor.fetchall()}
        finally:
            conn.close()

    def record_test_result(self, user_id: int, score: int, test_date: date) -> None:
        """Store a final test score."""
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                """INSERT INTO test_results (learner_id, score, test_date)
                VALUES (?, ?, ?)""",
                (user_id, score, test_date.isoformat()),
            )
            conn.commit()
        finally:
            conn.close()

    def last_test_result(self, user_id: int) -> tuple[int, date] | None:
        """Get the most recent (score, date), or None if never tested."""
        conn = get_connection(self.db_path)
        try:
            row = conn.execute(
                """SELECT score, test_date FROM test_results
                WHERE learner_id = ? ORDER BY id DESC LIMIT 1""",
                (user_id,),
            ).fetchone()
            if row is None:
                return None
            return row["score"], date.fromisoformat(row["test_date"])
        finally:
            conn.close()
