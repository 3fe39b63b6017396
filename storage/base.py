"""Abstract repository interfaces for the storage layer."""

from abc import ABC, abstractmethod
from datetime import date

from models import (
    FillBlankPayload,
    ImageChoicePayload,
    LearnerContext,
    MatchingPair,
    Topic,
)


class ContentSource(ABC):
    """Abstract interface for exercise content, grouped by category name."""

    @abstractmethod
    def fetch_random_pairs(self, category: str, n: int) -> list[MatchingPair]:
        """Load up to n random word pairs.

        Args:
            category: Content category (e.g. 'FoodMatch').
            n: Maximum number of pairs.

        Returns:
            List of pairs in random order, empty if the category has none.
        """
        pass

    @abstractmethod
    def fetch_random_fill_blank(
        self, category: str, distractor_count: int = 3
    ) -> FillBlankPayload | None:
        """Load one random sentence plus distractor words.

        Distractors are the answers of other records in the same category;
        the chosen record is excluded by identity.

        Args:
            category: Content category (e.g. 'PhrasesFillInBlank').
            distractor_count: Number of distractors wanted.

        Returns:
            The payload, or None if the category has no records.
        """
        pass

    @abstractmethod
    def fetch_random_image_choices(
        self, category: str, n: int
    ) -> list[ImageChoicePayload]:
        """Load up to n random image records.

        Args:
            category: Content category (e.g. 'ImageChoiceFood').
            n: Maximum number of records.

        Returns:
            List of image records in random order.
        """
        pass


class ProgressRepository(ABC):
    """Abstract interface for learner profiles and progress."""

    @abstractmethod
    def get_or_create_learner(self, username: str, email: str = "") -> LearnerContext:
        """Load a learner by username, creating the profile if missing.

        Args:
            username: The learner's username.
            email: Email to store for a new profile (or update if non-empty).

        Returns:
            The learner context.
        """
        pass

    @abstractmethod
    def mark_module_complete(self, user_id: int, topic: Topic) -> bool:
        """Record that the learner passed a module.

        Args:
            user_id: The learner ID.
            topic: The completed module.

        Returns:
            True if the learner exists and the flag was stored.
        """
        pass

    @abstractmethod
    def completed_modules(self, user_id: int) -> set[Topic]:
        """Get the modules the learner has completed."""
        pass

    @abstractmethod
    def record_test_result(self, user_id: int, score: int, test_date: date) -> None:
        """Store a final test score.

        Args:
            user_id: The learner ID.
            score: Number of correct tasks.
            test_date: Day the test was finished.
        """
        pass

    @abstractmethod
    def last_test_result(self, user_id: int) -> tuple[int, date] | None:
        """Get the most recent (score, date), or None if never tested."""
        pass
