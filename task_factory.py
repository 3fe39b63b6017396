"""Task pool assembly and session selection.

The factory turns content-source output into immutable Task descriptors:
one matching task per matching category, one fill-in-blank task per
fill-blank category, and a single image-choice task. A session is then a
uniformly shuffled draw from that pool.
"""

import random
import uuid

from loguru import logger

from config import TaskFactoryConfig
from models import (
    ImageChoiceGroupPayload,
    MatchTermsPayload,
    Task,
    TaskType,
    Topic,
)
from storage.base import ContentSource

# Content categories behind each learning module's practice run
TOPIC_MATCH_CATEGORIES: dict[Topic, str] = {
    Topic.ALPHABET: "AlphabetMatch",
    Topic.PHRASES: "PhrasesMatch",
    Topic.NUMBERS: "NumbersMatch",
    Topic.FAMILY: "FamilyMatch",
    Topic.FOOD: "FoodMatch",
}

# Modules with a follow-up exercise after matching
TOPIC_FILL_BLANK_CATEGORIES: dict[Topic, str] = {
    Topic.PHRASES: "PhrasesFillInBlank",
}
TOPIC_IMAGE_CATEGORIES: dict[Topic, str] = {
    Topic.FOOD: "ImageChoiceFood",
}


def new_task_id() -> str:
    return str(uuid.uuid4())


class TaskFactory:
    """Builds task pools from a content source and draws sessions from them."""

    def __init__(
        self,
        config: TaskFactoryConfig | None = None,
        rng: random.Random | None = None,
    ):
        self.config = config or TaskFactoryConfig()
        self.rng = rng or random.Random()

    def build_pool(self, source: ContentSource) -> list[Task]:
        """Assemble the full pool of candidate final-test tasks.

        Categories that yield no content are skipped. The image-choice task
        is always present, even when its category is empty.
        """
        tasks: list[Task] = []

        for category in self.config.match_categories:
            task = self._match_task(source, category)
            if task is not None:
                tasks.append(task)

        for category in self.config.fill_blank_categories:
            task = self._fill_blank_task(source, category)
            if task is not None:
                tasks.append(task)

        tasks.append(self._image_task(source, self.config.image_category))

        logger.info(f"Built task pool with {len(tasks)} task(s)")
        return tasks

    def select_session(self, pool: list[Task], size: int | None = None) -> list[Task]:
        """Draw size tasks from the pool without replacement, in random order.

        If the pool is smaller than size, the whole pool is returned permuted.
        """
        if size is None:
            size = self.config.session_size
        if size < 0:
            raise ValueError(f"Session size must be non-negative, got {size}")

        return self.rng.sample(pool, min(size, len(pool)))

    def build_module_tasks(self, topic: Topic, source: ContentSource) -> list[Task]:
        """Build the practice run for one learning module.

        Every module starts with its matching task; some modules continue
        with a fill-in-blank or image-choice task.
        """
        tasks: list[Task] = []

        match_task = self._match_task(source, TOPIC_MATCH_CATEGORIES[topic])
        if match_task is not None:
            tasks.append(match_task)

        if topic in TOPIC_FILL_BLANK_CATEGORIES:
            fill_task = self._fill_blank_task(source, TOPIC_FILL_BLANK_CATEGORIES[topic])
            if fill_task is not None:
                tasks.append(fill_task)

        if topic in TOPIC_IMAGE_CATEGORIES:
            image_task = self._image_task(source, TOPIC_IMAGE_CATEGORIES[topic])
            if image_task.payload.items:
                tasks.append(image_task)

        return tasks

    def _match_task(self, source: ContentSource, category: str) -> Task | None:
        pairs = source.fetch_random_pairs(category, self.config.pairs_per_task)
        if not pairs:
            logger.debug(f"No matching pairs in {category}, skipping")
            return None
        return Task(
            id=new_task_id(),
            topic=category,
            type=TaskType.MATCH_TERMS,
            payload=MatchTermsPayload(pairs=pairs),
        )

    def _fill_blank_task(self, source: ContentSource, category: str) -> Task | None:
        payload = source.fetch_random_fill_blank(category, self.config.distractor_count)
        if payload is None:
            logger.debug(f"No fill-in-blank record in {category}, skipping")
            return None
        return Task(
            id=new_task_id(),
            topic=category,
            type=TaskType.FILL_IN_BLANK,
            payload=payload,
        )

    def _image_task(self, source: ContentSource, category: str) -> Task:
        items = source.fetch_random_image_choices(category, self.config.image_items)
        if not items:
            logger.debug(f"No image records in {category}")
        return Task(
            id=new_task_id(),
            topic=category,
            type=TaskType.IMAGE_CHOICE,
            payload=ImageChoiceGroupPayload(items=items),
        )
