"""Abstract base class and shared utilities for exercises."""

import itertools
import random
import string
from abc import ABC, abstractmethod
from collections.abc import Callable, Hashable
from typing import Any, ClassVar, Generic, TypeVar

from loguru import logger
from pydantic import BaseModel

from exercises.config import ExerciseConfig
from exercises.mode import ModePolicy
from exercises.timers import RevertScheduler
from models import AnswerOutcome, ExerciseResult, Task, TaskType

P = TypeVar("P", bound=BaseModel)

_exercise_keys = itertools.count()


class Exercise(ABC, Generic[P]):
    """Abstract base class for live exercise instances.

    An exercise is the stateful instantiation of a Task. Each variant
    provides:
    - Randomized presentation (present_options / snapshot)
    - One mutation entry point per interaction, plus submit_answer() for
      generic dispatch
    - Completion and correctness tracking (result)

    To create a new exercise type:
    1. Add a TaskType member and payload model in models.py
    2. Create a class extending Exercise[YourPayload] and set task_type
    3. Implement all abstract methods
    4. Register it in EXERCISE_TYPES in exercises/__init__.py
    """

    task_type: ClassVar[TaskType]

    def __init__(
        self,
        payload: P,
        policy: ModePolicy,
        scheduler: RevertScheduler | None = None,
        rng: random.Random | None = None,
        config: ExerciseConfig | None = None,
    ):
        """Initialize with a read-only payload and the mode policy."""
        self.payload = payload
        self.policy = policy
        self.scheduler = scheduler or RevertScheduler()
        self.rng = rng or random.Random()
        self.config = config or ExerciseConfig()
        self._key = next(_exercise_keys)
        self._completed = False
        self._correct = False
        self._closed = False

    @classmethod
    def from_task(
        cls,
        task: Task,
        policy: ModePolicy,
        scheduler: RevertScheduler | None = None,
        rng: random.Random | None = None,
        config: ExerciseConfig | None = None,
    ) -> "Exercise":
        """Instantiate the exercise for a task of this class's type."""
        if task.type != cls.task_type:
            raise ValueError(
                f"{cls.__name__} cannot run a {task.type.value} task ({task.id})"
            )
        return cls(task.payload, policy, scheduler=scheduler, rng=rng, config=config)

    @abstractmethod
    def present_options(self) -> Any:
        """Return the option texts in presentation order."""
        ...

    @abstractmethod
    def snapshot(self) -> BaseModel:
        """Return a read-only copy of the current visual state."""
        ...

    @abstractmethod
    def submit_answer(self, answer: Any) -> AnswerOutcome:
        """Apply one answer in this exercise's native answer shape."""
        ...

    @property
    def is_terminal(self) -> bool:
        return self._completed

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def result(self) -> ExerciseResult:
        """Terminal summary. Incomplete exercises report correct=False."""
        return ExerciseResult(
            completed=self._completed,
            correct=self._completed and self._correct,
        )

    def close(self) -> None:
        """Abandon the exercise and drop its pending reverts."""
        if self._closed:
            return
        self._closed = True
        dropped = self.scheduler.cancel_matching(
            lambda key: isinstance(key, tuple) and key[:1] == (self._key,)
        )
        if dropped:
            logger.debug(f"{type(self).__name__} closed, cancelled {dropped} revert(s)")

    def _accepting_answers(self) -> bool:
        return not (self._completed or self._closed)

    def _complete(self, correct: bool) -> None:
        self._completed = True
        self._correct = correct
        logger.debug(
            f"{type(self).__name__} completed ({'correct' if correct else 'incorrect'})"
        )

    def _schedule_revert(self, key: Hashable, callback: Callable[[], None]) -> None:
        """Schedule callback after the configured revert delay.

        Stale callbacks arriving after close() are no-ops.
        """

        def _revert() -> None:
            if not self._closed:
                callback()

        self.scheduler.schedule((self._key, key), self.config.revert_delay_ms, _revert)

    def _ignore(self, reason: str) -> AnswerOutcome:
        logger.debug(f"{type(self).__name__}: ignored input ({reason})")
        return AnswerOutcome.IGNORED


def parse_letter_input(user_input: str, max_options: int = 4) -> int | None:
    """Parse letter (A-Z) or number input to 0-based index.

    Args:
        user_input: Raw user input string.
        max_options: Maximum number of valid options.

    Returns:
        0-based index or None if input is invalid or out of bounds.
    """
    user_input = user_input.strip().upper()
    if len(user_input) == 1 and user_input in string.ascii_uppercase:
        index = string.ascii_uppercase.index(user_input)
    elif user_input.isdigit():
        index = int(user_input) - 1
    else:
        return None

    if index < 0 or index >= max_options:
        return None

    return index


def option_label(index: int) -> str:
    """Letter label (A, B, C, ...) for a 0-based option index."""
    return chr(65 + index)


def parse_pair_input(user_input: str, max_items: int) -> tuple[int, int] | None:
    """Parse a matching answer like "2C" or "2 c" to (source, target) indices.

    The number picks from the source column (1-based), the letter from the
    target column. Returns None if either half is malformed or out of range.
    """
    cleaned = user_input.replace(" ", "").upper()
    number, letter = cleaned[:-1], cleaned[-1:]
    if not number.isdigit() or not letter.isalpha():
        return None

    source = int(number) - 1
    if source < 0 or source >= max_items:
        return None

    target = parse_letter_input(letter, max_items)
    if target is None:
        return None
    return source, target
