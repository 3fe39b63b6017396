"""Exercise engine for the Tatar tutor application.

This package provides the live exercise variants, the practice/test mode
policy, and the cooperative revert scheduler used for transient feedback.

Exercise variants (one per TaskType):
- MatchingExercise: Pair source words with their translations
- FillBlankExercise: Select the word that completes a sentence
- ImageChoiceExercise: Name each pictured word in a group of images

Supporting pieces:
- ModePolicy: Practice (retry, transient feedback) vs Test (first answer final)
- RevertScheduler: Keyed, cancellable delayed callbacks polled by the caller
- ExerciseConfig: Tunables shared by all exercises
"""

import random

from exercises.base import Exercise, option_label, parse_letter_input, parse_pair_input
from exercises.config import ExerciseConfig
from exercises.fill_blank import FillBlankExercise, FillBlankSnapshot
from exercises.image_choice import ImageChoiceExercise, ImageChoiceSnapshot
from exercises.matching import MatchingExercise, MatchingSnapshot
from exercises.mode import ModePolicy
from exercises.timers import RevertScheduler
from models import Task, TaskType

# Registry of exercise classes, one per task type
EXERCISE_TYPES: dict[TaskType, type[Exercise]] = {
    TaskType.MATCH_TERMS: MatchingExercise,
    TaskType.FILL_IN_BLANK: FillBlankExercise,
    TaskType.IMAGE_CHOICE: ImageChoiceExercise,
}


def build_exercise(
    task: Task,
    policy: ModePolicy,
    scheduler: RevertScheduler | None = None,
    rng: random.Random | None = None,
    config: ExerciseConfig | None = None,
) -> Exercise:
    """Instantiate the exercise class registered for the task's type."""
    exercise_class = EXERCISE_TYPES[task.type]
    return exercise_class.from_task(
        task, policy, scheduler=scheduler, rng=rng, config=config
    )


__all__ = [
    # Utilities
    "option_label",
    "parse_letter_input",
    "parse_pair_input",
    "build_exercise",
    "EXERCISE_TYPES",
    # Exercises
    "Exercise",
    "MatchingExercise",
    "FillBlankExercise",
    "ImageChoiceExercise",
    # Snapshots
    "MatchingSnapshot",
    "FillBlankSnapshot",
    "ImageChoiceSnapshot",
    # Policy, scheduling and configuration
    "ModePolicy",
    "RevertScheduler",
    "ExerciseConfig",
]
