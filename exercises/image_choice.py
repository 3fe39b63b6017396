"""Image choice exercise: name the pictured word, for a group of images."""

from pydantic import BaseModel

from exercises.base import Exercise
from models import (
    AnswerOutcome,
    ImageChoiceGroupPayload,
    ImageChoiceItem,
    OptionState,
    TaskType,
    ValidationState,
)


class ImageChoiceSnapshot(BaseModel):
    items: list[ImageChoiceItem]
    correct_count: int
    answered_count: int
    total_items: int
    completed: bool
    correct: bool


class ImageChoiceExercise(Exercise[ImageChoiceGroupPayload]):
    """A group of images, each offering every label of the group.

    Labels are the distinct correct answers across all items, shuffled
    separately for each item. Wrong picks are never reverted: in test mode
    the item locks with a miss, in practice mode it stays open until the
    correct label is chosen.
    """

    task_type = TaskType.IMAGE_CHOICE

    def __init__(self, payload: ImageChoiceGroupPayload, policy, scheduler=None, rng=None, config=None):
        super().__init__(payload, policy, scheduler=scheduler, rng=rng, config=config)

        labels = list(dict.fromkeys(item.correct_answer for item in payload.items))
        records = list(payload.items)
        self.rng.shuffle(records)

        self.items: list[ImageChoiceItem] = []
        for record in records:
            item_labels = labels.copy()
            self.rng.shuffle(item_labels)
            self.items.append(
                ImageChoiceItem(
                    image_ref=record.image_ref,
                    correct_answer=record.correct_answer,
                    options=[
                        OptionState(
                            text=label,
                            is_correct_option=label == record.correct_answer,
                        )
                        for label in item_labels
                    ],
                )
            )

    @property
    def total_items(self) -> int:
        return len(self.items)

    @property
    def correct_count(self) -> int:
        return sum(1 for item in self.items if item.answered_correctly)

    @property
    def answered_count(self) -> int:
        return sum(1 for item in self.items if item.answered)

    def present_options(self) -> list[list[str]]:
        return [[option.text for option in item.options] for item in self.items]

    def snapshot(self) -> ImageChoiceSnapshot:
        result = self.result
        return ImageChoiceSnapshot(
            items=[item.model_copy(deep=True) for item in self.items],
            correct_count=self.correct_count,
            answered_count=self.answered_count,
            total_items=self.total_items,
            completed=result.completed,
            correct=result.correct,
        )

    def select_option(self, item_index: int, option_index: int) -> AnswerOutcome:
        """Pick option_index as the label for the image at item_index."""
        if not self._accepting_answers():
            return self._ignore("exercise locked")
        if not 0 <= item_index < len(self.items):
            return self._ignore(f"item {item_index} out of range")

        item = self.items[item_index]
        if item.answered:
            return self._ignore(f"item {item_index} already answered")
        if not 0 <= option_index < len(item.options):
            return self._ignore(f"option {option_index} out of range")

        option = item.options[option_index]
        if not option.selectable:
            return self._ignore(f"option {option_index} not selectable")

        if option.is_correct_option:
            option.validation = ValidationState.CORRECT
            item.answered = True
            item.answered_correctly = True
            self._lock_item(item)
            outcome = AnswerOutcome.CORRECT
        else:
            option.validation = ValidationState.INCORRECT
            option.selectable = False
            if self.policy.first_answer_is_final:
                item.answered = True
                self._lock_item(item)
            outcome = AnswerOutcome.INCORRECT

        self._check_completion()
        return outcome

    def submit_answer(self, answer: tuple[int, int]) -> AnswerOutcome:
        item_index, option_index = answer
        return self.select_option(item_index, option_index)

    @staticmethod
    def _lock_item(item: ImageChoiceItem) -> None:
        for option in item.options:
            option.selectable = False

    def _check_completion(self) -> None:
        total = self.total_items
        if total == 0:
            return
        correct_count = self.correct_count
        if correct_count == total:
            self._complete(True)
        elif self.policy.first_answer_is_final and self.answered_count == total:
            self._complete(False)
