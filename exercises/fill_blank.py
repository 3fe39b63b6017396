"""Fill-in-the-blank exercise: pick the word that completes a sentence."""

from pydantic import BaseModel

from exercises.base import Exercise
from models import (
    AnswerOutcome,
    FillBlankPayload,
    OptionState,
    TaskType,
    ValidationState,
)


class FillBlankSnapshot(BaseModel):
    template: str
    options: list[OptionState]
    completed: bool
    correct: bool


class FillBlankExercise(Exercise[FillBlankPayload]):
    """One sentence, one correct answer and its distractors, shuffled.

    In practice mode a wrong option is marked incorrect, then reverts and
    becomes selectable again after the revert delay. In test mode the first
    selection, right or wrong, locks the exercise.
    """

    task_type = TaskType.FILL_IN_BLANK

    def __init__(self, payload: FillBlankPayload, policy, scheduler=None, rng=None, config=None):
        super().__init__(payload, policy, scheduler=scheduler, rng=rng, config=config)

        # One option per distinct word, so exactly one is correct
        texts = list(dict.fromkeys([payload.correct_answer, *payload.distractors]))
        self.rng.shuffle(texts)
        self.options = [
            OptionState(text=text, is_correct_option=text == payload.correct_answer)
            for text in texts
        ]

    @property
    def template(self) -> str:
        return self.payload.template

    def filled_sentence(self, answer: str | None = None) -> str:
        """The template with the blank replaced (by the correct answer by default)."""
        word = answer if answer is not None else self.payload.correct_answer
        return self.payload.template.replace(self.config.blank_marker, word, 1)

    def present_options(self) -> list[str]:
        return [option.text for option in self.options]

    def snapshot(self) -> FillBlankSnapshot:
        result = self.result
        return FillBlankSnapshot(
            template=self.template,
            options=[option.model_copy() for option in self.options],
            completed=result.completed,
            correct=result.correct,
        )

    def select_option(self, index: int) -> AnswerOutcome:
        """Select the option at index."""
        if not self._accepting_answers():
            return self._ignore("exercise locked")
        if not 0 <= index < len(self.options):
            return self._ignore(f"option {index} out of range")

        option = self.options[index]
        if not option.selectable:
            return self._ignore(f"option {index} not selectable")

        if option.is_correct_option:
            option.validation = ValidationState.CORRECT
            self._lock(correct=True)
            return AnswerOutcome.CORRECT

        option.validation = ValidationState.INCORRECT
        option.selectable = False
        if self.policy.incorrect_is_transient:
            self._schedule_revert(("option", index), lambda: self._revert_option(option))
        else:
            self._lock(correct=False)
        return AnswerOutcome.INCORRECT

    def submit_answer(self, answer: int) -> AnswerOutcome:
        return self.select_option(answer)

    def _revert_option(self, option: OptionState) -> None:
        option.validation = ValidationState.UNCHECKED
        option.selectable = not self.is_terminal

    def _lock(self, correct: bool) -> None:
        for option in self.options:
            option.selectable = False
        self._complete(correct)
