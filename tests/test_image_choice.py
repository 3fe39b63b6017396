"""Tests for the image choice exercise."""

from exercises import ImageChoiceExercise
from models import (
    AnswerOutcome,
    ImageChoiceGroupPayload,
    ImageChoicePayload,
    ValidationState,
)


def item_index(exercise: ImageChoiceExercise, answer: str) -> int:
    return next(i for i, item in enumerate(exercise.items) if item.correct_answer == answer)


def option_index(exercise: ImageChoiceExercise, item: int, text: str) -> int:
    return next(i for i, option in enumerate(exercise.items[item].options) if option.text == text)


def answer(exercise: ImageChoiceExercise, correct: str, picked: str) -> AnswerOutcome:
    item = item_index(exercise, correct)
    return exercise.select_option(item, option_index(exercise, item, picked))


class TestConstruction:
    """Tests for item and label building."""

    def test_every_item_offers_every_label(self, image_payload, practice, scheduler, rng):
        """Each item should list all distinct labels of the group."""
        exercise = ImageChoiceExercise(image_payload, practice, scheduler, rng)
        labels = sorted(item.correct_answer for item in image_payload.items)
        for options in exercise.present_options():
            assert sorted(options) == labels

    def test_duplicate_labels_are_collapsed(self, practice):
        """Two images with the same word should share one label."""
        payload = ImageChoiceGroupPayload(
            items=(
                ImageChoicePayload(image_ref="Food/tea1.png", correct_answer="чәй"),
                ImageChoicePayload(image_ref="Food/tea2.png", correct_answer="чәй"),
                ImageChoicePayload(image_ref="Food/milk.png", correct_answer="сөт"),
            )
        )
        exercise = ImageChoiceExercise(payload, practice)
        assert all(len(options) == 2 for options in exercise.present_options())

    def test_one_correct_option_per_item(self, image_payload, practice, scheduler, rng):
        """Exactly one option per item should be marked correct."""
        exercise = ImageChoiceExercise(image_payload, practice, scheduler, rng)
        for item in exercise.items:
            correct = [o for o in item.options if o.is_correct_option]
            assert [o.text for o in correct] == [item.correct_answer]


class TestTestMode:
    """Tests for first-answer-is-final groups."""

    def test_two_right_one_wrong(self, image_payload, test_mode, scheduler, rng):
        """A group with one miss should complete as incorrect."""
        exercise = ImageChoiceExercise(image_payload, test_mode, scheduler, rng)

        assert answer(exercise, "икмәк", "икмәк") == AnswerOutcome.CORRECT
        assert answer(exercise, "сөт", "сөт") == AnswerOutcome.CORRECT
        assert not exercise.is_terminal
        assert answer(exercise, "алма", "сөт") == AnswerOutcome.INCORRECT

        result = exercise.result
        assert result.completed
        assert not result.correct
        assert exercise.answered_count == 3
        assert exercise.correct_count == 2

    def test_wrong_pick_locks_item(self, image_payload, test_mode, scheduler, rng):
        """A missed item should accept no further picks."""
        exercise = ImageChoiceExercise(image_payload, test_mode, scheduler, rng)
        answer(exercise, "алма", "сөт")
        item = item_index(exercise, "алма")

        assert exercise.items[item].answered
        assert not exercise.items[item].answered_correctly
        assert all(not option.selectable for option in exercise.items[item].options)
        assert answer(exercise, "алма", "алма") == AnswerOutcome.IGNORED

    def test_all_right_completes_as_correct(self, image_payload, test_mode, scheduler, rng):
        """Naming every image correctly should complete as correct."""
        exercise = ImageChoiceExercise(image_payload, test_mode, scheduler, rng)
        for word in ("икмәк", "сөт", "алма"):
            answer(exercise, word, word)
        assert exercise.result.correct


class TestPracticeMode:
    """Tests for retry behaviour within an item."""

    def test_wrong_pick_keeps_item_open(self, image_payload, practice, scheduler, rng):
        """A wrong pick should disable that option but leave the item open."""
        exercise = ImageChoiceExercise(image_payload, practice, scheduler, rng)
        item = item_index(exercise, "алма")
        picked = option_index(exercise, item, "сөт")

        assert exercise.select_option(item, picked) == AnswerOutcome.INCORRECT
        option = exercise.items[item].options[picked]
        assert option.validation == ValidationState.INCORRECT
        assert not option.selectable
        assert not exercise.items[item].answered
        assert scheduler.pending == 0

    def test_completes_only_when_all_correct(self, image_payload, practice, scheduler, rng):
        """A practice group should finish once every item is named."""
        exercise = ImageChoiceExercise(image_payload, practice, scheduler, rng)
        answer(exercise, "алма", "сөт")
        answer(exercise, "алма", "алма")
        answer(exercise, "икмәк", "икмәк")
        assert not exercise.is_terminal

        answer(exercise, "сөт", "сөт")
        assert exercise.result.completed
        assert exercise.result.correct


class TestInputValidation:
    """Tests for ignored input."""

    def test_out_of_range_indices(self, image_payload, practice, scheduler, rng):
        """Bad item or option indices should be ignored."""
        exercise = ImageChoiceExercise(image_payload, practice, scheduler, rng)
        assert exercise.select_option(3, 0) == AnswerOutcome.IGNORED
        assert exercise.select_option(0, 3) == AnswerOutcome.IGNORED

    def test_submit_answer_takes_a_pair(self, image_payload, test_mode, scheduler, rng):
        """submit_answer should accept (item, option)."""
        exercise = ImageChoiceExercise(image_payload, test_mode, scheduler, rng)
        item = item_index(exercise, "сөт")
        option = option_index(exercise, item, "сөт")
        assert exercise.submit_answer((item, option)) == AnswerOutcome.CORRECT

    def test_empty_group_never_completes(self, practice):
        """A group without images should stay incomplete."""
        exercise = ImageChoiceExercise(ImageChoiceGroupPayload(items=()), practice)
        assert exercise.total_items == 0
        assert not exercise.result.completed
        assert not exercise.result.correct
