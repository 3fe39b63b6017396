"""Tests for the term matching exercise."""

import random

import pytest

from exercises import ExerciseConfig, MatchingExercise
from models import AnswerOutcome, MatchingPair, MatchTermsPayload, Task, TaskType


def source_index(exercise: MatchingExercise, text: str) -> int:
    return next(i for i, item in enumerate(exercise.source_items) if item.text == text)


def target_index(exercise: MatchingExercise, text: str) -> int:
    return next(i for i, item in enumerate(exercise.target_items) if item.text == text)


def match(exercise: MatchingExercise, source: str, target: str) -> AnswerOutcome:
    return exercise.submit_answer(
        (source_index(exercise, source), target_index(exercise, target))
    )


@pytest.fixture
def five_pairs() -> MatchTermsPayload:
    return MatchTermsPayload(
        pairs=[
            MatchingPair(source="a", target="1"),
            MatchingPair(source="b", target="2"),
            MatchingPair(source="c", target="3"),
            MatchingPair(source="d", target="4"),
            MatchingPair(source="e", target="5"),
        ]
    )


class TestConstruction:
    """Tests for column building."""

    def test_columns_hold_every_pair(self, match_payload, practice, scheduler, rng):
        """Both columns should contain each pair exactly once."""
        exercise = MatchingExercise(match_payload, practice, scheduler, rng)
        sources, targets = exercise.present_options()

        assert sorted(sources) == sorted(p.source for p in match_payload.pairs)
        assert sorted(targets) == sorted(p.target for p in match_payload.pairs)

    def test_pair_members_share_an_id(self, match_payload, practice, scheduler, rng):
        """Source and target items of one pair should carry the same id."""
        exercise = MatchingExercise(match_payload, practice, scheduler, rng)
        for pair in match_payload.pairs:
            source = exercise.source_items[source_index(exercise, pair.source)]
            target = exercise.target_items[target_index(exercise, pair.target)]
            assert source.id == target.id

    def test_truncates_to_max_pairs(self, practice, scheduler, rng):
        """At most max_pairs pairs should be used."""
        payload = MatchTermsPayload(
            pairs=[MatchingPair(source=f"s{i}", target=f"t{i}") for i in range(9)]
        )
        exercise = MatchingExercise(payload, practice, scheduler, rng)
        assert exercise.total_pairs == 6

        small = MatchingExercise(
            payload, practice, scheduler, rng, config=ExerciseConfig(max_pairs=3)
        )
        assert small.total_pairs == 3

    def test_from_task_rejects_other_task_types(self, fill_payload, practice):
        """from_task should refuse a task of a different type."""
        task = Task(id="t1", topic="x", type=TaskType.FILL_IN_BLANK, payload=fill_payload)
        with pytest.raises(ValueError):
            MatchingExercise.from_task(task, practice)

    def test_same_seed_gives_same_layout(self, match_payload, practice):
        """Seeded generators should produce identical presentations."""
        first = MatchingExercise(match_payload, practice, rng=random.Random(7))
        second = MatchingExercise(match_payload, practice, rng=random.Random(7))
        assert first.present_options() == second.present_options()


class TestMatchingScenario:
    """Five pairs: one correct match then one mismatch."""

    def test_correct_then_mismatch(self, five_pairs, practice, scheduler, rng):
        """A correct pair matches, a wrong pair flashes without scoring."""
        exercise = MatchingExercise(five_pairs, practice, scheduler, rng)

        assert match(exercise, "a", "1") == AnswerOutcome.CORRECT
        assert exercise.source_items[source_index(exercise, "a")].matched
        assert exercise.target_items[target_index(exercise, "1")].matched
        assert exercise.correctly_matched == 1

        assert match(exercise, "b", "3") == AnswerOutcome.INCORRECT
        assert exercise.source_items[source_index(exercise, "b")].invalid_flash
        assert exercise.target_items[target_index(exercise, "3")].invalid_flash
        assert exercise.correctly_matched == 1
        assert not exercise.is_terminal

    def test_first_selection_is_pending(self, five_pairs, practice, scheduler, rng):
        """Selecting only one side should wait for the other."""
        exercise = MatchingExercise(five_pairs, practice, scheduler, rng)
        assert exercise.select_source_item(0) == AnswerOutcome.PENDING
        assert exercise.snapshot().selected_source == 0

    def test_selections_clear_after_evaluation(self, five_pairs, practice, scheduler, rng):
        """Both selections should reset once a pair is evaluated."""
        exercise = MatchingExercise(five_pairs, practice, scheduler, rng)
        match(exercise, "b", "3")
        snapshot = exercise.snapshot()
        assert snapshot.selected_source is None
        assert snapshot.selected_target is None

    def test_matched_items_cannot_be_selected(self, five_pairs, practice, scheduler, rng):
        """A matched item should ignore further selection."""
        exercise = MatchingExercise(five_pairs, practice, scheduler, rng)
        match(exercise, "a", "1")
        assert exercise.select_source_item(source_index(exercise, "a")) == AnswerOutcome.IGNORED

    def test_out_of_range_index_is_ignored(self, five_pairs, practice, scheduler, rng):
        """Indices outside a column should be ignored."""
        exercise = MatchingExercise(five_pairs, practice, scheduler, rng)
        assert exercise.select_target_item(5) == AnswerOutcome.IGNORED
        assert exercise.select_source_item(-1) == AnswerOutcome.IGNORED


class TestPracticeMode:
    """Tests for transient mismatch feedback."""

    def test_flash_reverts_after_delay(self, five_pairs, practice, scheduler, clock, rng):
        """A mismatch flash should clear once the delay elapses."""
        exercise = MatchingExercise(five_pairs, practice, scheduler, rng)
        match(exercise, "b", "3")

        clock.advance_ms(500)
        scheduler.run_due()
        assert exercise.source_items[source_index(exercise, "b")].invalid_flash

        clock.advance_ms(500)
        assert scheduler.run_due() == 2
        assert not exercise.source_items[source_index(exercise, "b")].invalid_flash
        assert not exercise.target_items[target_index(exercise, "3")].invalid_flash

    def test_revert_is_noop_after_close(self, five_pairs, practice, scheduler, clock, rng):
        """Closing the exercise should drop its pending reverts."""
        exercise = MatchingExercise(five_pairs, practice, scheduler, rng)
        match(exercise, "b", "3")
        exercise.close()

        clock.advance_ms(1000)
        assert scheduler.run_due() == 0
        assert exercise.source_items[source_index(exercise, "b")].invalid_flash

    def test_mismatches_never_fail_the_exercise(self, five_pairs, practice, scheduler, rng):
        """Practice mode completes only when every pair is matched."""
        exercise = MatchingExercise(five_pairs, practice, scheduler, rng)
        for _ in range(10):
            match(exercise, "a", "2")
        assert exercise.incorrectly_matched == 0
        assert not exercise.is_terminal

        for source, target in [("a", "1"), ("b", "2"), ("c", "3"), ("d", "4"), ("e", "5")]:
            match(exercise, source, target)
        assert exercise.result.completed
        assert exercise.result.correct


class TestTestMode:
    """Tests for first-answer-is-final matching."""

    def test_mismatch_counts_as_miss(self, five_pairs, test_mode, scheduler, rng):
        """A mismatch should increment incorrectly_matched and schedule nothing."""
        exercise = MatchingExercise(five_pairs, test_mode, scheduler, rng)
        match(exercise, "a", "2")
        assert exercise.incorrectly_matched == 1
        assert scheduler.pending == 0

    def test_fails_when_attempts_reach_total(self, five_pairs, test_mode, scheduler, rng):
        """Correct plus incorrect reaching the total should end as incorrect."""
        exercise = MatchingExercise(five_pairs, test_mode, scheduler, rng)
        match(exercise, "a", "1")
        match(exercise, "b", "2")
        match(exercise, "c", "3")
        match(exercise, "d", "5")
        assert not exercise.is_terminal

        match(exercise, "e", "4")
        assert exercise.result.completed
        assert not exercise.result.correct

    def test_all_correct_completes_as_correct(self, five_pairs, test_mode, scheduler, rng):
        """Matching every pair first time should end as correct."""
        exercise = MatchingExercise(five_pairs, test_mode, scheduler, rng)
        for source, target in [("a", "1"), ("b", "2"), ("c", "3"), ("d", "4"), ("e", "5")]:
            match(exercise, source, target)
        assert exercise.result.correct

    def test_locked_exercise_ignores_input(self, five_pairs, test_mode, scheduler, rng):
        """No selection should be accepted after completion."""
        exercise = MatchingExercise(five_pairs, test_mode, scheduler, rng)
        for source, target in [("a", "1"), ("b", "2"), ("c", "3"), ("d", "4"), ("e", "5")]:
            match(exercise, source, target)
        assert exercise.select_source_item(0) == AnswerOutcome.IGNORED


class TestEmptyPayload:
    """Tests for a matching task without pairs."""

    def test_never_completes(self, practice, scheduler):
        """An empty matching exercise should stay incomplete and incorrect."""
        exercise = MatchingExercise(MatchTermsPayload(pairs=()), practice, scheduler)
        assert exercise.total_pairs == 0
        assert not exercise.is_terminal
        assert not exercise.result.correct
