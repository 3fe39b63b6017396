"""Term matching exercise: pair source words with their translations."""

from pydantic import BaseModel

from exercises.base import Exercise
from models import AnswerOutcome, MatchItem, MatchTermsPayload, TaskType


class MatchingSnapshot(BaseModel):
    source_items: list[MatchItem]
    target_items: list[MatchItem]
    selected_source: int | None
    selected_target: int | None
    correctly_matched: int
    incorrectly_matched: int
    total_pairs: int
    completed: bool
    correct: bool


class MatchingExercise(Exercise[MatchTermsPayload]):
    """Two columns of items; the learner picks one from each to form a pair.

    Pair order is shuffled and truncated to config.max_pairs, then the target
    column is shuffled again on its own so that row position never gives the
    pairing away. Items of the same pair share an id.
    """

    task_type = TaskType.MATCH_TERMS

    def __init__(self, payload: MatchTermsPayload, policy, scheduler=None, rng=None, config=None):
        super().__init__(payload, policy, scheduler=scheduler, rng=rng, config=config)

        pairs = list(payload.pairs)
        self.rng.shuffle(pairs)
        pairs = pairs[: self.config.max_pairs]

        self.source_items = [
            MatchItem(id=pair_id, text=pair.source) for pair_id, pair in enumerate(pairs)
        ]
        target_items = [
            MatchItem(id=pair_id, text=pair.target) for pair_id, pair in enumerate(pairs)
        ]
        self.rng.shuffle(target_items)
        self.target_items = target_items

        self.correctly_matched = 0
        self.incorrectly_matched = 0
        self._selected_source: int | None = None
        self._selected_target: int | None = None

    @property
    def total_pairs(self) -> int:
        return len(self.source_items)

    def present_options(self) -> tuple[list[str], list[str]]:
        return (
            [item.text for item in self.source_items],
            [item.text for item in self.target_items],
        )

    def snapshot(self) -> MatchingSnapshot:
        result = self.result
        return MatchingSnapshot(
            source_items=[item.model_copy() for item in self.source_items],
            target_items=[item.model_copy() for item in self.target_items],
            selected_source=self._selected_source,
            selected_target=self._selected_target,
            correctly_matched=self.correctly_matched,
            incorrectly_matched=self.incorrectly_matched,
            total_pairs=self.total_pairs,
            completed=result.completed,
            correct=result.correct,
        )

    def select_source_item(self, index: int) -> AnswerOutcome:
        """Select the source-column item at index."""
        if not self._can_select(self.source_items, index):
            return self._ignore(f"source item {index} unavailable")
        self._selected_source = index
        return self._evaluate_if_ready()

    def select_target_item(self, index: int) -> AnswerOutcome:
        """Select the target-column item at index."""
        if not self._can_select(self.target_items, index):
            return self._ignore(f"target item {index} unavailable")
        self._selected_target = index
        return self._evaluate_if_ready()

    def submit_answer(self, answer: tuple[int, int]) -> AnswerOutcome:
        """Select a (source index, target index) pair in one call."""
        source_index, target_index = answer
        outcome = self.select_source_item(source_index)
        if outcome == AnswerOutcome.IGNORED:
            return outcome
        return self.select_target_item(target_index)

    def _can_select(self, column: list[MatchItem], index: int) -> bool:
        if not self._accepting_answers():
            return False
        if not 0 <= index < len(column):
            return False
        return not column[index].matched

    def _evaluate_if_ready(self) -> AnswerOutcome:
        if self._selected_source is None or self._selected_target is None:
            return AnswerOutcome.PENDING

        source = self.source_items[self._selected_source]
        target = self.target_items[self._selected_target]

        if source.id == target.id:
            source.matched = True
            target.matched = True
            self.correctly_matched += 1
            outcome = AnswerOutcome.CORRECT
        else:
            source.invalid_flash = True
            target.invalid_flash = True
            if self.policy.incorrect_is_transient:
                self._schedule_revert(("source", source.id), lambda: self._clear_flash(source))
                self._schedule_revert(("target", target.id), lambda: self._clear_flash(target))
            else:
                # The flash stays as a permanent miss marker
                self.incorrectly_matched += 1
            outcome = AnswerOutcome.INCORRECT

        self._selected_source = None
        self._selected_target = None
        self._check_completion()
        return outcome

    @staticmethod
    def _clear_flash(item: MatchItem) -> None:
        item.invalid_flash = False

    def _check_completion(self) -> None:
        total = self.total_pairs
        if self.correctly_matched == total:
            self._complete(True)
        elif (
            self.policy.first_answer_is_final
            and self.correctly_matched + self.incorrectly_matched == total
        ):
            self._complete(False)
