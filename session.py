"""Session controller: runs an ordered sequence of tasks and scores it.

States: loading -> awaiting_answer -> (advancing) -> ... -> finished, with
aborted reachable from any non-terminal state through exit_early().
"""

import random
import uuid
from collections.abc import Callable, Sequence
from datetime import date
from typing import Protocol

from loguru import logger

from exercises import Exercise, ExerciseConfig, ModePolicy, RevertScheduler, build_exercise
from models import (
    LearnerContext,
    Mode,
    SessionPhase,
    SessionState,
    SessionSummary,
    Task,
    Topic,
)
from storage.base import ProgressRepository

ExerciseBuilder = Callable[..., Exercise]


class SessionListener(Protocol):
    """Collaborator told about a finished session (persistence, notification)."""

    def on_session_finished(self, summary: SessionSummary) -> None: ...


class SessionController:
    """Owns one SessionState and the currently active exercise.

    The controller is driven entirely by calls from the surrounding
    application: it never waits on an exercise. Invalid transitions
    (advancing a finished session, starting twice) are logged and ignored.
    """

    def __init__(
        self,
        context: LearnerContext,
        policy: ModePolicy | None = None,
        scheduler: RevertScheduler | None = None,
        listeners: Sequence[SessionListener] = (),
        exercise_builder: ExerciseBuilder = build_exercise,
        exercise_config: ExerciseConfig | None = None,
        rng: random.Random | None = None,
        topic: Topic | None = None,
    ):
        self.context = context
        self.policy = policy or ModePolicy.test()
        self.scheduler = scheduler or RevertScheduler()
        self.listeners = list(listeners)
        self.exercise_builder = exercise_builder
        self.exercise_config = exercise_config or ExerciseConfig()
        self.rng = rng
        self.topic = topic
        self.session_id = str(uuid.uuid4())
        self.state = SessionState()
        self._current_exercise: Exercise | None = None
        self._summary: SessionSummary | None = None

    @property
    def phase(self) -> SessionPhase:
        return self.state.phase

    @property
    def cursor(self) -> int:
        return self.state.cursor

    @property
    def results(self) -> dict[int, bool]:
        return dict(self.state.results)

    @property
    def current_task(self) -> Task | None:
        if self.state.phase != SessionPhase.AWAITING_ANSWER:
            return None
        return self.state.tasks[self.state.cursor]

    @property
    def current_exercise(self) -> Exercise | None:
        return self._current_exercise

    @property
    def tally(self) -> int | None:
        """Count of correct results; None until the session is finished."""
        if self._summary is None:
            return None
        return self._summary.tally

    @property
    def summary(self) -> SessionSummary | None:
        return self._summary

    @property
    def total(self) -> int:
        return len(self.state.tasks)

    def start(self, tasks: Sequence[Task]) -> None:
        """Begin the session at slot 0, or finish at once if there are no tasks."""
        if self.state.phase != SessionPhase.LOADING:
            logger.warning(f"Session {self.session_id}: start() ignored in {self.phase.value}")
            return

        self.state.tasks = list(tasks)
        self.state.cursor = 0
        logger.info(
            f"Session {self.session_id} started for user {self.context.user_id} "
            f"({self.policy.mode.value}, {len(self.state.tasks)} task(s))"
        )

        if not self.state.tasks:
            self._finish()
            return

        self._load_current()

    def advance(self) -> None:
        """Record the current slot's result and move to the next task."""
        if self.state.phase != SessionPhase.AWAITING_ANSWER:
            logger.debug(f"Session {self.session_id}: advance() ignored in {self.phase.value}")
            return

        self.state.phase = SessionPhase.ADVANCING
        exercise = self._current_exercise
        correct = exercise.result.correct if exercise is not None else False
        if exercise is not None:
            if not exercise.is_terminal:
                logger.debug(f"Slot {self.state.cursor} skipped before completion")
            exercise.close()

        self.state.results[self.state.cursor] = correct
        self.state.cursor += 1
        self._current_exercise = None

        if self.state.cursor == len(self.state.tasks):
            self._finish()
        else:
            self._load_current()

    def exit_early(self) -> None:
        """Abandon the session. No score is produced and no listener is told."""
        if self.state.is_terminal:
            logger.debug(f"Session {self.session_id}: exit_early() ignored in {self.phase.value}")
            return

        if self._current_exercise is not None:
            self._current_exercise.close()
            self._current_exercise = None
        self.state.phase = SessionPhase.ABORTED
        logger.info(
            f"Session {self.session_id} aborted at slot {self.state.cursor}/{self.total}"
        )

    def _load_current(self) -> None:
        task = self.state.tasks[self.state.cursor]
        self._current_exercise = self.exercise_builder(
            task,
            self.policy,
            scheduler=self.scheduler,
            rng=self.rng,
            config=self.exercise_config,
        )
        self.state.phase = SessionPhase.AWAITING_ANSWER

    def _finish(self) -> None:
        self.state.phase = SessionPhase.FINISHED
        results = tuple(self.state.results[i] for i in range(len(self.state.tasks)))
        self._summary = SessionSummary(
            session_id=self.session_id,
            user_id=self.context.user_id,
            mode=self.policy.mode,
            topic=self.topic,
            total=len(results),
            tally=sum(results),
            results=results,
            finished_on=date.today(),
        )
        logger.info(f"Session {self.session_id} finished: {self._summary.headline}")
        self._notify_listeners(self._summary)

    def _notify_listeners(self, summary: SessionSummary) -> None:
        # Collaborator failures never roll back the finished state
        for listener in self.listeners:
            try:
                listener.on_session_finished(summary)
            except Exception:
                logger.exception(
                    f"Session {summary.session_id}: {type(listener).__name__} failed"
                )


# ============================================================================
# Listeners
# ============================================================================


class FinalScoreRecorder:
    """Persists the final test score for the learner."""

    def __init__(self, progress: ProgressRepository):
        self.progress = progress

    def on_session_finished(self, summary: SessionSummary) -> None:
        if summary.mode != Mode.TEST:
            return
        self.progress.record_test_result(summary.user_id, summary.tally, summary.finished_on)


class ModuleCompletionRecorder:
    """Marks a module complete after a fully correct practice run."""

    def __init__(self, progress: ProgressRepository, topic: Topic):
        self.progress = progress
        self.topic = topic

    def on_session_finished(self, summary: SessionSummary) -> None:
        if summary.mode != Mode.PRACTICE or summary.total == 0:
            return
        if not summary.all_correct:
            logger.info(
                f"Module {self.topic.value} not marked complete: {summary.headline}"
            )
            return
        self.progress.mark_module_complete(summary.user_id, self.topic)
