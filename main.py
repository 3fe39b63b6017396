import argparse
import random
import signal
import sys
from collections.abc import Callable
from pathlib import Path

from loguru import logger
from rich.console import Console

from config import AppConfig
from exercises import (
    Exercise,
    FillBlankExercise,
    ImageChoiceExercise,
    MatchingExercise,
    ModePolicy,
    RevertScheduler,
    parse_letter_input,
    parse_pair_input,
)
from models import AnswerOutcome, LearnerContext, Mode, SessionPhase, SessionSummary, Topic
from notifications import ConsoleNotifier, EmailNotifier
from session import (
    FinalScoreRecorder,
    ModuleCompletionRecorder,
    SessionController,
    SessionListener,
)
from storage import (
    DEFAULT_CONTENT_PATH,
    ContentBundle,
    get_content_source,
    get_progress_repo,
    init_schema,
    seed_content,
)
from task_factory import TaskFactory
from ui import DEFAULT_THEME, NEXT, QUIT, TutorUI

DEFAULT_USERNAME = "learner"


def configure_logging(verbose: bool = False) -> None:
    """Route log records to stderr; DEBUG with --verbose, WARNING otherwise."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{line} - {message}",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(description="Tatar Tutor")
    parser.add_argument("--db", type=Path, default=None, help="SQLite database path")
    parser.add_argument("--config", type=Path, default=None, help="JSON config file")
    parser.add_argument(
        "--user",
        "-u",
        default=DEFAULT_USERNAME,
        help=f"Learner profile name (default: {DEFAULT_USERNAME})",
    )
    parser.add_argument("--email", default="", help="Email address for test results")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Show debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    practice_parser = subparsers.add_parser("practice", help="Practice one module")
    practice_parser.add_argument(
        "topic",
        choices=[topic.value for topic in Topic],
        help="Module to practice",
    )
    practice_parser.add_argument(
        "--seed", type=int, default=None, help="Random seed for reproducibility"
    )

    test_parser = subparsers.add_parser("test", help="Take the final test")
    test_parser.add_argument(
        "--seed", type=int, default=None, help="Random seed for reproducibility"
    )

    seed_parser = subparsers.add_parser("seed", help="Load lesson content into the database")
    seed_parser.add_argument(
        "--force", action="store_true", help="Replace content that is already seeded"
    )
    seed_parser.add_argument(
        "--content",
        type=Path,
        default=DEFAULT_CONTENT_PATH,
        help="Content JSON file (default: data/content.json)",
    )

    subparsers.add_parser("progress", help="Show module progress and last test score")

    return parser


def load_config(args) -> AppConfig:
    """Load the config file, then apply command-line overrides."""
    config = AppConfig.load(args.config)
    if args.db is not None:
        config = config.model_copy(update={"db_path": args.db})
    return config


def load_learner(args, config: AppConfig) -> LearnerContext:
    init_schema(config.db_path)
    progress = get_progress_repo(config.db_path)
    return progress.get_or_create_learner(args.user, args.email)


# ============================================================================
# Exercise runners: one interaction loop per exercise type
# ============================================================================


def run_matching(
    ui: TutorUI, exercise: MatchingExercise, scheduler: RevertScheduler, number: int, total: int
) -> str:
    while not exercise.is_terminal:
        scheduler.run_due()
        answer = ui.show_matching(exercise.snapshot(), number, total)
        if answer in (QUIT, NEXT):
            return answer

        pair = parse_pair_input(answer, exercise.total_pairs)
        if pair is None:
            ui.show_invalid_input("Enter a number and a letter, like 1A")
            continue

        outcome = exercise.submit_answer(pair)
        if outcome == AnswerOutcome.IGNORED:
            ui.show_invalid_input("That word is already matched")
        elif outcome == AnswerOutcome.INCORRECT:
            ui.show_feedback(False)
    return ""


def run_fill_blank(
    ui: TutorUI, exercise: FillBlankExercise, scheduler: RevertScheduler, number: int, total: int
) -> str:
    while not exercise.is_terminal:
        scheduler.run_due()
        answer = ui.show_fill_blank(exercise.snapshot(), number, total)
        if answer in (QUIT, NEXT):
            return answer

        options = exercise.present_options()
        index = parse_letter_input(answer, len(options))
        if index is None:
            ui.show_invalid_input(f"Enter a letter A-{chr(64 + len(options))}")
            continue

        outcome = exercise.select_option(index)
        if outcome == AnswerOutcome.IGNORED:
            ui.show_invalid_input("That option is not available right now")
        elif outcome == AnswerOutcome.INCORRECT:
            ui.show_feedback(False, user_answer=options[index])

    if exercise.policy.mode == Mode.PRACTICE:
        ui.show_feedback(True, correct_answer=exercise.filled_sentence())
    return ""


def run_image_choice(
    ui: TutorUI, exercise: ImageChoiceExercise, scheduler: RevertScheduler, number: int, total: int
) -> str:
    if exercise.total_items == 0:
        ui.show_info("No images available for this task.")
        return NEXT

    while not exercise.is_terminal:
        scheduler.run_due()
        snapshot = exercise.snapshot()
        item_index = next(i for i, item in enumerate(snapshot.items) if not item.answered)
        answer = ui.show_image_choice(snapshot, item_index, number, total)
        if answer in (QUIT, NEXT):
            return answer

        options = snapshot.items[item_index].options
        index = parse_letter_input(answer, len(options))
        if index is None:
            ui.show_invalid_input(f"Enter a letter A-{chr(64 + len(options))}")
            continue

        outcome = exercise.select_option(item_index, index)
        if outcome == AnswerOutcome.IGNORED:
            ui.show_invalid_input("That option is not available")
        elif outcome == AnswerOutcome.INCORRECT:
            ui.show_feedback(False, user_answer=options[index].text)
        elif outcome == AnswerOutcome.CORRECT:
            ui.show_feedback(True)
    return ""


ExerciseRunner = Callable[[TutorUI, Exercise, RevertScheduler, int, int], str]

# Registry of interaction loops, keyed by exercise class
EXERCISE_RUNNERS: dict[type[Exercise], ExerciseRunner] = {
    MatchingExercise: run_matching,
    FillBlankExercise: run_fill_blank,
    ImageChoiceExercise: run_image_choice,
}


def run_session(ui: TutorUI, controller: SessionController, tasks) -> SessionSummary | None:
    """Drive a session to the end. Returns None if the learner quit."""
    controller.start(tasks)

    while controller.phase == SessionPhase.AWAITING_ANSWER:
        ui.clear_screen()
        exercise = controller.current_exercise
        runner = EXERCISE_RUNNERS[type(exercise)]
        action = runner(
            ui, exercise, controller.scheduler, controller.cursor + 1, controller.total
        )

        if action == "" and ui.wait_for_continue() == QUIT:
            action = QUIT
        if action == QUIT:
            controller.exit_early()
            ui.show_quit_message()
            return None

        controller.advance()

    return controller.summary


def create_sigint_handler(ui: TutorUI, controller: SessionController):
    """Create a SIGINT handler that abandons the session before exiting."""

    def sigint_handler(signum, frame):
        controller.exit_early()
        ui.show_quit_message()
        sys.exit(0)

    return sigint_handler


def start_session(
    ui: TutorUI,
    learner: LearnerContext,
    policy: ModePolicy,
    tasks,
    config: AppConfig,
    listeners: list[SessionListener],
    rng: random.Random,
    topic: Topic | None = None,
) -> SessionSummary | None:
    if not tasks:
        ui.show_error("No content found. Run the 'seed' command first.")
        return None

    controller = SessionController(
        learner,
        policy=policy,
        listeners=listeners,
        exercise_config=config.exercise,
        rng=rng,
        topic=topic,
    )
    signal.signal(signal.SIGINT, create_sigint_handler(ui, controller))

    summary = run_session(ui, controller, tasks)
    if summary is not None:
        ui.show_session_summary(summary)
    return summary


def run_practice(args, ui: TutorUI) -> None:
    """Run the practice subcommand for one module."""
    config = load_config(args)
    learner = load_learner(args, config)
    topic = Topic(args.topic)
    rng = random.Random(args.seed)

    factory = TaskFactory(config.task_factory, rng=rng)
    tasks = factory.build_module_tasks(topic, get_content_source(config.db_path))

    progress = get_progress_repo(config.db_path)
    ui.show_welcome(learner.username, len(progress.completed_modules(learner.user_id)))
    ui.show_info(f"Module {topic.module_number}: {topic.display_name}")

    listeners: list[SessionListener] = [ModuleCompletionRecorder(progress, topic)]
    start_session(
        ui,
        learner,
        ModePolicy.practice(),
        tasks,
        config,
        listeners,
        rng,
        topic=topic,
    )


def run_test(args, ui: TutorUI) -> None:
    """Run the final test subcommand."""
    config = load_config(args)
    learner = load_learner(args, config)
    rng = random.Random(args.seed)

    factory = TaskFactory(config.task_factory, rng=rng)
    pool = factory.build_pool(get_content_source(config.db_path))
    tasks = factory.select_session(pool)

    listeners: list[SessionListener] = [
        FinalScoreRecorder(get_progress_repo(config.db_path)),
        ConsoleNotifier(ui.console),
    ]
    if config.smtp is not None:
        listeners.append(EmailNotifier(config.smtp, learner))

    start_session(ui, learner, ModePolicy.test(), tasks, config, listeners, rng)


def run_seed(args, ui: TutorUI) -> None:
    """Run the seed subcommand."""
    config = load_config(args)
    if not args.content.exists():
        ui.show_error(f"Content file not found: {args.content}")
        return

    bundle = ContentBundle.from_file(args.content)
    try:
        counts = seed_content(bundle, config.db_path, force=args.force)
    except FileExistsError:
        ui.show_error(f"Content already exists in {config.db_path}. Use --force to replace it.")
        return

    for table, count in counts.items():
        ui.show_info(f"Seeded {count} records into {table}")
    ui.show_success(f"Seeding complete: {config.db_path}")


def show_progress(args, ui: TutorUI) -> None:
    """Run the progress subcommand."""
    config = load_config(args)
    learner = load_learner(args, config)
    progress = get_progress_repo(config.db_path)
    ui.show_progress(
        progress.completed_modules(learner.user_id),
        progress.last_test_result(learner.user_id),
    )


def main():
    """Main entry point with CLI routing."""
    parser = create_parser()
    args = parser.parse_args()
    configure_logging(args.verbose)

    ui = TutorUI(Console(theme=DEFAULT_THEME))

    if args.command == "practice":
        run_practice(args, ui)
    elif args.command == "test":
        run_test(args, ui)
    elif args.command == "seed":
        run_seed(args, ui)
    elif args.command == "progress":
        show_progress(args, ui)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
