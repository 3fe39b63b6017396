from datetime import date
from typing import Optional

from rich.text import Text
from rich.panel import Panel
from rich.table import Table
from rich.style import Style
from rich.align import Align
from rich.columns import Columns
from rich import box
from rich.console import Group

from exercises import FillBlankSnapshot, ImageChoiceSnapshot, MatchingSnapshot, option_label
from models import MatchItem, Mode, OptionState, SessionSummary, Topic
from ui.styles import (
    TATAR_GREEN,
    TATAR_RED,
    HIGHLIGHT_GOLD,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
    TEXT_WHITE,
    create_error_header,
    create_success_header,
    get_score_style,
    get_validation_style,
)


def _progress_bar(percent: float, width: int = 30) -> str:
    filled = int(width * percent / 100)
    bar = "█" * filled + "░" * (width - filled)
    return f"[{bar}] {percent:.0f}%"


def _append_header(content: Text, exercise_number: int, total_exercises: int) -> None:
    if total_exercises <= 0:
        return
    percent = (exercise_number - 1) / total_exercises * 100
    content.append(_progress_bar(percent), Style(color=MUTED_GRAY))
    content.append("\n")
    content.append(
        f"Exercise {exercise_number}/{total_exercises}\n\n", Style(color=MUTED_GRAY)
    )


def _append_options(content: Text, options: list[OptionState]) -> None:
    for i, option in enumerate(options):
        label_style = (
            Style(color=HIGHLIGHT_GOLD, bold=True)
            if option.selectable
            else Style(color=MUTED_GRAY)
        )
        content.append(f"{option_label(i)}. ", label_style)
        content.append(option.text, get_validation_style(option.validation))
        content.append("\n")


class MatchingPanel:
    """Two columns of words: sources numbered, targets lettered."""

    def __init__(
        self,
        snapshot: MatchingSnapshot,
        exercise_number: int = 0,
        total_exercises: int = 0,
    ):
        self.snapshot = snapshot
        self.exercise_number = exercise_number
        self.total_exercises = total_exercises

    def _item_text(self, item: MatchItem, selected: bool) -> Text:
        if item.matched:
            return Text(item.text, style=Style(color=SUCCESS_GREEN, dim=True))
        if item.invalid_flash:
            return Text(item.text, style=Style(color=ERROR_RED, bold=True))
        if selected:
            return Text(item.text, style=Style(color=HIGHLIGHT_GOLD, bold=True, underline=True))
        return Text(item.text, style=Style(color=TEXT_WHITE))

    def render(self) -> Panel:
        snapshot = self.snapshot
        content = Text()
        _append_header(content, self.exercise_number, self.total_exercises)
        content.append("Match each word with its translation", Style(color=TATAR_GREEN, bold=True))

        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("#", style=Style(color=HIGHLIGHT_GOLD, bold=True), justify="right")
        table.add_column("Tatar")
        table.add_column("Label", style=Style(color=HIGHLIGHT_GOLD, bold=True), justify="right")
        table.add_column("Translation")

        for row, (source, target) in enumerate(
            zip(snapshot.source_items, snapshot.target_items)
        ):
            table.add_row(
                str(row + 1),
                self._item_text(source, snapshot.selected_source == row),
                option_label(row),
                self._item_text(target, snapshot.selected_target == row),
            )

        score = Text(
            f"Matched {snapshot.correctly_matched}/{snapshot.total_pairs}",
            style=Style(color=MUTED_GRAY),
        )
        if snapshot.incorrectly_matched:
            score.append(f"  Missed {snapshot.incorrectly_matched}", Style(color=ERROR_RED))

        return Panel(
            Group(content, table, score),
            title="Tatar Tutor",
            subtitle="Enter a pair like 1A, 'n' for next, 'q' to quit",
            border_style=TATAR_GREEN,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class FillBlankPanel:
    """A sentence with a blank and its lettered options."""

    def __init__(
        self,
        snapshot: FillBlankSnapshot,
        exercise_number: int = 0,
        total_exercises: int = 0,
    ):
        self.snapshot = snapshot
        self.exercise_number = exercise_number
        self.total_exercises = total_exercises

    def render(self) -> Panel:
        content = Text()
        _append_header(content, self.exercise_number, self.total_exercises)
        content.append("Fill in the blank\n\n", Style(color=MUTED_GRAY))
        content.append(self.snapshot.template, Style(color=TATAR_GREEN, bold=True))
        content.append("\n\n")
        _append_options(content, self.snapshot.options)

        return Panel(
            Align.left(content),
            title="Tatar Tutor",
            subtitle="Type a letter, 'n' for next, 'q' to quit",
            border_style=TATAR_GREEN,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class ImageChoicePanel:
    """One image of a group, with every label of the group as options."""

    def __init__(
        self,
        snapshot: ImageChoiceSnapshot,
        item_index: int,
        exercise_number: int = 0,
        total_exercises: int = 0,
    ):
        self.snapshot = snapshot
        self.item_index = item_index
        self.exercise_number = exercise_number
        self.total_exercises = total_exercises

    def render(self) -> Panel:
        snapshot = self.snapshot
        item = snapshot.items[self.item_index]

        content = Text()
        _append_header(content, self.exercise_number, self.total_exercises)
        content.append(
            f"Image {self.item_index + 1}/{snapshot.total_items}: ",
            Style(color=MUTED_GRAY),
        )
        content.append(f"[{item.image_ref}]", Style(color=INFO_BLUE, bold=True))
        content.append("\nWhat is pictured?\n\n", Style(color=TATAR_GREEN, bold=True))
        _append_options(content, item.options)
        content.append(
            f"\nCorrect {snapshot.correct_count}/{snapshot.total_items}",
            Style(color=MUTED_GRAY),
        )

        return Panel(
            Align.left(content),
            title="Tatar Tutor",
            subtitle="Type a letter, 'n' for next, 'q' to quit",
            border_style=TATAR_GREEN,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class FeedbackPanel:
    """A styled panel for displaying exercise feedback."""

    def __init__(
        self,
        is_correct: bool,
        correct_answer: str = "",
        user_answer: str = "",
    ):
        self.is_correct = is_correct
        self.correct_answer = correct_answer
        self.user_answer = user_answer

    def render(self) -> Panel:
        content = Text()

        if self.is_correct:
            content.append(create_success_header())
            content.append("\n")
        else:
            content.append(create_error_header())
            content.append("\n")
            if self.user_answer:
                content.append(
                    f"You answered: {self.user_answer}\n", Style(color=MUTED_GRAY)
                )

        if self.correct_answer:
            content.append("\n")
            content.append("Correct answer: ", Style(color=MUTED_GRAY))
            content.append(self.correct_answer, Style(color=SUCCESS_GREEN, bold=True))

        return Panel(
            Align.left(content),
            title="Result",
            border_style=SUCCESS_GREEN if self.is_correct else ERROR_RED,
            box=box.HEAVY,
            padding=(0, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class WelcomeScreen:
    """Welcome screen with banner and learner progress."""

    def __init__(self, username: str, completed_count: int, module_count: int = len(Topic)):
        self.username = username
        self.completed_count = completed_count
        self.module_count = module_count

    def render(self) -> Panel:
        banner = Text()
        banner.append("╔═══════════════════════════════╗\n", Style(color=TATAR_GREEN))
        banner.append("║        ", Style(color=TATAR_GREEN))
        banner.append("Татар теле", Style(color=TATAR_RED, bold=True))
        banner.append("             ║\n", Style(color=TATAR_GREEN))
        banner.append("║        Tatar Tutor            ║\n", Style(color=TATAR_GREEN))
        banner.append("╚═══════════════════════════════╝\n", Style(color=TATAR_GREEN))
        banner.append("\n")
        banner.append(f"Сәлам, {self.username}!\n\n", Style(color=TEXT_WHITE))
        banner.append("Type 'q' at any time to quit.\n", Style(color=MUTED_GRAY))

        stats = Table(show_header=False, border_style=MUTED_GRAY, box=box.ROUNDED)
        stats.add_column("Label", justify="center")
        stats.add_column("Value", justify="center")
        stats.add_row(
            Text("Modules Done", style=Style(color=MUTED_GRAY)),
            Text(
                f"{self.completed_count}/{self.module_count}",
                style=Style(color=HIGHLIGHT_GOLD, bold=True),
            ),
        )

        return Panel(
            Columns(
                [Align.center(banner), Align.center(stats)],
                align="center",
                padding=(3, 3),
            ),
            border_style=TATAR_GREEN,
            box=box.HEAVY,
            padding=(1, 3),
        )

    def __rich__(self) -> Panel:
        return self.render()


class ModuleTable:
    """Learning modules with completion marks and the last test score."""

    def __init__(
        self,
        completed: set[Topic],
        last_test: Optional[tuple[int, date]] = None,
    ):
        self.completed = completed
        self.last_test = last_test

    def render(self) -> Panel:
        table = Table(
            show_header=True,
            header_style=Style(color=TATAR_GREEN, bold=True),
            border_style=MUTED_GRAY,
            row_styles=[Style(), Style(dim=True)],
            box=box.HEAVY,
        )
        table.add_column("#", justify="right")
        table.add_column("Module", style=Style(color=TEXT_WHITE))
        table.add_column("Command", style=Style(color=MUTED_GRAY))
        table.add_column("Status", justify="center")

        for topic in Topic:
            done = topic in self.completed
            table.add_row(
                str(topic.module_number),
                topic.display_name,
                f"practice {topic.value}",
                Text("✓ done", style=SUCCESS_GREEN) if done else Text("-", style=MUTED_GRAY),
            )

        if self.last_test is None:
            footer = Text("No final test taken yet", style=MUTED_GRAY)
        else:
            score, taken_on = self.last_test
            footer = Text(f"Last final test: {score} correct on {taken_on.isoformat()}", style=INFO_BLUE)

        return Panel(
            Group(table, footer),
            title="Progress",
            border_style=HIGHLIGHT_GOLD,
            box=box.HEAVY,
            padding=(1, 1),
        )

    def __rich__(self) -> Panel:
        return self.render()


class SessionSummaryPanel:
    """Final tally of a finished session."""

    def __init__(self, summary: SessionSummary):
        self.summary = summary

    def render(self) -> Panel:
        summary = self.summary
        percent = summary.tally / summary.total * 100 if summary.total else 100.0

        stats = Table(show_header=False, border_style=MUTED_GRAY, box=box.SIMPLE)
        stats.add_column("Label", style=Style(color=MUTED_GRAY))
        stats.add_column("Value", justify="right")
        stats.add_row("Tasks", str(summary.total))
        stats.add_row(
            "Correct",
            Text(str(summary.tally), style=get_score_style(summary.tally, summary.total)),
        )
        stats.add_row(
            "Missed",
            Text(str(summary.total - summary.tally), style=Style(color=ERROR_RED)),
        )

        content = Text()
        content.append(summary.headline + "\n\n", Style(color=TATAR_GREEN, bold=True))
        content.append(f"Progress: {_progress_bar(percent)}\n", Style(color=MUTED_GRAY))
        if summary.mode == Mode.PRACTICE and summary.topic is not None:
            if summary.all_correct:
                content.append(
                    f"\nModule {summary.topic.module_number} complete!\n",
                    Style(color=SUCCESS_GREEN, bold=True),
                )
            else:
                content.append(
                    "\nGet every task right to complete the module.\n",
                    Style(color=MUTED_GRAY),
                )

        return Panel(
            Columns(
                [Align.center(content), Align.center(stats)],
                align="center",
                padding=(0, 1),
            ),
            title="Session Summary",
            border_style=HIGHLIGHT_GOLD,
            box=box.HEAVY,
            padding=(1, 3),
        )

    def __rich__(self) -> Panel:
        return self.render()
