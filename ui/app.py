from datetime import date
from typing import Optional

from rich.console import Console
from rich.text import Text
from rich.panel import Panel

from exercises import FillBlankSnapshot, ImageChoiceSnapshot, MatchingSnapshot
from models import SessionSummary, Topic
from ui.components import (
    FeedbackPanel,
    FillBlankPanel,
    ImageChoicePanel,
    MatchingPanel,
    ModuleTable,
    SessionSummaryPanel,
    WelcomeScreen,
)
from ui.styles import (
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
)

QUIT = "quit"
NEXT = "next"


class TutorUI:
    """Main UI orchestrator for the Tatar Tutor application."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def show_welcome(self, username: str, completed_count: int) -> None:
        """Display the welcome screen and wait for user to press Enter."""
        self.console.print(WelcomeScreen(username=username, completed_count=completed_count))
        self.console.print()
        self.console.input(Text("Press Enter to start...", style=f"bold {MUTED_GRAY}"))

    def show_matching(
        self, snapshot: MatchingSnapshot, exercise_number: int, total_exercises: int
    ) -> str:
        self.console.print(MatchingPanel(snapshot, exercise_number, total_exercises))
        return self._get_input()

    def show_fill_blank(
        self, snapshot: FillBlankSnapshot, exercise_number: int, total_exercises: int
    ) -> str:
        self.console.print(FillBlankPanel(snapshot, exercise_number, total_exercises))
        return self._get_input()

    def show_image_choice(
        self,
        snapshot: ImageChoiceSnapshot,
        item_index: int,
        exercise_number: int,
        total_exercises: int,
    ) -> str:
        self.console.print(
            ImageChoicePanel(snapshot, item_index, exercise_number, total_exercises)
        )
        return self._get_input()

    def _get_input(self) -> str:
        """Read one answer line.

        Returns:
            QUIT for 'q', NEXT for 'n', otherwise the stripped input.
        """
        user_input = self.console.input(
            Text("Your answer: ", style=f"bold {MUTED_GRAY}")
        ).strip()
        self.console.print()

        if user_input.lower() == "q":
            return QUIT
        if user_input.lower() == "n":
            return NEXT
        return user_input

    def show_invalid_input(self, hint: str) -> None:
        self.console.print(Text(f"{hint} (or 'n' to skip, 'q' to quit)\n", style=ERROR_RED))

    def show_feedback(
        self,
        is_correct: bool,
        correct_answer: str = "",
        user_answer: str = "",
    ) -> None:
        """Display feedback for the user's answer."""
        feedback = FeedbackPanel(
            is_correct=is_correct,
            correct_answer=correct_answer,
            user_answer=user_answer,
        )
        self.console.print(feedback)
        self.console.print()

    def show_session_summary(self, summary: SessionSummary) -> None:
        """Display the tally of a finished session."""
        self.console.print(SessionSummaryPanel(summary))

    def show_progress(
        self, completed: set[Topic], last_test: Optional[tuple[int, date]]
    ) -> None:
        self.console.print(ModuleTable(completed, last_test))

    def show_error(self, message: str) -> None:
        """Display an error message."""
        self.console.print(
            Panel(
                Text(f"Error: {message}", style=ERROR_RED),
                title="Error",
                border_style=ERROR_RED,
            )
        )

    def show_info(self, message: str) -> None:
        """Display an informational message."""
        self.console.print(Text(message, style=INFO_BLUE))

    def show_success(self, message: str) -> None:
        """Display a success message."""
        self.console.print(Text(message, style=SUCCESS_GREEN))

    def show_quit_message(self) -> None:
        """Display the quit message."""
        self.console.print()
        self.console.print(
            Text("Сау булыгыз! Session ended without a score.", style=MUTED_GRAY)
        )

    def clear_screen(self) -> None:
        """Clear the terminal screen."""
        self.console.clear()

    def wait_for_continue(self) -> str:
        """Wait for Enter. Returns QUIT if the user typed 'q' instead."""
        user_input = self.console.input(
            Text("Press Enter to continue...", style=f"bold {MUTED_GRAY}")
        ).strip()
        return QUIT if user_input.lower() == "q" else ""
