"""Result notifications sent when a final test finishes.

Both notifiers are session listeners. Delivery errors are not handled here:
they propagate to the session controller, which logs and swallows them so
a failed notification never affects the recorded result.
"""

import smtplib
from email.message import EmailMessage

from loguru import logger
from rich.console import Console
from rich.text import Text

from config import SmtpConfig
from models import LearnerContext, Mode, SessionSummary
from ui.styles import ERROR_RED, SUCCESS_GREEN

EMAIL_SUBJECT = "Tatar Tutor"


def format_result_message(summary: SessionSummary) -> str:
    return f"Final test result: {summary.tally}/{summary.total}"


class ConsoleNotifier:
    """Prints the final test result to the terminal."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def on_session_finished(self, summary: SessionSummary) -> None:
        if summary.mode != Mode.TEST:
            return
        style = SUCCESS_GREEN if summary.all_correct else ERROR_RED
        self.console.print(Text(format_result_message(summary), style=f"bold {style}"))


class EmailNotifier:
    """Emails the final test result to the learner."""

    def __init__(self, smtp: SmtpConfig, learner: LearnerContext):
        self.smtp = smtp
        self.learner = learner

    def build_message(self, summary: SessionSummary) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.smtp.sender
        message["To"] = self.learner.email
        message["Subject"] = EMAIL_SUBJECT
        message.set_content(format_result_message(summary))
        return message

    def on_session_finished(self, summary: SessionSummary) -> None:
        if summary.mode != Mode.TEST:
            return
        if not self.learner.email:
            logger.debug(f"No email on file for {self.learner.username}, skipping")
            return

        message = self.build_message(summary)
        with smtplib.SMTP(self.smtp.host, self.smtp.port, timeout=30) as client:
            if self.smtp.use_tls:
                client.starttls()
            if self.smtp.username:
                client.login(self.smtp.username, self.smtp.password)
            client.send_message(message)
        logger.info(f"Result email sent to {self.learner.email}")
