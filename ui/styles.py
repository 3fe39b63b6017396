from rich.theme import Theme
from rich.style import Style
from rich.text import Text

from models import ValidationState

TATAR_GREEN = "#00A651"
TATAR_RED = "#E31E24"
SUCCESS_GREEN = "#27AE60"
ERROR_RED = "#C0392B"
INFO_BLUE = "#3498DB"
MUTED_GRAY = "#7F8C8D"
TEXT_WHITE = "#FFFFFF"
HIGHLIGHT_GOLD = "#F1C40F"

DEFAULT_THEME = Theme(
    {
        "primary": Style(color=TATAR_GREEN, bold=True),
        "secondary": Style(color=TATAR_RED, bold=True),
        "success": Style(color=SUCCESS_GREEN),
        "error": Style(color=ERROR_RED, bold=True),
        "info": Style(color=INFO_BLUE),
        "muted": Style(color=MUTED_GRAY),
        "tatar": Style(color=TATAR_GREEN, bold=True),
        "option_label": Style(color=HIGHLIGHT_GOLD, bold=True),
        "option_text": Style(color=TEXT_WHITE),
        "title": Style(color=TATAR_GREEN, bold=True),
        "subtitle": Style(color=MUTED_GRAY),
    }
)

def get_validation_style(validation: ValidationState) -> Style:
    """Get style for an option's validation state."""
    styles = {
        ValidationState.CORRECT: Style(color=SUCCESS_GREEN, bold=True),
        ValidationState.INCORRECT: Style(color=ERROR_RED, bold=True, strike=True),
    }
    return styles.get(validation, Style(color=TEXT_WHITE))

def get_score_style(tally: int, total: int) -> Style:
    """Get color style based on the share of correct answers."""
    ratio = tally / total if total else 0.0
    if ratio >= 0.8:
        return Style(color=SUCCESS_GREEN, bold=True)
    elif ratio >= 0.5:
        return Style(color=HIGHLIGHT_GOLD)
    else:
        return Style(color=ERROR_RED)

def create_success_header() -> Text:
    """Create a success/correct answer header."""
    header = Text()
    header.append("✓ ", Style(color=SUCCESS_GREEN, bold=True))
    header.append("Correct!", Style(color=SUCCESS_GREEN, bold=True))
    return header

def create_error_header() -> Text:
    """Create an error/incorrect answer header."""
    header = Text()
    header.append("✗ ", Style(color=ERROR_RED, bold=True))
    header.append("Not quite!", Style(color=ERROR_RED, bold=True))
    return header
