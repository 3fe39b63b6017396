"""Tatar Tutor UI Module - Terminal interface for Tatar learning."""

from ui.app import NEXT, QUIT, TutorUI
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
    DEFAULT_THEME,
    TATAR_GREEN,
    TATAR_RED,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
)

__all__ = [
    "TutorUI",
    "QUIT",
    "NEXT",
    "FeedbackPanel",
    "FillBlankPanel",
    "ImageChoicePanel",
    "MatchingPanel",
    "ModuleTable",
    "SessionSummaryPanel",
    "WelcomeScreen",
    "DEFAULT_THEME",
    "TATAR_GREEN",
    "TATAR_RED",
    "SUCCESS_GREEN",
    "ERROR_RED",
    "INFO_BLUE",
    "MUTED_GRAY",
]
