"""Configuration for exercise presentation and feedback.

These configuration models allow tuning how exercises are built and how
long transient feedback stays visible.
"""

from pydantic import BaseModel, Field

from models import BLANK_MARKER


class ExerciseConfig(BaseModel):
    """Configuration shared by all exercise types."""

    max_pairs: int = Field(default=6, ge=1, le=26)
    revert_delay_ms: int = Field(default=1000, ge=0)
    blank_marker: str = BLANK_MARKER
