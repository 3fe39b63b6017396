"""Application configuration.

Settings are plain pydantic models with sensible defaults. A JSON file can
override any of them; its path comes from --config or the TATAR_TUTOR_CONFIG
environment variable.
"""

import os
from pathlib import Path

from pydantic import BaseModel, Field

from exercises.config import ExerciseConfig
from storage.connection import DEFAULT_DB_PATH

CONFIG_ENV_VAR = "TATAR_TUTOR_CONFIG"


class TaskFactoryConfig(BaseModel):
    """Which content categories feed the final test, and how much of each."""

    match_categories: list[str] = Field(
        default_factory=lambda: [
            "FamilyMatch",
            "FoodMatch",
            "AlphabetMatch",
            "NumbersMatch",
            "PhrasesMatch",
        ]
    )
    fill_blank_categories: list[str] = Field(
        default_factory=lambda: [
            "PhrasesFillInBlank",
            "NumbersFillInBlank",
            "FoodFillInBlank",
        ]
    )
    image_category: str = "ImageChoiceFood"
    pairs_per_task: int = Field(default=6, ge=1)
    distractor_count: int = Field(default=3, ge=0)
    image_items: int = Field(default=3, ge=1, le=26)
    session_size: int = Field(default=9, ge=0)


class SmtpConfig(BaseModel):
    """Outgoing mail server for result notifications."""

    host: str
    port: int = 587
    username: str = ""
    password: str = ""
    sender: str
    use_tls: bool = True


class AppConfig(BaseModel):
    """Master configuration for the application."""

    db_path: Path = DEFAULT_DB_PATH
    exercise: ExerciseConfig = Field(default_factory=ExerciseConfig)
    task_factory: TaskFactoryConfig = Field(default_factory=TaskFactoryConfig)
    smtp: SmtpConfig | None = None

    @classmethod
    def load(cls, path: Path | None = None) -> "AppConfig":
        """Load configuration from JSON, falling back to defaults.

        Args:
            path: Config file path. Defaults to $TATAR_TUTOR_CONFIG if set.

        Returns:
            The loaded configuration, or defaults if no file exists.
        """
        if path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            path = Path(env_path) if env_path else None

        if path is None or not path.exists():
            return cls()

        return cls.model_validate_json(path.read_text(encoding="utf-8"))
