from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


BLANK_MARKER = "___"


class TaskType(str, Enum):
    MATCH_TERMS = "match_terms"
    FILL_IN_BLANK = "fill_in_blank"
    IMAGE_CHOICE = "image_choice"


class Mode(str, Enum):
    PRACTICE = "practice"
    TEST = "test"


class Topic(str, Enum):
    """Learning modules, in curriculum order."""

    ALPHABET = "alphabet"
    PHRASES = "phrases"
    NUMBERS = "numbers"
    FAMILY = "family"
    FOOD = "food"

    @property
    def module_number(self) -> int:
        return _MODULE_NUMBERS[self]

    @property
    def display_name(self) -> str:
        return _TOPIC_TITLES[self]


_MODULE_NUMBERS = {
    Topic.ALPHABET: 1,
    Topic.PHRASES: 2,
    Topic.NUMBERS: 3,
    Topic.FAMILY: 4,
    Topic.FOOD: 5,
}

_TOPIC_TITLES = {
    Topic.ALPHABET: "Alphabet and pronunciation",
    Topic.PHRASES: "Simple phrases and greetings",
    Topic.NUMBERS: "Numbers and counting",
    Topic.FAMILY: "Family and people",
    Topic.FOOD: "Food and shopping",
}


# ============================================================================
# Content Payloads
# ============================================================================


class MatchingPair(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str
    target: str


class FillBlankPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    template: str  # Sentence containing BLANK_MARKER
    correct_answer: str
    distractors: tuple[str, ...] = ()


class ImageChoicePayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    image_ref: str
    correct_answer: str


class MatchTermsPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    pairs: tuple[MatchingPair, ...]


class ImageChoiceGroupPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: tuple[ImageChoicePayload, ...]


TaskPayload = MatchTermsPayload | FillBlankPayload | ImageChoiceGroupPayload

_PAYLOAD_TYPES: dict[TaskType, type[BaseModel]] = {
    TaskType.MATCH_TERMS: MatchTermsPayload,
    TaskType.FILL_IN_BLANK: FillBlankPayload,
    TaskType.IMAGE_CHOICE: ImageChoiceGroupPayload,
}


class Task(BaseModel):
    """A scheduled unit of exercise work: topic, type tag and payload."""

    model_config = ConfigDict(frozen=True)

    id: str
    topic: str
    type: TaskType
    payload: TaskPayload

    @model_validator(mode="after")
    def _check_payload_matches_type(self) -> "Task":
        expected = _PAYLOAD_TYPES[self.type]
        if not isinstance(self.payload, expected):
            raise ValueError(
                f"Task {self.id}: {self.type.value} requires {expected.__name__}, "
                f"got {type(self.payload).__name__}"
            )
        return self


# ============================================================================
# Exercise State Models
# ============================================================================


class ValidationState(str, Enum):
    UNCHECKED = "unchecked"
    CORRECT = "correct"
    INCORRECT = "incorrect"


class AnswerOutcome(str, Enum):
    """What a single interaction did to an exercise."""

    PENDING = "pending"  # Waiting for the other half of a matching pair
    CORRECT = "correct"
    INCORRECT = "incorrect"
    IGNORED = "ignored"  # Exercise locked, item unavailable or index out of range


class MatchItem(BaseModel):
    id: int  # Shared by the source and target item of the same pair
    text: str
    matched: bool = False
    invalid_flash: bool = False


class OptionState(BaseModel):
    text: str
    is_correct_option: bool
    validation: ValidationState = ValidationState.UNCHECKED
    selectable: bool = True


class ImageChoiceItem(BaseModel):
    image_ref: str
    correct_answer: str
    options: list[OptionState]
    answered: bool = False
    answered_correctly: bool = False


class ExerciseResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    completed: bool = False
    correct: bool = False


# ============================================================================
# Session Models
# ============================================================================


class SessionPhase(str, Enum):
    LOADING = "loading"
    AWAITING_ANSWER = "awaiting_answer"
    ADVANCING = "advancing"
    FINISHED = "finished"
    ABORTED = "aborted"


class SessionState(BaseModel):
    """Progress through one ordered run of tasks."""

    tasks: list[Task] = Field(default_factory=list)
    cursor: int = 0
    results: dict[int, bool] = Field(default_factory=dict)
    phase: SessionPhase = SessionPhase.LOADING

    @property
    def is_terminal(self) -> bool:
        return self.phase in (SessionPhase.FINISHED, SessionPhase.ABORTED)


class LearnerContext(BaseModel):
    """The learner a session runs for."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    username: str
    email: str = ""


class SessionSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: str
    user_id: int
    mode: Mode
    topic: Topic | None = None
    total: int
    tally: int
    results: tuple[bool, ...]
    finished_on: date

    @property
    def all_correct(self) -> bool:
        return self.tally == self.total

    @property
    def headline(self) -> str:
        return f"Correct answers: {self.tally} of {self.total}"
