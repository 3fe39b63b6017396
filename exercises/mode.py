"""Practice/test behavioral switch consulted by every exercise."""

from pydantic import BaseModel, ConfigDict

from models import Mode


class ModePolicy(BaseModel):
    """Decides whether a wrong answer is transient or final.

    Practice mode shows incorrect feedback for ExerciseConfig.revert_delay_ms
    and lets the learner try again. Test mode keeps the first answer: a wrong
    selection is recorded as a miss and never reverted.
    """

    model_config = ConfigDict(frozen=True)

    mode: Mode

    @classmethod
    def practice(cls) -> "ModePolicy":
        return cls(mode=Mode.PRACTICE)

    @classmethod
    def test(cls) -> "ModePolicy":
        return cls(mode=Mode.TEST)

    @property
    def incorrect_is_transient(self) -> bool:
        """True if incorrect feedback auto-reverts after the delay."""
        return self.mode == Mode.PRACTICE

    @property
    def first_answer_is_final(self) -> bool:
        return self.mode == Mode.TEST
