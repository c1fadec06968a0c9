"""Post-workout feedback collected after a session finishes."""

from __future__ import annotations

from dataclasses import dataclass

from session_engine.exceptions import InvalidFeedbackError
from session_engine.models.enums import MAX_PERCEIVED_EXERTION, MIN_PERCEIVED_EXERTION


@dataclass(frozen=True)
class WorkoutFeedback:
    """Perceived exertion (1 = easy, 10 = max effort) plus a free-text comment."""

    perceived_exertion: int
    comment: str = ""

    def __post_init__(self) -> None:
        if not MIN_PERCEIVED_EXERTION <= self.perceived_exertion <= MAX_PERCEIVED_EXERTION:
            raise InvalidFeedbackError(
                f"perceived_exertion must be between {MIN_PERCEIVED_EXERTION} and "
                f"{MAX_PERCEIVED_EXERTION}, got {self.perceived_exertion}",
                perceived_exertion=self.perceived_exertion,
            )

    def feedback_message(self) -> str:
        """Follow-up chat line sent back to the coach for the originating plan."""
        comment = self.comment.strip() or "No additional comments."
        return (
            f"My feedback for the last workout (rated {self.perceived_exertion}/"
            f"{MAX_PERCEIVED_EXERTION}): {comment}"
        )
