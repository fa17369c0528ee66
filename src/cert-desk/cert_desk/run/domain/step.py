"""Step value object — one transcript unit within a run."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from cert_desk.run.domain.grade_entry import GradeEntry
from cert_desk.run.domain.wire import WIRE_CONFIG

StepRole = Literal["interviewer", "agent", "system"]
StepStatus = Literal["pass", "fail", "info"]


class Step(BaseModel):
    """Immutable transcript unit: a question, an answer, or a system verdict.

    Only ``system`` steps carry grading. For graded steps ``score`` mirrors the
    elected grade entry; ``content`` mirrors its reasoning when that entry is
    automated, while a human entry's reasoning lands in ``human_note``.

    ``grading_history`` may be empty for steps recorded before history
    tracking existed; see ``cert_desk.grading.domain.history`` for how such
    steps are read.
    """

    model_config = WIRE_CONFIG

    id: str = Field(min_length=1)
    role: StepRole
    content: str
    timestamp: datetime
    status: StepStatus | None = None
    metadata: dict[str, str] = Field(default_factory=dict)
    score: int | None = Field(default=None, ge=0, le=100)
    category: str | None = None
    is_human_graded: bool = False
    human_note: str | None = None
    grading_history: tuple[GradeEntry, ...] = ()

    @property
    def is_scoreable(self) -> bool:
        """True for system verdicts that carry a numeric score."""
        return self.role == "system" and self.score is not None
