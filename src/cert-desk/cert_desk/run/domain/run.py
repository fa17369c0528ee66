"""Run aggregate — one end-to-end evaluation attempt of an agent."""

import math
from datetime import datetime
from typing import Literal, TypeAlias

from pydantic import BaseModel, Field

from cert_desk.run.domain.certificate import Certificate
from cert_desk.run.domain.errors import StepNotFoundError
from cert_desk.run.domain.step import Step
from cert_desk.run.domain.wire import WIRE_CONFIG

RunId: TypeAlias = str

RunStatus = Literal["running", "pass", "fail"]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return math.floor(value + 0.5)


class Run(BaseModel):
    """Immutable run value. Grading changes produce a new Run via ``with_step``.

    Because runs are never mutated in place, holding on to an earlier Run is a
    complete, alias-free snapshot of every step at that point in time.
    """

    model_config = WIRE_CONFIG

    id: RunId = Field(min_length=1)
    agent_id: str
    agent_name: str
    timestamp: datetime
    status: RunStatus = "running"
    score: int | None = Field(default=None, ge=0, le=100)
    steps: tuple[Step, ...] = ()
    template_name: str | None = None
    certificate: Certificate | None = None

    @property
    def is_certified(self) -> bool:
        return self.certificate is not None

    @property
    def display_score(self) -> int | None:
        """The score to show: frozen at the certificate's value once certified."""
        if self.certificate is not None:
            return self.certificate.score
        return self.score

    def scoreable_steps(self) -> list[Step]:
        return [step for step in self.steps if step.is_scoreable]

    def step_index(self, step_id: str) -> int:
        """Return the position of ``step_id`` in ``steps``.

        Raises:
            StepNotFoundError: if no step carries that id.
        """
        for index, step in enumerate(self.steps):
            if step.id == step_id:
                return index
        raise StepNotFoundError(run_id=self.id, step_id=step_id)

    def get_step(self, step_id: str) -> Step:
        return self.steps[self.step_index(step_id)]

    def with_step(self, step: Step) -> "Run":
        """Return a new Run with the step of the same id replaced by ``step``."""
        index = self.step_index(step.id)
        steps = self.steps[:index] + (step,) + self.steps[index + 1 :]
        return self.model_copy(update={"steps": steps})

    def with_appended_step(self, step: Step) -> "Run":
        return self.model_copy(update={"steps": self.steps + (step,)})

    def average_score(self) -> int | None:
        """Half-up rounded mean of all scoreable steps, or None if none are graded."""
        scores = [step.score for step in self.scoreable_steps() if step.score is not None]
        if not scores:
            return None
        return round_half_up(sum(scores) / len(scores))

    def category_scores(self) -> dict[str, int]:
        """Per-category rounded average of scoreable steps that carry a category."""
        buckets: dict[str, list[int]] = {}
        for step in self.scoreable_steps():
            if step.category is None or step.score is None:
                continue
            buckets.setdefault(step.category, []).append(step.score)
        return {
            category: round_half_up(sum(scores) / len(scores))
            for category, scores in buckets.items()
        }
