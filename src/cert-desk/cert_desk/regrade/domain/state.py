"""RegradeState — immutable snapshot of the regrade state machine."""

from typing import Literal

from pydantic import BaseModel, Field

RegradePhase = Literal["idle", "running", "completed", "failed"]


class RegradeFailure(BaseModel, frozen=True):
    """Where and why a regrade stopped."""

    step_id: str
    position: int = Field(ge=0)
    message: str


class RegradeState(BaseModel, frozen=True):
    """Phase, queue and progress of a regrade.

    ``queue`` holds the scoreable step ids in run order; ``current_position``
    indexes into it while a step is being reprocessed.
    """

    phase: RegradePhase = "idle"
    queue: tuple[str, ...] = ()
    progress: int = Field(default=0, ge=0, le=100)
    current_position: int | None = None
    failure: RegradeFailure | None = None

    @property
    def total(self) -> int:
        return len(self.queue)

    @property
    def current_step_id(self) -> str | None:
        if self.current_position is None:
            return None
        return self.queue[self.current_position]

    def is_pending(self, step_id: str) -> bool:
        """True for queued steps after the current one (not yet reprocessed)."""
        if self.current_position is None or step_id not in self.queue:
            return False
        return self.queue.index(step_id) > self.current_position


def progress_after(position: int, total: int) -> int:
    """Integer percentage once the step at ``position`` has been reprocessed."""
    if total == 0:
        return 100
    return (position + 1) * 100 // total
