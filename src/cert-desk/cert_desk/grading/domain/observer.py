"""GradingObserver port — domain events emitted by the election protocol."""

from typing import Protocol


class GradingObserver(Protocol):
    """Observer port for grading events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def review_added(
        self, run_id: str, step_id: str, source: str, score: int, history_size: int
    ) -> None: ...

    def entry_elected(
        self, run_id: str, step_id: str, entry_index: int, score: int
    ) -> None: ...

    def run_score_changed(
        self, run_id: str, score: int | None, status: str
    ) -> None: ...

    def run_restored(self, run_id: str, restored_steps: int) -> None: ...

    def step_persist_failed(self, run_id: str, step_id: str, reason: str) -> None: ...

    def run_persist_failed(self, run_id: str, reason: str) -> None: ...
