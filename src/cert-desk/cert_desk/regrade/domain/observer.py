"""Observer port for the regrade domain — defines events in domain language."""

from typing import Protocol


class RegradeObserver(Protocol):
    """Observer port emitting structured events while a run is regraded.

    Implementations may log to structlog, render progress, or record for tests.
    """

    def regrade_started(self, run_id: str, total_steps: int) -> None: ...

    def regrade_resumed(self, run_id: str, position: int, total_steps: int) -> None: ...

    def regrade_step_started(
        self, run_id: str, step_id: str, position: int, total_steps: int
    ) -> None: ...

    def regrade_step_completed(
        self, run_id: str, step_id: str, position: int, score: int, progress: int
    ) -> None: ...

    def regrade_failed(
        self, run_id: str, step_id: str, position: int, reason: str
    ) -> None: ...

    def regrade_completed(self, run_id: str, total_steps: int) -> None: ...

    def regrade_cancelled(self, run_id: str, position: int) -> None: ...

    def regrade_discarded(self, run_id: str) -> None: ...
