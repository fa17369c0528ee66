"""Observer port for the interview domain — defines events in domain language."""

from typing import Protocol


class InterviewObserver(Protocol):
    """Observer port emitting structured events while an interview executes.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def interview_started(
        self, run_id: str, template_name: str, total_criteria: int
    ) -> None: ...

    def criterion_graded(
        self, run_id: str, criterion_id: str, score: int, passed: bool
    ) -> None: ...

    def interview_completed(self, run_id: str, score: int, status: str) -> None: ...

    def interview_failed(self, run_id: str, reason: str) -> None: ...
