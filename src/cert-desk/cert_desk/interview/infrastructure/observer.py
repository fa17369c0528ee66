"""StructlogInterviewObserver — production observer that delegates to structlog."""

import structlog


class StructlogInterviewObserver:
    """Logs interview domain events to structlog.

    Does NOT inherit from InterviewObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def interview_started(
        self, run_id: str, template_name: str, total_criteria: int
    ) -> None:
        self._log.info(
            "interview.started",
            run_id=run_id,
            template_name=template_name,
            total_criteria=total_criteria,
        )

    def criterion_graded(
        self, run_id: str, criterion_id: str, score: int, passed: bool
    ) -> None:
        self._log.info(
            "interview.criterion_graded",
            run_id=run_id,
            criterion_id=criterion_id,
            score=score,
            passed=passed,
        )

    def interview_completed(self, run_id: str, score: int, status: str) -> None:
        self._log.info("interview.completed", run_id=run_id, score=score, status=status)

    def interview_failed(self, run_id: str, reason: str) -> None:
        self._log.error("interview.failed", run_id=run_id, reason=reason)
