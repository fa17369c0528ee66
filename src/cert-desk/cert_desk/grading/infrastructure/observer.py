"""Structlog implementation of the GradingObserver port."""

import structlog


class StructlogGradingObserver:
    """Delegates grading domain events to structlog.

    Satisfies the GradingObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def review_added(
        self, run_id: str, step_id: str, source: str, score: int, history_size: int
    ) -> None:
        self._log.info(
            "grading.review_added",
            run_id=run_id,
            step_id=step_id,
            source=source,
            score=score,
            history_size=history_size,
        )

    def entry_elected(
        self, run_id: str, step_id: str, entry_index: int, score: int
    ) -> None:
        self._log.info(
            "grading.entry_elected",
            run_id=run_id,
            step_id=step_id,
            entry_index=entry_index,
            score=score,
        )

    def run_score_changed(self, run_id: str, score: int | None, status: str) -> None:
        self._log.info(
            "grading.run_score_changed",
            run_id=run_id,
            score=score,
            status=status,
        )

    def run_restored(self, run_id: str, restored_steps: int) -> None:
        self._log.info(
            "grading.run_restored",
            run_id=run_id,
            restored_steps=restored_steps,
        )

    def step_persist_failed(self, run_id: str, step_id: str, reason: str) -> None:
        self._log.error(
            "grading.step_persist_failed",
            run_id=run_id,
            step_id=step_id,
            reason=reason,
        )

    def run_persist_failed(self, run_id: str, reason: str) -> None:
        self._log.error(
            "grading.run_persist_failed",
            run_id=run_id,
            reason=reason,
        )
