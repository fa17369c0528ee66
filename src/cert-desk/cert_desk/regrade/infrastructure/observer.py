"""StructlogRegradeObserver — production observer that delegates to structlog."""

import structlog


class StructlogRegradeObserver:
    """Logs regrade domain events to structlog.

    Does NOT inherit from RegradeObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def regrade_started(self, run_id: str, total_steps: int) -> None:
        self._log.info("regrade.started", run_id=run_id, total_steps=total_steps)

    def regrade_resumed(self, run_id: str, position: int, total_steps: int) -> None:
        self._log.info(
            "regrade.resumed",
            run_id=run_id,
            position=position,
            total_steps=total_steps,
        )

    def regrade_step_started(
        self, run_id: str, step_id: str, position: int, total_steps: int
    ) -> None:
        self._log.info(
            "regrade.step_started",
            run_id=run_id,
            step_id=step_id,
            position=position,
            total_steps=total_steps,
        )

    def regrade_step_completed(
        self, run_id: str, step_id: str, position: int, score: int, progress: int
    ) -> None:
        self._log.info(
            "regrade.step_completed",
            run_id=run_id,
            step_id=step_id,
            position=position,
            score=score,
            progress=progress,
        )

    def regrade_failed(
        self, run_id: str, step_id: str, position: int, reason: str
    ) -> None:
        self._log.error(
            "regrade.failed",
            run_id=run_id,
            step_id=step_id,
            position=position,
            reason=reason,
        )

    def regrade_completed(self, run_id: str, total_steps: int) -> None:
        self._log.info("regrade.completed", run_id=run_id, total_steps=total_steps)

    def regrade_cancelled(self, run_id: str, position: int) -> None:
        self._log.warning("regrade.cancelled", run_id=run_id, position=position)

    def regrade_discarded(self, run_id: str) -> None:
        self._log.info("regrade.discarded", run_id=run_id)
