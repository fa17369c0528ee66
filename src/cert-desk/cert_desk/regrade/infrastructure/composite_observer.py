"""CompositeRegradeObserver — fans out all events to a list of observers."""

from cert_desk.regrade.domain.observer import RegradeObserver


class CompositeRegradeObserver:
    """Delegates every observer event to each observer in order.

    Does NOT inherit from RegradeObserver (structural typing via Protocol).
    """

    def __init__(self, observers: list[RegradeObserver]) -> None:
        self._observers = observers

    def regrade_started(self, run_id: str, total_steps: int) -> None:
        for obs in self._observers:
            obs.regrade_started(run_id=run_id, total_steps=total_steps)

    def regrade_resumed(self, run_id: str, position: int, total_steps: int) -> None:
        for obs in self._observers:
            obs.regrade_resumed(
                run_id=run_id, position=position, total_steps=total_steps
            )

    def regrade_step_started(
        self, run_id: str, step_id: str, position: int, total_steps: int
    ) -> None:
        for obs in self._observers:
            obs.regrade_step_started(
                run_id=run_id,
                step_id=step_id,
                position=position,
                total_steps=total_steps,
            )

    def regrade_step_completed(
        self, run_id: str, step_id: str, position: int, score: int, progress: int
    ) -> None:
        for obs in self._observers:
            obs.regrade_step_completed(
                run_id=run_id,
                step_id=step_id,
                position=position,
                score=score,
                progress=progress,
            )

    def regrade_failed(
        self, run_id: str, step_id: str, position: int, reason: str
    ) -> None:
        for obs in self._observers:
            obs.regrade_failed(
                run_id=run_id, step_id=step_id, position=position, reason=reason
            )

    def regrade_completed(self, run_id: str, total_steps: int) -> None:
        for obs in self._observers:
            obs.regrade_completed(run_id=run_id, total_steps=total_steps)

    def regrade_cancelled(self, run_id: str, position: int) -> None:
        for obs in self._observers:
            obs.regrade_cancelled(run_id=run_id, position=position)

    def regrade_discarded(self, run_id: str) -> None:
        for obs in self._observers:
            obs.regrade_discarded(run_id=run_id)
