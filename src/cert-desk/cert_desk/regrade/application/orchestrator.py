"""RegradeOrchestrator — sequential replay of automated grading across a run."""

import asyncio

from cert_desk.grading.application.session import GradingSession
from cert_desk.grading.domain.errors import RunCertifiedError
from cert_desk.oracle.domain.oracle import GradingOracle
from cert_desk.oracle.domain.verdict import GradeVerdict
from cert_desk.regrade.domain.cancellation import CancellationToken
from cert_desk.regrade.domain.errors import RegradeInProgressError, RegradeStateError
from cert_desk.regrade.domain.observer import RegradeObserver
from cert_desk.regrade.domain.state import RegradeFailure, RegradeState, progress_after
from cert_desk.run.domain.run import Run


class RegradeOrchestrator:
    """Re-scores every scoreable step of a run, one at a time, in run order.

    State machine::

        idle -> running -> completed
                        -> failed -> running   (retry, resumes at the failed step)
                                  -> idle      (discard, restores the snapshot)

    The snapshot taken at ``start`` is the session's Run value at that moment.
    Runs are immutable, so restoring it on discard puts back every step exactly
    as it was, including dropping entries added by the failed attempt.
    """

    def __init__(
        self,
        session: GradingSession,
        oracle: GradingOracle,
        observer: RegradeObserver,
        pacing_seconds: float = 0.0,
        oracle_timeout_seconds: float | None = None,
    ) -> None:
        self._session = session
        self._oracle = oracle
        self._observer = observer
        self._pacing_seconds = pacing_seconds
        self._oracle_timeout_seconds = oracle_timeout_seconds
        self._state = RegradeState()
        self._snapshot: Run | None = None

    @property
    def state(self) -> RegradeState:
        return self._state

    @property
    def snapshot(self) -> Run | None:
        return self._snapshot

    async def start(self, cancellation: CancellationToken | None = None) -> RegradeState:
        """Snapshot the run and regrade every scoreable step from the first.

        Raises:
            RunCertifiedError: if the run carries a certificate.
            RegradeInProgressError: if a regrade is running or awaiting retry/discard.
        """
        run = self._session.run
        if run.is_certified:
            raise RunCertifiedError(run_id=run.id)
        if self._state.phase in ("running", "failed"):
            raise RegradeInProgressError(run_id=run.id, phase=self._state.phase)

        self._snapshot = run
        queue = tuple(step.id for step in run.steps if step.is_scoreable)
        self._state = RegradeState(phase="running", queue=queue, progress=0)
        self._observer.regrade_started(run_id=run.id, total_steps=len(queue))

        await self._drive(start=0, cancellation=cancellation)
        return self._state

    async def retry(self, cancellation: CancellationToken | None = None) -> RegradeState:
        """Resume a failed regrade at the step that failed.

        Raises:
            RegradeStateError: if the regrade is not in the failed phase.
        """
        failure = self._state.failure
        if self._state.phase != "failed" or failure is None:
            raise RegradeStateError(action="retry", phase=self._state.phase)

        self._state = self._state.model_copy(update={"phase": "running", "failure": None})
        self._observer.regrade_resumed(
            run_id=self._session.run.id,
            position=failure.position,
            total_steps=self._state.total,
        )

        await self._drive(start=failure.position, cancellation=cancellation)
        return self._state

    async def discard(self) -> RegradeState:
        """Restore the pre-regrade snapshot and return to idle.

        Raises:
            RegradeStateError: if the regrade is not in the failed phase.
        """
        if self._state.phase != "failed" or self._snapshot is None:
            raise RegradeStateError(action="discard", phase=self._state.phase)

        await self._session.restore(self._snapshot)
        self._snapshot = None
        self._state = RegradeState()
        self._observer.regrade_discarded(run_id=self._session.run.id)
        return self._state

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _drive(self, start: int, cancellation: CancellationToken | None) -> None:
        run_id = self._session.run.id
        queue = self._state.queue
        total = len(queue)

        for position in range(start, total):
            if cancellation is not None and cancellation.cancelled:
                # Phase stays "running" and the snapshot is kept: this orchestrator
                # accepts no further start, retry or discard.
                self._observer.regrade_cancelled(run_id=run_id, position=position)
                return

            step_id = queue[position]
            self._state = self._state.model_copy(update={"current_position": position})
            self._observer.regrade_step_started(
                run_id=run_id, step_id=step_id, position=position, total_steps=total
            )

            question, answer = transcript_context(self._session.run, step_id)
            try:
                verdict = await self._grade(question=question, answer=answer)
                await self._session.add_automated_review(
                    step_id=step_id, score=verdict.score, reasoning=verdict.reasoning
                )
            except Exception as exc:
                reason = str(exc) or type(exc).__name__
                self._state = self._state.model_copy(
                    update={
                        "phase": "failed",
                        "failure": RegradeFailure(
                            step_id=step_id, position=position, message=reason
                        ),
                    }
                )
                self._observer.regrade_failed(
                    run_id=run_id, step_id=step_id, position=position, reason=reason
                )
                return

            progress = progress_after(position=position, total=total)
            self._state = self._state.model_copy(update={"progress": progress})
            self._observer.regrade_step_completed(
                run_id=run_id,
                step_id=step_id,
                position=position,
                score=verdict.score,
                progress=progress,
            )

            if position < total - 1 and self._pacing_seconds > 0:
                await asyncio.sleep(self._pacing_seconds)

        self._state = self._state.model_copy(
            update={"phase": "completed", "progress": 100, "current_position": None}
        )
        self._observer.regrade_completed(run_id=run_id, total_steps=total)

    async def _grade(self, question: str, answer: str) -> GradeVerdict:
        if self._oracle_timeout_seconds is None:
            return await self._oracle.re_evaluate(question=question, answer=answer)
        async with asyncio.timeout(self._oracle_timeout_seconds):
            return await self._oracle.re_evaluate(question=question, answer=answer)


def transcript_context(run: Run, step_id: str) -> tuple[str, str]:
    """Return (question, answer): the nearest interviewer and agent steps before ``step_id``."""
    question = ""
    answer = ""
    found_question = False
    found_answer = False
    for step in reversed(run.steps[: run.step_index(step_id)]):
        if step.role == "interviewer" and not found_question:
            question = step.content
            found_question = True
        elif step.role == "agent" and not found_answer:
            answer = step.content
            found_answer = True
        if found_question and found_answer:
            break
    return question, answer
