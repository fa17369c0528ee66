"""GradingSession — the election protocol applied to one live run."""

from collections.abc import Callable
from typing import TypeAlias
from datetime import UTC, datetime

from cert_desk.core.errors import CertDeskError
from cert_desk.grading.domain.errors import (
    ReviewValidationError,
    RunCertifiedError,
    StepNotGradableError,
)
from cert_desk.grading.domain.history import (
    IndexedEntry,
    append_entry,
    display_order,
    elect_entry,
)
from cert_desk.grading.domain.observer import GradingObserver
from cert_desk.persistence.domain.store import RunStore
from cert_desk.run.domain.grade_entry import GradeEntry, GradeSource
from cert_desk.run.domain.run import Run
from cert_desk.run.domain.step import Step

Clock: TypeAlias = Callable[[], datetime]

DEFAULT_PASS_THRESHOLD = 70


def utc_now() -> datetime:
    return datetime.now(UTC)


class GradingSession:
    """Owns the in-memory Run and applies reviews and elections to it.

    The in-memory run is authoritative: every change is applied locally first
    and only then handed to the store. A failed save is reported to the
    observer and the local change stays in place until a later fetch replaces
    the run.

    The session does not guard against concurrent callers; one UI context owns
    one session.
    """

    def __init__(
        self,
        run: Run,
        store: RunStore,
        observer: GradingObserver,
        pass_threshold: int = DEFAULT_PASS_THRESHOLD,
        clock: Clock = utc_now,
    ) -> None:
        self._run = run
        self._store = store
        self._observer = observer
        self._pass_threshold = pass_threshold
        self._clock = clock

    @property
    def run(self) -> Run:
        return self._run

    def entries(self, step_id: str) -> list[IndexedEntry]:
        """Return the step's entries, elected first, others most-recent first."""
        return display_order(self._run.get_step(step_id))

    def gradable_step(self, step_id: str) -> Step:
        """Return the step if it may take a new grade entry.

        Raises:
            RunCertifiedError, StepNotFoundError, StepNotGradableError: as add_human_review.
        """
        if self._run.is_certified:
            raise RunCertifiedError(run_id=self._run.id)
        step = self._run.get_step(step_id)
        if step.role != "system":
            raise StepNotGradableError(step_id=step_id, role=step.role)
        return step

    async def add_human_review(self, step_id: str, score: int, note: str) -> Step:
        """Append and elect a human grade entry.

        Raises:
            ReviewValidationError: if ``note`` is blank or ``score`` is out of range.
            RunCertifiedError: if the run already carries a certificate.
            StepNotFoundError: if ``step_id`` is not in the run.
            StepNotGradableError: if the step is not a system step.
        """
        if not note.strip():
            raise ReviewValidationError("a human review requires a note")
        return await self._add_review(
            step_id=step_id, source="human", score=score, reasoning=note
        )

    async def add_automated_review(
        self, step_id: str, score: int, reasoning: str
    ) -> Step:
        """Append and elect an automated grade entry. Raises as add_human_review."""
        return await self._add_review(
            step_id=step_id, source="automated", score=score, reasoning=reasoning
        )

    async def elect(self, step_id: str, entry_index: int) -> Step:
        """Make the entry at ``entry_index`` the step's authoritative grade.

        Raises:
            EntryIndexError: if the index is outside the step's history.
            RunCertifiedError, StepNotFoundError, StepNotGradableError: as above.
        """
        step = self.gradable_step(step_id)
        updated = elect_entry(step, entry_index, at=self._clock())
        run_changed = self._apply(updated)
        self._observer.entry_elected(
            run_id=self._run.id,
            step_id=step_id,
            entry_index=entry_index,
            score=updated.grading_history[entry_index].score,
        )
        await self._persist(step=updated, run_changed=run_changed)
        return updated

    async def restore(self, snapshot: Run) -> None:
        """Replace the live run with ``snapshot`` and save every step that differs."""
        if snapshot.id != self._run.id:
            raise ValueError(
                f"snapshot of run '{snapshot.id}' cannot restore run '{self._run.id}'"
            )
        live_steps = {step.id: step for step in self._run.steps}
        changed = [step for step in snapshot.steps if live_steps.get(step.id) != step]
        run_changed = (snapshot.score, snapshot.status) != (
            self._run.score,
            self._run.status,
        )

        self._run = snapshot
        self._observer.run_restored(run_id=snapshot.id, restored_steps=len(changed))

        for step in changed:
            await self._persist_step(step)
        if run_changed:
            await self._persist_run()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _add_review(
        self, step_id: str, source: GradeSource, score: int, reasoning: str
    ) -> Step:
        _validate_score(score)
        step = self.gradable_step(step_id)

        now = self._clock()
        entry = GradeEntry(
            source=source, score=score, reasoning=reasoning, created_at=now
        )
        updated = append_entry(step, entry, at=now)
        run_changed = self._apply(updated)
        self._observer.review_added(
            run_id=self._run.id,
            step_id=step_id,
            source=source,
            score=score,
            history_size=len(updated.grading_history),
        )
        await self._persist(step=updated, run_changed=run_changed)
        return updated

    def _apply(self, step: Step) -> bool:
        """Swap ``step`` into the run and recompute its score; True if score/status moved."""
        run = self._run.with_step(step)
        score = run.average_score()
        status = run.status
        # Only a resolved run flips; a running one resolves when execution ends.
        if status != "running" and score is not None:
            status = "pass" if score >= self._pass_threshold else "fail"

        run_changed = (score, status) != (run.score, run.status)
        self._run = run.model_copy(update={"score": score, "status": status})
        if run_changed:
            self._observer.run_score_changed(
                run_id=self._run.id, score=score, status=status
            )
        return run_changed

    async def _persist(self, step: Step, run_changed: bool) -> None:
        await self._persist_step(step)
        if run_changed:
            await self._persist_run()

    async def _persist_step(self, step: Step) -> None:
        try:
            await self._store.update_step(run_id=self._run.id, step=step)
        except CertDeskError as exc:
            self._observer.step_persist_failed(
                run_id=self._run.id, step_id=step.id, reason=str(exc)
            )

    async def _persist_run(self) -> None:
        try:
            await self._store.update_run(
                run_id=self._run.id, status=self._run.status, score=self._run.score
            )
        except CertDeskError as exc:
            self._observer.run_persist_failed(run_id=self._run.id, reason=str(exc))


def _validate_score(score: int) -> None:
    if isinstance(score, bool) or not isinstance(score, int):
        raise ReviewValidationError(f"score must be an integer, got {score!r}")
    if not 0 <= score <= 100:
        raise ReviewValidationError(f"score must be between 0 and 100, got {score}")
