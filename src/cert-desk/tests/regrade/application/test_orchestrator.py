"""Tests for RegradeOrchestrator — sequencing, failure, retry, discard, cancel."""

import pytest

from cert_desk.grading.application.session import GradingSession
from cert_desk.grading.domain.errors import RunCertifiedError
from cert_desk.oracle.domain.verdict import GradeVerdict
from cert_desk.regrade.application.orchestrator import (
    RegradeOrchestrator,
    transcript_context,
)
from cert_desk.regrade.domain.cancellation import CancellationToken
from cert_desk.regrade.domain.errors import RegradeInProgressError, RegradeStateError
from cert_desk.run.domain.run import Run
from cert_desk.run.domain.step import Step
from tests.grading.fake_observer import FakeGradingObserver
from tests.oracle.fake_oracle import FakeGradingOracle, Hang, Outcome, oracle_failure
from tests.persistence.fake_store import FakeRunStore
from tests.regrade.fake_observer import (
    FakeRegradeObserver,
    RegradeCompletedEvent,
    RegradeFailedEvent,
    RegradeStartedEvent,
)
from tests.run.run_factory import (
    FakeClock,
    make_answer,
    make_certificate,
    make_graded_step,
    make_interview_run,
    make_question,
    make_run,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _verdict(score: int, reasoning: str = "Re-graded.") -> GradeVerdict:
    return GradeVerdict(score=score, reasoning=reasoning)


class _Harness:
    def __init__(
        self,
        run: Run,
        outcomes: list[Outcome] | None = None,
        observer: FakeRegradeObserver | None = None,
        oracle_timeout_seconds: float | None = None,
        store: FakeRunStore | None = None,
    ) -> None:
        self.store = store if store is not None else FakeRunStore(runs=[run])
        self.grading_observer = FakeGradingObserver()
        self.session = GradingSession(
            run=run,
            store=self.store,
            observer=self.grading_observer,
            clock=FakeClock(),
        )
        self.oracle = FakeGradingOracle(outcomes=outcomes)
        self.observer = observer if observer is not None else FakeRegradeObserver()
        self.orchestrator = RegradeOrchestrator(
            session=self.session,
            oracle=self.oracle,
            observer=self.observer,
            oracle_timeout_seconds=oracle_timeout_seconds,
        )


class _CrashingStore(FakeRunStore):
    async def update_step(self, run_id: str, step: Step) -> None:
        raise RuntimeError("disk full")


class _CancelAfterFirstStep(FakeRegradeObserver):
    def __init__(self, token: CancellationToken) -> None:
        super().__init__()
        self._token = token

    def regrade_step_completed(
        self, run_id: str, step_id: str, position: int, score: int, progress: int
    ) -> None:
        super().regrade_step_completed(run_id, step_id, position, score, progress)
        self._token.cancel()


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


class TestSuccessfulRegrade:
    async def test_every_scoreable_step_regraded_in_order(self) -> None:
        h = _Harness(
            make_interview_run([90, 80, 70]),
            outcomes=[_verdict(50), _verdict(60), _verdict(70)],
        )

        state = await h.orchestrator.start()

        assert state.phase == "completed"
        assert [h.session.run.get_step(f"g-{i}").score for i in range(3)] == [50, 60, 70]
        assert [call.question for call in h.oracle.calls] == [
            "Question 0?",
            "Question 1?",
            "Question 2?",
        ]
        assert all(call.mode == "re_evaluate" for call in h.oracle.calls)

    async def test_oracle_sees_preceding_answer(self) -> None:
        h = _Harness(make_interview_run([90]))

        await h.orchestrator.start()

        assert h.oracle.calls[0].answer == "Answer 0."

    async def test_progress_after_each_step(self) -> None:
        h = _Harness(make_interview_run([90, 80, 70]))

        state = await h.orchestrator.start()

        assert [event.progress for event in h.observer.step_completed] == [33, 66, 100]
        assert state.progress == 100
        assert state.current_position is None

    async def test_new_entries_are_elected_automated(self) -> None:
        h = _Harness(make_interview_run([90]), outcomes=[_verdict(42, "Shallow.")])

        await h.orchestrator.start()

        step = h.session.run.get_step("g-0")
        assert len(step.grading_history) == 2
        assert step.grading_history[-1].source == "automated"
        assert step.grading_history[-1].is_elected is True
        assert step.content == "Shallow."

    async def test_human_graded_step_keeps_human_entry(self) -> None:
        h = _Harness(make_interview_run([90]), outcomes=[_verdict(65)])
        await h.session.add_human_review(step_id="g-0", score=30, note="Nope.")

        await h.orchestrator.start()

        step = h.session.run.get_step("g-0")
        assert [entry.source for entry in step.grading_history] == [
            "automated",
            "human",
            "automated",
        ]
        assert step.score == 65
        assert step.is_human_graded is False

    async def test_run_score_updated(self) -> None:
        h = _Harness(
            make_interview_run([90, 90]), outcomes=[_verdict(40), _verdict(50)]
        )

        await h.orchestrator.start()

        assert h.session.run.score == 45
        assert h.session.run.status == "fail"

    async def test_emits_started_and_completed(self) -> None:
        h = _Harness(make_interview_run([90, 80]))

        await h.orchestrator.start()

        assert h.observer.started == [RegradeStartedEvent(run_id="RUN-1", total_steps=2)]
        assert h.observer.completed == [RegradeCompletedEvent(run_id="RUN-1", total_steps=2)]

    async def test_empty_queue_completes_immediately(self) -> None:
        h = _Harness(make_run(steps=(make_question(), make_answer())))

        state = await h.orchestrator.start()

        assert state.phase == "completed"
        assert state.progress == 100
        assert h.oracle.calls == []

    async def test_can_start_again_after_completion(self) -> None:
        h = _Harness(make_interview_run([90]))
        await h.orchestrator.start()

        state = await h.orchestrator.start()

        assert state.phase == "completed"
        assert len(h.oracle.calls) == 2


# ---------------------------------------------------------------------------
# Failure, retry, discard
# ---------------------------------------------------------------------------


class TestFailure:
    async def test_stops_at_failing_step(self) -> None:
        h = _Harness(
            make_interview_run([90, 80, 70]),
            outcomes=[_verdict(55), oracle_failure("rate limited")],
        )

        state = await h.orchestrator.start()

        assert state.phase == "failed"
        assert state.failure is not None
        assert state.failure.position == 1
        assert state.failure.step_id == "g-1"
        assert "rate limited" in state.failure.message
        assert state.progress == 33
        assert len(h.oracle.calls) == 2

    async def test_earlier_steps_keep_new_grade(self) -> None:
        h = _Harness(
            make_interview_run([90, 80, 70]),
            outcomes=[_verdict(55), oracle_failure()],
        )

        await h.orchestrator.start()

        assert h.session.run.get_step("g-0").score == 55
        assert h.session.run.get_step("g-1").score == 80
        assert h.session.run.get_step("g-2").score == 70

    async def test_emits_failed_event(self) -> None:
        h = _Harness(make_interview_run([90, 80]), outcomes=[oracle_failure("boom")])

        await h.orchestrator.start()

        assert h.observer.failed == [
            RegradeFailedEvent(
                run_id="RUN-1",
                step_id="g-0",
                position=0,
                reason="Failed to grade answer: boom",
            )
        ]
        assert h.observer.completed == []

    async def test_oracle_timeout_is_a_failure(self) -> None:
        h = _Harness(
            make_interview_run([90, 80]),
            outcomes=[Hang()],
            oracle_timeout_seconds=0.01,
        )

        state = await h.orchestrator.start()

        assert state.phase == "failed"
        assert state.failure is not None
        assert state.failure.position == 0
        assert state.failure.message == "TimeoutError"

    async def test_unexpected_oracle_error_is_a_failure(self) -> None:
        run = make_interview_run([80, 60, 90])
        h = _Harness(run, outcomes=[_verdict(40), ValueError("bad payload")])

        state = await h.orchestrator.start()

        assert state.phase == "failed"
        assert state.failure is not None
        assert state.failure.position == 1
        assert state.failure.message == "bad payload"
        assert h.observer.failed[0].step_id == "g-1"

        await h.orchestrator.discard()

        assert h.session.run == run

    async def test_unexpected_store_error_is_a_failure(self) -> None:
        run = make_interview_run([80, 60])
        h = _Harness(run, outcomes=[_verdict(40)], store=_CrashingStore(runs=[run]))

        state = await h.orchestrator.start()

        assert state.phase == "failed"
        assert state.failure is not None
        assert state.failure.step_id == "g-0"
        assert state.failure.message == "disk full"

    async def test_start_while_failed_is_rejected(self) -> None:
        h = _Harness(make_interview_run([90]), outcomes=[oracle_failure()])
        await h.orchestrator.start()

        with pytest.raises(RegradeInProgressError):
            await h.orchestrator.start()


class TestPersistenceFailure:
    async def test_step_write_failures_are_reported_and_regrade_completes(self) -> None:
        h = _Harness(
            make_interview_run([90, 80, 70]),
            outcomes=[_verdict(50), _verdict(60), _verdict(70)],
        )
        h.store.fail_update_step = True

        state = await h.orchestrator.start()

        assert state.phase == "completed"
        assert [h.session.run.get_step(f"g-{i}").score for i in range(3)] == [50, 60, 70]
        assert [f.step_id for f in h.grading_observer.step_persist_failures] == [
            "g-0",
            "g-1",
            "g-2",
        ]
        assert h.store.updated_steps == []


class TestRetry:
    async def test_retry_resumes_at_failed_step(self) -> None:
        h = _Harness(
            make_interview_run([90, 80, 70]),
            outcomes=[_verdict(55), oracle_failure(), _verdict(65), _verdict(75)],
        )
        await h.orchestrator.start()
        calls_before_retry = len(h.oracle.calls)

        state = await h.orchestrator.retry()

        retried = h.oracle.calls[calls_before_retry:]
        assert [call.question for call in retried] == ["Question 1?", "Question 2?"]
        assert state.phase == "completed"
        assert state.progress == 100
        assert [h.session.run.get_step(f"g-{i}").score for i in range(3)] == [55, 65, 75]

    async def test_retry_does_not_regrade_completed_steps_twice(self) -> None:
        h = _Harness(
            make_interview_run([90, 80, 70]),
            outcomes=[_verdict(55), oracle_failure()],
        )
        await h.orchestrator.start()

        await h.orchestrator.retry()

        assert len(h.session.run.get_step("g-0").grading_history) == 2

    async def test_retry_emits_resumed(self) -> None:
        h = _Harness(make_interview_run([90, 80]), outcomes=[_verdict(1), oracle_failure()])
        await h.orchestrator.start()

        await h.orchestrator.retry()

        assert len(h.observer.resumed) == 1
        assert h.observer.resumed[0].position == 1
        assert h.observer.resumed[0].total_steps == 2

    async def test_retry_can_fail_again(self) -> None:
        h = _Harness(
            make_interview_run([90, 80]),
            outcomes=[oracle_failure("first"), oracle_failure("second")],
        )
        await h.orchestrator.start()

        state = await h.orchestrator.retry()

        assert state.phase == "failed"
        assert state.failure is not None
        assert "second" in state.failure.message

    async def test_retry_outside_failed_phase(self) -> None:
        h = _Harness(make_interview_run([90]))

        with pytest.raises(RegradeStateError):
            await h.orchestrator.retry()

        await h.orchestrator.start()

        with pytest.raises(RegradeStateError):
            await h.orchestrator.retry()


class TestDiscard:
    async def test_discard_restores_snapshot_exactly(self) -> None:
        run = make_interview_run([90, 80, 70])
        h = _Harness(run, outcomes=[_verdict(55), _verdict(44), oracle_failure()])
        await h.orchestrator.start()

        state = await h.orchestrator.discard()

        assert h.session.run == run
        assert state.phase == "idle"
        assert h.orchestrator.snapshot is None

    async def test_discard_persists_restored_steps(self) -> None:
        run = make_interview_run([90, 80, 70])
        h = _Harness(run, outcomes=[_verdict(55), oracle_failure()])
        await h.orchestrator.start()
        h.store.updated_steps.clear()

        await h.orchestrator.discard()

        assert [write.step for write in h.store.updated_steps] == [run.get_step("g-0")]
        assert h.store.runs["RUN-1"].get_step("g-0") == run.get_step("g-0")

    async def test_discard_emits_event(self) -> None:
        h = _Harness(make_interview_run([90]), outcomes=[oracle_failure()])
        await h.orchestrator.start()

        await h.orchestrator.discard()

        assert len(h.observer.discarded) == 1

    async def test_start_allowed_after_discard(self) -> None:
        h = _Harness(make_interview_run([90]), outcomes=[oracle_failure()])
        await h.orchestrator.start()
        await h.orchestrator.discard()

        state = await h.orchestrator.start()

        assert state.phase == "completed"

    async def test_discard_outside_failed_phase(self) -> None:
        h = _Harness(make_interview_run([90]))

        with pytest.raises(RegradeStateError):
            await h.orchestrator.discard()


# ---------------------------------------------------------------------------
# Cancellation and guards
# ---------------------------------------------------------------------------


class TestCancellation:
    async def test_cancelled_before_start_grades_nothing(self) -> None:
        h = _Harness(make_interview_run([90, 80]))
        token = CancellationToken()
        token.cancel()

        state = await h.orchestrator.start(cancellation=token)

        assert h.oracle.calls == []
        assert state.phase == "running"
        assert h.observer.cancelled[0].position == 0

    async def test_cancel_mid_run_stops_before_next_step(self) -> None:
        token = CancellationToken()
        h = _Harness(
            make_interview_run([90, 80, 70]), observer=_CancelAfterFirstStep(token)
        )

        state = await h.orchestrator.start(cancellation=token)

        assert len(h.oracle.calls) == 1
        assert state.phase == "running"
        assert state.progress == 33
        assert h.observer.cancelled[0].position == 1
        assert h.observer.completed == []

    async def test_cancelled_regrade_blocks_new_start(self) -> None:
        h = _Harness(make_interview_run([90]))
        token = CancellationToken()
        token.cancel()
        await h.orchestrator.start(cancellation=token)

        with pytest.raises(RegradeInProgressError):
            await h.orchestrator.start()


class TestGuards:
    async def test_certified_run_cannot_be_regraded(self) -> None:
        run = make_interview_run([90]).model_copy(
            update={"certificate": make_certificate(score=90)}
        )
        h = _Harness(run)

        with pytest.raises(RunCertifiedError):
            await h.orchestrator.start()

        assert h.orchestrator.state.phase == "idle"
        assert h.oracle.calls == []

    async def test_snapshot_is_run_at_start(self) -> None:
        run = make_interview_run([90])
        h = _Harness(run, outcomes=[oracle_failure()])

        await h.orchestrator.start()

        assert h.orchestrator.snapshot == run


# ---------------------------------------------------------------------------
# transcript_context
# ---------------------------------------------------------------------------


class TestTranscriptContext:
    def test_nearest_question_and_answer(self) -> None:
        run = make_interview_run([90, 80])

        assert transcript_context(run, "g-1") == ("Question 1?", "Answer 1.")

    def test_missing_context_is_empty(self) -> None:
        run = make_run(steps=(make_graded_step("g-0", 90),))

        assert transcript_context(run, "g-0") == ("", "")
