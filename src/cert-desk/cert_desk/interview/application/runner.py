"""InterviewRunner — executes a template against an agent and records the run."""

import asyncio
import uuid
from collections.abc import Callable

from cert_desk.core.errors import CertDeskError
from cert_desk.grading.application.session import (
    DEFAULT_PASS_THRESHOLD,
    Clock,
    utc_now,
)
from cert_desk.interview.domain.observer import InterviewObserver
from cert_desk.interview.domain.responder import AgentResponder
from cert_desk.interview.domain.template import Criterion, Template
from cert_desk.oracle.domain.oracle import GradingOracle
from cert_desk.persistence.domain.store import RunStore
from cert_desk.run.domain.grade_entry import GradeEntry
from cert_desk.run.domain.run import Run, RunStatus
from cert_desk.run.domain.step import Step


def _new_run_id() -> str:
    return f"RUN-{uuid.uuid4().hex[:8].upper()}"


class InterviewRunner:
    """Asks every criterion in order, grades each answer, and resolves the run.

    Each criterion produces three steps: the interviewer's question, the
    agent's answer, and a system verdict carrying one elected automated grade.
    Steps are appended locally and then saved through the store one by one.

    One runner executes one interview at a time.
    """

    def __init__(
        self,
        store: RunStore,
        oracle: GradingOracle,
        responder: AgentResponder,
        observer: InterviewObserver,
        pass_threshold: int = DEFAULT_PASS_THRESHOLD,
        pacing_seconds: float = 0.0,
        clock: Clock = utc_now,
        run_id_factory: Callable[[], str] = _new_run_id,
    ) -> None:
        self._store = store
        self._oracle = oracle
        self._responder = responder
        self._observer = observer
        self._pass_threshold = pass_threshold
        self._pacing_seconds = pacing_seconds
        self._clock = clock
        self._run_id_factory = run_id_factory
        self._run: Run | None = None

    async def run(self, template: Template, agent_id: str, agent_name: str) -> Run:
        """Interview the agent and return the resolved run.

        Any CertDeskError ends the interview early: the run gets a failed
        system step and status ``fail``, and is returned rather than raised.
        Store failures while recording that abort propagate.
        """
        run = Run(
            id=self._run_id_factory(),
            agent_id=agent_id,
            agent_name=agent_name,
            timestamp=self._clock(),
            status="running",
            template_name=template.name,
        )
        self._run = await self._store.create_run(run)
        self._observer.interview_started(
            run_id=run.id,
            template_name=template.name,
            total_criteria=len(template.criteria),
        )

        try:
            for index, criterion in enumerate(template.criteria):
                if index > 0 and self._pacing_seconds > 0:
                    await asyncio.sleep(self._pacing_seconds)
                await self._ask(template=template, criterion=criterion, index=index)
        except CertDeskError as exc:
            return await self._abort(reason=str(exc))

        score = self._current.average_score() or 0
        status: RunStatus = "pass" if score >= self._pass_threshold else "fail"
        await self._append(
            Step(
                id="end",
                role="system",
                content=f"Evaluation Complete. Final Score: {score}/100",
                timestamp=self._clock(),
                status=status,
            )
        )
        run = await self._resolve(status=status, score=score)
        self._observer.interview_completed(run_id=run.id, score=score, status=status)
        return run

    @property
    def _current(self) -> Run:
        if self._run is None:
            raise RuntimeError("no interview in progress")
        return self._run

    async def _ask(self, template: Template, criterion: Criterion, index: int) -> None:
        await self._append(
            Step(
                id=f"q-{index}",
                role="interviewer",
                content=criterion.prompt,
                timestamp=self._clock(),
                status="info",
            )
        )

        answer = await self._responder.respond(question=criterion.prompt)
        await self._append(
            Step(
                id=f"a-{index}",
                role="agent",
                content=answer,
                timestamp=self._clock(),
                status="info",
            )
        )

        verdict = await self._oracle.evaluate(
            question=criterion.prompt, answer=answer, expected=criterion.expected
        )
        graded_at = self._clock()
        passed = verdict.score >= criterion.min_score
        entry = GradeEntry(
            source="automated",
            score=verdict.score,
            reasoning=verdict.reasoning,
            created_at=graded_at,
            elected_at=graded_at,
            is_elected=True,
        )
        await self._append(
            Step(
                id=f"g-{index}",
                role="system",
                content=verdict.reasoning,
                timestamp=graded_at,
                status="pass" if passed else "fail",
                score=verdict.score,
                category=template.category,
                grading_history=(entry,),
            )
        )
        self._observer.criterion_graded(
            run_id=self._current.id,
            criterion_id=criterion.id,
            score=verdict.score,
            passed=passed,
        )

    async def _abort(self, reason: str) -> Run:
        await self._append(
            Step(
                id="error",
                role="system",
                content=f"Interview error: {reason}",
                timestamp=self._clock(),
                status="fail",
            )
        )
        run = await self._resolve(status="fail", score=self._current.average_score())
        self._observer.interview_failed(run_id=run.id, reason=reason)
        return run

    async def _resolve(self, status: RunStatus, score: int | None) -> Run:
        run = self._current.model_copy(update={"status": status, "score": score})
        self._run = None
        await self._store.update_run(run_id=run.id, status=status, score=score)
        return run

    async def _append(self, step: Step) -> None:
        # The local run keeps a step even when the store rejects it.
        self._run = self._current.with_appended_step(step)
        await self._store.add_step(run_id=self._run.id, step=step)
