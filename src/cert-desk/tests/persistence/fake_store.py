"""FakeRunStore — in-memory RunStore with call recording and failure injection."""

from dataclasses import dataclass

from cert_desk.persistence.infrastructure.errors import (
    CertificateConflictError,
    PersistenceError,
    RunNotFoundError,
)
from cert_desk.run.domain.certificate import Certificate
from cert_desk.run.domain.run import Run, RunStatus
from cert_desk.run.domain.step import Step
from tests.run.run_factory import T0


@dataclass(frozen=True)
class StepWrite:
    run_id: str
    step: Step


@dataclass(frozen=True)
class RunWrite:
    run_id: str
    status: RunStatus
    score: int | None


class FakeRunStore:
    """Keeps runs in a dict and records every write.

    Set the ``fail_*`` flags to make the matching operation raise
    PersistenceError. Failed writes are not recorded.
    """

    def __init__(self, runs: list[Run] | None = None) -> None:
        self.runs: dict[str, Run] = {run.id: run for run in runs or []}
        self.created: list[Run] = []
        self.added_steps: list[StepWrite] = []
        self.updated_steps: list[StepWrite] = []
        self.updated_runs: list[RunWrite] = []
        self.certificate_requests: list[str] = []
        self.fail_add_step = False
        self.fail_add_step_id: str | None = None
        self.fail_update_step = False
        self.fail_update_run = False
        self.fail_issue = False

    async def get_run(self, run_id: str) -> Run:
        if run_id not in self.runs:
            raise RunNotFoundError(run_id=run_id)
        return self.runs[run_id]

    async def create_run(self, run: Run) -> Run:
        self.created.append(run)
        self.runs[run.id] = run
        return run

    async def add_step(self, run_id: str, step: Step) -> None:
        if self.fail_add_step or step.id == self.fail_add_step_id:
            raise PersistenceError("add_step unavailable")
        self.added_steps.append(StepWrite(run_id=run_id, step=step))
        self.runs[run_id] = self.runs[run_id].with_appended_step(step)

    async def update_step(self, run_id: str, step: Step) -> None:
        if self.fail_update_step:
            raise PersistenceError("update_step unavailable")
        self.updated_steps.append(StepWrite(run_id=run_id, step=step))
        if run_id in self.runs:
            self.runs[run_id] = self.runs[run_id].with_step(step)

    async def update_run(self, run_id: str, status: RunStatus, score: int | None) -> None:
        if self.fail_update_run:
            raise PersistenceError("update_run unavailable")
        self.updated_runs.append(RunWrite(run_id=run_id, status=status, score=score))
        if run_id in self.runs:
            self.runs[run_id] = self.runs[run_id].model_copy(
                update={"status": status, "score": score}
            )

    async def issue_certificate(self, run_id: str) -> Certificate:
        self.certificate_requests.append(run_id)
        if self.fail_issue:
            raise PersistenceError("certificate service unavailable")
        run = await self.get_run(run_id)
        if run.certificate is not None:
            raise CertificateConflictError(run_id=run_id)
        certificate = Certificate(
            id=f"CERT-{len(self.certificate_requests):08d}",
            run_id=run.id,
            agent_id=run.agent_id,
            agent_name=run.agent_name,
            template_name=run.template_name,
            score=run.score or 0,
            issued_at=T0,
            data_hash="0" * 64,
        )
        self.runs[run_id] = run.model_copy(update={"certificate": certificate})
        return certificate
