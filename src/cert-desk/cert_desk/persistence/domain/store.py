"""RunStore Protocol — structural interface of the persistence collaborator."""

from typing import Protocol

from cert_desk.run.domain.certificate import Certificate
from cert_desk.run.domain.run import Run, RunStatus
from cert_desk.run.domain.step import Step


class RunStore(Protocol):
    """Durable storage for runs, their steps, and issued certificates.

    Implementations raise a CertDeskError subclass on failure.
    """

    async def get_run(self, run_id: str) -> Run: ...

    async def create_run(self, run: Run) -> Run: ...

    async def add_step(self, run_id: str, step: Step) -> None: ...

    async def update_step(self, run_id: str, step: Step) -> None: ...

    async def update_run(
        self, run_id: str, status: RunStatus, score: int | None
    ) -> None: ...

    async def issue_certificate(self, run_id: str) -> Certificate: ...
