"""JsonRunStore — RunStore keeping one JSON document per run in a directory."""

import hashlib
import uuid
from datetime import UTC, datetime
from pathlib import Path

from pydantic import ValidationError

from cert_desk.persistence.infrastructure.errors import (
    CertificateConflictError,
    PersistenceError,
    RunNotFoundError,
)
from cert_desk.run.domain.certificate import Certificate
from cert_desk.run.domain.run import Run, RunStatus
from cert_desk.run.domain.step import Step


def run_data_hash(run: Run) -> str:
    """SHA-256 hex digest of the run's canonical JSON, certificate excluded."""
    canonical = run.model_dump_json(by_alias=True, exclude={"certificate"})
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class JsonRunStore:
    """File-backed store for local use: ``<data_dir>/<run_id>.json``.

    Files are rewritten whole on each change; there is no locking, so one
    process should own a directory at a time.
    """

    def __init__(self, data_dir: Path, issued_by: str | None = None) -> None:
        self._data_dir = data_dir
        self._issued_by = issued_by

    async def get_run(self, run_id: str) -> Run:
        return self._load(run_id)

    async def create_run(self, run: Run) -> Run:
        if self._path(run.id).exists():
            raise PersistenceError(f"run '{run.id}' already exists")
        self._save(run)
        return run

    async def add_step(self, run_id: str, step: Step) -> None:
        run = self._load(run_id)
        self._save(run.with_appended_step(step))

    async def update_step(self, run_id: str, step: Step) -> None:
        run = self._load(run_id)
        self._save(run.with_step(step))

    async def update_run(self, run_id: str, status: RunStatus, score: int | None) -> None:
        run = self._load(run_id)
        self._save(run.model_copy(update={"status": status, "score": score}))

    async def issue_certificate(self, run_id: str) -> Certificate:
        run = self._load(run_id)
        if run.certificate is not None:
            raise CertificateConflictError(run_id=run_id)
        if run.status != "pass" or run.score is None:
            raise PersistenceError(f"run '{run_id}' has not passed")

        certificate = Certificate(
            id=f"CERT-{uuid.uuid4().hex[:8].upper()}",
            run_id=run.id,
            agent_id=run.agent_id,
            agent_name=run.agent_name,
            template_name=run.template_name,
            score=run.score,
            issued_at=datetime.now(UTC),
            issued_by=self._issued_by,
            data_hash=run_data_hash(run),
        )
        self._save(run.model_copy(update={"certificate": certificate}))
        return certificate

    def _path(self, run_id: str) -> Path:
        return self._data_dir / f"{run_id}.json"

    def _load(self, run_id: str) -> Run:
        path = self._path(run_id)
        if not path.is_file():
            raise RunNotFoundError(run_id=run_id)
        try:
            return Run.model_validate_json(path.read_text(encoding="utf-8"))
        except ValidationError as exc:
            raise PersistenceError(f"corrupt run file {path}: {exc}") from exc

    def _save(self, run: Run) -> None:
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            self._path(run.id).write_text(
                run.model_dump_json(by_alias=True, indent=2), encoding="utf-8"
            )
        except OSError as exc:
            raise PersistenceError(f"cannot write run '{run.id}': {exc}") from exc
