"""HttpRunStore — RunStore backed by the console's REST API."""

import asyncio
from typing import Any, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from cert_desk.persistence.infrastructure.errors import (
    CertificateConflictError,
    PersistenceError,
    RunNotFoundError,
)
from cert_desk.run.domain.certificate import Certificate
from cert_desk.run.domain.run import Run, RunStatus
from cert_desk.run.domain.step import Step


class HttpRunStore:
    """Talks JSON to the run service with a blocking ``requests.Session``.

    Every request runs in a worker thread so the event loop is never blocked.
    Payloads use the service's camelCase field names.
    """

    def __init__(
        self,
        base_url: str,
        api_token: str | None = None,
        timeout_seconds: float = 20.0,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._session = session if session is not None else requests.Session()
        if api_token:
            self._session.headers["Authorization"] = f"Bearer {api_token}"

    async def get_run(self, run_id: str) -> Run:
        body = await self._request("GET", f"/api/runs/{run_id}", run_id=run_id)
        return _parse(Run, body)

    async def create_run(self, run: Run) -> Run:
        body = await self._request(
            "POST", "/api/runs", payload=run.model_dump(mode="json", by_alias=True)
        )
        if body is None:
            return run
        return _parse(Run, body)

    async def add_step(self, run_id: str, step: Step) -> None:
        await self._request(
            "POST",
            f"/api/runs/{run_id}/steps",
            payload=step.model_dump(mode="json", by_alias=True),
            run_id=run_id,
        )

    async def update_step(self, run_id: str, step: Step) -> None:
        payload = {
            "gradingHistory": [
                entry.model_dump(mode="json", by_alias=True)
                for entry in step.grading_history
            ],
            "content": step.content,
        }
        await self._request(
            "PATCH", f"/api/runs/{run_id}/steps/{step.id}", payload=payload, run_id=run_id
        )

    async def update_run(self, run_id: str, status: RunStatus, score: int | None) -> None:
        await self._request(
            "PATCH",
            f"/api/runs/{run_id}",
            payload={"status": status, "score": score},
            run_id=run_id,
        )

    async def issue_certificate(self, run_id: str) -> Certificate:
        body = await self._request(
            "POST", "/api/certificates", payload={"run_id": run_id}, run_id=run_id
        )
        return _parse(Certificate, body)

    async def _request(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
        run_id: str | None = None,
    ) -> Any:
        return await asyncio.to_thread(self._send, method, path, payload, run_id)

    def _send(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None,
        run_id: str | None,
    ) -> Any:
        url = f"{self._base_url}{path}"
        try:
            response = self._session.request(
                method, url, json=payload, timeout=self._timeout
            )
        except requests.exceptions.RequestException as exc:
            raise PersistenceError(f"{method} {path}: {exc}") from exc

        if response.status_code == 404 and run_id is not None:
            raise RunNotFoundError(run_id=run_id)
        if response.status_code == 409 and path == "/api/certificates" and run_id:
            raise CertificateConflictError(run_id=run_id)
        if not response.ok:
            raise PersistenceError(f"{method} {path} returned HTTP {response.status_code}")

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise PersistenceError(f"{method} {path} returned invalid JSON") from exc


M = TypeVar("M", bound=BaseModel)


def _parse(model: type[M], body: Any) -> M:
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        raise PersistenceError(f"unexpected {model.__name__} payload: {exc}") from exc
