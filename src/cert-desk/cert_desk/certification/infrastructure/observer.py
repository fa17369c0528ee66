"""Structlog implementation of the CertificationObserver port."""

import structlog


class StructlogCertificationObserver:
    """Delegates certification domain events to structlog.

    Satisfies the CertificationObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def certificate_issue_started(self, run_id: str) -> None:
        self._log.info("certification.issue_started", run_id=run_id)

    def certificate_issued(self, run_id: str, certificate_id: str, score: int) -> None:
        self._log.info(
            "certification.issued",
            run_id=run_id,
            certificate_id=certificate_id,
            score=score,
        )

    def certificate_issue_failed(self, run_id: str, reason: str) -> None:
        self._log.error("certification.issue_failed", run_id=run_id, reason=reason)
