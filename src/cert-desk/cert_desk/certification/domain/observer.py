"""CertificationObserver port — domain events emitted around certificate issuance."""

from typing import Protocol


class CertificationObserver(Protocol):
    def certificate_issue_started(self, run_id: str) -> None: ...

    def certificate_issued(
        self, run_id: str, certificate_id: str, score: int
    ) -> None: ...

    def certificate_issue_failed(self, run_id: str, reason: str) -> None: ...
