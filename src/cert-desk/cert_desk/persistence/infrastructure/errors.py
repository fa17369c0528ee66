"""Error types raised by persistence infrastructure."""

from cert_desk.core.errors import CertDeskError


class PersistenceError(CertDeskError):
    """Raised when the run store cannot be reached or rejects a request."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to persist: {reason}", retriable=True)


class RunNotFoundError(CertDeskError):
    """Raised when the requested run does not exist in the store."""

    def __init__(self, run_id: str) -> None:
        self.run_id = run_id
        super().__init__(f"Failed to load run: '{run_id}' not found")


class CertificateConflictError(CertDeskError):
    """Raised when a certificate is requested for a run that already has one."""

    def __init__(self, run_id: str) -> None:
        self.run_id = run_id
        super().__init__(f"Failed to issue certificate: run '{run_id}' is already certified")
