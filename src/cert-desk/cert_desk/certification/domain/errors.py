"""Error types raised by the certification gate."""

from cert_desk.core.errors import CertDeskError


class CertificationIneligibleError(CertDeskError):
    """Raised when issuance is requested for a run that is not eligible."""

    def __init__(self, run_id: str, reason: str) -> None:
        self.run_id = run_id
        super().__init__(f"Failed to certify run '{run_id}': {reason}")
