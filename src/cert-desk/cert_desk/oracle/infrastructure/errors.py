"""Error types raised by oracle infrastructure."""

from cert_desk.core.errors import CertDeskError


class OracleInvocationError(CertDeskError):
    """Raised when the oracle cannot be invoked or returns an unparseable verdict."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to grade answer: {reason}", retriable=True)
