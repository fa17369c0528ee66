"""Error types raised by interview infrastructure."""

from pathlib import Path

from cert_desk.core.errors import CertDeskError


class TemplateLoadError(CertDeskError):
    """Raised when a template file is missing, unparseable, or invalid."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to load template {path}: {reason}")


class ResponderInvocationError(CertDeskError):
    """Raised when the agent responder cannot produce an answer."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to obtain agent answer: {reason}", retriable=True)
