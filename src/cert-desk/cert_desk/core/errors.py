"""Base exception class for all cert-desk-specific errors."""


class CertDeskError(Exception):
    """Base class for all cert-desk errors."""

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable
