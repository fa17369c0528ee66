"""Validation errors raised by the election protocol before any state changes."""

from cert_desk.core.errors import CertDeskError


class ReviewValidationError(CertDeskError):
    """Raised when a review carries a blank note or an out-of-range score."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to add review: {reason}")


class EntryIndexError(CertDeskError):
    """Raised when an election targets an index outside the step's history."""

    def __init__(self, step_id: str, entry_index: int, history_size: int) -> None:
        self.step_id = step_id
        self.entry_index = entry_index
        self.history_size = history_size
        super().__init__(
            f"Failed to elect entry {entry_index} on step '{step_id}':"
            f" history has {history_size} entries"
        )


class StepNotGradableError(CertDeskError):
    """Raised when grading is attempted on a step that is not a system verdict."""

    def __init__(self, step_id: str, role: str) -> None:
        self.step_id = step_id
        super().__init__(f"Failed to grade step '{step_id}': role '{role}' is not graded")


class RunCertifiedError(CertDeskError):
    """Raised when grading would change a run that already carries a certificate."""

    def __init__(self, run_id: str) -> None:
        self.run_id = run_id
        super().__init__(f"Failed to change grading: run '{run_id}' is certified")
