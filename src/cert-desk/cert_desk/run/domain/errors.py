"""Error types raised when addressing steps inside a run."""

from cert_desk.core.errors import CertDeskError


class StepNotFoundError(CertDeskError):
    """Raised when a step id does not exist in the run."""

    def __init__(self, run_id: str, step_id: str) -> None:
        self.run_id = run_id
        self.step_id = step_id
        super().__init__(f"Failed to find step '{step_id}' in run '{run_id}'")
