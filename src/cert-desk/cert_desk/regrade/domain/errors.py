"""Error types raised by the regrade state machine."""

from cert_desk.core.errors import CertDeskError


class RegradeInProgressError(CertDeskError):
    """Raised when a regrade is started while another one is active."""

    def __init__(self, run_id: str, phase: str) -> None:
        self.run_id = run_id
        self.phase = phase
        super().__init__(
            f"Failed to start regrade: run '{run_id}' already has a regrade in phase '{phase}'"
        )


class RegradeStateError(CertDeskError):
    """Raised when retry or discard is requested outside the failed phase."""

    def __init__(self, action: str, phase: str) -> None:
        self.action = action
        self.phase = phase
        super().__init__(f"Failed to {action} regrade: phase is '{phase}', not 'failed'")
