"""CancellationToken — cooperative stop signal passed into a regrade invocation."""


class CancellationToken:
    """Raised once, observed by the orchestrator at the top of each iteration.

    Cancelling never interrupts an oracle or store call already in flight.
    """

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
