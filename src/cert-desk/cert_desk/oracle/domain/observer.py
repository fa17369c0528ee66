"""OracleObserver port — domain events emitted during oracle invocations."""

from typing import Protocol


class OracleObserver(Protocol):
    """Observer port for grading-oracle events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def oracle_call_started(self, mode: str, model: str) -> None: ...

    def oracle_call_completed(self, mode: str, score: int, duration_ms: int) -> None: ...

    def oracle_call_failed(self, mode: str, reason: str) -> None: ...

    def oracle_high_temperature_warned(self, temperature: float) -> None: ...
