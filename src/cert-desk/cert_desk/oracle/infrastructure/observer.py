"""Structlog implementation of the OracleObserver port."""

import structlog


class StructlogOracleObserver:
    """Delegates oracle domain events to structlog.

    Satisfies the OracleObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def oracle_call_started(self, mode: str, model: str) -> None:
        self._log.info("oracle.call_started", mode=mode, model=model)

    def oracle_call_completed(self, mode: str, score: int, duration_ms: int) -> None:
        self._log.info(
            "oracle.call_completed",
            mode=mode,
            score=score,
            duration_ms=duration_ms,
        )

    def oracle_call_failed(self, mode: str, reason: str) -> None:
        self._log.error("oracle.call_failed", mode=mode, reason=reason)

    def oracle_high_temperature_warned(self, temperature: float) -> None:
        self._log.warning("oracle.high_temperature_warned", temperature=temperature)
