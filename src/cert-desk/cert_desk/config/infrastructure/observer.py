"""Structlog implementation of the ConfigObserver port."""

import structlog


class StructlogConfigObserver:
    """Delegates config domain events to structlog.

    Satisfies the ConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_loaded(self, path: str, persistence_kind: str) -> None:
        self._log.info("config.loaded", path=path, persistence_kind=persistence_kind)

    def config_oracle_temperature_warning(self, temperature: float) -> None:
        self._log.warning(
            "config.oracle_temperature_warning",
            temperature=temperature,
            message="Oracle temperature > 0.0 may produce non-deterministic grades",
        )
