"""Top-level AppConfig aggregate — the root configuration object."""

from pydantic import BaseModel, Field

from cert_desk.config.domain.grading import GradingConfig, RegradeConfig
from cert_desk.config.domain.oracle import OracleConfig, ResponderConfig
from cert_desk.config.domain.persistence import PersistenceConfig


class AppConfig(BaseModel, frozen=True):
    """Root configuration aggregate for the cert-desk console core."""

    oracle: OracleConfig
    persistence: PersistenceConfig
    responder: ResponderConfig | None = None
    grading: GradingConfig = Field(default_factory=GradingConfig)
    regrade: RegradeConfig = Field(default_factory=RegradeConfig)
