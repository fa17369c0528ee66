"""Certificate value object — the immutable record attached to a passing run."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from cert_desk.run.domain.wire import WIRE_CONFIG

CertificateStatus = Literal["active", "revoked"]


class Certificate(BaseModel):
    """Issued certificate. ``score`` is the run average frozen at issuance."""

    model_config = WIRE_CONFIG

    id: str = Field(min_length=1)
    run_id: str = Field(min_length=1)
    agent_id: str
    agent_name: str
    template_name: str | None = None
    score: int = Field(ge=0, le=100)
    status: CertificateStatus = "active"
    issued_at: datetime
    issued_by: str | None = None
    data_hash: str = Field(min_length=1)
