"""Run store configuration."""

from pathlib import Path
from typing import Literal, Self

from pydantic import BaseModel, Field, model_validator


class PersistenceConfig(BaseModel, frozen=True):
    """Either an HTTP run service (``base_url``) or a local JSON directory (``data_dir``)."""

    kind: Literal["http", "json"]
    base_url: str | None = None
    api_token: str | None = None
    data_dir: Path | None = None
    timeout_seconds: float = Field(default=20.0, gt=0.0)

    @model_validator(mode="after")
    def _check_kind_settings(self) -> Self:
        if self.kind == "http" and not self.base_url:
            raise ValueError("persistence.base_url is required when kind is 'http'")
        if self.kind == "json" and self.data_dir is None:
            raise ValueError("persistence.data_dir is required when kind is 'json'")
        return self
