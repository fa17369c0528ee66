"""Grading and regrade configuration models."""

from pydantic import BaseModel, Field


class GradingConfig(BaseModel, frozen=True):
    pass_threshold: int = Field(default=70, ge=0, le=100)


class RegradeConfig(BaseModel, frozen=True):
    pacing_seconds: float = Field(default=1.0, ge=0.0)
    oracle_timeout_seconds: float | None = Field(default=None, gt=0.0)
