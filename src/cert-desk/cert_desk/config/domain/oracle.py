"""Grading-oracle and agent-responder model configuration."""

from pydantic import BaseModel, Field


class OracleConfig(BaseModel, frozen=True):
    model: str = Field(min_length=1)
    temperature: float = Field(default=0.0, ge=0.0)


class ResponderConfig(BaseModel, frozen=True):
    """LLM used to answer interview questions on the agent's behalf."""

    model: str = Field(min_length=1)
    temperature: float = Field(default=0.7, ge=0.0)
