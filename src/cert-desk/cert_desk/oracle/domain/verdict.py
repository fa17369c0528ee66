"""GradeVerdict — structured output from a single grading-oracle call."""

from pydantic import BaseModel, ConfigDict, Field


class GradeVerdict(BaseModel):
    """Immutable score and reasoning returned by the grading oracle."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    reasoning: str
