"""Template and Criterion value objects — the script an interview follows."""

from typing import Literal

from pydantic import BaseModel, Field

from cert_desk.run.domain.wire import WIRE_CONFIG


class Criterion(BaseModel):
    """One interview question with its expected answer and passing score."""

    model_config = WIRE_CONFIG

    id: str = Field(min_length=1)
    prompt: str = Field(min_length=1)
    expected: str = ""
    min_score: int = Field(default=70, ge=0, le=100)


class Template(BaseModel):
    model_config = WIRE_CONFIG

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str = ""
    skills: list[str] = Field(default_factory=list)
    difficulty: Literal["Easy", "Medium", "Hard"] = "Medium"
    criteria: list[Criterion] = Field(min_length=1)

    @property
    def category(self) -> str:
        """Category recorded on grade steps: the first skill, else "General"."""
        if self.skills:
            return self.skills[0]
        return "General"
