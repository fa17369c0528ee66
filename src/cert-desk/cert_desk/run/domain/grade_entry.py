"""GradeEntry value object — one scoring event attached to a graded step."""

from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator

from cert_desk.run.domain.wire import WIRE_CONFIG

GradeSource = Literal["human", "automated"]


class GradeEntry(BaseModel):
    """Immutable record of one scoring event.

    ``source``, ``score``, ``reasoning`` and ``created_at`` never change once
    the entry exists. Election produces a copy with updated ``is_elected`` /
    ``elected_at``; nothing else differs between the two.
    """

    model_config = WIRE_CONFIG

    source: GradeSource
    score: int = Field(ge=0, le=100)
    reasoning: str = ""
    created_at: datetime
    elected_at: datetime | None = None
    is_elected: bool = Field(
        default=False,
        validation_alias=AliasChoices("isElected", "isSelected", "is_elected"),
    )

    @field_validator("source", mode="before")
    @classmethod
    def _normalise_legacy_source(cls, value: object) -> object:
        # Older runs recorded automated grades as "ai".
        if value == "ai":
            return "automated"
        return value

    def elected(self, at: datetime) -> "GradeEntry":
        """Return a copy marked as the elected entry at ``at``."""
        return self.model_copy(update={"is_elected": True, "elected_at": at})

    def unelected(self) -> "GradeEntry":
        """Return a copy with the elected flag cleared; ``elected_at`` is kept."""
        if not self.is_elected:
            return self
        return self.model_copy(update={"is_elected": False})
