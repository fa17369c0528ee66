"""GradingOracle Protocol — structural interface for all oracle implementations."""

from typing import Protocol

from cert_desk.oracle.domain.verdict import GradeVerdict


class GradingOracle(Protocol):
    """Scores a question/answer pair on a 0-100 scale.

    ``evaluate`` may use an expected reference answer; ``re_evaluate`` is the
    blind variant used when regrading existing transcripts.
    """

    async def evaluate(
        self, question: str, answer: str, expected: str | None = None
    ) -> GradeVerdict: ...

    async def re_evaluate(self, question: str, answer: str) -> GradeVerdict: ...
