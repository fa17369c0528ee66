"""FakeAgentResponder — canned answers for interview tests."""

from cert_desk.interview.infrastructure.errors import ResponderInvocationError


class FakeAgentResponder:
    """Answers with ``answers`` in order, then echoes the question.

    Raises ResponderInvocationError on the call whose index is ``fail_on``.
    """

    def __init__(self, answers: list[str] | None = None, fail_on: int | None = None) -> None:
        self._answers = list(answers or [])
        self._fail_on = fail_on
        self.questions: list[str] = []

    async def respond(self, question: str) -> str:
        call_index = len(self.questions)
        self.questions.append(question)
        if call_index == self._fail_on:
            raise ResponderInvocationError(reason="agent offline")
        if self._answers:
            return self._answers.pop(0)
        return f"Answer to: {question}"
