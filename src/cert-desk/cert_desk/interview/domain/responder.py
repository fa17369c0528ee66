"""AgentResponder Protocol — whatever answers interview questions for the agent."""

from typing import Protocol


class AgentResponder(Protocol):
    async def respond(self, question: str) -> str: ...
