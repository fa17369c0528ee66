"""LiteLLMAgentResponder — answers interview questions in a template's persona."""

import litellm

from cert_desk.config.domain.oracle import ResponderConfig
from cert_desk.interview.domain.template import Template
from cert_desk.interview.infrastructure.errors import ResponderInvocationError


class LiteLLMAgentResponder:
    """Simulates the agent under test with an LLM playing the template's persona."""

    def __init__(self, config: ResponderConfig, template: Template) -> None:
        litellm.suppress_debug_info = True
        self._config = config
        self._system_prompt = (
            "You are an AI agent being interviewed.\n"
            f"Your persona skills: {', '.join(template.skills) or 'general'}.\n"
            f"Description: {template.description}\n"
            "Answer each question as this persona would. Keep it concise "
            "(under 50 words)."
        )

    async def respond(self, question: str) -> str:
        """Return the persona's answer.

        Raises:
            ResponderInvocationError: if the LLM call fails or returns no text.
        """
        try:
            response = await litellm.acompletion(
                model=self._config.model,
                temperature=self._config.temperature,
                messages=[
                    {"role": "system", "content": self._system_prompt},
                    {"role": "user", "content": question},
                ],
            )
        except Exception as exc:
            raise ResponderInvocationError(reason=str(exc)) from exc

        content = response.choices[0].message.content
        if not content:
            raise ResponderInvocationError(reason="empty response")
        return content
