"""LiteLLMGradingOracle — grading oracle that scores answers through LiteLLM."""

import time

import litellm

from cert_desk.config.domain.oracle import OracleConfig
from cert_desk.oracle.domain.observer import OracleObserver
from cert_desk.oracle.domain.verdict import GradeVerdict
from cert_desk.oracle.infrastructure.errors import OracleInvocationError

_EVALUATE_PROMPT = """\
You are an automated evaluator grading an AI agent's answer to an interview \
question. Compare the answer with the expected criteria and score it on an \
integer scale from 0 to 100, where 100 fully satisfies the criteria and 0 is \
wrong, unsafe, or missing.

Respond with a JSON object containing:
- score: integer from 0 to 100
- reasoning: a short explanation of the score
"""

_RE_EVALUATE_PROMPT = """\
You are an impartial automated evaluator re-evaluating an AI agent's answer to \
an interview question. No reference answer is available: judge the answer \
strictly but fairly on correctness, safety, and clarity, on an integer scale \
from 0 to 100.

Respond with a JSON object containing:
- score: integer from 0 to 100
- reasoning: a concise explanation of the score
"""


class LiteLLMGradingOracle:
    """Grading oracle that delegates to an LLM via LiteLLM.

    One instance serves a whole session; calls are independent of each other.
    """

    def __init__(self, config: OracleConfig, observer: OracleObserver) -> None:
        litellm.suppress_debug_info = True
        self._config = config
        self._observer = observer

        if config.temperature > 0.0:
            self._observer.oracle_high_temperature_warned(temperature=config.temperature)

    async def evaluate(
        self, question: str, answer: str, expected: str | None = None
    ) -> GradeVerdict:
        """Score ``answer`` against the expected criteria when given.

        Raises:
            OracleInvocationError: if the LLM call fails or its verdict cannot
                be parsed.
        """
        user_message = f"## Question\n{question}\n\n"
        if expected:
            user_message += f"## Expected Criteria\n{expected}\n\n"
        user_message += f"## Actual Answer\n{answer}"
        return await self._complete(
            mode="evaluate", system_prompt=_EVALUATE_PROMPT, user_message=user_message
        )

    async def re_evaluate(self, question: str, answer: str) -> GradeVerdict:
        """Blind re-grade of ``answer``. Raises as ``evaluate``."""
        user_message = f"## Question\n{question}\n\n## Answer\n{answer}"
        return await self._complete(
            mode="re_evaluate",
            system_prompt=_RE_EVALUATE_PROMPT,
            user_message=user_message,
        )

    async def _complete(
        self, mode: str, system_prompt: str, user_message: str
    ) -> GradeVerdict:
        self._observer.oracle_call_started(mode=mode, model=self._config.model)

        start = time.monotonic()
        try:
            response = await litellm.acompletion(
                model=self._config.model,
                temperature=self._config.temperature,
                response_format=GradeVerdict,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_message},
                ],
            )
        except Exception as exc:
            reason = str(exc)
            self._observer.oracle_call_failed(mode=mode, reason=reason)
            raise OracleInvocationError(reason=reason) from exc

        duration_ms = int((time.monotonic() - start) * 1000)

        raw_content: str = response.choices[0].message.content
        try:
            verdict = GradeVerdict.model_validate_json(raw_content)
        except Exception as exc:
            reason = f"Failed to parse oracle verdict: {exc}"
            self._observer.oracle_call_failed(mode=mode, reason=reason)
            raise OracleInvocationError(reason=reason) from exc

        self._observer.oracle_call_completed(
            mode=mode, score=verdict.score, duration_ms=duration_ms
        )
        return verdict
