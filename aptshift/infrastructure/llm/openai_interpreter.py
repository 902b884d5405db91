from __future__ import annotations

import json
from typing import Any

from openai import OpenAI

from aptshift.application.exceptions import LLMContractError, LLMUpstreamError
from aptshift.application.ports.interpreter import InterpretationRequest, InterpreterPort
from aptshift.core.config import settings
from aptshift.infrastructure.llm.prompts import build_interpret_prompt


class OpenAIInterpreter(InterpreterPort):
    """
    OpenAI-backed adapter implementing InterpreterPort.

    Contract guarantees:
    - interpret returns the decoded JSON object of one ChangeIntent
    - Raises:
        LLMUpstreamError: networking/provider failures
        LLMContractError: empty response or text that is not a JSON object
    """

    def __init__(self, client: OpenAI | None = None) -> None:
        self.client = client or OpenAI(api_key=settings.OPENAI_API_KEY)

    def interpret(self, request: InterpretationRequest) -> dict[str, Any]:
        prompt = build_interpret_prompt(
            text=request.text,
            context=request.conversation_context,
            is_admin=request.is_admin,
            assigned_apartment_ids=list(request.assigned_apartment_ids),
            bookings=request.candidate_bookings,
            today=request.today.isoformat() if request.today else "",
        )

        text = self._call_text(
            model=settings.OPENAI_MODEL_INTERPRET,
            prompt=prompt,
            temperature=settings.OPENAI_TEMPERATURE_INTERPRET,
        )

        data = _parse_json(text, what="interpret")
        if not isinstance(data, dict):
            raise LLMContractError("Interpret: expected a JSON object.")
        return data

    def _call_text(self, model: str, prompt: str, temperature: float) -> str:
        try:
            resp = self.client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": "Return only valid JSON. Do not include markdown or extra text."},
                    {"role": "user", "content": prompt},
                ],
                temperature=temperature,
                max_tokens=1400,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            raise LLMUpstreamError(f"OpenAI API error: {e}") from e

        content = (resp.choices[0].message.content or "").strip() if resp.choices else ""
        if not content:
            raise LLMContractError("LLM returned empty response text.")

        return content


def _parse_json(text: str, what: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        snippet = text[:200].replace("\n", " ")
        raise LLMContractError(f"{what.capitalize()}: invalid JSON. Snippet: {snippet!r}")
