from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest

from aptshift.application.exceptions import LLMContractError, LLMUpstreamError
from aptshift.application.ports.interpreter import InterpretationRequest
from aptshift.domain.entities.booking import Booking
from aptshift.infrastructure.llm.openai_interpreter import OpenAIInterpreter


class FakeCompletions:
    def __init__(self, content=None, error=None) -> None:
        self.content = content
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(completions: FakeCompletions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def _request() -> InterpretationRequest:
    booking = Booking(id="2026-10-20_562_checkout", apartment_id="562", type="checkout", date=date(2026, 10, 20))
    return InterpretationRequest(
        text="виїзд 562 на 11:00",
        conversation_context={"lastTime": "12:00"},
        is_admin=False,
        assigned_apartment_ids=("562",),
        candidate_bookings=[booking],
        today=date(2026, 10, 20),
    )


def test_returns_decoded_object_and_uses_json_mode():
    completions = FakeCompletions(content='{"isTimeChange": true, "changeType": "checkout"}')

    data = OpenAIInterpreter(client=_client(completions)).interpret(_request())

    assert data == {"isTimeChange": True, "changeType": "checkout"}
    assert completions.kwargs["response_format"] == {"type": "json_object"}
    prompt = completions.kwargs["messages"][1]["content"]
    assert "2026-10-20_562_checkout" in prompt
    assert "Assigned apartments: 562" in prompt
    assert "виїзд 562 на 11:00" in prompt


def test_provider_failure_is_upstream_error():
    completions = FakeCompletions(error=TimeoutError("read timeout"))

    with pytest.raises(LLMUpstreamError):
        OpenAIInterpreter(client=_client(completions)).interpret(_request())


def test_empty_or_non_object_output_is_contract_error():
    for content in ("", "not json", "[1, 2]"):
        with pytest.raises(LLMContractError):
            OpenAIInterpreter(client=_client(FakeCompletions(content=content))).interpret(_request())
