from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from aptshift.domain.entities.booking import Booking


@dataclass(frozen=True)
class InterpretationRequest:
    text: str
    conversation_context: dict[str, Any]
    is_admin: bool
    assigned_apartment_ids: tuple[str, ...]
    candidate_bookings: list[Booking] = field(default_factory=list)
    today: date | None = None


class InterpreterPort(ABC):
    @abstractmethod
    def interpret(self, request: InterpretationRequest) -> dict[str, Any]:
        """
        Turn one chat message into a ChangeIntent JSON object.

        Requirements:
        - Return the decoded JSON object as-is; schema validation belongs to the caller
        - Only reference bookings from `candidate_bookings`
        - Never pick a booking when several match: fill ambiguousMatches or clarificationNeeded

        Raises:
            LLMUpstreamError: networking/provider failures
            LLMContractError: empty response or text that is not a JSON object
        """
        raise NotImplementedError
