from __future__ import annotations

import logging
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from aptshift.application.utils import messages
from aptshift.domain.entities.change_intent import (
    BookingRef,
    ChangeIntent,
    ClarificationOption,
    ClarificationRequest,
    Conflict,
    InterpretationOutcome,
    OutcomeKind,
    ValidationResult,
)

logger = logging.getLogger(__name__)


def _as_text(value: Any) -> Any:
    # Interpreters often send apartment ids and hours as numbers.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _as_list(value: Any) -> Any:
    return [] if value is None else value


class _DTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class BookingRefDTO(_DTO):
    id: str | None = None
    type: str | None = None
    date: str | None = None
    apartment_id: str | None = Field(None, alias="apartmentId")
    address: str | None = None
    guest_name: str | None = Field(None, alias="guestName")

    @field_validator("id", "type", "date", "apartment_id", "address", "guest_name", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _as_text(value)

    def to_domain(self) -> BookingRef | None:
        if not (self.id or (self.date and self.apartment_id)):
            return None
        return BookingRef(
            id=(self.id or "").strip() or None,
            type=(self.type or "").strip().lower() or None,
            date=(self.date or "").strip() or None,
            apartment_id=(self.apartment_id or "").strip() or None,
            address=self.address,
            guest_name=self.guest_name,
        )


class ConflictDTO(_DTO):
    type: str = ""
    time: str = ""
    description: str = ""

    @field_validator("type", "time", "description", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _as_text(value)


class ValidationDTO(_DTO):
    is_valid: bool = Field(True, alias="isValid")
    errors: list[str] = Field(default_factory=list)
    conflicts: list[ConflictDTO] = Field(default_factory=list)

    @field_validator("errors", "conflicts", mode="before")
    @classmethod
    def _default_list(cls, value: Any) -> Any:
        return _as_list(value)

    def to_domain(self) -> ValidationResult:
        conflicts = [Conflict(type=c.type, time=c.time, description=c.description) for c in self.conflicts]
        if self.is_valid and not self.errors and not conflicts:
            return ValidationResult.ok()
        errors = list(self.errors) or ([] if conflicts else [messages.ORACLE_REJECTED])
        return ValidationResult.failed(errors, conflicts)


class OptionDTO(_DTO):
    value: str
    display: str | None = None

    @field_validator("value", "display", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _as_text(value)


class ClarificationDTO(_DTO):
    type: Literal["date", "apartment", "guest", "time"]
    message: str = ""
    available_options: list[OptionDTO] = Field(default_factory=list, alias="availableOptions")

    @field_validator("available_options", mode="before")
    @classmethod
    def _default_list(cls, value: Any) -> Any:
        return _as_list(value)

    def to_domain(self) -> ClarificationRequest:
        return ClarificationRequest(
            type=self.type,
            message=self.message or "",
            options=tuple(ClarificationOption(value=o.value, display=o.display or o.value) for o in self.available_options),
        )


class ChangeIntentDTO(_DTO):
    is_time_change: bool = Field(False, alias="isTimeChange")
    change_type: Literal["checkin", "checkout", "cleaning"] | None = Field(None, alias="changeType")
    target_booking: BookingRefDTO | None = Field(None, alias="targetBooking")
    suggested_time: str | None = Field(None, alias="suggestedTime")
    reasoning: str = ""
    validation: ValidationDTO | None = None
    ambiguous_matches: list[BookingRefDTO] = Field(default_factory=list, alias="ambiguousMatches")
    clarification_needed: ClarificationDTO | None = Field(None, alias="clarificationNeeded")
    multiple_changes: list["ChangeIntentDTO"] = Field(default_factory=list, alias="multipleChanges")

    @field_validator("suggested_time", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _as_text(value)

    @field_validator("ambiguous_matches", "multiple_changes", mode="before")
    @classmethod
    def _default_list(cls, value: Any) -> Any:
        return _as_list(value)

    @field_validator("reasoning", mode="before")
    @classmethod
    def _reasoning_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("change_type", mode="before")
    @classmethod
    def _lower_change_type(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    def to_domain(self, with_siblings: bool = True) -> ChangeIntent:
        target = self.target_booking.to_domain() if self.target_booking else None
        change_type = self.change_type
        if change_type is None and target is not None and target.type in ("checkin", "checkout"):
            change_type = target.type

        siblings: tuple[ChangeIntent, ...] = ()
        if with_siblings:
            siblings = tuple(s.to_domain(with_siblings=False) for s in self.multiple_changes)

        return ChangeIntent(
            is_time_change=self.is_time_change,
            change_type=change_type,
            target=target,
            suggested_time=(self.suggested_time or "").strip() or None,
            reasoning=self.reasoning,
            validation=self.validation.to_domain() if self.validation else None,
            ambiguous_matches=tuple(m for m in (r.to_domain() for r in self.ambiguous_matches) if m is not None),
            clarification=self.clarification_needed.to_domain() if self.clarification_needed else None,
            multiple_changes=siblings,
        )


def classify(intent: ChangeIntent) -> InterpretationOutcome:
    if (
        intent.target is None
        and intent.multiple_changes
        and not intent.ambiguous_matches
        and intent.clarification is None
    ):
        # Compound request without a primary: the first sibling becomes the primary,
        # keeping its own ambiguity or clarification so it is triaged like any primary.
        first, *rest = intent.multiple_changes
        intent = ChangeIntent(
            is_time_change=first.is_time_change or intent.is_time_change,
            change_type=first.change_type,
            target=first.target,
            suggested_time=first.suggested_time,
            reasoning=first.reasoning or intent.reasoning,
            validation=first.validation,
            ambiguous_matches=first.ambiguous_matches,
            clarification=first.clarification,
            multiple_changes=tuple(rest),
        )

    if intent.ambiguous_matches:
        if intent.clarification is not None:
            logger.warning("Interpreter sent both ambiguousMatches and clarificationNeeded; using ambiguousMatches")
        return InterpretationOutcome(kind=OutcomeKind.AMBIGUOUS, intent=intent)
    if intent.clarification is not None:
        return InterpretationOutcome(kind=OutcomeKind.CLARIFICATION, intent=intent)

    if not intent.is_time_change:
        return InterpretationOutcome(kind=OutcomeKind.NOT_TIME_CHANGE, intent=intent)
    if intent.target is None:
        return InterpretationOutcome(kind=OutcomeKind.UNRESOLVED, intent=intent)
    return InterpretationOutcome(kind=OutcomeKind.RESOLVED, intent=intent)


def parse_interpretation(payload: Any) -> InterpretationOutcome:
    """Validate one raw interpreter response and tag it with its triage outcome."""
    if not isinstance(payload, dict):
        return InterpretationOutcome(kind=OutcomeKind.MALFORMED, error="Interpreter response is not a JSON object")
    try:
        dto = ChangeIntentDTO.model_validate(payload)
    except ValidationError as e:
        return InterpretationOutcome(kind=OutcomeKind.MALFORMED, error=f"Schema violation: {e.error_count()} error(s)")
    return classify(dto.to_domain())
