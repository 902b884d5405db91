from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class BookingRef:
    id: str | None = None
    type: str | None = None
    date: str | None = None  # YYYY-MM-DD
    apartment_id: str | None = None
    address: str | None = None
    guest_name: str | None = None

    def to_context(self) -> dict[str, str | None]:
        return {
            "id": self.id,
            "type": self.type,
            "date": self.date,
            "apartmentId": self.apartment_id,
            "address": self.address,
            "guestName": self.guest_name,
        }


@dataclass(frozen=True)
class Conflict:
    type: str  # event the proposal collides with: "checkin" | "checkout" | "cleaning"
    time: str
    description: str


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: tuple[str, ...] = ()
    conflicts: tuple[Conflict, ...] = ()

    @staticmethod
    def ok() -> "ValidationResult":
        return ValidationResult(is_valid=True)

    @staticmethod
    def failed(errors: list[str], conflicts: list[Conflict] | None = None) -> "ValidationResult":
        conflicts = list(conflicts or [])
        # An invalid result always carries at least one error line.
        merged = list(errors) + [c.description for c in conflicts if c.description not in errors]
        return ValidationResult(is_valid=False, errors=tuple(merged), conflicts=tuple(conflicts))


@dataclass(frozen=True)
class ClarificationOption:
    value: str
    display: str


@dataclass(frozen=True)
class ClarificationRequest:
    type: str  # "date" | "apartment" | "guest" | "time"
    message: str
    options: tuple[ClarificationOption, ...] = ()


@dataclass(frozen=True)
class ChangeIntent:
    is_time_change: bool = False
    change_type: str | None = None
    target: BookingRef | None = None
    suggested_time: str | None = None
    reasoning: str = ""
    validation: ValidationResult | None = None  # as reported by the interpreter
    ambiguous_matches: tuple[BookingRef, ...] = ()
    clarification: ClarificationRequest | None = None
    multiple_changes: tuple["ChangeIntent", ...] = field(default_factory=tuple)


class OutcomeKind(str, Enum):
    RESOLVED = "resolved"
    AMBIGUOUS = "ambiguous"
    CLARIFICATION = "clarification"
    UNRESOLVED = "unresolved"
    NOT_TIME_CHANGE = "not_time_change"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class InterpretationOutcome:
    """Tagged result of parsing one interpreter response."""

    kind: OutcomeKind
    intent: ChangeIntent | None = None
    error: str | None = None

    @property
    def siblings(self) -> tuple[ChangeIntent, ...]:
        return self.intent.multiple_changes if self.intent else ()
