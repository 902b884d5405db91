from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable
from zoneinfo import ZoneInfo

from aptshift.application.dto.change_intent import parse_interpretation
from aptshift.application.exceptions import LLMContractError, LLMUpstreamError
from aptshift.application.ports.booking_store import BookingStorePort
from aptshift.application.ports.conversation_store import ConversationStorePort
from aptshift.application.ports.interpreter import InterpretationRequest, InterpreterPort
from aptshift.application.use_cases.apply_time_change import ApplyTimeChangeUseCase
from aptshift.application.use_cases.permissions import PermissionGuard
from aptshift.application.utils import messages
from aptshift.application.utils.clarification import build_ambiguous_prompt, build_clarification_prompt
from aptshift.application.utils.conflicts import detect_conflicts
from aptshift.application.utils.dates import candidate_window, today_in, utc_now
from aptshift.application.utils.time_rules import is_change_compatible, normalize_time, parse_time, validate_rules
from aptshift.domain.entities.booking import CHECKIN, CHECKOUT, CLEANING, Booking, booking_id_for
from aptshift.domain.entities.change_intent import (
    BookingRef,
    ChangeIntent,
    InterpretationOutcome,
    OutcomeKind,
    ValidationResult,
)
from aptshift.domain.entities.message import Message
from aptshift.domain.entities.reply import Reply
from aptshift.domain.entities.user_access import UserAccess

APPLIED = "applied"
REJECTED = "rejected"
PERMISSION_DENIED = "permission_denied"
NOT_FOUND = "not_found"
TYPE_MISMATCH = "type_mismatch"
ERROR = "error"

# Context keys carried over from the previous turn when nothing new was resolved
_CARRY_KEYS = ("lastBooking", "lastChangeType", "lastTime")


@dataclass(frozen=True)
class ChangeResult:
    outcome: str
    text: str
    booking: Booking | None = None
    change_type: str | None = None
    time: str | None = None
    validation: ValidationResult | None = None


def _booking_ref(booking: Booking) -> BookingRef:
    return BookingRef(
        id=booking.id,
        type=booking.type,
        date=booking.date.isoformat(),
        apartment_id=booking.apartment_id,
        address=booking.address,
        guest_name=booking.guest_name,
    )


def _booking_type_for(change_type: str | None) -> str | None:
    if change_type == CHECKIN:
        return CHECKIN
    if change_type in (CHECKOUT, CLEANING):
        return CHECKOUT
    return None


def _remembered(results: list[ChangeResult]) -> dict[str, Any]:
    """Context entries for the last change that reached a booking, if any."""
    last = next((r for r in reversed(results) if r.booking is not None), None)
    if last is None:
        return {}
    return {
        "lastBooking": _booking_ref(last.booking).to_context(),
        "lastChangeType": last.change_type,
        "lastTime": last.time,
    }


def render_validation(validation: ValidationResult) -> str:
    conflict_texts = {c.description for c in validation.conflicts}
    lines = [messages.VALIDATION_HEADER]
    lines.extend(f"• {e}" for e in validation.errors if e not in conflict_texts)
    lines.extend(
        messages.CONFLICT_LINE.format(type=c.type, time=c.time, description=c.description)
        for c in validation.conflicts
    )
    return "\n".join(lines)


class HandleIncomingMessageUseCase:
    """
    One chat turn: interpret the message, resolve the booking, check access,
    validate and apply. Returns the reply texts; sending them is the caller's job.
    """

    def __init__(
        self,
        conversation_store: ConversationStorePort,
        booking_store: BookingStorePort,
        permission_guard: PermissionGuard,
        interpreter: InterpreterPort,
        applier: ApplyTimeChangeUseCase,
        timezone: ZoneInfo,
        window_days: int = 10,
        now_provider: Callable[[], datetime] = utc_now,
    ) -> None:
        self._conversations = conversation_store
        self._bookings = booking_store
        self._guard = permission_guard
        self._interpreter = interpreter
        self._applier = applier
        self._timezone = timezone
        self._window_days = window_days
        self._now = now_provider
        self._logger = logging.getLogger(__name__)

    def handle(self, message: Message) -> Reply:
        try:
            return self._handle(message)
        except Exception as e:
            self._logger.exception(
                "Failed to handle incoming message",
                extra={"user_id": message.user_id, "error_type": type(e).__name__},
            )
            return Reply(texts=[messages.GENERIC_ERROR], outcome=ERROR)

    def _handle(self, message: Message) -> Reply:
        state = self._conversations.load(message.user_id)
        access = self._guard.load_access(message.user_id)

        today = today_in(self._timezone, self._now())
        start, end = candidate_window(today, self._window_days)
        scope = None if access.is_admin else access.assigned_apartment_ids
        candidates = self._bookings.list_window(start, end, scope)

        request = InterpretationRequest(
            text=message.text,
            conversation_context=dict(state.last_context),
            is_admin=access.is_admin,
            assigned_apartment_ids=access.assigned_apartment_ids,
            candidate_bookings=candidates,
            today=today,
        )
        try:
            payload = self._interpreter.interpret(request)
        except (LLMUpstreamError, LLMContractError) as e:
            self._logger.warning(
                "Interpreter failed; message ignored",
                extra={"user_id": message.user_id, "error_type": type(e).__name__, "reason": str(e)},
            )
            return Reply(texts=[], outcome=OutcomeKind.MALFORMED.value, meta={"error": str(e)})

        outcome = parse_interpretation(payload)
        self._logger.info(
            "Message interpreted",
            extra={"user_id": message.user_id, "outcome": outcome.kind.value, "candidates": len(candidates)},
        )

        if outcome.kind == OutcomeKind.MALFORMED:
            self._logger.warning(
                "Interpreter response rejected; message ignored",
                extra={"user_id": message.user_id, "reason": outcome.error},
            )
            return Reply(texts=[], outcome=outcome.kind.value, meta={"error": outcome.error})

        if outcome.kind in (OutcomeKind.AMBIGUOUS, OutcomeKind.CLARIFICATION):
            return self._ask_user(message, access, outcome, state.last_context)

        if outcome.kind in (OutcomeKind.NOT_TIME_CHANGE, OutcomeKind.UNRESOLVED):
            text = messages.NOT_TIME_CHANGE if outcome.kind == OutcomeKind.NOT_TIME_CHANGE else messages.UNRESOLVED
            sibling_texts, results = self._process_siblings(outcome.siblings, access, message.user_id)
            context = {k: state.last_context[k] for k in _CARRY_KEYS if k in state.last_context}
            context.update(_remembered(results))
            context["outcome"] = outcome.kind.value
            self._conversations.save(message.user_id, message.text, context)
            return Reply(
                texts=[text, *sibling_texts],
                outcome=outcome.kind.value,
                meta={"changes": [r.outcome for r in results]} if outcome.siblings else {},
            )

        return self._process_resolved(message, access, outcome)

    def _ask_user(
        self,
        message: Message,
        access: UserAccess,
        outcome: InterpretationOutcome,
        previous_context: dict[str, Any],
    ) -> Reply:
        intent = outcome.intent
        sibling_texts, results = self._process_siblings(outcome.siblings, access, message.user_id)

        # A follow-up that still needs an answer keeps the request it belongs to.
        original = previous_context.get("message") if previous_context.get("pending") else None
        context: dict[str, Any] = {
            "pending": outcome.kind.value,
            "message": original or message.text,
            "changeType": intent.change_type,
            "suggestedTime": intent.suggested_time,
        }
        if outcome.kind == OutcomeKind.AMBIGUOUS:
            text = build_ambiguous_prompt(intent.ambiguous_matches)
            context["candidates"] = [ref.to_context() for ref in intent.ambiguous_matches]
        else:
            text = build_clarification_prompt(intent.clarification)
            context["clarificationType"] = intent.clarification.type
            context["options"] = [{"value": o.value, "display": o.display} for o in intent.clarification.options]
        context.update(_remembered(results))

        self._conversations.save(message.user_id, message.text, context)
        return Reply(
            texts=[text, *sibling_texts],
            outcome=outcome.kind.value,
            meta={"changes": [r.outcome for r in results]} if outcome.siblings else {},
        )

    def _process_resolved(self, message: Message, access: UserAccess, outcome: InterpretationOutcome) -> Reply:
        primary = self._process_change(outcome.intent, access, message.user_id)
        sibling_texts, sibling_results = self._process_siblings(outcome.siblings, access, message.user_id)
        results = [primary, *sibling_results]

        context: dict[str, Any] = {"outcome": primary.outcome}
        context.update(_remembered(results))
        self._conversations.save(message.user_id, message.text, context)

        return Reply(
            texts=[primary.text, *sibling_texts],
            outcome=primary.outcome,
            meta={"changes": [r.outcome for r in results]},
        )

    def _process_siblings(
        self,
        siblings: tuple[ChangeIntent, ...],
        access: UserAccess,
        actor_id: str,
    ) -> tuple[list[str], list[ChangeResult]]:
        """Each sibling of a compound request is handled and reported on its own, numbered from 2."""
        texts: list[str] = []
        results: list[ChangeResult] = []
        for index, sibling in enumerate(siblings, start=2):
            if sibling.ambiguous_matches:
                texts.append(f"{index}. " + build_ambiguous_prompt(sibling.ambiguous_matches))
                continue
            if sibling.clarification is not None:
                texts.append(f"{index}. " + build_clarification_prompt(sibling.clarification))
                continue
            if sibling.target is None:
                texts.append(messages.SIBLING_UNRESOLVED.format(index=index))
                continue
            result = self._process_change(sibling, access, actor_id)
            results.append(result)
            texts.append(result.text)
        return texts, results

    def _resolve_target(self, ref: BookingRef, change_type: str | None) -> tuple[Booking | None, str]:
        """Explicit id first, then the key derived from date, apartment and type."""
        if ref.id:
            booking = self._bookings.get(ref.id)
            if booking is not None:
                return booking, ref.id

        booking_type = ref.type if ref.type in (CHECKIN, CHECKOUT) else _booking_type_for(change_type)
        if ref.date and ref.apartment_id and booking_type:
            derived = booking_id_for(ref.date, ref.apartment_id, booking_type)
            booking = self._bookings.get(derived)
            if booking is not None:
                return booking, derived
            return None, ref.id or derived
        return None, ref.id or ""

    def _process_change(self, intent: ChangeIntent, access: UserAccess, actor_id: str) -> ChangeResult:
        booking, lookup_id = self._resolve_target(intent.target, intent.change_type)

        apartment_id = booking.apartment_id if booking is not None else intent.target.apartment_id
        if not self._guard.authorize(access, apartment_id):
            return ChangeResult(outcome=PERMISSION_DENIED, text=messages.NO_ACCESS)

        if booking is None:
            self._logger.info("Target booking not found", extra={"user_id": actor_id, "booking_id": lookup_id})
            return ChangeResult(outcome=NOT_FOUND, text=messages.BOOKING_NOT_FOUND.format(booking_id=lookup_id))

        change_type = intent.change_type or booking.type
        if not is_change_compatible(change_type, booking.type):
            return ChangeResult(
                outcome=TYPE_MISMATCH,
                text=messages.TYPE_MISMATCH,
                booking=booking,
                change_type=change_type,
            )

        validation = self._validate(intent, change_type, booking)
        if not validation.is_valid:
            self._logger.info(
                "Time change rejected",
                extra={
                    "user_id": actor_id,
                    "booking_id": booking.id,
                    "change_type": change_type,
                    "errors": list(validation.errors),
                },
            )
            return ChangeResult(
                outcome=REJECTED,
                text=render_validation(validation),
                booking=booking,
                change_type=change_type,
                time=intent.suggested_time,
                validation=validation,
            )

        new_time = normalize_time(intent.suggested_time, allow_minutes=change_type == CLEANING)
        result = self._applier.apply(booking.id, change_type, new_time, actor_id, intent.reasoning)
        return ChangeResult(
            outcome=APPLIED if result.success else (result.error_kind or ERROR),
            text=result.message,
            booking=booking,
            change_type=change_type,
            time=new_time,
            validation=validation,
        )

    def _validate(self, intent: ChangeIntent, change_type: str, booking: Booking) -> ValidationResult:
        """Local rules and conflicts decide; an interpreter rejection also blocks the change."""
        errors = validate_rules(change_type, intent.suggested_time, booking)
        conflicts = []
        if parse_time(intent.suggested_time, allow_minutes=change_type == CLEANING) is not None:
            same_day = self._bookings.list_for_day(booking.apartment_id, booking.date)
            conflicts = detect_conflicts(change_type, intent.suggested_time, booking, same_day)

        if errors or conflicts:
            return ValidationResult.failed(errors, conflicts)

        oracle = intent.validation
        if oracle is not None and not oracle.is_valid:
            self._logger.info(
                "Interpreter rejected a locally valid change",
                extra={"booking_id": booking.id, "change_type": change_type},
            )
            return ValidationResult.failed(list(oracle.errors) or [messages.ORACLE_REJECTED], list(oracle.conflicts))
        return ValidationResult.ok()
