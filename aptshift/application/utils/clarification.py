from __future__ import annotations

from aptshift.application.utils import messages
from aptshift.application.utils.dates import format_display_date
from aptshift.domain.entities.change_intent import BookingRef, ClarificationRequest


def describe_booking(ref: BookingRef) -> str:
    parts = [format_display_date(ref.date)]
    if ref.apartment_id:
        parts.append(f"кв. {ref.apartment_id}")
    if ref.address:
        parts.append(ref.address)
    if ref.guest_name:
        parts.append(ref.guest_name)
    if ref.type:
        parts.append(messages.BOOKING_TYPE_LABELS.get(ref.type, ref.type))
    return ", ".join(p for p in parts if p)


def build_ambiguous_prompt(matches: tuple[BookingRef, ...]) -> str:
    lines = [messages.AMBIGUOUS_HEADER]
    lines.extend(f"{i}. {describe_booking(ref)}" for i, ref in enumerate(matches, start=1))
    return "\n".join(lines)


def build_clarification_prompt(request: ClarificationRequest) -> str:
    header = request.message.strip() or messages.CLARIFICATION_HEADERS.get(request.type, messages.AMBIGUOUS_HEADER)
    lines = [header]
    for i, option in enumerate(request.options, start=1):
        display = option.display
        if request.type == "date" and display == option.value:
            display = format_display_date(option.value)
        elif request.type == "apartment" and option.value not in display:
            display = f"{display} (ID {option.value})"
        lines.append(f"{i}. {display}")
    return "\n".join(lines)
