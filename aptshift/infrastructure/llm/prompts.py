import json
from typing import Any

from aptshift.domain.entities.booking import Booking

_SCHEMA = (
    "{\n"
    "  \"isTimeChange\": true,\n"
    "  \"changeType\": \"checkin\" | \"checkout\" | \"cleaning\",\n"
    "  \"targetBooking\": {\"id\": \"...\", \"type\": \"checkin|checkout\", \"date\": \"YYYY-MM-DD\",\n"
    "                    \"apartmentId\": \"...\", \"address\": \"...\", \"guestName\": \"...\"} | null,\n"
    "  \"suggestedTime\": \"HH:00\" (cleaning may be \"HH:MM\"),\n"
    "  \"reasoning\": \"...\",\n"
    "  \"validation\": {\"isValid\": true, \"errors\": [], \"conflicts\": [{\"type\": \"...\", \"time\": \"...\", \"description\": \"...\"}]},\n"
    "  \"ambiguousMatches\": [<targetBooking objects>],\n"
    "  \"clarificationNeeded\": {\"type\": \"date|apartment|guest|time\", \"message\": \"...\",\n"
    "                          \"availableOptions\": [{\"value\": \"...\", \"display\": \"...\"}]} | null,\n"
    "  \"multipleChanges\": [<objects with the same shape, without multipleChanges>]\n"
    "}\n"
)


def _booking_line(b: Booking) -> dict[str, Any]:
    return {
        "id": b.id,
        "type": b.type,
        "date": b.date.isoformat(),
        "apartmentId": b.apartment_id,
        "address": b.address,
        "guestName": b.guest_name,
        "checkinTime": b.checkin_time,
        "checkoutTime": b.checkout_time,
        "cleaningTime": b.cleaning_time,
        "hasSameDayCheckin": b.has_same_day_checkin,
    }


def build_interpret_prompt(
    text: str,
    context: dict,
    is_admin: bool,
    assigned_apartment_ids: list[str],
    bookings: list[Booking],
    today: str,
) -> str:
    scope = "ALL" if is_admin else (", ".join(assigned_apartment_ids) or "none")
    return (
        "You interpret chat messages from apartment cleaning staff and administrators.\n"
        "Return ONLY valid JSON. No markdown. No extra text.\n"
        "Output schema:\n"
        f"{_SCHEMA}"
        "Rules:\n"
        "  - A time change is a request to move a check-in, checkout or cleaning time.\n"
        "  - Set isTimeChange=false for anything else.\n"
        "  - Only reference bookings from the bookings list below. Never invent ids.\n"
        "  - Match bookings by id, apartment id, address or guest name; if the message\n"
        "    mentions an id, it wins over every other identifier.\n"
        "  - If more than one booking matches, do NOT pick one: list them in ambiguousMatches\n"
        "    and set targetBooking=null.\n"
        "  - If a required detail (date, apartment, guest or time) is missing, set\n"
        "    clarificationNeeded with the possible options and targetBooking=null.\n"
        "  - Never fill both ambiguousMatches and clarificationNeeded.\n"
        "  - Checkout must be before 14:00; check-in must be after 14:00; cleaning starts at\n"
        "    least 30 minutes after checkout and no later than 14:00.\n"
        "  - Cleaning changes target the checkout booking of that apartment and date.\n"
        "  - One message with several changes: put each change in multipleChanges.\n"
        "  - Use the conversation context to resolve follow-ups like \"and for tomorrow\" or\n"
        "    answers to a previous clarification.\n"
        "  - Write messages, reasoning and errors in Ukrainian.\n"
        "\n"
        f"Today: {today}\n"
        f"User is admin: {is_admin}\n"
        f"Assigned apartments: {scope}\n"
        f"Conversation context: {json.dumps(context or {}, ensure_ascii=False)}\n"
        f"Bookings: {json.dumps([_booking_line(b) for b in bookings], ensure_ascii=False)}\n"
        "\n"
        f"Message: {text}\n"
    )
