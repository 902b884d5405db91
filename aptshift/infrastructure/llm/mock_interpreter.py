from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Any

from aptshift.application.ports.interpreter import InterpretationRequest, InterpreterPort
from aptshift.domain.entities.booking import CHECKIN, CHECKOUT, CLEANING, Booking

_TIME = re.compile(r"\b([01]?\d|2[0-3])[:.]([0-5]\d)\b")
_ISO_DATE = re.compile(r"\b(\d{4})-(\d{2})-(\d{2})\b")
_FULL_DATE = re.compile(r"\b(\d{1,2})\.(\d{1,2})\.(\d{4})\b")
_SHORT_DATE = re.compile(r"\b(\d{1,2})\.(\d{1,2})\b")
_NUMBER = re.compile(r"\b\d{2,}\b")
_CHOICE = re.compile(r"^\s*(\d{1,2})\s*\.?\s*$")
_SPLIT = re.compile(r"[;\n]+")

_KEYWORDS = (
    (CLEANING, ("прибиран", "cleaning", "клінінг")),
    (CHECKIN, ("заїзд", "заезд", "заселен", "checkin", "check-in")),
    (CHECKOUT, ("виїзд", "выезд", "виселен", "checkout", "check-out")),
)


def _change_type(text: str) -> str | None:
    lowered = text.lower()
    for change_type, words in _KEYWORDS:
        if any(w in lowered for w in words):
            return change_type
    return None


def _booking_type(change_type: str | None) -> str | None:
    if change_type == CHECKIN:
        return CHECKIN
    if change_type in (CHECKOUT, CLEANING):
        return CHECKOUT
    return None


def _make_date(year: str | int, month: str | int, day: str | int) -> date | None:
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


def _ref(b: Booking) -> dict[str, Any]:
    return {
        "id": b.id,
        "type": b.type,
        "date": b.date.isoformat(),
        "apartmentId": b.apartment_id,
        "address": b.address,
        "guestName": b.guest_name,
    }


class MockInterpreter(InterpreterPort):
    """
    Offline interpreter for local runs and tests.

    Understands messages like "виїзд 562 на 11:00" or "заїзд Гусак 16:00":
    a change keyword, an identifier (booking id, apartment id, address or guest
    name, in that order) and a time. Several changes can be separated by ";".
    """

    def interpret(self, request: InterpretationRequest) -> dict[str, Any]:
        context = request.conversation_context or {}
        text = request.text.strip()

        choice = _CHOICE.match(text)
        if choice and context.get("pending") == "ambiguous":
            return self._pick_candidate(int(choice.group(1)), context)
        if choice and context.get("pending") == "clarification":
            text = self._chosen_option(int(choice.group(1)), context) or text
        if context.get("pending") and context.get("message"):
            text = f"{context['message']} {text}"

        parts = [p.strip() for p in _SPLIT.split(text) if p.strip()]
        if len(parts) > 1:
            changes = [self._interpret_one(p, request, context) for p in parts]
            changes = [c for c in changes if c.get("isTimeChange")]
            if len(changes) > 1:
                return {
                    "isTimeChange": True,
                    "targetBooking": None,
                    "reasoning": "Кілька змін в одному повідомленні",
                    "multipleChanges": changes,
                }
        return self._interpret_one(text, request, context)

    def _pick_candidate(self, number: int, context: dict[str, Any]) -> dict[str, Any]:
        candidates = context.get("candidates") or []
        if not 1 <= number <= len(candidates):
            return {"isTimeChange": True, "targetBooking": None, "reasoning": "Невідомий номер варіанту"}
        return {
            "isTimeChange": True,
            "changeType": context.get("changeType"),
            "targetBooking": candidates[number - 1],
            "suggestedTime": context.get("suggestedTime"),
            "reasoning": f"Обрано варіант {number}",
        }

    @staticmethod
    def _chosen_option(number: int, context: dict[str, Any]) -> str | None:
        options = context.get("options") or []
        if 1 <= number <= len(options):
            return str(options[number - 1].get("value") or "") or None
        return None

    def _interpret_one(self, text: str, request: InterpretationRequest, context: dict[str, Any]) -> dict[str, Any]:
        change_type = _change_type(text) or context.get("changeType")
        day, remainder = self._extract_date(text, request.today)
        time_match = _TIME.search(remainder)
        suggested_time = f"{int(time_match.group(1)):02d}:{time_match.group(2)}" if time_match else context.get("suggestedTime")

        if change_type is None:
            return {"isTimeChange": False, "reasoning": "Повідомлення не стосується зміни часу"}

        remainder = _TIME.sub(" ", remainder)

        booking_type = _booking_type(change_type)
        pool = [b for b in request.candidate_bookings if b.type == booking_type]
        if day is not None:
            pool = [b for b in pool if b.date == day]
        matches = self._match(remainder, pool)
        if matches is None and context.get("lastBooking"):
            last = context["lastBooking"]
            matches = [b for b in pool if b.apartment_id == str(last.get("apartmentId"))]

        base: dict[str, Any] = {
            "isTimeChange": True,
            "changeType": change_type,
            "suggestedTime": suggested_time,
            "targetBooking": None,
        }
        if not matches:
            base["reasoning"] = "Не знайдено відповідного завдання"
            return base

        if len(matches) > 1:
            dates = sorted({b.date for b in matches})
            if len(dates) > 1:
                base["clarificationNeeded"] = {
                    "type": "date",
                    "message": "Уточніть дату:",
                    "availableOptions": [
                        {"value": d.isoformat(), "display": d.strftime("%d.%m.%Y")} for d in dates
                    ],
                }
            else:
                base["ambiguousMatches"] = [_ref(b) for b in matches]
            base["reasoning"] = "Знайдено кілька завдань"
            return base

        if not suggested_time:
            base["clarificationNeeded"] = {"type": "time", "message": "Уточніть час:", "availableOptions": []}
            base["reasoning"] = "Не вказано час"
            return base

        base["targetBooking"] = _ref(matches[0])
        base["reasoning"] = "Знайдено одне завдання"
        return base

    @staticmethod
    def _extract_date(text: str, today: date | None) -> tuple[date | None, str]:
        """
        The day named in the text, and the text with the date removed.

        Relative words, ISO and DD.MM.YYYY dates are unambiguous. A bare DD.MM
        is read as a date only when it cannot be a time ("25.10") or when
        another time is present ("11:00 22.10"); a lone "22.10" stays a time.
        """
        day = None
        lowered = text.lower()
        if today is not None:
            if "післязавтра" in lowered:
                day = today + timedelta(days=2)
            elif "завтра" in lowered or "tomorrow" in lowered:
                day = today + timedelta(days=1)
            elif "сьогодні" in lowered or "today" in lowered:
                day = today

        iso = _ISO_DATE.search(text)
        if iso:
            day = day or _make_date(iso.group(1), iso.group(2), iso.group(3))
            text = _ISO_DATE.sub(" ", text)
        full = _FULL_DATE.search(text)
        if full:
            day = day or _make_date(full.group(3), full.group(2), full.group(1))
            text = _FULL_DATE.sub(" ", text)

        times = _TIME.findall(text)
        year = today.year if today else date.today().year
        for short in _SHORT_DATE.finditer(text):
            parsed = _make_date(year, short.group(2), short.group(1))
            if parsed is None:
                continue
            if _TIME.fullmatch(short.group(0)) and len(times) < 2:
                continue
            day = day or parsed
            text = text.replace(short.group(0), " ", 1)
            break
        return day, text

    @staticmethod
    def _match(text: str, pool: list[Booking]) -> list[Booking] | None:
        """Bookings named by the text, or None when the text names nothing."""
        lowered = text.lower()

        by_id = [b for b in pool if b.id.lower() in lowered]
        if by_id:
            return by_id

        numbers = set(_NUMBER.findall(text))
        if numbers:
            by_apartment = [b for b in pool if b.apartment_id in numbers]
            if by_apartment:
                return by_apartment

        by_address = [
            b for b in pool
            if any(len(w) >= 4 and w in lowered for w in re.findall(r"\w+", b.address.lower()))
        ]
        if by_address:
            return by_address

        by_guest = [
            b for b in pool
            if any(len(w) >= 3 and w in lowered for w in re.findall(r"\w+", b.guest_name.lower()))
        ]
        if by_guest:
            return by_guest

        return [] if numbers else None
