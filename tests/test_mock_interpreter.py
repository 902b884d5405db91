from __future__ import annotations

from datetime import date

from aptshift.application.ports.interpreter import InterpretationRequest
from aptshift.domain.entities.booking import Booking
from aptshift.infrastructure.llm.mock_interpreter import MockInterpreter

TODAY = date(2026, 10, 20)


def _booking(apartment_id, booking_type, day=TODAY, guest="Гусак", address=None) -> Booking:
    return Booking(
        id=f"{day.isoformat()}_{apartment_id}_{booking_type}",
        apartment_id=apartment_id,
        type=booking_type,
        date=day,
        address=address or f"вул. Шевченка {apartment_id}",
        guest_name=guest,
    )


def _request(text, bookings, context=None) -> InterpretationRequest:
    return InterpretationRequest(
        text=text,
        conversation_context=context or {},
        is_admin=True,
        assigned_apartment_ids=(),
        candidate_bookings=bookings,
        today=TODAY,
    )


def test_apartment_id_and_time():
    bookings = [_booking("562", "checkout"), _booking("562", "checkin"), _booking("432", "checkout")]

    data = MockInterpreter().interpret(_request("Змініть виїзд 562 на 12:00", bookings))

    assert data["changeType"] == "checkout"
    assert data["suggestedTime"] == "12:00"
    assert data["targetBooking"]["id"] == "2026-10-20_562_checkout"


def test_guest_name_for_checkin():
    bookings = [_booking("562", "checkin", guest="Петренко"), _booking("432", "checkin", guest="Гусак")]

    data = MockInterpreter().interpret(_request("Встанови заїзд на 15:00 для Гусак", bookings))

    assert data["targetBooking"]["apartmentId"] == "432"


def test_tomorrow_narrows_dates():
    tomorrow = date(2026, 10, 21)
    bookings = [_booking("562", "checkout"), _booking("562", "checkout", day=tomorrow)]

    data = MockInterpreter().interpret(_request("виїзд 562 завтра о 10:00", bookings))

    assert data["targetBooking"]["date"] == "2026-10-21"


def test_same_day_duplicates_are_ambiguous():
    bookings = [_booking("562", "checkout"), _booking("432", "checkout")]

    data = MockInterpreter().interpret(_request("виїзд Гусак 10:00", bookings))

    assert data["targetBooking"] is None
    assert len(data["ambiguousMatches"]) == 2


def test_pick_pending_candidate_by_number():
    context = {
        "pending": "ambiguous",
        "changeType": "checkout",
        "suggestedTime": "10:00",
        "candidates": [{"id": "a"}, {"id": "b"}],
    }

    data = MockInterpreter().interpret(_request("2", [], context))

    assert data["targetBooking"] == {"id": "b"}
    assert data["suggestedTime"] == "10:00"


def test_multiple_changes():
    bookings = [_booking("562", "checkout"), _booking("432", "checkout")]

    data = MockInterpreter().interpret(_request("виїзд 562 на 10:00; виїзд 432 на 11:00", bookings))

    assert [c["targetBooking"]["apartmentId"] for c in data["multipleChanges"]] == ["562", "432"]


def test_small_talk_is_not_a_time_change():
    data = MockInterpreter().interpret(_request("Привіт, як справи?", [_booking("562", "checkout")]))

    assert data["isTimeChange"] is False


def test_unknown_apartment_has_no_target():
    data = MockInterpreter().interpret(_request("виїзд 999 на 10:00", [_booking("562", "checkout")]))

    assert data["isTimeChange"] is True
    assert data["targetBooking"] is None


def test_short_date_next_to_a_time_is_a_date():
    later = date(2026, 10, 22)
    bookings = [_booking("562", "checkout"), _booking("562", "checkout", day=later)]

    data = MockInterpreter().interpret(_request("виїзд 562 22.10 на 11:00", bookings))

    assert data["suggestedTime"] == "11:00"
    assert data["targetBooking"]["date"] == "2026-10-22"


def test_lone_dotted_value_is_a_time():
    data = MockInterpreter().interpret(_request("виїзд 562 на 11.00", [_booking("562", "checkout")]))

    assert data["suggestedTime"] == "11:00"
    assert data["targetBooking"]["id"] == "2026-10-20_562_checkout"


def test_numbered_answer_picks_clarification_option():
    later = date(2026, 10, 22)
    bookings = [_booking("562", "checkout"), _booking("562", "checkout", day=later)]
    context = {
        "pending": "clarification",
        "message": "виїзд Гусак 11:00",
        "clarificationType": "date",
        "options": [
            {"value": "2026-10-20", "display": "20.10.2026"},
            {"value": "2026-10-22", "display": "22.10.2026"},
        ],
    }

    data = MockInterpreter().interpret(_request("2", bookings, context))

    assert data["targetBooking"]["date"] == "2026-10-22"
    assert data["suggestedTime"] == "11:00"
