from __future__ import annotations

from aptshift.application.dto.change_intent import parse_interpretation
from aptshift.domain.entities.change_intent import OutcomeKind

TARGET = {
    "id": "2026-10-20_562_checkout",
    "type": "checkout",
    "date": "2026-10-20",
    "apartmentId": 562,
    "address": "вул. Басейна 5",
    "guestName": "Гусак",
}


def test_resolved_intent():
    outcome = parse_interpretation(
        {
            "isTimeChange": True,
            "changeType": "checkout",
            "targetBooking": TARGET,
            "suggestedTime": "11:00",
            "reasoning": "Виїзд 562",
        }
    )

    assert outcome.kind == OutcomeKind.RESOLVED
    assert outcome.intent.target.apartment_id == "562"
    assert outcome.intent.suggested_time == "11:00"


def test_missing_change_type_is_taken_from_booking_type():
    outcome = parse_interpretation({"isTimeChange": True, "targetBooking": TARGET, "suggestedTime": "10:00"})

    assert outcome.intent.change_type == "checkout"


def test_not_a_time_change():
    outcome = parse_interpretation({"isTimeChange": False, "reasoning": "Привітання"})

    assert outcome.kind == OutcomeKind.NOT_TIME_CHANGE


def test_time_change_without_target_is_unresolved():
    outcome = parse_interpretation({"isTimeChange": True, "changeType": "checkin", "targetBooking": None})

    assert outcome.kind == OutcomeKind.UNRESOLVED


def test_ambiguous_wins_over_clarification():
    outcome = parse_interpretation(
        {
            "isTimeChange": True,
            "ambiguousMatches": [TARGET, {**TARGET, "id": "2026-10-21_562_checkout", "date": "2026-10-21"}],
            "clarificationNeeded": {"type": "date", "message": "?", "availableOptions": []},
        }
    )

    assert outcome.kind == OutcomeKind.AMBIGUOUS
    assert len(outcome.intent.ambiguous_matches) == 2


def test_clarification_outcome():
    outcome = parse_interpretation(
        {
            "isTimeChange": True,
            "clarificationNeeded": {
                "type": "date",
                "message": "Уточніть дату",
                "availableOptions": [{"value": "2026-10-20"}, {"value": "2026-10-22", "display": "22.10"}],
            },
        }
    )

    assert outcome.kind == OutcomeKind.CLARIFICATION
    options = outcome.intent.clarification.options
    assert [o.value for o in options] == ["2026-10-20", "2026-10-22"]
    assert options[0].display == "2026-10-20"


def test_invalid_oracle_validation_always_carries_errors():
    outcome = parse_interpretation(
        {
            "isTimeChange": True,
            "targetBooking": TARGET,
            "suggestedTime": "13:00",
            "validation": {
                "isValid": False,
                "errors": None,
                "conflicts": [{"type": "checkin", "time": "13:00", "description": "Заїзд о 13:00"}],
            },
        }
    )

    validation = outcome.intent.validation
    assert validation.is_valid is False
    assert validation.errors == ("Заїзд о 13:00",)


def test_multiple_changes_without_primary_promote_first_sibling():
    second = {**TARGET, "id": "2026-10-20_432_checkout", "apartmentId": "432"}
    outcome = parse_interpretation(
        {
            "isTimeChange": True,
            "targetBooking": None,
            "multipleChanges": [
                {"isTimeChange": True, "changeType": "checkout", "targetBooking": TARGET, "suggestedTime": "11:00"},
                {"isTimeChange": True, "changeType": "checkout", "targetBooking": second, "suggestedTime": "10:00"},
            ],
        }
    )

    assert outcome.kind == OutcomeKind.RESOLVED
    assert outcome.intent.target.apartment_id == "562"
    assert [s.target.apartment_id for s in outcome.siblings] == ["432"]


def test_promoted_sibling_keeps_its_ambiguity():
    second = {**TARGET, "id": "2026-10-20_432_checkout", "apartmentId": "432"}
    outcome = parse_interpretation(
        {
            "isTimeChange": True,
            "targetBooking": None,
            "multipleChanges": [
                {
                    "isTimeChange": True,
                    "changeType": "checkout",
                    "targetBooking": None,
                    "suggestedTime": "11:00",
                    "ambiguousMatches": [TARGET, second],
                },
                {"isTimeChange": True, "changeType": "checkout", "targetBooking": TARGET, "suggestedTime": "10:00"},
            ],
        }
    )

    assert outcome.kind == OutcomeKind.AMBIGUOUS
    assert len(outcome.intent.ambiguous_matches) == 2
    assert [s.target.apartment_id for s in outcome.siblings] == ["562"]


def test_schema_violations_are_malformed():
    assert parse_interpretation("not json").kind == OutcomeKind.MALFORMED
    assert parse_interpretation({"isTimeChange": True, "changeType": "lunch"}).kind == OutcomeKind.MALFORMED
    assert (
        parse_interpretation({"isTimeChange": True, "clarificationNeeded": {"type": "weather"}}).kind
        == OutcomeKind.MALFORMED
    )
