from __future__ import annotations

from aptshift.application.utils.time_rules import format_minutes, parse_time
from aptshift.core.constants import CLEANING_GAP_MINUTES, DEFAULT_CHECKIN_TIME
from aptshift.domain.entities.booking import CHECKIN, CHECKOUT, CLEANING, Booking
from aptshift.domain.entities.change_intent import Conflict


def _minutes(value: str | None) -> int | None:
    return parse_time(value, allow_minutes=True)


def _same_day(target: Booking, bookings: list[Booking], booking_type: str) -> list[Booking]:
    return [
        b
        for b in bookings
        if b.id != target.id
        and b.type == booking_type
        and b.apartment_id == target.apartment_id
        and b.date == target.date
    ]


def _checkin_times(target: Booking, same_day: list[Booking]) -> list[int]:
    """Times of same-day check-ins; an unscheduled check-in counts as the default check-in time."""
    checkins = _same_day(target, same_day, CHECKIN)
    times = [_minutes(b.checkin_time or DEFAULT_CHECKIN_TIME) for b in checkins]
    if not checkins and target.has_same_day_checkin:
        times.append(_minutes(DEFAULT_CHECKIN_TIME))
    return [t for t in times if t is not None]


def detect_conflicts(
    change_type: str,
    proposed_time: str,
    target: Booking,
    same_day_bookings: list[Booking],
) -> list[Conflict]:
    """
    Conflicts between a proposed time and the other events of the same
    apartment on the same date. Every conflict found is returned.
    """
    proposed = _minutes(proposed_time)
    if proposed is None:
        return []

    conflicts: list[Conflict] = []

    if change_type == CHECKOUT:
        for checkin in _checkin_times(target, same_day_bookings):
            if proposed >= checkin:
                conflicts.append(
                    Conflict(
                        type=CHECKIN,
                        time=format_minutes(checkin),
                        description=f"Виїзд має бути раніше заїзду того ж дня ({format_minutes(checkin)})",
                    )
                )
        cleaning = _minutes(target.cleaning_time)
        if cleaning is not None and cleaning < proposed + CLEANING_GAP_MINUTES:
            conflicts.append(
                Conflict(
                    type=CLEANING,
                    time=format_minutes(cleaning),
                    description=(
                        f"Прибирання о {format_minutes(cleaning)} почнеться менш ніж через "
                        f"{CLEANING_GAP_MINUTES} хв після нового часу виїзду"
                    ),
                )
            )

    elif change_type == CLEANING:
        checkout = _minutes(target.checkout_time)
        if checkout is not None and proposed < checkout + CLEANING_GAP_MINUTES:
            conflicts.append(
                Conflict(
                    type=CHECKOUT,
                    time=format_minutes(checkout),
                    description=(
                        f"Прибирання можна почати не раніше ніж через {CLEANING_GAP_MINUTES} хв "
                        f"після виїзду ({format_minutes(checkout)})"
                    ),
                )
            )
        for checkin in _checkin_times(target, same_day_bookings):
            if proposed >= checkin:
                conflicts.append(
                    Conflict(
                        type=CHECKIN,
                        time=format_minutes(checkin),
                        description=f"Прибирання має завершитися до заїзду ({format_minutes(checkin)})",
                    )
                )

    elif change_type == CHECKIN:
        for checkout_booking in _same_day(target, same_day_bookings, CHECKOUT):
            cleaning = _minutes(checkout_booking.cleaning_time)
            checkout = _minutes(checkout_booking.checkout_time)
            if cleaning is not None:
                if cleaning >= proposed:
                    conflicts.append(
                        Conflict(
                            type=CLEANING,
                            time=format_minutes(cleaning),
                            description=f"Прибирання о {format_minutes(cleaning)} не завершиться до заїзду",
                        )
                    )
            elif checkout is not None and checkout >= proposed:
                conflicts.append(
                    Conflict(
                        type=CHECKOUT,
                        time=format_minutes(checkout),
                        description=f"Заїзд має бути пізніше виїзду того ж дня ({format_minutes(checkout)})",
                    )
                )

    return conflicts
