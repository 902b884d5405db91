"""
Time-window rules for checkout, check-in and cleaning.

Pure functions only: nothing here looks at other bookings (see conflicts.py).
Check-in and checkout times are whole hours ("HH:00"); cleaning times may carry
minutes because cleaning is placed relative to the checkout with a 30-minute gap.
"""

from __future__ import annotations

import re

from aptshift.application.utils.messages import RULE_MESSAGES
from aptshift.core.constants import CHECKIN_CHECKOUT_BOUNDARY_HOUR, CLEANING_DEADLINE, CLEANING_GAP_MINUTES
from aptshift.domain.entities.booking import CHECKIN, CHECKOUT, CLEANING, Booking

_WHOLE_HOUR = re.compile(r"^([0-9]|[01][0-9]|2[0-3]):00$")
_HOUR_MINUTE = re.compile(r"^([0-9]|[01][0-9]|2[0-3]):([0-5][0-9])$")


def parse_time(value: str | None, allow_minutes: bool = False) -> int | None:
    """Minutes since midnight, or None when the value is not a valid time."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    if allow_minutes:
        match = _HOUR_MINUTE.match(text)
        if not match:
            return None
        return int(match.group(1)) * 60 + int(match.group(2))
    match = _WHOLE_HOUR.match(text)
    if not match:
        return None
    return int(match.group(1)) * 60


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_time(value: str | None, allow_minutes: bool = False) -> str | None:
    """Zero-padded "HH:MM" form of a valid time ("9:00" -> "09:00")."""
    minutes = parse_time(value, allow_minutes=allow_minutes)
    return format_minutes(minutes) if minutes is not None else None


def is_valid_checkout(t: str) -> bool:
    minutes = parse_time(t)
    return minutes is not None and minutes // 60 < CHECKIN_CHECKOUT_BOUNDARY_HOUR


def is_valid_checkin(t: str) -> bool:
    minutes = parse_time(t)
    return minutes is not None and minutes // 60 > CHECKIN_CHECKOUT_BOUNDARY_HOUR


def is_valid_cleaning(t: str, checkout_time: str | None) -> bool:
    cleaning = parse_time(t, allow_minutes=True)
    checkout = parse_time(checkout_time, allow_minutes=True)
    if cleaning is None or checkout is None:
        return False
    deadline = parse_time(CLEANING_DEADLINE)
    return checkout + CLEANING_GAP_MINUTES <= cleaning <= deadline


def format_error(kind: str, value: str | None = None) -> str:
    template = RULE_MESSAGES[kind]
    return template.format(value=value if value is not None else "")


def is_change_compatible(change_type: str | None, booking_type: str) -> bool:
    """Check-in changes apply to check-in bookings; checkout and cleaning changes to checkout bookings."""
    if change_type == CHECKIN:
        return booking_type == CHECKIN
    if change_type in (CHECKOUT, CLEANING):
        return booking_type == CHECKOUT
    return False


def validate_rules(change_type: str, time_value: str | None, booking: Booking) -> list[str]:
    """
    Rule errors for one proposed change. A format error is reported alone,
    before any window rule is evaluated.
    """
    allow_minutes = change_type == CLEANING
    if parse_time(time_value, allow_minutes=allow_minutes) is None:
        return [format_error("format", time_value if time_value is not None else "?")]

    if change_type == CHECKOUT and not is_valid_checkout(time_value):
        return [format_error("checkout")]
    if change_type == CHECKIN and not is_valid_checkin(time_value):
        return [format_error("checkin")]
    if change_type == CLEANING:
        if not booking.checkout_time:
            return [format_error("cleaning_no_checkout")]
        if not is_valid_cleaning(time_value, booking.checkout_time):
            return [format_error("cleaning")]
    return []
