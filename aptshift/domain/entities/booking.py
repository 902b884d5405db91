from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

CHECKIN = "checkin"
CHECKOUT = "checkout"
CLEANING = "cleaning"

BOOKING_TYPES = (CHECKIN, CHECKOUT)
CHANGE_TYPES = (CHECKIN, CHECKOUT, CLEANING)

# Field on the booking document that each change type rewrites.
TIME_FIELDS = {
    CHECKIN: "checkinTime",
    CHECKOUT: "checkoutTime",
    CLEANING: "cleaningTime",
}


def booking_id_for(booking_date: date | str, apartment_id: str, booking_type: str) -> str:
    """Deterministic booking key: one document per (date, apartment, type)."""
    day = booking_date.isoformat() if isinstance(booking_date, date) else str(booking_date)
    return f"{day}_{apartment_id}_{booking_type}"


def apartment_from_booking_id(booking_id: str) -> str | None:
    """Apartment part of a key built by booking_id_for, or None if the key has another shape."""
    day, sep, rest = booking_id.partition("_")
    apartment_id, sep2, booking_type = rest.rpartition("_")
    if not (sep and sep2 and day and apartment_id) or booking_type not in BOOKING_TYPES:
        return None
    return apartment_id


@dataclass(frozen=True)
class Booking:
    id: str
    apartment_id: str
    type: str  # "checkin" | "checkout"
    date: date
    address: str = ""
    checkin_time: str | None = None
    checkout_time: str | None = None
    cleaning_time: str | None = None  # checkout bookings only
    has_same_day_checkin: bool = False
    sum_to_collect: float = 0
    keys_count: int = 1
    guest_name: str = ""
    guest_contact: str | None = None
    updated_at: str | None = None
    updated_by: str | None = None

    def time_for(self, change_type: str) -> str | None:
        if change_type == CHECKIN:
            return self.checkin_time
        if change_type == CHECKOUT:
            return self.checkout_time
        if change_type == CLEANING:
            return self.cleaning_time
        return None

    @staticmethod
    def from_document(data: dict[str, Any]) -> "Booking":
        raw_date = data.get("date")
        booking_date = raw_date if isinstance(raw_date, date) else date.fromisoformat(str(raw_date))
        booking_type = str(data.get("type") or "")
        apartment_id = str(data.get("apartmentId") or "")
        return Booking(
            id=str(data.get("id") or booking_id_for(booking_date, apartment_id, booking_type)),
            apartment_id=apartment_id,
            type=booking_type,
            date=booking_date,
            address=data.get("address") or "",
            checkin_time=data.get("checkinTime"),
            checkout_time=data.get("checkoutTime"),
            cleaning_time=data.get("cleaningTime"),
            has_same_day_checkin=bool(data.get("hasSameDayCheckin", False)),
            sum_to_collect=data.get("sumToCollect") or 0,
            keys_count=data.get("keysCount") if data.get("keysCount") is not None else 1,
            guest_name=data.get("guestName") or "",
            guest_contact=data.get("guestContact"),
            updated_at=data.get("updatedAt"),
            updated_by=data.get("updatedBy"),
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "apartmentId": self.apartment_id,
            "type": self.type,
            "date": self.date.isoformat(),
            "address": self.address,
            "checkinTime": self.checkin_time,
            "checkoutTime": self.checkout_time,
            "cleaningTime": self.cleaning_time,
            "hasSameDayCheckin": self.has_same_day_checkin,
            "sumToCollect": self.sum_to_collect,
            "keysCount": self.keys_count,
            "guestName": self.guest_name,
            "guestContact": self.guest_contact,
            "updatedAt": self.updated_at,
            "updatedBy": self.updated_by,
        }
