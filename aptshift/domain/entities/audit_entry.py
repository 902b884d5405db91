from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class AuditEntry:
    booking_id: str
    apartment_id: str
    address: str
    date: str
    old_time: str | None
    new_time: str
    booking_type: str
    guest_name: str
    change_type: str
    reasoning: str
    updated_at: str
    updated_by: str

    def to_document(self) -> dict[str, Any]:
        return {
            "bookingId": self.booking_id,
            "apartmentId": self.apartment_id,
            "address": self.address,
            "date": self.date,
            "oldTime": self.old_time,
            "newTime": self.new_time,
            "bookingType": self.booking_type,
            "guestName": self.guest_name,
            "changeType": self.change_type,
            "reasoning": self.reasoning,
            "updatedAt": self.updated_at,
            "updatedBy": self.updated_by,
        }
