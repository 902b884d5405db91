from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from aptshift.domain.entities.booking import Booking


class BookingStorePort(ABC):
    @abstractmethod
    def get(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def list_for_day(self, apartment_id: str, day: date) -> list[Booking]:
        """All bookings (checkin and checkout) of one apartment on one date."""
        raise NotImplementedError

    @abstractmethod
    def list_window(self, start: date, end: date, apartment_ids: tuple[str, ...] | None = None) -> list[Booking]:
        """Bookings dated within [start, end]; restricted to apartment_ids when given."""
        raise NotImplementedError
