from __future__ import annotations

import logging
from datetime import date

from aptshift.application.ports.booking_store import BookingStorePort
from aptshift.application.ports.document_store import DocumentStorePort
from aptshift.core.constants import BOOKINGS_COLLECTION
from aptshift.domain.entities.booking import Booking


class DocumentBookingStore(BookingStorePort):
    def __init__(self, store: DocumentStorePort) -> None:
        self._store = store
        self._logger = logging.getLogger(__name__)

    def get(self, booking_id: str) -> Booking | None:
        data = self._store.get(BOOKINGS_COLLECTION, booking_id)
        if data is None:
            return None
        return Booking.from_document({**data, "id": booking_id})

    def list_for_day(self, apartment_id: str, day: date) -> list[Booking]:
        return [b for b in self.list_window(day, day) if b.apartment_id == str(apartment_id)]

    def list_window(self, start: date, end: date, apartment_ids: tuple[str, ...] | None = None) -> list[Booking]:
        docs = self._store.query_range(BOOKINGS_COLLECTION, "date", start.isoformat(), end.isoformat())
        allowed = set(apartment_ids) if apartment_ids is not None else None
        bookings: list[Booking] = []
        for doc in docs:
            try:
                booking = Booking.from_document(doc)
            except (TypeError, ValueError) as e:
                self._logger.warning("Skipping malformed booking document", extra={"booking_id": doc.get("id"), "error": str(e)})
                continue
            if allowed is not None and booking.apartment_id not in allowed:
                continue
            bookings.append(booking)
        return bookings
