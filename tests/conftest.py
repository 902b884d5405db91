from __future__ import annotations

from datetime import date

import pytest

from aptshift.core.constants import BOOKINGS_COLLECTION, CLEANING_ASSIGNMENTS_COLLECTION, USERS_COLLECTION
from aptshift.domain.entities.booking import Booking, booking_id_for
from aptshift.infrastructure.store.memory_store import MemoryDocumentStore


@pytest.fixture
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


@pytest.fixture
def seed_booking(store):
    """Write a booking document and return the Booking it represents."""

    def _seed(
        apartment_id: str = "562",
        booking_type: str = "checkout",
        day: date = date(2026, 10, 20),
        **fields,
    ) -> Booking:
        booking = Booking(
            id=booking_id_for(day, apartment_id, booking_type),
            apartment_id=apartment_id,
            type=booking_type,
            date=day,
            address=fields.pop("address", f"вул. Басейна {apartment_id}"),
            guest_name=fields.pop("guest_name", "Гусак"),
            **fields,
        )
        store.set(BOOKINGS_COLLECTION, booking.id, booking.to_document())
        return booking

    return _seed


@pytest.fixture
def add_user(store):
    def _add(user_id: str, role: str = "cleaner", apartments: tuple[str, ...] = ()) -> None:
        store.set(USERS_COLLECTION, user_id, {"id": user_id, "role": role})
        if apartments:
            store.set(
                CLEANING_ASSIGNMENTS_COLLECTION,
                user_id,
                {"userId": user_id, "apartmentIds": list(apartments)},
            )

    return _add
