from __future__ import annotations

import threading
from datetime import datetime, timezone

from aptshift.application.use_cases.apply_time_change import ApplyTimeChangeUseCase
from aptshift.core.constants import BOOKINGS_COLLECTION, TIME_CHANGES_COLLECTION
from aptshift.infrastructure.store.memory_store import MemoryDocumentStore

NOW = datetime(2026, 10, 20, 8, 0, tzinfo=timezone.utc)


def _applier(store) -> ApplyTimeChangeUseCase:
    return ApplyTimeChangeUseCase(store=store, now_provider=lambda: NOW)


def test_apply_writes_booking_and_single_audit_entry(store, seed_booking):
    booking = seed_booking("562", "checkin", checkin_time="15:00", guest_name="Гусак")

    result = _applier(store).apply(booking.id, "checkin", "16:00", "user_1", "Гість запізнюється")

    assert result.success is True
    assert result.audit_written is True
    assert result.old_time == "15:00"
    assert "16:00" in result.message
    assert "20.10.2026" in result.message
    assert "562" in result.message

    doc = store.get(BOOKINGS_COLLECTION, booking.id)
    assert doc["checkinTime"] == "16:00"
    assert doc["updatedBy"] == "user_1"
    assert doc["updatedAt"] == NOW.isoformat()

    audit = store.list_all(TIME_CHANGES_COLLECTION)
    assert len(audit) == 1
    assert audit[0]["oldTime"] == "15:00"
    assert audit[0]["newTime"] == "16:00"
    assert audit[0]["bookingId"] == booking.id
    assert audit[0]["changeType"] == "checkin"
    assert audit[0]["reasoning"] == "Гість запізнюється"


def test_reapply_same_value_is_noop(store, seed_booking):
    booking = seed_booking("562", "checkout", checkout_time="11:00")
    applier = _applier(store)

    first = applier.apply(booking.id, "checkout", "10:00", "user_1")
    second = applier.apply(booking.id, "checkout", "10:00", "user_1")

    assert first.audit_written is True
    assert second.success is True
    assert second.audit_written is False
    assert len(store.list_all(TIME_CHANGES_COLLECTION)) == 1


def test_time_is_normalized_before_write(store, seed_booking):
    booking = seed_booking("562", "checkout", checkout_time="11:00")

    _applier(store).apply(booking.id, "checkout", "9:00", "user_1")

    assert store.get(BOOKINGS_COLLECTION, booking.id)["checkoutTime"] == "09:00"


def test_cleaning_change_updates_cleaning_field(store, seed_booking):
    booking = seed_booking("562", "checkout", checkout_time="11:00")

    result = _applier(store).apply(booking.id, "cleaning", "11:30", "user_1")

    assert result.success is True
    assert store.get(BOOKINGS_COLLECTION, booking.id)["cleaningTime"] == "11:30"


def test_missing_booking(store):
    result = _applier(store).apply("2026-10-20_999_checkout", "checkout", "10:00", "user_1")

    assert result.success is False
    assert result.error_kind == "not_found"
    assert "2026-10-20_999_checkout" in result.message
    assert store.list_all(TIME_CHANGES_COLLECTION) == []


def test_type_mismatch_is_terminal(store, seed_booking):
    booking = seed_booking("562", "checkin", checkin_time="15:00")

    result = _applier(store).apply(booking.id, "cleaning", "12:00", "user_1")

    assert result.error_kind == "type_mismatch"
    assert store.get(BOOKINGS_COLLECTION, booking.id)["checkinTime"] == "15:00"
    assert store.list_all(TIME_CHANGES_COLLECTION) == []


class _ContendedStore(MemoryDocumentStore):
    """Bumps the booking behind the transaction's back on every read."""

    def __init__(self, booking_id: str) -> None:
        super().__init__()
        self.booking_id = booking_id
        self.reads = 0

    def _read(self, collection, key):
        data, version = super()._read(collection, key)
        if collection == BOOKINGS_COLLECTION and key == self.booking_id and data is not None:
            self.reads += 1
            if self.reads % 2 == 1:
                # odd reads come from the transaction; move the version before commit
                self._write(collection, key, dict(data), version + 1)
        return data, version


def test_persistent_contention_surfaces_transient_conflict():
    store = _ContendedStore("2026-10-20_562_checkout")
    store._write(
        BOOKINGS_COLLECTION,
        "2026-10-20_562_checkout",
        {"apartmentId": "562", "type": "checkout", "date": "2026-10-20", "checkoutTime": "11:00"},
        1,
    )

    result = _applier(store).apply("2026-10-20_562_checkout", "checkout", "10:00", "user_1")

    assert result.success is False
    assert result.error_kind == "transient_conflict"
    assert store.list_all(TIME_CHANGES_COLLECTION) == []


def test_concurrent_identical_changes_write_one_audit_entry(store, seed_booking):
    booking = seed_booking("562", "checkout", checkout_time="11:00")
    applier = _applier(store)
    barrier = threading.Barrier(8)
    results = []

    def worker():
        barrier.wait()
        results.append(applier.apply(booking.id, "checkout", "10:00", "user_1"))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert len(results) == 8
    assert sum(1 for r in results if r.audit_written) == 1
    assert all(r.success or r.error_kind == "transient_conflict" for r in results)
    assert store.get(BOOKINGS_COLLECTION, booking.id)["checkoutTime"] == "10:00"
    assert len(store.list_all(TIME_CHANGES_COLLECTION)) == 1
