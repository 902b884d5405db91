#!/usr/bin/env python3
"""
Seed the configured document store with bookings, users and assignments.

Usage:
  python3 scripts/seed_store.py                 # demo data around today
  python3 scripts/seed_store.py export.json     # {"collection": [{"id": ..., ...}, ...]}

Checkout bookings get hasSameDayCheckin derived from the check-ins of the same
apartment and date.
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from aptshift.application.utils.dates import today_in
from aptshift.core.config import settings
from aptshift.core.constants import BOOKINGS_COLLECTION, CLEANING_ASSIGNMENTS_COLLECTION, USERS_COLLECTION
from aptshift.domain.entities.booking import CHECKIN, CHECKOUT, Booking, booking_id_for
from aptshift.wiring.dependencies import get_document_store


def _demo_data() -> dict[str, list[dict]]:
    today = today_in(ZoneInfo(settings.BUSINESS_TIMEZONE))
    tomorrow = today + timedelta(days=1)
    rows = [
        (today, "562", CHECKOUT, "вул. Басейна 5", "Гусак", {"checkoutTime": "11:00", "keysCount": 2}),
        (today, "562", CHECKIN, "вул. Басейна 5", "Коваленко", {"checkinTime": "15:00", "sumToCollect": 1200}),
        (today, "432", CHECKOUT, "вул. Хрещатик 12", "Шевчук", {"checkoutTime": "12:00", "cleaningTime": "12:30"}),
        (tomorrow, "598", CHECKIN, "вул. Саксаганського 40", "Гусак", {"checkinTime": "16:00"}),
        (tomorrow, "562", CHECKOUT, "вул. Басейна 5", "Коваленко", {"checkoutTime": "10:00"}),
    ]
    bookings = []
    for day, apartment_id, booking_type, address, guest, extra in rows:
        bookings.append(
            {
                "id": booking_id_for(day, apartment_id, booking_type),
                "date": day.isoformat(),
                "apartmentId": apartment_id,
                "type": booking_type,
                "address": address,
                "guestName": guest,
                **extra,
            }
        )
    return {
        BOOKINGS_COLLECTION: bookings,
        USERS_COLLECTION: [
            {"id": "admin_local", "role": "admin", "firstName": "Admin"},
            {"id": "cleaner_local", "role": "cleaner", "firstName": "Olena"},
        ],
        CLEANING_ASSIGNMENTS_COLLECTION: [
            {"id": "cleaner_local", "userId": "cleaner_local", "apartmentIds": ["562", "598"]},
        ],
    }


def _derive_same_day_checkins(bookings: list[dict]) -> None:
    checkins = {(b.get("date"), str(b.get("apartmentId"))) for b in bookings if b.get("type") == CHECKIN}
    for b in bookings:
        if b.get("type") == CHECKOUT:
            b["hasSameDayCheckin"] = (b.get("date"), str(b.get("apartmentId"))) in checkins


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the document store")
    parser.add_argument("export", nargs="?", help="JSON export: {collection: [documents with id]}")
    args = parser.parse_args()

    if args.export:
        data = json.loads(Path(args.export).read_text(encoding="utf-8"))
    else:
        data = _demo_data()

    _derive_same_day_checkins(data.get(BOOKINGS_COLLECTION, []))

    store = get_document_store()
    for collection, documents in data.items():
        print(f"Seeding collection: {collection}")
        for doc in documents:
            doc = dict(doc)
            doc_id = str(doc.pop("id"))
            if collection == BOOKINGS_COLLECTION:
                # normalizes field types and fills defaults
                doc = Booking.from_document({**doc, "id": doc_id}).to_document()
            store.set(collection, doc_id, doc)
            print(f"  added {doc_id}")
    print("Store seeded.")


if __name__ == "__main__":
    main()
