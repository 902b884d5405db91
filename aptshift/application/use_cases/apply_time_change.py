from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from aptshift.application.exceptions import BookingNotFoundError, StoreContentionError, TypeMismatchError
from aptshift.application.ports.document_store import DocumentStorePort, TransactionPort
from aptshift.application.utils import messages
from aptshift.application.utils.dates import format_display_date, utc_now
from aptshift.application.utils.time_rules import is_change_compatible, normalize_time
from aptshift.core.constants import BOOKINGS_COLLECTION, TIME_CHANGES_COLLECTION
from aptshift.domain.entities.audit_entry import AuditEntry
from aptshift.domain.entities.booking import CLEANING, TIME_FIELDS, Booking


@dataclass(frozen=True)
class ApplyResult:
    success: bool
    message: str
    error_kind: str | None = None  # not_found | type_mismatch | transient_conflict | error
    audit_written: bool = False
    old_time: str | None = None


class ApplyTimeChangeUseCase:
    """
    Applies one validated time change to a booking and records the audit entry.

    The booking update and the audit entry are written in a single store
    transaction, so either both exist afterwards or neither does. Re-applying a
    value the booking already holds is a successful no-op without an audit entry.
    """

    def __init__(self, store: DocumentStorePort, now_provider: Callable[[], datetime] = utc_now) -> None:
        self._store = store
        self._now = now_provider
        self._logger = logging.getLogger(__name__)

    def apply(
        self,
        booking_id: str,
        change_type: str,
        new_time: str,
        actor_id: str,
        reasoning: str = "",
    ) -> ApplyResult:
        new_time = normalize_time(new_time, allow_minutes=change_type == CLEANING) or new_time
        field = TIME_FIELDS[change_type]

        def txn(tx: TransactionPort) -> tuple[Booking, str | None, bool]:
            data = tx.get(BOOKINGS_COLLECTION, booking_id)
            if data is None:
                raise BookingNotFoundError(booking_id)
            booking = Booking.from_document({**data, "id": booking_id})
            if not is_change_compatible(change_type, booking.type):
                raise TypeMismatchError(change_type, booking.type)

            old_time = booking.time_for(change_type)
            if old_time == new_time:
                return booking, old_time, False

            updated_at = self._now().isoformat()
            tx.set(
                BOOKINGS_COLLECTION,
                booking_id,
                {**data, field: new_time, "updatedAt": updated_at, "updatedBy": actor_id},
            )
            entry = AuditEntry(
                booking_id=booking_id,
                apartment_id=booking.apartment_id,
                address=booking.address,
                date=booking.date.isoformat(),
                old_time=old_time,
                new_time=new_time,
                booking_type=booking.type,
                guest_name=booking.guest_name,
                change_type=change_type,
                reasoning=reasoning,
                updated_at=updated_at,
                updated_by=actor_id,
            )
            tx.set(TIME_CHANGES_COLLECTION, uuid.uuid4().hex, entry.to_document())
            return booking, old_time, True

        log_extra = {"booking_id": booking_id, "change_type": change_type, "user_id": actor_id}
        try:
            booking, old_time, written = self._store.run_transaction(txn)
        except BookingNotFoundError:
            self._logger.info("Booking not found", extra=log_extra)
            return ApplyResult(
                success=False,
                message=messages.BOOKING_NOT_FOUND.format(booking_id=booking_id),
                error_kind="not_found",
            )
        except TypeMismatchError as e:
            self._logger.info("Change type does not match booking", extra={**log_extra, "reason": str(e)})
            return ApplyResult(success=False, message=messages.TYPE_MISMATCH, error_kind="type_mismatch")
        except StoreContentionError:
            self._logger.warning("Time change lost to concurrent writers", extra=log_extra)
            return ApplyResult(success=False, message=messages.TRANSIENT_CONFLICT, error_kind="transient_conflict")
        except Exception:
            self._logger.exception("Time change failed", extra=log_extra)
            return ApplyResult(success=False, message=messages.GENERIC_ERROR, error_kind="error")

        template = messages.APPLIED if written else messages.ALREADY_SET
        text = template.format(
            label=messages.CHANGE_LABELS[change_type],
            new_time=new_time,
            address=booking.address,
            apartment_id=booking.apartment_id,
            date=format_display_date(booking.date),
        )
        self._logger.info(
            "Time change applied" if written else "Time change already in place",
            extra={**log_extra, "old_time": old_time, "new_time": new_time},
        )
        return ApplyResult(success=True, message=text, audit_written=written, old_time=old_time)
