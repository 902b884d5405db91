from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

from aptshift.application.exceptions import BookingNotFoundError, PermissionDeniedError, StoreContentionError
from aptshift.application.ports.document_store import DocumentStorePort, TransactionPort
from aptshift.application.use_cases.permissions import PermissionGuard
from aptshift.application.utils import messages
from aptshift.application.utils.dates import utc_now
from aptshift.core.constants import BOOKINGS_COLLECTION
from aptshift.domain.entities.booking import apartment_from_booking_id


@dataclass(frozen=True)
class InfoUpdateResult:
    success: bool
    message: str
    error_kind: str | None = None


def _format_sum(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:.2f}"


class UpdateBookingInfoUseCase:
    """Changes the amount to collect and/or the key count of one booking."""

    def __init__(
        self,
        store: DocumentStorePort,
        permission_guard: PermissionGuard,
        now_provider: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._guard = permission_guard
        self._now = now_provider
        self._logger = logging.getLogger(__name__)

    def execute(
        self,
        booking_id: str,
        actor_id: str,
        sum_to_collect: float | None = None,
        keys_count: int | None = None,
    ) -> InfoUpdateResult:
        if sum_to_collect is None and keys_count is None:
            return InfoUpdateResult(success=False, message=messages.INFO_NOTHING_TO_UPDATE, error_kind="invalid")
        if sum_to_collect is not None and sum_to_collect < 0:
            return InfoUpdateResult(success=False, message=messages.INFO_INVALID_SUM, error_kind="invalid")
        if keys_count is not None and keys_count < 0:
            return InfoUpdateResult(success=False, message=messages.INFO_INVALID_KEYS, error_kind="invalid")

        access = self._guard.load_access(actor_id)

        def txn(tx: TransactionPort) -> None:
            data = tx.get(BOOKINGS_COLLECTION, booking_id)
            if data is None:
                # Missing bookings of apartments the user cannot manage read as denied.
                if not self._guard.authorize(access, apartment_from_booking_id(booking_id)):
                    raise PermissionDeniedError(actor_id)
                raise BookingNotFoundError(booking_id)
            if not self._guard.authorize(access, str(data.get("apartmentId") or "")):
                raise PermissionDeniedError(actor_id)

            update: dict[str, Any] = {"updatedAt": self._now().isoformat(), "updatedBy": actor_id}
            if sum_to_collect is not None:
                update["sumToCollect"] = sum_to_collect
            if keys_count is not None:
                update["keysCount"] = keys_count
            tx.set(BOOKINGS_COLLECTION, booking_id, {**data, **update})

        try:
            self._store.run_transaction(txn)
        except BookingNotFoundError:
            return InfoUpdateResult(
                success=False,
                message=messages.BOOKING_NOT_FOUND.format(booking_id=booking_id),
                error_kind="not_found",
            )
        except PermissionDeniedError:
            return InfoUpdateResult(success=False, message=messages.NO_ACCESS, error_kind="permission_denied")
        except StoreContentionError:
            self._logger.warning("Info update lost to concurrent writers", extra={"booking_id": booking_id})
            return InfoUpdateResult(success=False, message=messages.TRANSIENT_CONFLICT, error_kind="transient_conflict")

        details = []
        if sum_to_collect is not None:
            details.append(messages.INFO_UPDATED_SUM.format(sum=_format_sum(sum_to_collect)))
        if keys_count is not None:
            details.append(messages.INFO_UPDATED_KEYS.format(keys=keys_count))
        self._logger.info("Booking info updated", extra={"booking_id": booking_id, "user_id": actor_id})
        return InfoUpdateResult(success=True, message=messages.INFO_UPDATED.format(details=", ".join(details)))
