from __future__ import annotations

import logging
from dataclasses import dataclass

from aptshift.application.exceptions import PermissionDeniedError
from aptshift.application.ports.access_store import AccessStorePort
from aptshift.application.use_cases.permissions import PermissionGuard
from aptshift.application.utils import messages


@dataclass(frozen=True)
class AssignmentResult:
    success: bool
    message: str
    apartment_ids: tuple[str, ...] = ()


def _clean_ids(apartment_ids: list[str]) -> list[str]:
    return list(dict.fromkeys(str(a).strip() for a in apartment_ids if str(a).strip()))


class ManageAssignmentsUseCase:
    """Admin-only management of which apartments a cleaner is assigned to."""

    def __init__(self, access_store: AccessStorePort, permission_guard: PermissionGuard) -> None:
        self._access_store = access_store
        self._guard = permission_guard
        self._logger = logging.getLogger(__name__)

    def _require_admin(self, actor_id: str) -> None:
        if not self._guard.load_access(actor_id).is_admin:
            self._logger.info("Assignment change refused for non-admin", extra={"user_id": actor_id})
            raise PermissionDeniedError(messages.ADMIN_ONLY_ASSIGNMENTS)

    def add(self, actor_id: str, user_id: str, apartment_ids: list[str]) -> AssignmentResult:
        return self._change(actor_id, user_id, apartment_ids, remove=False)

    def remove(self, actor_id: str, user_id: str, apartment_ids: list[str]) -> AssignmentResult:
        return self._change(actor_id, user_id, apartment_ids, remove=True)

    def show(self, actor_id: str, user_id: str) -> AssignmentResult:
        self._require_admin(actor_id)
        if not self._access_store.user_exists(user_id):
            return AssignmentResult(success=False, message=messages.USER_NOT_FOUND.format(user_id=user_id))

        current = self._access_store.get_access(user_id).assigned_apartment_ids
        if not current:
            return AssignmentResult(success=True, message=messages.ASSIGNMENTS_EMPTY.format(user_id=user_id))
        return AssignmentResult(
            success=True,
            message=messages.ASSIGNMENTS_LIST.format(user_id=user_id, apartment_ids=", ".join(current)),
            apartment_ids=current,
        )

    def _change(self, actor_id: str, user_id: str, apartment_ids: list[str], remove: bool) -> AssignmentResult:
        self._require_admin(actor_id)
        if not self._access_store.user_exists(user_id):
            return AssignmentResult(success=False, message=messages.USER_NOT_FOUND.format(user_id=user_id))

        requested = _clean_ids(apartment_ids)
        current = list(self._access_store.get_access(user_id).assigned_apartment_ids)
        if remove:
            updated = [a for a in current if a not in requested]
        else:
            updated = current + [a for a in requested if a not in current]
        self._access_store.set_assigned_apartments(user_id, updated)

        template = messages.ASSIGNMENTS_REMOVED if remove else messages.ASSIGNMENTS_ADDED
        self._logger.info(
            "Assignments updated",
            extra={"user_id": user_id, "actor_id": actor_id, "action": "remove" if remove else "add"},
        )
        return AssignmentResult(
            success=True,
            message=template.format(apartment_ids=", ".join(requested), user_id=user_id),
            apartment_ids=tuple(updated),
        )
