from __future__ import annotations

import logging

from aptshift.application.ports.access_store import AccessStorePort
from aptshift.domain.entities.user_access import UserAccess


class PermissionGuard:
    """Admins may touch every apartment; everyone else only their assigned ones."""

    def __init__(self, access_store: AccessStorePort) -> None:
        self._access_store = access_store
        self._logger = logging.getLogger(__name__)

    def load_access(self, user_id: str) -> UserAccess:
        return self._access_store.get_access(user_id)

    def authorize(self, access: UserAccess, apartment_id: str | None) -> bool:
        allowed = self.can_view(access, apartment_id)
        if not allowed:
            self._logger.info(
                "Permission denied",
                extra={"user_id": access.user_id, "apartment_id": apartment_id},
            )
        return allowed

    @staticmethod
    def can_view(access: UserAccess, apartment_id: str | None) -> bool:
        if access.is_admin:
            return True
        if not apartment_id:
            return False
        return str(apartment_id) in access.assigned_apartment_ids
