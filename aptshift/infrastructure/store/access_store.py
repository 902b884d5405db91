from __future__ import annotations

from datetime import datetime, timezone

from aptshift.application.ports.access_store import AccessStorePort
from aptshift.application.ports.document_store import DocumentStorePort
from aptshift.core.constants import CLEANING_ASSIGNMENTS_COLLECTION, USERS_COLLECTION
from aptshift.domain.entities.user_access import UserAccess


class DocumentAccessStore(AccessStorePort):
    def __init__(self, store: DocumentStorePort) -> None:
        self._store = store

    def get_access(self, user_id: str) -> UserAccess:
        user_doc = self._store.get(USERS_COLLECTION, user_id)
        assignment_doc = self._store.get(CLEANING_ASSIGNMENTS_COLLECTION, user_id)
        return UserAccess.from_documents(user_id, user_doc, assignment_doc)

    def set_assigned_apartments(self, user_id: str, apartment_ids: list[str]) -> None:
        now = datetime.now(timezone.utc).isoformat()
        existing = self._store.get(CLEANING_ASSIGNMENTS_COLLECTION, user_id) or {}
        self._store.set(
            CLEANING_ASSIGNMENTS_COLLECTION,
            user_id,
            {
                "userId": user_id,
                "apartmentIds": list(apartment_ids),
                "createdAt": existing.get("createdAt") or now,
                "updatedAt": now,
            },
        )

    def user_exists(self, user_id: str) -> bool:
        return self._store.get(USERS_COLLECTION, user_id) is not None
