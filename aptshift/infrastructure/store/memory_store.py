from __future__ import annotations

from typing import Any

from aptshift.infrastructure.store.versioned_store import VersionedDocumentStore


class MemoryDocumentStore(VersionedDocumentStore):
    """Process-local store for tests and throwaway runs. State is lost on restart."""

    def __init__(self, max_attempts: int = 2) -> None:
        super().__init__(max_attempts=max_attempts)
        self._collections: dict[str, dict[str, tuple[int, dict[str, Any]]]] = {}

    def _read(self, collection: str, key: str) -> tuple[dict[str, Any] | None, int]:
        entry = self._collections.get(collection, {}).get(key)
        if entry is None:
            return None, 0
        version, data = entry
        return data, version

    def _write(self, collection: str, key: str, data: dict[str, Any], version: int) -> None:
        self._collections.setdefault(collection, {})[key] = (version, data)

    def _remove(self, collection: str, key: str) -> bool:
        return self._collections.get(collection, {}).pop(key, None) is not None

    def _scan(self, collection: str) -> list[dict[str, Any]]:
        return [data for _, data in self._collections.get(collection, {}).values()]
