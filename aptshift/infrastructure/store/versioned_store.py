from __future__ import annotations

import copy
import logging
import threading
from abc import abstractmethod
from contextlib import contextmanager
from typing import Any, Callable, Iterator, TypeVar

from aptshift.application.exceptions import StoreContentionError
from aptshift.application.ports.document_store import DocumentStorePort, TransactionPort

T = TypeVar("T")


class _Transaction(TransactionPort):
    def __init__(self, store: "VersionedDocumentStore") -> None:
        self._store = store
        self.read_versions: dict[tuple[str, str], int] = {}
        self.writes: dict[tuple[str, str], dict[str, Any]] = {}

    def get(self, collection: str, key: str) -> dict[str, Any] | None:
        ref = (collection, key)
        if ref in self.writes:
            return copy.deepcopy(self.writes[ref])
        with self._store._locked():
            data, version = self._store._read(collection, key)
        self.read_versions.setdefault(ref, version)
        return copy.deepcopy(data)

    def set(self, collection: str, key: str, data: dict[str, Any]) -> None:
        ref = (collection, key)
        if ref not in self.read_versions:
            # Blind writes still conflict with a concurrent create of the same key.
            with self._store._locked():
                _, version = self._store._read(collection, key)
            self.read_versions[ref] = version
        self.writes[ref] = copy.deepcopy(data)


class VersionedDocumentStore(DocumentStorePort):
    """
    Shared optimistic-concurrency machinery for document stores.

    Every document carries an integer version. A transaction records the version
    of each document it touches and commits only if none of them moved; otherwise
    the transaction function is re-run, up to `max_attempts` runs in total.
    """

    def __init__(self, max_attempts: int = 2) -> None:
        self._max_attempts = max(1, max_attempts)
        self._lock = threading.RLock()
        self._logger = logging.getLogger(__name__)

    @abstractmethod
    def _read(self, collection: str, key: str) -> tuple[dict[str, Any] | None, int]:
        """Return (data, version); a missing document is (None, 0)."""
        raise NotImplementedError

    @abstractmethod
    def _write(self, collection: str, key: str, data: dict[str, Any], version: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def _remove(self, collection: str, key: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def _scan(self, collection: str) -> list[dict[str, Any]]:
        raise NotImplementedError

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with self._lock:
            yield

    def get(self, collection: str, key: str) -> dict[str, Any] | None:
        with self._locked():
            data, _ = self._read(collection, key)
        return copy.deepcopy(data)

    def set(self, collection: str, key: str, data: dict[str, Any]) -> None:
        with self._locked():
            _, version = self._read(collection, key)
            self._write(collection, key, copy.deepcopy(data), version + 1)

    def delete(self, collection: str, key: str) -> bool:
        with self._locked():
            return self._remove(collection, key)

    def list_all(self, collection: str) -> list[dict[str, Any]]:
        with self._locked():
            return copy.deepcopy(self._scan(collection))

    def query_range(self, collection: str, field: str, start: str, end: str) -> list[dict[str, Any]]:
        docs = [d for d in self.list_all(collection) if start <= str(d.get(field) or "") <= end]
        return sorted(docs, key=lambda d: str(d.get(field) or ""))

    def run_transaction(self, fn: Callable[[TransactionPort], T]) -> T:
        for attempt in range(1, self._max_attempts + 1):
            tx = _Transaction(self)
            result = fn(tx)
            if self._commit(tx):
                return result
            self._logger.warning(
                "Transaction contention",
                extra={"attempt": attempt, "max_attempts": self._max_attempts},
            )
        raise StoreContentionError(f"Transaction aborted after {self._max_attempts} attempts")

    def _commit(self, tx: _Transaction) -> bool:
        with self._locked():
            for (collection, key), version in tx.read_versions.items():
                _, current = self._read(collection, key)
                if current != version:
                    return False
            for (collection, key), data in tx.writes.items():
                _, current = self._read(collection, key)
                self._write(collection, key, data, current + 1)
            return True
