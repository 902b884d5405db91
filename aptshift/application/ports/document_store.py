from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, TypeVar

T = TypeVar("T")


class TransactionPort(ABC):
    """Read-modify-write view handed to a transaction function."""

    @abstractmethod
    def get(self, collection: str, key: str) -> dict[str, Any] | None:
        raise NotImplementedError

    @abstractmethod
    def set(self, collection: str, key: str, data: dict[str, Any]) -> None:
        """Buffer a write; it becomes visible only when the transaction commits."""
        raise NotImplementedError


class DocumentStorePort(ABC):
    @abstractmethod
    def get(self, collection: str, key: str) -> dict[str, Any] | None:
        raise NotImplementedError

    @abstractmethod
    def set(self, collection: str, key: str, data: dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, collection: str, key: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def list_all(self, collection: str) -> list[dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def query_range(self, collection: str, field: str, start: str, end: str) -> list[dict[str, Any]]:
        """
        Return documents whose `field` lies in [start, end] (inclusive, string ordering).
        Used for date range queries on ISO dates.
        """
        raise NotImplementedError

    @abstractmethod
    def run_transaction(self, fn: Callable[[TransactionPort], T]) -> T:
        """
        Run `fn` as an atomic multi-document read-modify-write.

        Requirements:
        - Writes buffered by `fn` commit together or not at all
        - If a document read by `fn` changed before commit, `fn` is re-run
          (bounded retry); persistent contention raises StoreContentionError
        - Exceptions raised by `fn` abort the transaction and propagate unchanged
        """
        raise NotImplementedError
