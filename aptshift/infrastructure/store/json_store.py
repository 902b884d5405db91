from __future__ import annotations

import fcntl
import json
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from aptshift.infrastructure.store.versioned_store import VersionedDocumentStore

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.\-]")


class JsonDocumentStore(VersionedDocumentStore):
    """
    File-backed document store: one JSON file per document under
    <data_dir>/<collection>/<key>.json, holding {"version": n, "data": {...}}.

    Survives restarts. Commits are serialized by a thread lock plus an flock on
    <data_dir>/.commit.lock, so several worker processes on one host can share
    the directory.
    """

    def __init__(self, data_dir: str = "./data/store", max_attempts: int = 2) -> None:
        super().__init__(max_attempts=max_attempts)
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._lock_path = self._data_dir / ".commit.lock"

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with self._lock:
            with open(self._lock_path, "a+") as lock_file:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
                try:
                    yield
                finally:
                    fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def _get_file_path(self, collection: str, key: str) -> Path:
        safe_key = _UNSAFE_KEY_CHARS.sub("_", key)
        return self._data_dir / collection / f"{safe_key}.json"

    def _read(self, collection: str, key: str) -> tuple[dict[str, Any] | None, int]:
        return self._load_file(self._get_file_path(collection, key))

    def _load_file(self, file_path: Path) -> tuple[dict[str, Any] | None, int]:
        if not file_path.exists():
            return None, 0
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            self._logger.warning("Unreadable document file", extra={"path": str(file_path), "error": str(e)})
            return None, 0
        return payload.get("data"), int(payload.get("version", 0))

    def _write(self, collection: str, key: str, data: dict[str, Any], version: int) -> None:
        file_path = self._get_file_path(collection, key)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = file_path.with_suffix(".json.tmp")

        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump({"version": version, "data": data}, f, indent=2, ensure_ascii=False)
            # Atomic rename
            temp_path.replace(file_path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise

    def _remove(self, collection: str, key: str) -> bool:
        file_path = self._get_file_path(collection, key)
        if not file_path.exists():
            return False
        file_path.unlink()
        return True

    def _scan(self, collection: str) -> list[dict[str, Any]]:
        collection_dir = self._data_dir / collection
        if not collection_dir.exists():
            return []
        docs: list[dict[str, Any]] = []
        for file_path in sorted(collection_dir.glob("*.json")):
            data, _ = self._load_file(file_path)
            if data is not None:
                docs.append(data)
        return docs
