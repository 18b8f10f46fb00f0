"""
Usage stores - persisted key-value state behind the quota gate.

A store keeps a monotonically increasing run counter per client
fingerprint plus a few string values (the stored credential and the
client's own fingerprint). Stores are injected into the gate so tests and
sessions never share state.
"""
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import redis

from skillflow.config import get_settings
from skillflow.observability import get_logger

logger = get_logger(__name__)

USAGE_KEY_PREFIX = "skillflow:usage:"
CREDENTIAL_KEY = "skillflow:api-key"
FINGERPRINT_KEY = "skillflow:fingerprint"


@runtime_checkable
class UsageStore(Protocol):
    """Key-value persistence used by the usage gate."""

    def get_count(self, fingerprint: str) -> int:
        """Runs recorded for a fingerprint."""
        ...

    def increment(self, fingerprint: str) -> int:
        """Record one run; returns the new count."""
        ...

    def get_value(self, key: str) -> str | None:
        ...

    def set_value(self, key: str, value: str) -> None:
        ...

    def delete_value(self, key: str) -> None:
        ...


class InMemoryUsageStore:
    """Process-local store (tests, single sessions)."""

    def __init__(self):
        """Initialize empty store."""
        self._counts: dict[str, int] = {}
        self._values: dict[str, str] = {}

    def get_count(self, fingerprint: str) -> int:
        return self._counts.get(fingerprint, 0)

    def increment(self, fingerprint: str) -> int:
        self._counts[fingerprint] = self._counts.get(fingerprint, 0) + 1
        return self._counts[fingerprint]

    def get_value(self, key: str) -> str | None:
        return self._values.get(key)

    def set_value(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete_value(self, key: str) -> None:
        self._values.pop(key, None)


class FileUsageStore:
    """
    JSON-file store, the CLI's equivalent of browser local storage.

    Each operation is a single read-modify-write of the whole file. Safe
    for one client; not for concurrent writers in separate processes.
    """

    def __init__(self, path: str | Path):
        """
        Initialize file store.

        Args:
            path: JSON file to use (created on first write)
        """
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {"counts": {}, "values": {}}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            data = None
        if not isinstance(data, dict):
            return self._empty_state()
        data.setdefault("counts", {})
        data.setdefault("values", {})
        if not isinstance(data["counts"], dict) or not isinstance(data["values"], dict):
            return self._empty_state()
        return data

    def _empty_state(self) -> dict[str, Any]:
        logger.warning(
            "Usage file is corrupt, starting from empty state",
            extra={"path": str(self.path)},
        )
        return {"counts": {}, "values": {}}

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except Exception:
            os.unlink(tmp_path)
            raise
        os.replace(tmp_path, self.path)

    def get_count(self, fingerprint: str) -> int:
        return int(self._read()["counts"].get(fingerprint, 0))

    def increment(self, fingerprint: str) -> int:
        with self._lock:
            data = self._read()
            count = int(data["counts"].get(fingerprint, 0)) + 1
            data["counts"][fingerprint] = count
            self._write(data)
        return count

    def get_value(self, key: str) -> str | None:
        return self._read()["values"].get(key)

    def set_value(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data["values"][key] = value
            self._write(data)

    def delete_value(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if data["values"].pop(key, None) is not None:
                self._write(data)


class RedisUsageStore:
    """Redis-backed store for the AI service; counters use atomic INCR."""

    def __init__(self, redis_client: redis.Redis | None = None):
        """
        Initialize Redis store.

        Args:
            redis_client: Optional Redis client (will create one if not provided)
        """
        if redis_client is None:
            settings = get_settings()
            self.redis_client = redis.from_url(
                settings.redis_url,
                decode_responses=True,
            )
        else:
            self.redis_client = redis_client

    def _usage_key(self, fingerprint: str) -> str:
        """Get Redis key for a fingerprint's counter."""
        return f"{USAGE_KEY_PREFIX}{fingerprint}"

    def get_count(self, fingerprint: str) -> int:
        value = self.redis_client.get(self._usage_key(fingerprint))
        return int(value) if value is not None else 0

    def increment(self, fingerprint: str) -> int:
        return int(self.redis_client.incr(self._usage_key(fingerprint)))

    def get_value(self, key: str) -> str | None:
        value = self.redis_client.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set_value(self, key: str, value: str) -> None:
        self.redis_client.set(key, value)

    def delete_value(self, key: str) -> None:
        self.redis_client.delete(key)


def create_usage_store(backend: str | None = None) -> UsageStore:
    """
    Create the usage store selected by settings.

    Args:
        backend: Override for settings.usage_backend

    Returns:
        A fresh store instance
    """
    settings = get_settings()
    backend = (backend or settings.usage_backend).lower()
    if backend == "file":
        return FileUsageStore(settings.usage_file)
    if backend == "redis":
        return RedisUsageStore()
    if backend == "memory":
        return InMemoryUsageStore()
    raise ValueError(f"Unknown usage backend: {backend}")
