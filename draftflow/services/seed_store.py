"""Seed storage - hands a gathering snapshot to the drafting stage.

Seeds are stored as a versioned ``SeedRecord`` JSON document under a key.
Every save replaces whatever was stored under that key. Records that cannot
be parsed, or carry an unknown schema version, load as ``None``.
"""

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from threading import Lock
from typing import Dict, Optional

import httpx
from pydantic import ValidationError

from draftflow.core.config import Settings, get_settings
from draftflow.models.seed import DEFAULT_SEED_KEY, SavedSeed, SeedRecord

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


def encode_record(seed: SavedSeed) -> str:
    """Wrap a seed in the current envelope and serialize it."""
    return SeedRecord(payload=seed).model_dump_json()


def decode_record(raw: Optional[str]) -> Optional[SavedSeed]:
    """Parse a stored record; ``None`` if absent or unreadable."""
    if not raw:
        return None
    try:
        return SeedRecord.model_validate_json(raw).payload
    except (ValidationError, ValueError) as e:
        logger.warning(f"Ignoring unreadable seed record: {e}")
        return None


class SeedStore(ABC):
    """Keyed storage for seed records."""

    @abstractmethod
    def read_raw(self, key: str) -> Optional[str]:
        """Return the stored JSON document, if any."""
        pass

    @abstractmethod
    def write_raw(self, key: str, raw: str) -> None:
        """Store a JSON document, replacing any previous one."""
        pass

    @abstractmethod
    def delete(self, key: str = DEFAULT_SEED_KEY) -> None:
        """Remove the record under ``key`` (no-op if absent)."""
        pass

    def save(self, seed: SavedSeed, key: str = DEFAULT_SEED_KEY) -> SeedRecord:
        raw = encode_record(seed)
        self.write_raw(key, raw)
        logger.info(f"Saved seed '{key}' ({len(seed.bullets)} bullets, {len(seed.results)} sources)")
        return SeedRecord(payload=seed)

    def load(self, key: str = DEFAULT_SEED_KEY) -> Optional[SavedSeed]:
        return decode_record(self.read_raw(key))


class MemorySeedStore(SeedStore):
    """In-process store, one slot per key."""

    def __init__(self):
        self._records: Dict[str, str] = {}
        self._lock = Lock()

    def read_raw(self, key: str) -> Optional[str]:
        with self._lock:
            return self._records.get(key)

    def write_raw(self, key: str, raw: str) -> None:
        with self._lock:
            self._records[key] = raw

    def delete(self, key: str = DEFAULT_SEED_KEY) -> None:
        with self._lock:
            self._records.pop(key, None)


class FileSeedStore(SeedStore):
    """One ``<key>.json`` file per key under a directory."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid seed key: {key!r}")
        return self.directory / f"{key}.json"

    def read_raw(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write_raw(self, key: str, raw: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(raw, encoding="utf-8")
        tmp.replace(path)

    def delete(self, key: str = DEFAULT_SEED_KEY) -> None:
        self._path(key).unlink(missing_ok=True)


class HttpSeedStore(SeedStore):
    """Store backed by the service's ``/api/v1/seed`` routes."""

    def __init__(self, client: httpx.Client, path: str = "/api/v1/seed"):
        self.client = client
        self.path = path

    def read_raw(self, key: str) -> Optional[str]:
        response = self.client.get(self.path, params={"key": key})
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.text

    def write_raw(self, key: str, raw: str) -> None:
        record = SeedRecord.model_validate_json(raw)
        response = self.client.put(
            self.path,
            params={"key": key},
            content=record.payload.model_dump_json(),
            headers={"Content-Type": "application/json"},
        )
        response.raise_for_status()

    def delete(self, key: str = DEFAULT_SEED_KEY) -> None:
        response = self.client.delete(self.path, params={"key": key})
        response.raise_for_status()


def create_seed_store(settings: Settings) -> SeedStore:
    """Build the store selected by ``SEED_STORE_BACKEND``."""
    if settings.seed_store_backend == "file":
        return FileSeedStore(settings.seed_store_path)
    return MemorySeedStore()


_store: Optional[SeedStore] = None
_store_lock = Lock()


def get_seed_store() -> SeedStore:
    """Get the process-wide seed store."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = create_seed_store(get_settings())
    return _store


def reset_seed_store() -> None:
    """Drop the process-wide store (useful for testing)."""
    global _store
    with _store_lock:
        _store = None
