"""Local, disposable storage for unsubmitted availability selections.

A draft survives reloads until the week is submitted. It is a convenience
cache only: once a stored record exists for the week the draft is cleared,
and a corrupt draft is dropped rather than reported.
"""

import json
import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import Protocol

from opsdesk.config import get_settings

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Synchronous string key-value storage."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStorage:
    """Process-local storage, used in tests and single-process setups."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove(self, key: str) -> None:
        self._items.pop(key, None)


class FileStorage:
    """One JSON file per key inside ``directory``."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _path(self, key: str) -> Path:
        return self.directory / f"{re.sub(r'[^A-Za-z0-9_.-]', '_', key)}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(value, encoding="utf-8")

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class DraftStore:
    """Per-(user, week) draft selections on top of a ``KeyValueStorage``."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    @staticmethod
    def draft_key(uid: int, week_start: date) -> str:
        return f"draft-availability-{uid}-{week_start.isoformat()}"

    def save(self, uid: int, week_start: date, selection: set[str]) -> None:
        """Overwrite the draft. Storage failures are logged, never raised."""
        payload = {
            "weekStart": week_start.isoformat(),
            "selected": sorted(selection),
            "updatedAt": datetime.utcnow().isoformat(),
        }
        try:
            self._storage.set(self.draft_key(uid, week_start), json.dumps(payload))
        except OSError as e:
            logger.warning("Could not save draft for user %s week %s: %s", uid, week_start, e)

    def load(self, uid: int, week_start: date) -> set[str] | None:
        """Return the saved selection, or None if there is no usable draft."""
        key = self.draft_key(uid, week_start)
        try:
            raw = self._storage.get(key)
        except UnicodeDecodeError as e:
            logger.warning("Discarding undecodable draft %s: %s", key, e)
            self.clear(uid, week_start)
            return None
        except OSError as e:
            logger.warning("Could not read draft %s: %s", key, e)
            return None
        if raw is None:
            return None

        try:
            selected = json.loads(raw)["selected"]
            if not isinstance(selected, list) or not all(isinstance(k, str) for k in selected):
                raise ValueError("selected must be a list of strings")
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Discarding corrupt draft %s: %s", key, e)
            self.clear(uid, week_start)
            return None
        return set(selected)

    def clear(self, uid: int, week_start: date) -> None:
        try:
            self._storage.remove(self.draft_key(uid, week_start))
        except OSError as e:
            logger.warning("Could not clear draft for user %s week %s: %s", uid, week_start, e)


_memory_storage = MemoryStorage()


def get_draft_store() -> DraftStore:
    """FastAPI dependency: draft store configured by ``draft_backend``."""
    settings = get_settings()
    if settings.draft_backend == "memory":
        return DraftStore(_memory_storage)
    return DraftStore(FileStorage(settings.draft_dir))
