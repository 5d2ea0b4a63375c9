"""
Local Storage Module

Key/value persistence with local-storage semantics (get, set, remove of string
values) and the pathway store that caches the last generated profile+pathway
pair under one fixed key.

Example Usage:
    from pathfinder.utils.storage import LocalStorage, PathwayStore

    store = PathwayStore(LocalStorage(".pathfinder"))
    store.save(profile, pathway)

    snapshot = store.load()   # None when empty or corrupted
    store.clear()
"""

import json
from pathlib import Path
from typing import NamedTuple, Optional, Protocol

import structlog
from pydantic import ValidationError

from pathfinder.models.pathway import TrainingPathway
from pathfinder.models.profile import LearnerProfile

logger = structlog.get_logger(__name__)

STORAGE_KEY = "ncvet-pathway-data"
STORAGE_FILENAME = "local_storage.json"


class KeyValueStorage(Protocol):
    """String key/value store with local-storage semantics."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """In-process storage, used by tests and when persistence is disabled."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class LocalStorage:
    """Key/value storage backed by a single JSON file."""

    def __init__(self, storage_dir: str | Path = ".pathfinder"):
        """
        Initialize LocalStorage.

        Args:
            storage_dir: Directory for the storage file (created on first write)
        """
        self.storage_dir = Path(storage_dir)
        self.storage_file = self.storage_dir / STORAGE_FILENAME

    def _read_all(self) -> dict[str, str]:
        if not self.storage_file.exists():
            return {}
        try:
            with open(self.storage_file, "r", encoding="utf-8") as f:
                items = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            # The file itself is unreadable; start fresh, like a cleared browser store
            logger.warning(
                "storage_file_corrupted", storage_file=str(self.storage_file), error=str(e)
            )
            return {}
        if not isinstance(items, dict):
            logger.warning("storage_file_unexpected_shape", storage_file=str(self.storage_file))
            return {}
        return {k: v for k, v in items.items() if isinstance(v, str)}

    def _write_all(self, items: dict[str, str]) -> None:
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        tmp_file = self.storage_file.with_suffix(".tmp")
        try:
            with open(tmp_file, "w", encoding="utf-8") as f:
                json.dump(items, f, indent=2)
            tmp_file.replace(self.storage_file)
        except OSError as e:
            raise IOError(f"Failed to write storage file {self.storage_file}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if key in items:
            del items[key]
            self._write_all(items)


class PathwaySnapshot(NamedTuple):
    profile: LearnerProfile
    pathway: TrainingPathway


class PathwayStore:
    """Caches the last generated profile+pathway pair under one fixed key."""

    def __init__(self, storage: KeyValueStorage, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key

    def load(self) -> Optional[PathwaySnapshot]:
        """
        Restore the stored pair.

        Returns:
            The snapshot, or None when nothing usable is stored. Unparsable or
            incomplete data is treated as corrupted and the key is removed.
        """
        try:
            raw = self.storage.get_item(self.key)
            if raw is None:
                return None
            data = json.loads(raw)
            if not isinstance(data, dict) or not data.get("pathway") or not data.get("profile"):
                raise ValueError("stored data lacks pathway or profile")
            snapshot = PathwaySnapshot(
                profile=LearnerProfile.model_validate(data["profile"]),
                pathway=TrainingPathway.model_validate(data["pathway"]),
            )
        except (OSError, ValueError, ValidationError) as e:
            logger.warning("stored_pathway_corrupted", key=self.key, error=str(e)[:200])
            self._discard()
            return None

        logger.info("stored_pathway_restored", step_count=len(snapshot.pathway.pathway))
        return snapshot

    def save(self, profile: LearnerProfile, pathway: TrainingPathway) -> None:
        """Overwrite the stored pair wholesale."""
        payload = {"pathway": pathway.to_wire(), "profile": profile.to_wire()}
        self.storage.set_item(self.key, json.dumps(payload))
        logger.info("pathway_stored", key=self.key, step_count=len(pathway.pathway))

    def clear(self) -> None:
        self.storage.remove_item(self.key)
        logger.info("stored_pathway_cleared", key=self.key)

    def _discard(self) -> None:
        try:
            self.storage.remove_item(self.key)
        except OSError as e:
            logger.warning("stored_pathway_discard_failed", key=self.key, error=str(e))
