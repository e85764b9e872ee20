from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)

SETTINGS_KEY = "typing_game_settings_v1"
HIGH_SCORE_KEY_PREFIX = "typing_game_highscore_"
LEADERBOARD_KEY_PREFIX = "typing_game_leaderboard_"


def default_storage_path() -> Path:
    return Path.home() / ".kanatype" / "storage.json"


class KeyValueStore(Protocol):
    """String key-value storage used for settings, high scores and leaderboards."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """In-memory store, handy for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore:
    """Key-value store persisted as one JSON object on disk.

    File: ~/.kanatype/storage.json unless a path is given. Every ``set``
    writes the whole file back; unreadable files start out empty.
    """

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = Path(file_path) if file_path else default_storage_path()
        self._data = self._load()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._save()

    def _load(self) -> Dict[str, str]:
        if not self._file_path.exists():
            return {}
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (ValueError, OSError) as e:
            # ValueError covers both bad JSON and bad UTF-8
            logger.warning("Could not load storage from %s: %s", self._file_path, e)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Ignoring storage file %s: expected a JSON object", self._file_path)
            return {}
        return {str(key): str(value) for key, value in payload.items() if isinstance(value, str)}

    def _save(self) -> None:
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(self._data, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save storage to %s: %s", self._file_path, e)
