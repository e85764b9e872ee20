from __future__ import annotations

import json
import logging
import math
import time
from dataclasses import asdict, dataclass, replace
from typing import Dict, List, Optional, Tuple

from kanatype.core.session import RunResult
from kanatype.core.storage import HIGH_SCORE_KEY_PREFIX, LEADERBOARD_KEY_PREFIX, KeyValueStore

logger = logging.getLogger(__name__)

TOP_N = 3
MAX_NAME_LENGTH = 10
DEFAULT_NAME = "Player"


@dataclass(frozen=True)
class LeaderboardEntry:
    name: str
    score: int
    accuracy: float
    words: int
    timestamp: int


def sort_key(entry: LeaderboardEntry) -> Tuple[int, float, int]:
    """Higher score first, then higher accuracy, then the earlier run."""
    return (-entry.score, -entry.accuracy, entry.timestamp)


def clean_name(name: Optional[str]) -> str:
    name = str(name or "").strip()[:MAX_NAME_LENGTH]
    return name or DEFAULT_NAME


def _entry_from_raw(raw: object) -> Optional[LeaderboardEntry]:
    if not isinstance(raw, dict):
        return None
    try:
        entry = LeaderboardEntry(
            name=str(raw.get("name") or "")[:MAX_NAME_LENGTH],
            score=int(raw.get("score", 0)),
            # older saves used "acc" / "ts"
            accuracy=float(raw.get("accuracy", raw.get("acc", 0.0))),
            words=int(raw.get("words", 0)),
            timestamp=int(raw.get("timestamp", raw.get("ts", 0)) or 0),
        )
    except (TypeError, ValueError, OverflowError):
        return None
    # json accepts NaN and Infinity, which would break the sort order
    if not all(math.isfinite(v) for v in (entry.score, entry.accuracy, entry.timestamp)):
        return None
    return entry


class LeaderboardStore:
    """Top-3 runs and the high score for each session duration.

    A run that makes the top 3 is held as pending until ``commit`` gives it a
    name; only then is the list written back.
    """

    def __init__(self, storage: KeyValueStore) -> None:
        self._storage = storage
        self._pending: Dict[int, Tuple[LeaderboardEntry, List[LeaderboardEntry]]] = {}

    def load(self, duration_seconds: int) -> List[LeaderboardEntry]:
        raw = self._storage.get(f"{LEADERBOARD_KEY_PREFIX}{duration_seconds}")
        if not raw:
            return []
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Leaderboard for %ss is unreadable, treating as empty: %s", duration_seconds, e)
            return []
        if not isinstance(payload, list):
            return []
        entries = [entry for entry in map(_entry_from_raw, payload) if entry is not None]
        return sorted(entries, key=sort_key)[:TOP_N]

    def record(
        self,
        duration_seconds: int,
        run: RunResult,
        timestamp_ms: Optional[int] = None,
    ) -> Tuple[List[LeaderboardEntry], bool]:
        """Rank *run* against the stored top 3.

        Returns the resulting top 3 and whether the run is part of it. Nothing
        is persisted here; call ``commit`` with a name for a qualifying run.
        """
        previous = self.load(duration_seconds)
        entry = LeaderboardEntry(
            name="",
            score=run.score,
            accuracy=run.accuracy,
            words=run.successful_words,
            timestamp=int(time.time() * 1000) if timestamp_ms is None else int(timestamp_ms),
        )
        ranked = sorted(previous + [entry], key=sort_key)
        top = ranked[:TOP_N]
        if not any(item is entry for item in top):
            self._pending.pop(duration_seconds, None)
            return previous, False
        self._pending[duration_seconds] = (entry, top)
        return list(top), True

    def has_pending(self, duration_seconds: int) -> bool:
        return duration_seconds in self._pending

    def commit(self, duration_seconds: int, name: Optional[str] = None) -> List[LeaderboardEntry]:
        """Name the pending run for *duration_seconds* and persist the top 3."""
        pending = self._pending.pop(duration_seconds, None)
        if pending is None:
            return self.load(duration_seconds)
        entry, top = pending
        named = replace(entry, name=clean_name(name))
        top = [named if item is entry else item for item in top]
        self._save(duration_seconds, top)
        logger.info("Leaderboard %ss: %s placed with %d", duration_seconds, named.name, named.score)
        return top

    def high_score(self, duration_seconds: int) -> int:
        raw = self._storage.get(f"{HIGH_SCORE_KEY_PREFIX}{duration_seconds}")
        try:
            return max(0, int(raw or 0))
        except (TypeError, ValueError):
            logger.warning("High score for %ss is unreadable: %r", duration_seconds, raw)
            return 0

    def update_high_score(self, duration_seconds: int, score: int) -> int:
        """Store *score* if it beats the current best; return the best."""
        best = max(self.high_score(duration_seconds), int(score))
        self._storage.set(f"{HIGH_SCORE_KEY_PREFIX}{duration_seconds}", str(best))
        return best

    def _save(self, duration_seconds: int, entries: List[LeaderboardEntry]) -> None:
        payload = [asdict(entry) for entry in sorted(entries, key=sort_key)[:TOP_N]]
        self._storage.set(
            f"{LEADERBOARD_KEY_PREFIX}{duration_seconds}",
            json.dumps(payload, ensure_ascii=False),
        )
