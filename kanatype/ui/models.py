"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from kanatype.core.leaderboard import LeaderboardEntry
from kanatype.core.scoring import format_percent
from kanatype.core.session import RunResult

NO_MISTAKES_TEXT = "No mistakes!"
UNNAMED = "(no name)"


def format_mistakes(run: RunResult, limit: int = 10) -> str:
    """``"k: 3 / a: 1"`` style summary of the most common mistakes."""
    top = run.top_mistakes(limit)
    if not top:
        return NO_MISTAKES_TEXT
    return "Most missed: " + " / ".join(f"{key}: {count}" for key, count in top)


def format_leaderboard(entries: Sequence[LeaderboardEntry]) -> List[str]:
    """One display line per entry, ranked from 1."""
    return [
        f"{rank}. {entry.name or UNNAMED} - {entry.score} ({format_percent(entry.accuracy)})"
        for rank, entry in enumerate(entries, start=1)
    ]


@dataclass
class ResultSummary:
    """Text shown on the result screen for one finished run."""

    score: str
    cpm: str
    wpm: str
    accuracy: str
    words: str
    high_score: str
    mistakes: str
    leaderboard: List[str]

    @classmethod
    def from_run(
        cls,
        run: RunResult,
        high_score: int,
        leaderboard: Sequence[LeaderboardEntry],
    ) -> "ResultSummary":
        return cls(
            score=str(run.score),
            cpm=str(run.cpm),
            wpm=str(run.wpm),
            accuracy=format_percent(run.accuracy),
            words=str(run.successful_words),
            high_score=str(high_score),
            mistakes=format_mistakes(run),
            leaderboard=format_leaderboard(leaderboard),
        )
