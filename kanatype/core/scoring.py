"""Accuracy and speed metrics for a timed run.

Speed follows the usual typing-test convention:
  * **CPM** – correct characters per minute.
  * **WPM** – CPM / 5, one "word" being five characters.

Only correct keystrokes count toward speed; mistakes show up in accuracy.
"""

from __future__ import annotations

CHARS_PER_WORD = 5


def accuracy(correct: int, total: int) -> float:
    """Fraction of keystrokes that were correct, 1.0 before any keystroke."""
    if total <= 0:
        return 1.0
    return max(0.0, min(1.0, correct / total))


def _minutes(elapsed_ms: float, duration_ms: float) -> float:
    if elapsed_ms > 0:
        return elapsed_ms / 60000.0
    return max(duration_ms, 0) / 60000.0


def cpm(correct: int, elapsed_ms: float, duration_ms: float = 0) -> int:
    """Correct characters per minute; a zero *elapsed_ms* uses *duration_ms*."""
    minutes = _minutes(elapsed_ms, duration_ms)
    if minutes <= 0:
        return 0
    return round(correct / minutes)


def wpm(correct: int, elapsed_ms: float, duration_ms: float = 0) -> int:
    """Words per minute with a five-character word."""
    minutes = _minutes(elapsed_ms, duration_ms)
    if minutes <= 0:
        return 0
    return round(correct / CHARS_PER_WORD / minutes)


def format_percent(value: float) -> str:
    """Format a 0..1 ratio as a one-decimal percentage, e.g. ``93.3%``."""
    return f"{value * 100:.1f}%"
