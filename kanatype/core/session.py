from __future__ import annotations

import logging
import random
import time
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Union

from kanatype.core import scoring
from kanatype.core.config import GameConfig
from kanatype.core.transliteration import to_typing_target
from kanatype.core.word_queue import WordQueue
from kanatype.core.wordlists import FALLBACK_WORDS, filter_words

logger = logging.getLogger(__name__)

BACKSPACE = "Backspace"


class SessionStatus(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    RESULT = "result"


@dataclass(frozen=True)
class WordChanged:
    display_word: str
    typing_target: str


@dataclass(frozen=True)
class KeystrokeResult:
    correct: bool
    character: str


@dataclass(frozen=True)
class WordCompleted:
    successful_words: int
    combo: int


@dataclass(frozen=True)
class RunResult:
    """Summary of a finished run."""

    correct_keystrokes: int
    total_keystrokes: int
    successful_words: int
    accuracy: float
    cpm: int
    wpm: int
    duration_seconds: int
    mistakes: Dict[str, int] = field(default_factory=dict)
    best_combo: int = 0

    @property
    def score(self) -> int:
        """Leaderboard score: the number of correct keystrokes."""
        return self.correct_keystrokes

    def top_mistakes(self, limit: int = 10) -> List[tuple[str, int]]:
        """Most frequently mistyped characters, most frequent first."""
        return Counter(self.mistakes).most_common(limit)


@dataclass(frozen=True)
class SessionEnded:
    result: RunResult


SessionEvent = Union[WordChanged, KeystrokeResult, WordCompleted, SessionEnded]
Listener = Callable[[SessionEvent], None]


@dataclass
class SessionState:
    """Mutable state of one run. Only the owning controller changes it."""

    config: GameConfig
    status: SessionStatus = SessionStatus.IDLE
    start_ms: float = 0.0
    duration_ms: int = 0
    last_remaining_ms: float = 0.0
    display_word: str = ""
    typing_target: str = ""
    typed: str = ""
    correct_keystrokes: int = 0
    total_keystrokes: int = 0
    successful_words: int = 0
    combo: int = 0
    best_combo: int = 0
    mistakes: Counter = field(default_factory=Counter)

    @property
    def accuracy(self) -> float:
        return scoring.accuracy(self.correct_keystrokes, self.total_keystrokes)

    @property
    def expected_char(self) -> str:
        """Next character of the typing target, or ``""`` if the word is done."""
        idx = len(self.typed)
        return self.typing_target[idx] if idx < len(self.typing_target) else ""


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class SessionController:
    """Drives a timed typing run: idle -> playing -> result.

    The controller never touches a clock on its own beyond ``start``; the
    caller feeds it ticks and key presses. Events are delivered to
    subscribed listeners synchronously.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], float]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._clock = clock or _monotonic_ms
        self._rng = rng
        self._listeners: List[Listener] = []
        self._state: Optional[SessionState] = None
        self._queue: Optional[WordQueue] = None
        self._words: List[str] = []
        self._result: Optional[RunResult] = None

    @property
    def status(self) -> SessionStatus:
        return self._state.status if self._state else SessionStatus.IDLE

    @property
    def state(self) -> Optional[SessionState]:
        return self._state

    @property
    def config(self) -> Optional[GameConfig]:
        return self._state.config if self._state else None

    @property
    def result(self) -> Optional[RunResult]:
        """Result of the most recently finished run."""
        return self._result

    @property
    def queue(self) -> Optional[WordQueue]:
        return self._queue

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def start(self, config: GameConfig, words: Sequence[str], now_ms: Optional[float] = None) -> SessionState:
        """Begin a fresh run with *config* over *words*."""
        pool = filter_words(words, config.min_word_length, config.max_word_length)
        if not pool:
            logger.warning("Word pool is empty, using fallback words")
            pool = list(FALLBACK_WORDS)
        self._words = list(words)
        self._queue = WordQueue(
            pool,
            randomize=config.randomize,
            no_repeat=config.no_repeat_in_session,
            rng=self._rng,
        )
        self._result = None
        state = SessionState(config=config, duration_ms=config.duration_ms)
        state.last_remaining_ms = float(state.duration_ms)
        state.start_ms = self._clock() if now_ms is None else now_ms
        state.status = SessionStatus.PLAYING
        self._state = state
        logger.info(
            "Session started: %ss, %d words, randomize=%s, no_repeat=%s",
            config.duration_seconds, len(pool), config.randomize, config.no_repeat_in_session,
        )
        self._advance_word()
        return state

    def retry(self, now_ms: Optional[float] = None) -> SessionState:
        """Start again with the previous config and word list."""
        if self._state is None:
            raise RuntimeError("retry() called before any session was started")
        return self.start(self._state.config, self._words, now_ms)

    def reset(self) -> None:
        """Return to idle. The last result stays readable through ``result``."""
        if self._state is not None and self._state.status is SessionStatus.PLAYING:
            self.quit()
        self._state = None
        self._queue = None

    def remaining_ms(self) -> float:
        """Last reported remaining time."""
        if self._state is None:
            return 0.0
        return max(0.0, self._state.last_remaining_ms)

    def tick(self, now_ms: Optional[float] = None) -> float:
        """Update the countdown and return the remaining milliseconds.

        The reported value never increases, even if ticks arrive late or out
        of order. Reaching zero ends the run.
        """
        state = self._state
        if state is None or state.status is not SessionStatus.PLAYING:
            return self.remaining_ms()
        now = self._clock() if now_ms is None else now_ms
        remaining = state.duration_ms - (now - state.start_ms)
        state.last_remaining_ms = min(remaining, state.last_remaining_ms)
        if state.last_remaining_ms <= 0:
            state.last_remaining_ms = 0.0
            self._finish(now)
        return self.remaining_ms()

    def submit_keystroke(
        self,
        key: str,
        timestamp_ms: Optional[float] = None,
        composing: bool = False,
    ) -> Optional[bool]:
        """Apply one key press.

        Returns True for a correct character, False for a wrong one and None
        when the key was ignored (backspace included).
        """
        state = self._state
        if state is None or state.status is not SessionStatus.PLAYING:
            return None
        if timestamp_ms is not None:
            self.tick(timestamp_ms)
            if state.status is not SessionStatus.PLAYING:
                return None
        if key == BACKSPACE:
            state.typed = state.typed[:-1]
            return None
        if composing or len(key) != 1 or not key.isprintable():
            return None

        expected = state.expected_char
        state.total_keystrokes += 1
        if expected and self._normalize(key) == self._normalize(expected):
            state.correct_keystrokes += 1
            # The target's own casing is kept so the typed text matches it.
            state.typed += expected
            self._emit(KeystrokeResult(correct=True, character=key))
            if len(state.typed) >= len(state.typing_target):
                state.successful_words += 1
                state.combo += 1
                state.best_combo = max(state.best_combo, state.combo)
                self._emit(WordCompleted(successful_words=state.successful_words, combo=state.combo))
                self._advance_word()
            return True

        state.combo = 0
        state.mistakes[key] += 1
        self._emit(KeystrokeResult(correct=False, character=key))
        return False

    def quit(self, now_ms: Optional[float] = None) -> Optional[RunResult]:
        """End the run immediately, whatever time is left."""
        state = self._state
        if state is None or state.status is not SessionStatus.PLAYING:
            return self._result
        now = self._clock() if now_ms is None else now_ms
        remaining = state.duration_ms - (now - state.start_ms)
        state.last_remaining_ms = max(0.0, min(remaining, state.last_remaining_ms))
        return self._finish(now)

    def _normalize(self, ch: str) -> str:
        return ch if self._state.config.case_sensitive else ch.lower()

    def _advance_word(self) -> None:
        state = self._state
        display = ""
        target = ""
        # Words that romanize to nothing (a lone っ, say) can't be typed.
        for _ in range(max(1, len(self._queue))):
            display = self._queue.next()
            target = to_typing_target(display, state.config.transliterate)
            if target:
                break
        state.display_word = display
        state.typing_target = target
        state.typed = ""
        logger.debug("Next word: %r -> %r", display, target)
        self._emit(WordChanged(display_word=display, typing_target=target))

    def _finish(self, now_ms: float) -> RunResult:
        state = self._state
        state.status = SessionStatus.RESULT
        elapsed = min(max(now_ms - state.start_ms, 0.0), float(state.duration_ms))
        result = RunResult(
            correct_keystrokes=state.correct_keystrokes,
            total_keystrokes=state.total_keystrokes,
            successful_words=state.successful_words,
            accuracy=state.accuracy,
            cpm=scoring.cpm(state.correct_keystrokes, elapsed, state.duration_ms),
            wpm=scoring.wpm(state.correct_keystrokes, elapsed, state.duration_ms),
            duration_seconds=state.config.duration_seconds,
            mistakes=dict(state.mistakes),
            best_combo=state.best_combo,
        )
        self._result = result
        logger.info(
            "Session ended: score=%d accuracy=%.3f words=%d",
            result.score, result.accuracy, result.successful_words,
        )
        self._emit(SessionEnded(result=result))
        return result

    def _emit(self, event: SessionEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Session listener failed on %s", type(event).__name__)
