"""Qt glue that drives a SessionController from the event loop."""

from __future__ import annotations

from typing import Optional, Sequence

from PySide6.QtCore import QElapsedTimer, QObject, QTimer, Signal

from kanatype.core.config import GameConfig
from kanatype.core.session import (
    KeystrokeResult,
    RunResult,
    SessionController,
    SessionEnded,
    SessionEvent,
    SessionStatus,
    WordChanged,
    WordCompleted,
)

FRAME_INTERVAL_MS = 16


class SessionDriver(QObject):
    """Ticks the session once per frame and re-emits engine events as signals."""

    wordChanged = Signal(str, str)
    keystrokeResult = Signal(bool, str)
    wordCompleted = Signal(int, int)
    timeChanged = Signal(float)
    sessionEnded = Signal(object)

    def __init__(self, controller: Optional[SessionController] = None, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._elapsed = QElapsedTimer()
        self._elapsed.start()
        self._controller = controller or SessionController(clock=self.now_ms)
        self._controller.subscribe(self._on_event)
        self._timer = QTimer(self)
        self._timer.setInterval(FRAME_INTERVAL_MS)
        self._timer.timeout.connect(self._on_frame)

    @property
    def controller(self) -> SessionController:
        return self._controller

    def now_ms(self) -> float:
        return float(self._elapsed.elapsed())

    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self, config: GameConfig, words: Sequence[str]) -> None:
        self._controller.start(config, words)
        self.timeChanged.emit(self._controller.remaining_ms())
        self._timer.start()

    def retry(self) -> None:
        self._controller.retry()
        self.timeChanged.emit(self._controller.remaining_ms())
        self._timer.start()

    def key_pressed(self, key: str, composing: bool = False) -> Optional[bool]:
        return self._controller.submit_keystroke(key, composing=composing)

    def quit(self) -> Optional[RunResult]:
        self._timer.stop()
        return self._controller.quit()

    def reset(self) -> None:
        self._timer.stop()
        self._controller.reset()

    def _on_frame(self) -> None:
        remaining = self._controller.tick()
        self.timeChanged.emit(remaining)
        if self._controller.status is not SessionStatus.PLAYING:
            self._timer.stop()

    def _on_event(self, event: SessionEvent) -> None:
        if isinstance(event, WordChanged):
            self.wordChanged.emit(event.display_word, event.typing_target)
        elif isinstance(event, KeystrokeResult):
            self.keystrokeResult.emit(event.correct, event.character)
        elif isinstance(event, WordCompleted):
            self.wordCompleted.emit(event.successful_words, event.combo)
        elif isinstance(event, SessionEnded):
            self._timer.stop()
            self.sessionEnded.emit(event.result)
