"""Play screen widgets: the word being typed and the countdown bar."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QPainter
from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget

from kanatype.ui.colors import HomeColors, timer_color


class WordDisplay(QWidget):
    """Source word on top (when it differs) and the typing target below.

    Target characters are painted green once typed, grey while pending, and
    the next expected one turns red after a mistake.
    """

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._target = ""
        self._typed_len = 0
        self._error = False

        self._source = QLabel("")
        self._source.setAlignment(Qt.AlignCenter)
        self._source.setStyleSheet(f"color: {HomeColors.TEXT_SECONDARY}; font-size: 36px;")

        self._line = QLabel("")
        self._line.setAlignment(Qt.AlignCenter)
        self._line.setTextFormat(Qt.RichText)
        self._line.setStyleSheet("font-size: 44px; font-family: monospace;")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)
        layout.addWidget(self._source)
        layout.addWidget(self._line)

    def set_word(self, display_word: str, target: str) -> None:
        self._target = target
        self._typed_len = 0
        self._error = False
        self._source.setText(display_word if display_word != target else "")
        self._source.setVisible(display_word != target)
        self._render()

    def set_progress(self, typed_len: int, error: bool = False) -> None:
        self._typed_len = max(0, min(typed_len, len(self._target)))
        self._error = error
        self._render()

    def _render(self) -> None:
        parts = []
        for i, ch in enumerate(self._target):
            if i < self._typed_len:
                color = HomeColors.CHAR_CORRECT
            elif i == self._typed_len and self._error:
                color = HomeColors.CHAR_EXPECTED
            else:
                color = HomeColors.CHAR_PENDING
            text = "&nbsp;" if ch == " " else (ch.replace("&", "&amp;").replace("<", "&lt;"))
            parts.append(f'<span style="color:{color}">{text}</span>')
        self._line.setText("".join(parts))


class TimerBar(QWidget):
    """Horizontal bar that shrinks with the remaining time."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._ratio = 1.0
        self._remaining_ms = 0.0
        self.setFixedHeight(14)

    def set_remaining(self, remaining_ms: float, total_ms: float) -> None:
        self._remaining_ms = remaining_ms
        self._ratio = max(0.0, min(1.0, remaining_ms / total_ms)) if total_ms > 0 else 0.0
        self.update()

    def paintEvent(self, event) -> None:
        super().paintEvent(event)
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.setPen(Qt.NoPen)
        painter.setBrush(QColor("#e6f0f0"))
        painter.drawRoundedRect(0, 0, self.width(), self.height(), 7, 7)
        width = int(self.width() * self._ratio)
        if width > 0:
            painter.setBrush(QColor(timer_color(self._remaining_ms)))
            painter.drawRoundedRect(0, 0, width, self.height(), 7, 7)
