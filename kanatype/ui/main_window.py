from __future__ import annotations

import logging

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QCloseEvent, QKeyEvent
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QFormLayout,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QMainWindow,
    QPushButton,
    QSpinBox,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from kanatype.core.config import MAX_DURATION_SECONDS, MIN_DURATION_SECONDS, AppConfig, GameConfig, save_settings
from kanatype.core.leaderboard import MAX_NAME_LENGTH, LeaderboardStore
from kanatype.core.scoring import format_percent
from kanatype.core.session import BACKSPACE, RunResult, SessionStatus
from kanatype.core.storage import KeyValueStore
from kanatype.core.wordlists import load_words
from kanatype.ui.colors import HomeColors
from kanatype.ui.driver import SessionDriver
from kanatype.ui.models import ResultSummary
from kanatype.ui.typing_widgets import TimerBar, WordDisplay

logger = logging.getLogger(__name__)

START_PAGE, PLAY_PAGE, RESULT_PAGE = range(3)


class MainWindow(QMainWindow):
    """Start, play and result screens around one SessionDriver."""

    def __init__(self, config: AppConfig, storage: KeyValueStore) -> None:
        super().__init__()
        self._config = config
        self._storage = storage
        self._leaderboard = LeaderboardStore(storage)
        self._driver = SessionDriver(parent=self)
        self._driver.wordChanged.connect(self._on_word_changed)
        self._driver.keystrokeResult.connect(self._on_keystroke)
        self._driver.wordCompleted.connect(self._on_word_completed)
        self._driver.timeChanged.connect(self._on_time_changed)
        self._driver.sessionEnded.connect(self._on_session_ended)
        self._closing = False
        self._return_to_start_after_quit = False
        self._build_ui()
        self.setFocusPolicy(Qt.StrongFocus)
        self._apply_settings_to_ui(config)
        self._stack.setCurrentIndex(START_PAGE)

    def _build_ui(self) -> None:
        """Construct the three pages inside a stacked widget."""
        self.setWindowTitle("Kanatype")
        self.setMinimumSize(900, 600)
        self.setStyleSheet(
            f"""
            QMainWindow {{
                background: qlineargradient(x1:0, y1:0, x2:0, y2:1,
                    stop:0 {HomeColors.BG_TOP}, stop:1 {HomeColors.BG_BOTTOM});
            }}
            QLabel {{ color: {HomeColors.TEXT_PRIMARY}; }}
            QPushButton {{
                background: {HomeColors.PRIMARY};
                color: white;
                border-radius: 8px;
                padding: 8px 18px;
                font-weight: 600;
            }}
            QPushButton:hover {{ background: {HomeColors.PRIMARY_DARK}; }}
            """
        )
        self._stack = QStackedWidget()
        self._stack.addWidget(self._build_start_page())
        self._stack.addWidget(self._build_play_page())
        self._stack.addWidget(self._build_result_page())
        self.setCentralWidget(self._stack)

    def _build_start_page(self) -> QWidget:
        page = QWidget()
        form = QFormLayout()
        self._duration_input = QSpinBox()
        self._duration_input.setRange(MIN_DURATION_SECONDS, MAX_DURATION_SECONDS)
        self._duration_input.setSuffix(" s")
        self._wordlist_select = QComboBox()
        self._case_sensitive = QCheckBox("Case sensitive")
        self._romaji_input = QCheckBox("Type kana as romaji")
        self._randomize = QCheckBox("Random order")
        self._no_repeat = QCheckBox("No repeats within a session")
        form.addRow("Duration", self._duration_input)
        form.addRow("Word list", self._wordlist_select)
        for box in (self._case_sensitive, self._romaji_input, self._randomize, self._no_repeat):
            form.addRow(box)

        title = QLabel("Kanatype")
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet(f"font-size: 40px; font-weight: 900; color: {HomeColors.PRIMARY};")
        hint = QLabel("Press Enter to start")
        hint.setAlignment(Qt.AlignCenter)
        hint.setStyleSheet(f"color: {HomeColors.TEXT_MUTED};")
        start_btn = QPushButton("Start")
        start_btn.clicked.connect(self._start_from_form)

        layout = QVBoxLayout(page)
        layout.setContentsMargins(80, 40, 80, 40)
        layout.addWidget(title)
        layout.addLayout(form)
        layout.addWidget(start_btn, 0, Qt.AlignHCenter)
        layout.addWidget(hint)
        layout.addStretch(1)
        return page

    def _build_play_page(self) -> QWidget:
        page = QWidget()
        self._timer_bar = TimerBar()
        self._timer_label = QLabel("")
        self._timer_label.setAlignment(Qt.AlignRight)
        self._stats_label = QLabel("")
        self._stats_label.setStyleSheet(f"color: {HomeColors.TEXT_SECONDARY}; font-size: 16px;")
        self._word_display = WordDisplay()
        quit_btn = QPushButton("Quit")
        quit_btn.setFocusPolicy(Qt.NoFocus)
        quit_btn.clicked.connect(self._quit_to_start)

        top = QHBoxLayout()
        top.addWidget(self._stats_label, 1)
        top.addWidget(self._timer_label)
        layout = QVBoxLayout(page)
        layout.setContentsMargins(40, 30, 40, 30)
        layout.addWidget(self._timer_bar)
        layout.addLayout(top)
        layout.addStretch(1)
        layout.addWidget(self._word_display)
        layout.addStretch(1)
        layout.addWidget(quit_btn, 0, Qt.AlignRight)
        return page

    def _build_result_page(self) -> QWidget:
        page = QWidget()
        self._result_labels = {}
        form = QFormLayout()
        for key, caption in (
            ("score", "Score"),
            ("cpm", "CPM"),
            ("wpm", "WPM"),
            ("accuracy", "Accuracy"),
            ("words", "Words"),
            ("high_score", "High score"),
        ):
            label = QLabel("")
            label.setStyleSheet(f"font-size: 22px; font-weight: 700; color: {HomeColors.PRIMARY};")
            self._result_labels[key] = label
            form.addRow(caption, label)
        self._mistakes_label = QLabel("")
        self._mistakes_label.setWordWrap(True)
        self._toplist_label = QLabel("")
        retry_btn = QPushButton("Retry")
        retry_btn.clicked.connect(self._retry)
        back_btn = QPushButton("Back")
        back_btn.clicked.connect(self._show_start)

        buttons = QHBoxLayout()
        buttons.addStretch(1)
        buttons.addWidget(retry_btn)
        buttons.addWidget(back_btn)
        layout = QVBoxLayout(page)
        layout.setContentsMargins(80, 40, 80, 40)
        layout.addLayout(form)
        layout.addWidget(self._mistakes_label)
        layout.addWidget(QLabel("Top 3"))
        layout.addWidget(self._toplist_label)
        layout.addStretch(1)
        layout.addLayout(buttons)
        return page

    def _apply_settings_to_ui(self, config: AppConfig) -> None:
        game = config.game
        self._duration_input.setValue(game.duration_seconds)
        self._wordlist_select.clear()
        for ref in config.word_lists:
            self._wordlist_select.addItem(ref.name, ref.path)
        idx = self._wordlist_select.findData(config.word_list_path)
        self._wordlist_select.setCurrentIndex(max(0, idx))
        self._case_sensitive.setChecked(game.case_sensitive)
        self._romaji_input.setChecked(game.transliterate)
        self._randomize.setChecked(game.randomize)
        self._no_repeat.setChecked(game.no_repeat_in_session)

    def _game_config_from_form(self) -> GameConfig:
        current = self._config.game
        return GameConfig(
            duration_seconds=self._duration_input.value(),
            case_sensitive=self._case_sensitive.isChecked(),
            transliterate=self._romaji_input.isChecked(),
            randomize=self._randomize.isChecked(),
            no_repeat_in_session=self._no_repeat.isChecked(),
            min_word_length=current.min_word_length,
            max_word_length=current.max_word_length,
        )

    def _start_from_form(self) -> None:
        game = self._game_config_from_form()
        path = self._wordlist_select.currentData() or self._config.word_list_path
        save_settings(self._storage, {**game.to_settings(), "wordListPath": path})
        self._config = AppConfig(
            game=game,
            word_lists=self._config.word_lists,
            word_list_path=path,
            sound=self._config.sound,
        )
        words = load_words(self._config.resolve_word_list(), game.min_word_length, game.max_word_length)
        logger.info("Starting %ss run with %s", game.duration_seconds, path)
        self._stack.setCurrentIndex(PLAY_PAGE)
        self._driver.start(game, words)
        self._update_stats()
        self.setFocus()

    def _retry(self) -> None:
        self._stack.setCurrentIndex(PLAY_PAGE)
        self._driver.retry()
        self._update_stats()
        self.setFocus()

    def _quit_to_start(self) -> None:
        self._return_to_start_after_quit = True
        self._driver.quit()

    def _show_start(self) -> None:
        self._driver.reset()
        self._stack.setCurrentIndex(START_PAGE)

    def keyPressEvent(self, event: QKeyEvent) -> None:
        status = self._driver.controller.status
        key = event.key()
        if key in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
            if self._stack.currentIndex() == START_PAGE:
                self._start_from_form()
                return
            if self._stack.currentIndex() == RESULT_PAGE:
                self._retry()
                return
        if status is not SessionStatus.PLAYING:
            super().keyPressEvent(event)
            return
        if key == Qt.Key.Key_Escape:
            self._driver.quit()
            return
        if key == Qt.Key.Key_Backspace:
            self._driver.key_pressed(BACKSPACE)
            self._refresh_word(error=False)
            return
        text = event.text()
        if len(text) == 1 and text.isprintable():
            self._driver.key_pressed(text)
            return
        super().keyPressEvent(event)

    def _refresh_word(self, error: bool) -> None:
        state = self._driver.controller.state
        if state is not None:
            self._word_display.set_progress(len(state.typed), error=error)

    def _on_word_changed(self, display_word: str, target: str) -> None:
        self._word_display.set_word(display_word, target)

    def _on_keystroke(self, correct: bool, character: str) -> None:
        self._refresh_word(error=not correct)
        self._update_stats()

    def _on_word_completed(self, successful_words: int, combo: int) -> None:
        self._update_stats()

    def _on_time_changed(self, remaining_ms: float) -> None:
        state = self._driver.controller.state
        total = state.duration_ms if state is not None else 0
        self._timer_bar.set_remaining(remaining_ms, total)
        self._timer_label.setText(f"{remaining_ms / 1000:.1f}")

    def _update_stats(self) -> None:
        state = self._driver.controller.state
        if state is None:
            return
        self._stats_label.setText(
            f"Correct {state.correct_keystrokes} / {state.total_keystrokes}   "
            f"Accuracy {format_percent(state.accuracy)}   "
            f"Words {state.successful_words}   Combo {state.combo}"
        )

    def _on_session_ended(self, run: RunResult) -> None:
        duration = run.duration_seconds
        best = self._leaderboard.update_high_score(duration, run.score)
        top, is_new = self._leaderboard.record(duration, run)
        self._show_result(ResultSummary.from_run(run, best, top))
        if self._return_to_start_after_quit:
            self._return_to_start_after_quit = False
            self._show_start()
        else:
            self._stack.setCurrentIndex(RESULT_PAGE)
        if is_new:
            # Let the result page paint before the name prompt blocks.
            QTimer.singleShot(0, lambda: self._ask_name(run, best, duration))

    def _ask_name(self, run: RunResult, best: int, duration: int) -> None:
        name, ok = QInputDialog.getText(
            self,
            "Top 3!",
            f"You made the top 3! Enter your name (up to {MAX_NAME_LENGTH} characters):",
        )
        top = self._leaderboard.commit(duration, name if ok else "")
        self._show_result(ResultSummary.from_run(run, best, top))

    def _show_result(self, summary: ResultSummary) -> None:
        for key, label in self._result_labels.items():
            label.setText(getattr(summary, key))
        self._mistakes_label.setText(summary.mistakes)
        self._toplist_label.setText("\n".join(summary.leaderboard) or "-")

    def closeEvent(self, event: QCloseEvent) -> None:
        """Stop the frame timer before the window goes away.

        A run still in progress is dropped without being scored.
        """
        if not self._closing:
            self._closing = True
            self._driver.sessionEnded.disconnect(self._on_session_ended)
        self._driver.reset()
        super().closeEvent(event)
