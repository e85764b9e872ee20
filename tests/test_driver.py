"""Tests for kanatype.ui.driver – Qt timer and signal glue."""

from __future__ import annotations

import pytest

QtCore = pytest.importorskip("PySide6.QtCore")

from kanatype.core.config import GameConfig  # noqa: E402
from kanatype.core.session import RunResult, SessionController, SessionStatus  # noqa: E402
from kanatype.ui.driver import SessionDriver  # noqa: E402


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture(scope="module")
def qt_app():
    app = QtCore.QCoreApplication.instance() or QtCore.QCoreApplication([])
    yield app


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def driver(qt_app, clock: FakeClock) -> SessionDriver:
    return SessionDriver(controller=SessionController(clock=clock))


def config() -> GameConfig:
    return GameConfig(duration_seconds=10, randomize=False, transliterate=True)


# ===========================================================================
# Timer lifecycle
# ===========================================================================

class TestTimer:
    def test_start_runs_timer(self, driver: SessionDriver):
        driver.start(config(), ["ねこ"])
        assert driver.is_running()
        assert driver.controller.status is SessionStatus.PLAYING

    def test_quit_stops_timer(self, driver: SessionDriver):
        driver.start(config(), ["ねこ"])
        result = driver.quit()
        assert isinstance(result, RunResult)
        assert not driver.is_running()

    def test_reset_stops_timer(self, driver: SessionDriver):
        driver.start(config(), ["ねこ"])
        driver.reset()
        assert not driver.is_running()
        assert driver.controller.status is SessionStatus.IDLE

    def test_expiry_stops_timer(self, driver: SessionDriver, clock: FakeClock):
        ended = []
        driver.sessionEnded.connect(ended.append)
        driver.start(config(), ["ねこ"])
        clock.now = 10001.0
        driver._on_frame()
        assert not driver.is_running()
        assert len(ended) == 1
        assert driver.controller.status is SessionStatus.RESULT

    def test_retry_restarts_timer(self, driver: SessionDriver):
        driver.start(config(), ["ねこ"])
        driver.quit()
        driver.retry()
        assert driver.is_running()


# ===========================================================================
# Signals
# ===========================================================================

class TestSignals:
    def test_word_changed(self, driver: SessionDriver):
        words = []
        driver.wordChanged.connect(lambda display, target: words.append((display, target)))
        driver.start(config(), ["ねこ"])
        assert words == [("ねこ", "neko")]

    def test_keystroke_and_completion(self, driver: SessionDriver):
        strokes = []
        completed = []
        driver.keystrokeResult.connect(lambda ok, ch: strokes.append((ok, ch)))
        driver.wordCompleted.connect(lambda words, combo: completed.append((words, combo)))
        driver.start(config(), ["ねこ"])
        for ch in "nx":
            driver.key_pressed(ch)
        for ch in "eko":
            driver.key_pressed(ch)
        assert strokes == [(True, "n"), (False, "x"), (True, "e"), (True, "k"), (True, "o")]
        assert completed == [(1, 1)]

    def test_time_changed(self, driver: SessionDriver, clock: FakeClock):
        times = []
        driver.timeChanged.connect(times.append)
        driver.start(config(), ["ねこ"])
        clock.now = 2500.0
        driver._on_frame()
        assert times == [10000.0, 7500.0]
