"""Tests for kanatype.core.scoring – accuracy, CPM and WPM."""

from __future__ import annotations

import pytest

from kanatype.core import scoring


# ===========================================================================
# accuracy
# ===========================================================================

class TestAccuracy:
    def test_no_keystrokes_is_perfect(self):
        assert scoring.accuracy(0, 0) == 1

    def test_ratio(self):
        assert scoring.accuracy(7, 10) == pytest.approx(0.7)

    def test_all_wrong(self):
        assert scoring.accuracy(0, 5) == 0.0

    def test_clamped_above_one(self):
        assert scoring.accuracy(12, 10) == 1.0

    def test_clamped_below_zero(self):
        assert scoring.accuracy(-1, 10) == 0.0


# ===========================================================================
# cpm / wpm
# ===========================================================================

class TestRates:
    def test_cpm_one_minute(self):
        assert scoring.cpm(300, 60000) == 300

    def test_cpm_fifteen_seconds(self):
        assert scoring.cpm(50, 15000) == 200

    def test_wpm_uses_five_char_words(self):
        assert scoring.wpm(300, 60000) == 60

    def test_rounding(self):
        # 7 chars in 15 s -> 28 cpm, 5.6 wpm
        assert scoring.cpm(7, 15000) == 28
        assert scoring.wpm(7, 15000) == 6

    def test_zero_elapsed_uses_duration(self):
        assert scoring.cpm(30, 0, duration_ms=30000) == 60
        assert scoring.wpm(30, 0, duration_ms=30000) == 12

    def test_zero_elapsed_and_duration(self):
        assert scoring.cpm(30, 0, duration_ms=0) == 0
        assert scoring.wpm(30, 0) == 0

    def test_rates_are_ints(self):
        assert isinstance(scoring.cpm(11, 12345), int)
        assert isinstance(scoring.wpm(11, 12345), int)


# ===========================================================================
# format_percent
# ===========================================================================

class TestFormatPercent:
    def test_one_decimal(self):
        assert scoring.format_percent(0.9333) == "93.3%"

    def test_full(self):
        assert scoring.format_percent(1.0) == "100.0%"
