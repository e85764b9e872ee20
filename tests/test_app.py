"""Tests for kanatype.app – command-line handling."""

from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("PySide6.QtWidgets")

from kanatype.app import build_parser, overrides_from_args  # noqa: E402


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.config is None
        assert args.duration is None
        assert args.word_list is None
        assert args.verbose is False

    def test_all_options(self):
        args = build_parser().parse_args(
            ["-c", "cfg.yaml", "-t", "30", "--list", "words/english.txt", "--storage", "s.json", "-v"]
        )
        assert args.config == Path("cfg.yaml")
        assert args.duration == 30
        assert args.word_list == "words/english.txt"
        assert args.storage == Path("s.json")
        assert args.verbose is True


class TestOverrides:
    def test_none_given(self):
        assert overrides_from_args(build_parser().parse_args([])) == {}

    def test_duration_clamped(self):
        args = build_parser().parse_args(["-t", "5000"])
        assert overrides_from_args(args) == {"gameDurationSeconds": 600}

    def test_word_list(self):
        args = build_parser().parse_args(["--list", "mine.txt"])
        assert overrides_from_args(args) == {"wordListPath": "mine.txt"}
