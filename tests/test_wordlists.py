"""Tests for kanatype.core.wordlists – word list files."""

from __future__ import annotations

from pathlib import Path

from kanatype.core.config import data_dir
from kanatype.core.wordlists import FALLBACK_WORDS, filter_words, load_words, parse_words


class TestParseWords:
    def test_skips_blank_and_comments(self):
        text = "# header\ncat\n\n  dog  \n# note\nbird\n"
        assert parse_words(text) == ["cat", "dog", "bird"]

    def test_windows_line_endings(self):
        assert parse_words("cat\r\ndog\r\n") == ["cat", "dog"]


class TestFilterWords:
    def test_length_bounds(self):
        assert filter_words(["a", "ab", "abc", "abcd"], 2, 3) == ["ab", "abc"]

    def test_drops_empty(self):
        assert filter_words(["", "  ", "x"]) == ["x"]

    def test_kana_length_counts_characters(self):
        assert filter_words(["ねこ", "さくら"], 1, 2) == ["ねこ"]


class TestLoadWords:
    def test_loads_file(self, tmp_path: Path):
        f = tmp_path / "words.txt"
        f.write_text("# list\nねこ\nいぬ\nひこうき\n", encoding="utf-8")
        assert load_words(f, 1, 3) == ["ねこ", "いぬ"]

    def test_missing_file_falls_back(self, tmp_path: Path):
        assert load_words(tmp_path / "missing.txt") == list(FALLBACK_WORDS)

    def test_fallback_has_three_words(self):
        assert len(FALLBACK_WORDS) == 3

    def test_bundled_lists_load(self):
        for name in ("default.txt", "english.txt"):
            words = load_words(data_dir() / "words" / name)
            assert words
            assert not any(w.startswith("#") for w in words)
