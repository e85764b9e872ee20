from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List

logger = logging.getLogger(__name__)

FALLBACK_WORDS = ("fallback", "typing", "game")


def filter_words(words: Iterable[str], min_length: int = 1, max_length: int = 32) -> List[str]:
    """Strip words and keep the non-empty ones within the length bounds."""
    kept: List[str] = []
    for word in words:
        word = str(word).strip()
        if word and min_length <= len(word) <= max_length:
            kept.append(word)
    return kept


def parse_words(text: str) -> List[str]:
    """One word per line; blank lines and ``#`` comments are skipped."""
    words = []
    for line in text.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            words.append(line)
    return words


def load_words(path: Path, min_length: int = 1, max_length: int = 32) -> List[str]:
    """Load a word list file, falling back to a tiny built-in list on failure."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to load words from %s: %s", path, e)
        return list(FALLBACK_WORDS)
    words = filter_words(parse_words(text), min_length, max_length)
    logger.info("Loaded %d words from %s", len(words), path)
    return words
