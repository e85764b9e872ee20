from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from kanatype.core.storage import SETTINGS_KEY, KeyValueStore

logger = logging.getLogger(__name__)

MIN_DURATION_SECONDS = 1
MAX_DURATION_SECONDS = 600
DEFAULT_WORD_LIST = "words/default.txt"


def data_dir() -> Path:
    return Path(__file__).resolve().parent.parent / "data"


def clamp_duration(seconds: Any, default: int = 15) -> int:
    """Coerce *seconds* to an int within the supported duration range."""
    try:
        value = int(seconds)
    except (TypeError, ValueError):
        value = default
    return max(MIN_DURATION_SECONDS, min(MAX_DURATION_SECONDS, value))


def _pick(raw: Mapping[str, Any], *names: str, default: Any = None) -> Any:
    for name in names:
        if name in raw and raw[name] is not None:
            return raw[name]
    return default


@dataclass(frozen=True)
class GameConfig:
    """Settings that stay fixed for one timed run."""

    duration_seconds: int = 15
    case_sensitive: bool = False
    transliterate: bool = True
    randomize: bool = True
    no_repeat_in_session: bool = False
    min_word_length: int = 1
    max_word_length: int = 32

    def __post_init__(self) -> None:
        if self.duration_seconds <= 0:
            raise ValueError(f"duration_seconds must be positive, got {self.duration_seconds}")
        if self.min_word_length <= 0 or self.max_word_length <= 0:
            raise ValueError("word length bounds must be positive")
        if self.min_word_length > self.max_word_length:
            raise ValueError(
                f"min_word_length ({self.min_word_length}) exceeds max_word_length ({self.max_word_length})"
            )

    @property
    def duration_ms(self) -> int:
        return self.duration_seconds * 1000

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "GameConfig":
        """Build a config from a loosely-typed mapping (camelCase or snake_case keys)."""
        defaults = cls()
        min_len = _pick(raw, "min_word_length", "minWordLength", default=defaults.min_word_length)
        max_len = _pick(raw, "max_word_length", "maxWordLength", default=defaults.max_word_length)
        try:
            min_len = max(1, int(min_len))
        except (TypeError, ValueError):
            min_len = defaults.min_word_length
        try:
            max_len = max(1, int(max_len))
        except (TypeError, ValueError):
            max_len = defaults.max_word_length
        if min_len > max_len:
            min_len, max_len = max_len, min_len
        return cls(
            duration_seconds=clamp_duration(
                _pick(raw, "duration_seconds", "durationSeconds", "gameDurationSeconds",
                      default=defaults.duration_seconds),
                defaults.duration_seconds,
            ),
            case_sensitive=bool(_pick(raw, "case_sensitive", "caseSensitive", default=defaults.case_sensitive)),
            transliterate=bool(
                _pick(raw, "transliterate", "romaji_input", "romajiInput", default=defaults.transliterate)
            ),
            randomize=bool(_pick(raw, "randomize", default=defaults.randomize)),
            no_repeat_in_session=bool(
                _pick(raw, "no_repeat_in_session", "noRepeatInSession", default=defaults.no_repeat_in_session)
            ),
            min_word_length=min_len,
            max_word_length=max_len,
        )

    def to_settings(self) -> Dict[str, Any]:
        """Return the camelCase mapping written to saved settings."""
        return {
            "gameDurationSeconds": self.duration_seconds,
            "caseSensitive": self.case_sensitive,
            "romajiInput": self.transliterate,
            "randomize": self.randomize,
            "noRepeatInSession": self.no_repeat_in_session,
            "minWordLength": self.min_word_length,
            "maxWordLength": self.max_word_length,
        }


@dataclass(frozen=True)
class WordListRef:
    name: str
    path: str


@dataclass(frozen=True)
class SoundSettings:
    enabled: bool = True
    volume: float = 0.6


@dataclass(frozen=True)
class AppConfig:
    """Everything the desktop app needs before a run: game rules, lists, sound."""

    game: GameConfig = field(default_factory=GameConfig)
    word_lists: List[WordListRef] = field(
        default_factory=lambda: [WordListRef(name="Default", path=DEFAULT_WORD_LIST)]
    )
    word_list_path: str = DEFAULT_WORD_LIST
    sound: SoundSettings = field(default_factory=SoundSettings)

    def resolve_word_list(self, base_dir: Optional[Path] = None) -> Path:
        """Absolute path of the selected word list (relative paths live under data/)."""
        path = Path(self.word_list_path)
        if path.is_absolute():
            return path
        return (base_dir or data_dir()) / path

    def with_game(self, game: GameConfig) -> "AppConfig":
        return replace(self, game=game)


DEFAULTS: Dict[str, Any] = {
    "gameDurationSeconds": 15,
    "wordLists": [{"name": "Default", "path": DEFAULT_WORD_LIST}],
    "randomize": True,
    "romajiInput": True,
    "noRepeatInSession": False,
    "caseSensitive": False,
    "minWordLength": 1,
    "maxWordLength": 32,
    "sound": {"enabled": True, "volume": 0.6},
}


def read_config_file(path: Path) -> Dict[str, Any]:
    """Read a YAML config file; missing or malformed files yield ``{}``."""
    if not path.exists():
        logger.info("No config file at %s, using defaults", path)
        return {}
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError) as e:
        logger.warning("Could not read config %s: %s", path, e)
        return {}
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        logger.warning("Ignoring config %s: expected a mapping at top level", path)
        return {}
    return raw


def load_saved_settings(store: KeyValueStore) -> Dict[str, Any]:
    raw = store.get(SETTINGS_KEY)
    if not raw:
        return {}
    try:
        saved = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Discarding unreadable saved settings: %s", e)
        return {}
    return saved if isinstance(saved, dict) else {}


def save_settings(store: KeyValueStore, partial: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge *partial* into the saved settings and persist the result."""
    merged = {**load_saved_settings(store), **partial}
    store.set(SETTINGS_KEY, json.dumps(merged, ensure_ascii=False))
    return merged


def _word_lists(merged: Mapping[str, Any]) -> List[WordListRef]:
    lists: List[WordListRef] = []
    raw_lists = merged.get("wordLists")
    if isinstance(raw_lists, list):
        for item in raw_lists:
            if isinstance(item, dict) and item.get("path"):
                path = str(item["path"])
                lists.append(WordListRef(name=str(item.get("name") or path), path=path))
    if not lists:
        path = str(merged.get("wordListPath") or DEFAULT_WORD_LIST)
        logger.warning("No word lists configured, falling back to %s", path)
        lists = [WordListRef(name="Default", path=path)]
    return lists


def _sound(raw: Any) -> SoundSettings:
    if not isinstance(raw, dict):
        return SoundSettings()
    try:
        volume = float(raw.get("volume", 0.6))
    except (TypeError, ValueError):
        volume = 0.6
    return SoundSettings(enabled=bool(raw.get("enabled", True)), volume=max(0.0, min(1.0, volume)))


def build_app_config(*layers: Mapping[str, Any]) -> AppConfig:
    """Merge config layers (lowest priority first) over the built-in defaults."""
    merged: Dict[str, Any] = dict(DEFAULTS)
    for layer in layers:
        merged.update({k: v for k, v in layer.items() if v is not None})
    lists = _word_lists(merged)
    selected = str(merged.get("wordListPath") or lists[0].path)
    if selected not in {wl.path for wl in lists}:
        # An explicitly chosen list that isn't in the menu is still offered.
        lists.append(WordListRef(name=Path(selected).stem, path=selected))
    return AppConfig(
        game=GameConfig.from_mapping(merged),
        word_lists=lists,
        word_list_path=selected,
        sound=_sound(merged.get("sound")),
    )


def load_app_config(
    store: KeyValueStore,
    config_path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> AppConfig:
    """Defaults < config.yaml < saved settings < command-line overrides."""
    file_layer = read_config_file(config_path or data_dir() / "config.yaml")
    return build_app_config(file_layer, load_saved_settings(store), dict(overrides or {}))
