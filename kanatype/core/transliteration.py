"""Kana to romaji conversion used to build typing targets.

The conversion is a simple Hepburn-like scheme tuned for typing practice:

  * **Digraphs** – a kana followed by a small ya/yu/yo becomes one
    three-letter cluster (きゃ → ``kya``, しゅ → ``shu``).
  * **Gemination** – a small tsu (っ / ッ) doubles the first consonant of
    whatever follows it (がっこう → ``gakkou``).
  * **Long vowel** – the katakana prolonged sound mark (ー) repeats the last
    vowel written so far (ラーメン → ``raamen``).

Characters outside the tables (Latin letters, digits, punctuation, kanji)
are passed through unchanged.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping

KANA_PATTERN = re.compile(r"[\u3040-\u30ff]")

SOKUON = frozenset({"っ", "ッ"})
CHOONPU = "ー"
VOWELS = "aiueo"

DIGRAPHS: Mapping[str, str] = MappingProxyType({
    # hiragana
    "きゃ": "kya", "きゅ": "kyu", "きょ": "kyo",
    "ぎゃ": "gya", "ぎゅ": "gyu", "ぎょ": "gyo",
    "しゃ": "sha", "しゅ": "shu", "しょ": "sho",
    "じゃ": "ja", "じゅ": "ju", "じょ": "jo",
    "ちゃ": "cha", "ちゅ": "chu", "ちょ": "cho",
    "にゃ": "nya", "にゅ": "nyu", "にょ": "nyo",
    "ひゃ": "hya", "ひゅ": "hyu", "ひょ": "hyo",
    "びゃ": "bya", "びゅ": "byu", "びょ": "byo",
    "ぴゃ": "pya", "ぴゅ": "pyu", "ぴょ": "pyo",
    "みゃ": "mya", "みゅ": "myu", "みょ": "myo",
    "りゃ": "rya", "りゅ": "ryu", "りょ": "ryo",
    # katakana
    "キャ": "kya", "キュ": "kyu", "キョ": "kyo",
    "ギャ": "gya", "ギュ": "gyu", "ギョ": "gyo",
    "シャ": "sha", "シュ": "shu", "ショ": "sho",
    "ジャ": "ja", "ジュ": "ju", "ジョ": "jo",
    "チャ": "cha", "チュ": "chu", "チョ": "cho",
    "ニャ": "nya", "ニュ": "nyu", "ニョ": "nyo",
    "ヒャ": "hya", "ヒュ": "hyu", "ヒョ": "hyo",
    "ビャ": "bya", "ビュ": "byu", "ビョ": "byo",
    "ピャ": "pya", "ピュ": "pyu", "ピョ": "pyo",
    "ミャ": "mya", "ミュ": "myu", "ミョ": "myo",
    "リャ": "rya", "リュ": "ryu", "リョ": "ryo",
})

SYLLABLES: Mapping[str, str] = MappingProxyType({
    "あ": "a", "い": "i", "う": "u", "え": "e", "お": "o",
    "ア": "a", "イ": "i", "ウ": "u", "エ": "e", "オ": "o",
    "か": "ka", "き": "ki", "く": "ku", "け": "ke", "こ": "ko",
    "カ": "ka", "キ": "ki", "ク": "ku", "ケ": "ke", "コ": "ko",
    "さ": "sa", "し": "shi", "す": "su", "せ": "se", "そ": "so",
    "サ": "sa", "シ": "shi", "ス": "su", "セ": "se", "ソ": "so",
    "た": "ta", "ち": "chi", "つ": "tsu", "て": "te", "と": "to",
    "タ": "ta", "チ": "chi", "ツ": "tsu", "テ": "te", "ト": "to",
    "な": "na", "に": "ni", "ぬ": "nu", "ね": "ne", "の": "no",
    "ナ": "na", "ニ": "ni", "ヌ": "nu", "ネ": "ne", "ノ": "no",
    "は": "ha", "ひ": "hi", "ふ": "fu", "へ": "he", "ほ": "ho",
    "ハ": "ha", "ヒ": "hi", "フ": "fu", "ヘ": "he", "ホ": "ho",
    "ま": "ma", "み": "mi", "む": "mu", "め": "me", "も": "mo",
    "マ": "ma", "ミ": "mi", "ム": "mu", "メ": "me", "モ": "mo",
    "や": "ya", "ゆ": "yu", "よ": "yo",
    "ヤ": "ya", "ユ": "yu", "ヨ": "yo",
    "ら": "ra", "り": "ri", "る": "ru", "れ": "re", "ろ": "ro",
    "ラ": "ra", "リ": "ri", "ル": "ru", "レ": "re", "ロ": "ro",
    "わ": "wa", "を": "o", "ん": "n",
    "ワ": "wa", "ヲ": "o", "ン": "n",
    "が": "ga", "ぎ": "gi", "ぐ": "gu", "げ": "ge", "ご": "go",
    "ガ": "ga", "ギ": "gi", "グ": "gu", "ゲ": "ge", "ゴ": "go",
    "ざ": "za", "じ": "ji", "ず": "zu", "ぜ": "ze", "ぞ": "zo",
    "ザ": "za", "ジ": "ji", "ズ": "zu", "ゼ": "ze", "ゾ": "zo",
    "だ": "da", "ぢ": "ji", "づ": "zu", "で": "de", "ど": "do",
    "ダ": "da", "ヂ": "ji", "ヅ": "zu", "デ": "de", "ド": "do",
    "ば": "ba", "び": "bi", "ぶ": "bu", "べ": "be", "ぼ": "bo",
    "バ": "ba", "ビ": "bi", "ブ": "bu", "ベ": "be", "ボ": "bo",
    "ぱ": "pa", "ぴ": "pi", "ぷ": "pu", "ぺ": "pe", "ぽ": "po",
    "パ": "pa", "ピ": "pi", "プ": "pu", "ペ": "pe", "ポ": "po",
    "ゔ": "vu", "ヴ": "vu",
})


def contains_kana(word: str) -> bool:
    """Return True if *word* has at least one hiragana or katakana character."""
    return bool(KANA_PATTERN.search(word))


def kana_to_romaji(text: str) -> str:
    """Convert kana in *text* to romaji, leaving everything else as is."""
    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        pair = text[i:i + 2]
        if len(pair) == 2 and pair in DIGRAPHS:
            out.append(DIGRAPHS[pair])
            i += 2
            continue
        if ch in SOKUON:
            # Only the doubled consonant is written here; the following
            # syllable is converted on the next pass.
            following = DIGRAPHS.get(text[i + 1:i + 3]) or SYLLABLES.get(text[i + 1:i + 2], "")
            if following:
                out.append(following[0])
            i += 1
            continue
        if ch == CHOONPU:
            last = out[-1][-1] if out else ""
            if last and last in VOWELS:
                out.append(last)
            i += 1
            continue
        out.append(SYLLABLES.get(ch, ch))
        i += 1
    return "".join(out)


def to_typing_target(word: str, enabled: bool = True) -> str:
    """Return the string the player has to type for *word*.

    When transliteration is disabled, or the word has no kana at all, the
    word itself is the target.
    """
    if not word:
        return ""
    if not enabled or not contains_kana(word):
        return word
    return kana_to_romaji(word)
