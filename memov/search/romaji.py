"""Romaji to kana conversion and SKK dictionary lookup for query expansion."""

from __future__ import annotations

import logging
from functools import lru_cache
from importlib import resources

logger = logging.getLogger(__name__)

SKK_DICTIONARY = "skk_jisyo.txt"

# Longest key in ROMAJI_TO_HIRAGANA; conversion tries this many characters first.
MAX_ROMAJI_LENGTH = 4

ROMAJI_TO_HIRAGANA = {
    # Basic hiragana
    "a": "あ", "i": "い", "u": "う", "e": "え", "o": "お",
    "ka": "か", "ki": "き", "ku": "く", "ke": "け", "ko": "こ",
    "sa": "さ", "si": "し", "shi": "し", "su": "す", "se": "せ", "so": "そ",
    "ta": "た", "ti": "ち", "chi": "ち", "tu": "つ", "tsu": "つ", "te": "て", "to": "と",
    "na": "な", "ni": "に", "nu": "ぬ", "ne": "ね", "no": "の",
    "ha": "は", "hi": "ひ", "fu": "ふ", "hu": "ふ", "he": "へ", "ho": "ほ",
    "ma": "ま", "mi": "み", "mu": "む", "me": "め", "mo": "も",
    "ya": "や", "yu": "ゆ", "yo": "よ",
    "ra": "ら", "ri": "り", "ru": "る", "re": "れ", "ro": "ろ",
    "wa": "わ", "wo": "を", "n": "ん", "nn": "ん",
    # Voiced sounds (dakuten)
    "ga": "が", "gi": "ぎ", "gu": "ぐ", "ge": "げ", "go": "ご",
    "za": "ざ", "zi": "じ", "ji": "じ", "zu": "ず", "ze": "ぜ", "zo": "ぞ",
    "da": "だ", "di": "ぢ", "du": "づ", "de": "で", "do": "ど",
    "ba": "ば", "bi": "び", "bu": "ぶ", "be": "べ", "bo": "ぼ",
    "pa": "ぱ", "pi": "ぴ", "pu": "ぷ", "pe": "ぺ", "po": "ぽ",
    # Combinations
    "kya": "きゃ", "kyu": "きゅ", "kyo": "きょ",
    "sha": "しゃ", "sya": "しゃ", "shu": "しゅ", "syu": "しゅ", "sho": "しょ", "syo": "しょ",
    "cha": "ちゃ", "tya": "ちゃ", "chu": "ちゅ", "tyu": "ちゅ", "cho": "ちょ", "tyo": "ちょ",
    "nya": "にゃ", "nyu": "にゅ", "nyo": "にょ",
    "hya": "ひゃ", "hyu": "ひゅ", "hyo": "ひょ",
    "mya": "みゃ", "myu": "みゅ", "myo": "みょ",
    "rya": "りゃ", "ryu": "りゅ", "ryo": "りょ",
    "gya": "ぎゃ", "gyu": "ぎゅ", "gyo": "ぎょ",
    "ja": "じゃ", "ju": "じゅ", "jo": "じょ",
    "zya": "じゃ", "zyu": "じゅ", "zyo": "じょ",
    "dya": "ぢゃ", "dyu": "ぢゅ", "dyo": "ぢょ",
    "bya": "びゃ", "byu": "びゅ", "byo": "びょ",
    "pya": "ぴゃ", "pyu": "ぴゅ", "pyo": "ぴょ",
    # Small tsu for double consonants
    # Basic hiragana with っ
    "kka": "っか", "kki": "っき", "kku": "っく", "kke": "っけ", "kko": "っこ",
    "ssa": "っさ", "sshi": "っし", "ssi": "っし", "ssu": "っす", "sse": "っせ", "sso": "っそ",
    "tta": "った", "tti": "っち", "tchi": "っち", "ttsu": "っつ", "ttu": "っつ", "tte": "って", "tto": "っと",
    "ppa": "っぱ", "ppi": "っぴ", "ppu": "っぷ", "ppe": "っぺ", "ppo": "っぽ",
    "hha": "っは", "hhi": "っひ", "hhu": "っふ", "hhe": "っへ", "hho": "っほ",
    # Voiced sounds with っ
    "gga": "っが", "ggi": "っぎ", "ggu": "っぐ", "gge": "っげ", "ggo": "っご",
    "zza": "っざ", "zzi": "っじ", "jji": "っじ", "zzu": "っず", "zze": "っぜ", "zzo": "っぞ",
    "dda": "っだ", "ddi": "っぢ", "ddu": "っづ", "dde": "っで", "ddo": "っど",
    "bba": "っば", "bbi": "っび", "bbu": "っぶ", "bbe": "っべ", "bbo": "っぼ",
    # Combinations with っ
    "kkya": "っきゃ", "kkyu": "っきゅ", "kkyo": "っきょ",
    "ssha": "っしゃ", "ssya": "っしゃ", "sshu": "っしゅ", "ssyu": "っしゅ", "ssho": "っしょ", "ssyo": "っしょ",
    "tcha": "っちゃ", "ttya": "っちゃ", "tchu": "っちゅ", "ttyu": "っちゅ", "tcho": "っちょ", "ttyo": "っちょ",
    "hhya": "っひゃ", "hhyu": "っひゅ", "hhyo": "っひょ",
    "ggya": "っぎゃ", "ggyu": "っぎゅ", "ggyo": "っぎょ",
    "jja": "っじゃ", "jju": "っじゅ", "jjo": "っじょ",
    "zzya": "っじゃ", "zzyu": "っじゅ", "zzyo": "っじょ",
    "ddya": "っぢゃ", "ddyu": "っぢゅ", "ddyo": "っぢょ",
    "bbya": "っびゃ", "bbyu": "っびゅ", "bbyo": "っびょ",
    "ppya": "っぴゃ", "ppyu": "っぴゅ", "ppyo": "っぴょ",
    # Additional rows with っ
    "nna": "っな", "nni": "っに", "nnu": "っぬ", "nne": "っね", "nno": "っの",
    "mma": "っま", "mmi": "っみ", "mmu": "っむ", "mme": "っめ", "mmo": "っも",
    "yya": "っや", "yyu": "っゆ", "yyo": "っよ",
    "rra": "っら", "rri": "っり", "rru": "っる", "rre": "っれ", "rro": "っろ",
    "wwa": "っわ", "wwo": "っを",
    # Additional combinations with っ
    "nnya": "っにゃ", "nnyu": "っにゅ", "nnyo": "っにょ",
    "mmya": "っみゃ", "mmyu": "っみゅ", "mmyo": "っみょ",
    "rrya": "っりゃ", "rryu": "っりゅ", "rryo": "っりょ",
    # Long vowels
    "-": "ー",
}

HIRAGANA_TO_KATAKANA = str.maketrans(
    "あいうえおかきくけこさしすせそたちつてとなにぬねのはひふへほまみむめもやゆよらりるれろわをん"
    "がぎぐげござじずぜぞだぢづでどばびぶべぼぱぴぷぺぽゃゅょっ",
    "アイウエオカキクケコサシスセソタチツテトナニヌネノハヒフヘホマミムメモヤユヨラリルレロワヲン"
    "ガギグゲゴザジズゼゾダヂヅデドバビブベボパピプペポャュョッ",
)


def contains_japanese(text: str) -> bool:
    """True if any character is hiragana, katakana or a CJK unified ideograph."""
    for ch in text:
        code = ord(ch)
        if 0x3040 <= code <= 0x309F or 0x30A0 <= code <= 0x30FF or 0x4E00 <= code <= 0x9FFF:
            return True
    return False


def to_hiragana(romaji: str) -> str:
    """Greedy longest-match transliteration; characters with no mapping are dropped."""
    romaji = romaji.lower()
    out = []
    pos = 0
    while pos < len(romaji):
        for end in range(min(len(romaji), pos + MAX_ROMAJI_LENGTH), pos, -1):
            kana = ROMAJI_TO_HIRAGANA.get(romaji[pos:end])
            if kana is not None:
                out.append(kana)
                pos = end
                break
        else:
            pos += 1
    return "".join(out)


def to_katakana(hiragana: str) -> str:
    return hiragana.translate(HIRAGANA_TO_KATAKANA)


def parse_skk_dictionary(text: str) -> dict[str, list[str]]:
    """Parse SKK-JISYO lines of the form ``よみ /候補;注釈/候補/``."""
    dictionary: dict[str, list[str]] = {}
    for line in text.splitlines():
        if not line or line.startswith(";"):
            continue
        parts = line.split(" ")
        if len(parts) != 2:
            continue
        reading, raw = parts
        candidates = [candidate.split(";", 1)[0] for candidate in raw.strip("/").split("/")]
        dictionary[reading] = [candidate for candidate in candidates if candidate]
    return dictionary


@lru_cache(maxsize=1)
def skk_dictionary() -> dict[str, list[str]]:
    """The bundled dictionary, loaded once per process."""
    text = resources.files(__package__).joinpath(SKK_DICTIONARY).read_text(encoding="utf-8")
    dictionary = parse_skk_dictionary(text)
    logger.debug("Loaded %d SKK entries", len(dictionary))
    return dictionary


def variations(word: str, dictionary: dict[str, list[str]] | None = None) -> list[str]:
    """All spellings a query word should match.

    Japanese words match only themselves. Anything else is treated as romaji and
    expands to itself, its hiragana and katakana forms, and kanji candidates.
    """
    if contains_japanese(word):
        return [word]

    if dictionary is None:
        dictionary = skk_dictionary()
    hiragana = to_hiragana(word)
    candidates = [word, hiragana, to_katakana(hiragana)]
    if hiragana:
        candidates.extend(dictionary.get(hiragana, []))

    seen: set[str] = set()
    result = []
    for candidate in candidates:
        if candidate and candidate not in seen:
            seen.add(candidate)
            result.append(candidate)
    return result
