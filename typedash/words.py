from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from .config import ConfigError

logger = logging.getLogger(__name__)

LINE_SIZE = 12
DELIMITER = " "
MIN_SEED_CHARS = 50


# ---------------------------
# Vocabulary (offline)
# ---------------------------

COMMON_WORDS = [
    "a", "about", "above", "after", "again", "air", "all", "almost", "also", "always",
    "am", "among", "an", "and", "another", "any", "are", "around", "as", "ask",
    "at", "away", "back", "be", "because", "been", "before", "being", "below", "best",
    "between", "big", "both", "but", "by", "call", "came", "can", "car", "case",
    "change", "child", "city", "close", "come", "company", "could", "country", "course", "day",
    "did", "different", "do", "does", "down", "each", "early", "end", "enough", "even",
    "every", "example", "eye", "face", "fact", "family", "far", "feel", "few", "find",
    "first", "for", "found", "from", "full", "get", "give", "go", "good", "great",
    "group", "grow", "had", "hand", "hard", "has", "have", "he", "head", "health",
    "hear", "help", "her", "here", "high", "him", "his", "home", "house", "how",
    "however", "I", "if", "in", "into", "is", "it", "its", "just", "keep",
    "kind", "know", "large", "last", "late", "learn", "left", "life", "like", "line",
    "little", "live", "long", "look", "love", "made", "make", "man", "many", "may",
    "me", "mean", "men", "might", "more", "most", "move", "much", "must", "my",
    "near", "need", "never", "new", "next", "night", "no", "not", "now", "number",
    "of", "off", "often", "old", "on", "once", "one", "only", "or", "other",
    "our", "out", "over", "own", "part", "people", "place", "point", "problem", "program",
    "public", "put", "question", "right", "room", "run", "said", "same", "saw", "say",
    "school", "see", "seem", "set", "she", "should", "show", "since", "small", "so",
    "some", "something", "sound", "still", "study", "such", "system", "take", "tell", "than",
    "that", "the", "their", "them", "then", "there", "these", "they", "thing", "think",
    "this", "those", "time", "to", "today", "together", "too", "town", "try", "two",
    "under", "up", "use", "very", "want", "was", "water", "way", "we", "week",
    "well", "went", "were", "what", "when", "where", "which", "while", "who", "why",
    "will", "with", "word", "work", "world", "would", "write", "year", "you", "your",
]


class VocabularyPool:
    """Read-only pool of filler words, sampled uniformly with replacement."""

    def __init__(self, words: Sequence[str]) -> None:
        cleaned = tuple(w for w in words if w and not w.isspace())
        if not cleaned:
            raise ConfigError("vocabulary pool must contain at least one word")
        self._words = cleaned

    @property
    def words(self) -> Tuple[str, ...]:
        return self._words

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word: object) -> bool:
        return word in self._words

    def choose(self, rng: random.Random, k: int) -> List[str]:
        if k <= 0:
            return []
        return rng.choices(self._words, k=k)


DEFAULT_VOCABULARY = VocabularyPool(COMMON_WORDS)


class SeedQueue:
    """
    Seed words behind a cursor. Words are handed out once, in order;
    the queue never refills.
    """

    def __init__(self, text: str) -> None:
        self._words: Tuple[str, ...] = tuple((text or "").split())
        self._cursor = 0

    @property
    def words(self) -> Tuple[str, ...]:
        return self._words

    @property
    def consumed(self) -> Tuple[str, ...]:
        return self._words[: self._cursor]

    @property
    def remaining(self) -> int:
        return len(self._words) - self._cursor

    @property
    def exhausted(self) -> bool:
        return self._cursor >= len(self._words)

    def take(self, n: int) -> List[str]:
        if n <= 0:
            return []
        end = min(len(self._words), self._cursor + n)
        taken = list(self._words[self._cursor:end])
        self._cursor = end
        return taken


class WordSource:
    def __init__(
        self,
        seed_text: str,
        vocabulary: Optional[VocabularyPool] = None,
        line_size: int = LINE_SIZE,
        rng: Optional[random.Random] = None,
    ) -> None:
        if line_size <= 0:
            raise ConfigError(f"line size must be positive, got {line_size}")
        self.queue = SeedQueue(seed_text)
        self.vocabulary = vocabulary if vocabulary is not None else DEFAULT_VOCABULARY
        self.line_size = line_size
        self.rng = rng if rng is not None else random.Random()

    def next_line(self) -> List[str]:
        """Seed words first (in order), then random filler up to ``line_size``."""
        line = self.queue.take(self.line_size)
        missing = self.line_size - len(line)
        if missing:
            line.extend(self.vocabulary.choose(self.rng, missing))
            logger.debug("line padded with %d filler words", missing)
        return line


# ---------------------------
# Input splitting
# ---------------------------

def split_completed_words(value: str) -> Tuple[List[str], str]:
    """
    Return (completed_words, fragment_without_spaces).
    Treat one or more spaces as delimiter.
    """
    if not value:
        return [], ""
    if DELIMITER not in value:
        return [], value

    parts = value.split(DELIMITER)
    completed = [p for p in parts[:-1] if p != ""]
    fragment = parts[-1]
    return completed, fragment


# ---------------------------
# Seed text
# ---------------------------

def clean_seed_text(text: str) -> str:
    text = (text or "").replace("\r\n", "\n").replace("\n", " ")
    for ch in ('*', '"'):
        text = text.replace(ch, "")
    return text.strip()


def seed_word_count(duration_sec: int) -> int:
    # ~50 wpm worth of text plus a little slack
    return int(round((duration_sec / 60.0) * 50)) + 10


def generate_fallback_text(
    vocabulary: Optional[VocabularyPool] = None,
    word_count: int = 50,
    rng: Optional[random.Random] = None,
) -> str:
    pool = vocabulary if vocabulary is not None else DEFAULT_VOCABULARY
    rng = rng if rng is not None else random.Random()
    return " ".join(pool.choose(rng, max(1, word_count)))


def load_seed_text(
    path: Optional[Union[str, Path]] = None,
    vocabulary: Optional[VocabularyPool] = None,
    word_count: int = 50,
    rng: Optional[random.Random] = None,
) -> str:
    """
    Read the seed paragraph from ``path``. Anything unusable (no path,
    unreadable file, text too short) is replaced by locally generated filler.
    """
    if path:
        try:
            raw = Path(path).read_text(encoding="utf-8", errors="ignore")
        except OSError as exc:
            logger.warning("could not read seed text %s: %s", path, exc)
        else:
            text = clean_seed_text(raw)
            if len(text) >= MIN_SEED_CHARS:
                return text
            logger.warning(
                "seed text %s too short (%d chars), using fallback", path, len(text)
            )
    return generate_fallback_text(vocabulary, word_count, rng)
