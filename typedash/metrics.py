from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Dict, Union

CHARS_PER_WORD = 5

Number = Union[int, float, Fraction]


@dataclass(frozen=True)
class TestStats:
    __test__ = False  # not a pytest class

    wpm: int
    accuracy: int
    correct_chars: int
    incorrect_chars: int
    total_chars: int
    elapsed_seconds: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {
            "wpm": self.wpm,
            "accuracy": self.accuracy,
            "correctChars": self.correct_chars,
            "incorrectChars": self.incorrect_chars,
            "totalChars": self.total_chars,
        }


def round_half_up(value: Number) -> int:
    return int(math.floor(Fraction(value) + Fraction(1, 2)))


def live_wpm(correct_chars: int, seconds: Number) -> int:
    """(correct / 5) / minutes, rounded once at the end. Zero time gives 0."""
    if seconds <= 0:
        return 0
    return round_half_up(Fraction(correct_chars * 60) / (CHARS_PER_WORD * Fraction(seconds)))


def live_accuracy(correct_chars: int, incorrect_chars: int) -> int:
    total = correct_chars + incorrect_chars
    if total <= 0:
        return 100
    return round_half_up(Fraction(correct_chars * 100, total))


def compute_stats(correct_chars: int, incorrect_chars: int, seconds: Number) -> TestStats:
    return TestStats(
        wpm=live_wpm(correct_chars, seconds),
        accuracy=live_accuracy(correct_chars, incorrect_chars),
        correct_chars=correct_chars,
        incorrect_chars=incorrect_chars,
        total_chars=correct_chars + incorrect_chars,
        elapsed_seconds=int(seconds),
    )
