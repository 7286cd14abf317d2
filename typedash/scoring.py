from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class Verdict(Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    EXTRA = "extra"  # typed past the end of the word; scored as incorrect

    @property
    def ok(self) -> bool:
        return self is Verdict.CORRECT


class WordState(Enum):
    UNTYPED = "untyped"
    CURRENT = "current"
    COMPLETED_CORRECT = "completed-correct"
    COMPLETED_INCORRECT = "completed-incorrect"


@dataclass(frozen=True)
class WordScore:
    correct: int
    incorrect: int


# ---------------------------
# Typing math
# ---------------------------

def char_match_count(typed: str, target: str) -> int:
    n = min(len(typed), len(target))
    good = 0
    for i in range(n):
        if typed[i] == target[i]:
            good += 1
    return good


def classify(target: str, typed: str) -> List[Verdict]:
    """One verdict per typed character, compared position by position."""
    verdicts: List[Verdict] = []
    for i, ch in enumerate(typed):
        if i >= len(target):
            verdicts.append(Verdict.EXTRA)
        elif ch == target[i]:
            verdicts.append(Verdict.CORRECT)
        else:
            verdicts.append(Verdict.INCORRECT)
    return verdicts


def cursor_index(typed: str) -> int:
    return len(typed)


def keystroke_correct(target: str, typed: str) -> bool:
    """Verdict for the most recently typed character of ``typed``."""
    if not typed:
        return False
    i = len(typed) - 1
    return i < len(target) and typed[i] == target[i]


def score_word(target: str, typed: str) -> WordScore:
    """
    Points for a submitted word. Untyped characters of the target count as
    incorrect, and the delimiter is one more character that goes to the
    correct side only for an exact match.
    """
    correct = char_match_count(typed, target)
    incorrect = len(typed) - correct
    incorrect += max(0, len(target) - len(typed))
    if typed == target:
        correct += 1
    else:
        incorrect += 1
    return WordScore(correct=correct, incorrect=incorrect)


def word_state(
    index: int, current_index: int, target: str, submitted: Optional[str] = None
) -> WordState:
    if index > current_index:
        return WordState.UNTYPED
    if index == current_index:
        return WordState.CURRENT
    if submitted == target:
        return WordState.COMPLETED_CORRECT
    return WordState.COMPLETED_INCORRECT
