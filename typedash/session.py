from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .config import ConfigError
from .metrics import TestStats, compute_stats, live_accuracy, live_wpm
from .scoring import (
    Verdict,
    WordState,
    classify,
    keystroke_correct,
    score_word,
    word_state,
)
from .words import DELIMITER, LINE_SIZE, VocabularyPool, WordSource

logger = logging.getLogger(__name__)

KeystrokeListener = Callable[[str, bool], None]
CompletionCallback = Callable[[TestStats], None]


class SessionStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    ENDED = "ended"


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a session, taken after an event."""

    line: Tuple[str, ...]
    current_word_index: int
    current_input: str
    history: Tuple[str, ...]
    remaining_seconds: int
    wpm: int
    accuracy: int
    status: SessionStatus
    correct_chars: int
    incorrect_chars: int
    word_states: Tuple[WordState, ...]
    verdicts: Tuple[Verdict, ...]
    image: Optional[str] = None

    @property
    def current_word(self) -> str:
        return self.line[self.current_word_index]


class TypingSession:
    """
    One timed typing test.

    Events are handled one at a time: ``on_input_change`` for every edit of
    the input box, ``on_submit_word`` for the delimiter key, ``on_timer_tick``
    once per second while running, and ``restart`` to throw everything away.
    The session ends when the countdown reaches zero or ``end_test`` is
    called; final stats are produced exactly once.
    """

    def __init__(
        self,
        seed_text: str,
        duration_sec: int,
        vocabulary: Optional[VocabularyPool] = None,
        line_size: int = LINE_SIZE,
        rng: Optional[random.Random] = None,
        image: Optional[str] = None,
        on_complete: Optional[CompletionCallback] = None,
    ) -> None:
        if duration_sec <= 0:
            raise ConfigError(f"duration must be a positive number of seconds, got {duration_sec}")
        self.seed_text = seed_text
        self.duration_sec = int(duration_sec)
        self.vocabulary = vocabulary
        self.line_size = line_size
        self.rng = rng if rng is not None else random.Random()
        self.image = image
        self.on_complete = on_complete
        self.generation = 0
        self._listeners: List[KeystrokeListener] = []
        self._reset()

    def _reset(self) -> None:
        self.source = WordSource(self.seed_text, self.vocabulary, self.line_size, self.rng)
        self.line: List[str] = self.source.next_line()
        self.current_word_index = 0
        self.current_input = ""
        self.history: List[str] = []
        self.correct_chars = 0
        self.incorrect_chars = 0
        self.remaining_seconds = self.duration_sec
        self.started = False
        self.status = SessionStatus.IDLE
        self._stats: Optional[TestStats] = None

    # ---------------------------
    # Listeners
    # ---------------------------

    def subscribe(self, listener: KeystrokeListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: KeystrokeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, char: str, correct: bool) -> None:
        for listener in list(self._listeners):
            listener(char, correct)

    # ---------------------------
    # Events
    # ---------------------------

    def on_input_change(self, value: str) -> Optional[bool]:
        """
        Replace the in-progress input. Returns the verdict of the newly typed
        character, or None when nothing was appended (deletion, no-op, ended).
        """
        if self.status is SessionStatus.ENDED:
            return None
        if value.endswith(DELIMITER):
            # the delimiter goes through on_submit_word
            return None
        if not self.started and value:
            self.started = True
            self.status = SessionStatus.RUNNING
            logger.info("session %d started (%ds)", self.generation, self.duration_sec)

        previous = self.current_input
        self.current_input = value
        if len(value) <= len(previous) or not value:
            return None
        correct = keystroke_correct(self.current_word, value)
        self._notify(value[-1], correct)
        return correct

    def on_submit_word(self) -> bool:
        """Score the current input against the current word and advance."""
        if self.status is SessionStatus.ENDED or not self.current_input:
            return False
        target = self.current_word
        typed = self.current_input
        score = score_word(target, typed)
        self.correct_chars += score.correct
        self.incorrect_chars += score.incorrect

        if self.current_word_index == len(self.line) - 1:
            self.line = self.source.next_line()
            self.current_word_index = 0
            self.history = []
            logger.debug("line finished, %d seed words left", self.source.queue.remaining)
        else:
            self.history.append(typed)
            self.current_word_index += 1
        self.current_input = ""
        return True

    def on_timer_tick(self, generation: Optional[int] = None) -> None:
        if generation is not None and generation != self.generation:
            logger.debug("dropping stale tick from session %d", generation)
            return
        if self.status is not SessionStatus.RUNNING:
            return
        self.remaining_seconds = max(0, self.remaining_seconds - 1)
        if self.remaining_seconds == 0:
            self.end_test()

    def end_test(self) -> TestStats:
        """Finalize once; later calls hand back the same stats untouched."""
        if self._stats is not None:
            return self._stats
        self.status = SessionStatus.ENDED
        self._stats = compute_stats(
            self.correct_chars, self.incorrect_chars, self.elapsed_seconds
        )
        logger.info(
            "session %d ended: %d wpm, %d%% accuracy",
            self.generation,
            self._stats.wpm,
            self._stats.accuracy,
        )
        if self.on_complete is not None:
            self.on_complete(self._stats)
        return self._stats

    def restart(self) -> None:
        self.generation += 1
        logger.info("session restarted (generation %d)", self.generation)
        self._reset()

    # ---------------------------
    # Derived state
    # ---------------------------

    @property
    def current_word(self) -> str:
        return self.line[self.current_word_index]

    @property
    def elapsed_seconds(self) -> int:
        return self.duration_sec - self.remaining_seconds

    @property
    def stats(self) -> Optional[TestStats]:
        return self._stats

    @property
    def finished(self) -> bool:
        return self.status is SessionStatus.ENDED

    def wpm(self) -> int:
        if not self.started:
            return 0
        return live_wpm(self.correct_chars, self.elapsed_seconds)

    def accuracy(self) -> int:
        return live_accuracy(self.correct_chars, self.incorrect_chars)

    def word_states(self) -> List[WordState]:
        states = []
        for i, word in enumerate(self.line):
            submitted = self.history[i] if i < len(self.history) else None
            states.append(word_state(i, self.current_word_index, word, submitted))
        return states

    def verdicts(self) -> List[Verdict]:
        return classify(self.current_word, self.current_input)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            line=tuple(self.line),
            current_word_index=self.current_word_index,
            current_input=self.current_input,
            history=tuple(self.history),
            remaining_seconds=self.remaining_seconds,
            wpm=self.wpm(),
            accuracy=self.accuracy(),
            status=self.status,
            correct_chars=self.correct_chars,
            incorrect_chars=self.incorrect_chars,
            word_states=tuple(self.word_states()),
            verdicts=tuple(self.verdicts()),
            image=self.image,
        )
