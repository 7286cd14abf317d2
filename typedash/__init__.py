"""
typedash - timed typing practice in the terminal.

The engine (word source, keystroke scoring, session state machine and
metrics) has no UI dependency; ``typedash.app`` drives it with Textual.
"""

from .config import ConfigError, Settings, load_settings
from .metrics import TestStats, compute_stats
from .scoring import Verdict, WordState, classify, score_word
from .session import SessionSnapshot, SessionStatus, TypingSession
from .words import LINE_SIZE, SeedQueue, VocabularyPool, WordSource

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "Settings",
    "load_settings",
    "TestStats",
    "compute_stats",
    "Verdict",
    "WordState",
    "classify",
    "score_word",
    "SessionSnapshot",
    "SessionStatus",
    "TypingSession",
    "LINE_SIZE",
    "SeedQueue",
    "VocabularyPool",
    "WordSource",
]
