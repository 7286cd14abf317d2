import random

import pytest

from typedash.config import ConfigError
from typedash.scoring import Verdict, WordState
from typedash.session import SessionStatus, TypingSession
from typedash.words import LINE_SIZE, VocabularyPool

SEED = "the quick brown fox jumps over the lazy dog and then some more words to type"


def make_session(text=SEED, duration=60, **kwargs):
    kwargs.setdefault("vocabulary", VocabularyPool(["filler"]))
    kwargs.setdefault("rng", random.Random(0))
    return TypingSession(text, duration, **kwargs)


def type_word(session, typed):
    for i in range(1, len(typed) + 1):
        session.on_input_change(typed[:i])
    return session.on_submit_word()


def test_starts_idle_until_first_input():
    session = make_session()
    assert session.status is SessionStatus.IDLE
    session.on_input_change("")
    assert session.status is SessionStatus.IDLE
    session.on_timer_tick()
    assert session.remaining_seconds == 60
    session.on_input_change("t")
    assert session.status is SessionStatus.RUNNING
    assert session.started


def test_rejects_non_positive_duration():
    with pytest.raises(ConfigError):
        make_session(duration=0)


def test_perfect_word_adds_length_plus_one():
    session = make_session()
    assert type_word(session, "the")
    assert (session.correct_chars, session.incorrect_chars) == (4, 0)
    assert session.current_word_index == 1
    assert session.current_input == ""
    assert session.history == ["the"]


def test_partial_and_extra_words():
    session = make_session()
    type_word(session, "th")       # 2 correct, 1 missed + delimiter
    type_word(session, "quickk")   # 5 correct, 1 extra + delimiter
    assert session.correct_chars == 7
    assert session.incorrect_chars == 2 + 2


def test_submit_requires_input():
    session = make_session()
    assert not session.on_submit_word()
    assert session.current_word_index == 0
    assert (session.correct_chars, session.incorrect_chars) == (0, 0)


def test_delimiter_in_input_is_not_stored():
    session = make_session()
    session.on_input_change("the")
    assert session.on_input_change("the ") is None
    assert session.current_input == "the"


def test_counters_never_decrease():
    session = make_session()
    last = (0, 0)
    for typed in ["the", "quack", "b", "foxes", "jumps", "x", "the"]:
        type_word(session, typed)
        now = (session.correct_chars, session.incorrect_chars)
        assert now[0] >= last[0] and now[1] >= last[1]
        last = now


def test_line_rollover_resets_index_and_history():
    session = make_session()
    seed_words = SEED.split()
    first_line = list(session.line)
    assert first_line == seed_words[:LINE_SIZE]
    for word in first_line:
        type_word(session, word)
    assert session.current_word_index == 0
    assert session.history == []
    assert session.line[: len(seed_words) - LINE_SIZE] == seed_words[LINE_SIZE:]
    assert session.line[len(seed_words) - LINE_SIZE:] == ["filler"] * (2 * LINE_SIZE - len(seed_words))
    # counters carry over the line boundary
    assert session.correct_chars == sum(len(w) + 1 for w in first_line)
    assert session.incorrect_chars == 0


def test_keystroke_listener_gets_verdicts():
    session = make_session()
    seen = []
    session.subscribe(lambda ch, ok: seen.append((ch, ok)))
    assert session.on_input_change("t") is True
    assert session.on_input_change("tx") is False
    assert session.on_input_change("t") is None  # backspace
    assert session.on_input_change("th") is True
    assert seen == [("t", True), ("x", False), ("h", True)]


def test_unsubscribe():
    session = make_session()
    seen = []
    listener = lambda ch, ok: seen.append(ch)  # noqa: E731
    session.subscribe(listener)
    session.unsubscribe(listener)
    session.on_input_change("t")
    assert seen == []


def test_timer_counts_down_and_ends_once():
    completed = []
    session = make_session(duration=3, on_complete=completed.append)
    type_word(session, "the")
    session.on_input_change("qu")
    for _ in range(5):
        session.on_timer_tick()
    assert session.remaining_seconds == 0
    assert session.status is SessionStatus.ENDED
    assert len(completed) == 1
    stats = completed[0]
    # the half-typed "qu" is not scored
    assert (stats.correct_chars, stats.incorrect_chars) == (4, 0)
    assert stats.elapsed_seconds == 3
    assert stats.wpm == 16  # (4 / 5) / (3 / 60)


def test_end_test_is_idempotent():
    completed = []
    session = make_session(duration=2, on_complete=completed.append)
    type_word(session, "the")
    session.on_timer_tick()
    session.on_timer_tick()
    first = session.stats
    assert first is not None
    again = session.end_test()
    assert again is first
    assert len(completed) == 1


def test_events_after_end_are_ignored():
    session = make_session(duration=1)
    type_word(session, "the")
    session.on_timer_tick()
    stats = session.stats
    assert session.on_input_change("q") is None
    assert not session.on_submit_word()
    session.on_timer_tick()
    assert session.correct_chars == 4
    assert session.stats is stats


def test_explicit_end_uses_elapsed_time():
    session = make_session(duration=60)
    for word in ["the", "quick", "brown", "fox", "jumps"]:
        type_word(session, word)
    for _ in range(6):
        session.on_timer_tick()
    stats = session.end_test()
    # 21 letters plus 5 delimiters in 6 seconds
    assert stats.elapsed_seconds == 6
    assert stats.wpm == 52
    assert stats.accuracy == 100


def test_end_before_start_reports_zero():
    session = make_session()
    stats = session.end_test()
    assert (stats.wpm, stats.accuracy, stats.total_chars) == (0, 100, 0)


def test_restart_discards_state_without_finalizing():
    completed = []
    session = make_session(duration=5, on_complete=completed.append)
    type_word(session, "the")
    session.on_timer_tick()
    old_generation = session.generation
    session.restart()
    assert session.generation == old_generation + 1
    assert session.status is SessionStatus.IDLE
    assert (session.correct_chars, session.incorrect_chars) == (0, 0)
    assert session.remaining_seconds == 5
    assert session.current_word_index == 0
    assert session.line[:3] == ["the", "quick", "brown"]
    assert completed == []


def test_stale_tick_is_dropped_after_restart():
    completed = []
    session = make_session(duration=1, on_complete=completed.append)
    session.on_input_change("t")
    stale = session.generation
    session.restart()
    session.on_input_change("t")
    session.on_timer_tick(stale)
    assert session.remaining_seconds == 1
    assert completed == []
    session.on_timer_tick(session.generation)
    assert len(completed) == 1


def test_live_stats():
    session = make_session(duration=60)
    assert session.wpm() == 0
    assert session.accuracy() == 100
    type_word(session, "the")
    type_word(session, "quick")
    for _ in range(3):
        session.on_timer_tick()
    # 10 correct chars in 3 seconds
    assert session.wpm() == 40
    type_word(session, "brwn")
    # "brwn": 2 correct, 2 wrong, 1 missed, delimiter wrong
    assert (session.correct_chars, session.incorrect_chars) == (12, 4)
    assert session.accuracy() == 75


def test_snapshot():
    session = make_session(image="fox.jpg")
    type_word(session, "the")
    type_word(session, "quack")
    session.on_input_change("brownn")
    snap = session.snapshot()
    assert snap.current_word_index == 2
    assert snap.current_word == "brown"
    assert snap.history == ("the", "quack")
    assert snap.word_states[:3] == (
        WordState.COMPLETED_CORRECT,
        WordState.COMPLETED_INCORRECT,
        WordState.CURRENT,
    )
    assert snap.word_states[3] is WordState.UNTYPED
    assert snap.verdicts[-1] is Verdict.EXTRA
    assert snap.image == "fox.jpg"
    assert snap.status is SessionStatus.RUNNING
    assert len(snap.line) == LINE_SIZE
