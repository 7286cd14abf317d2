from typedash.metrics import compute_stats, live_accuracy, live_wpm, round_half_up


def test_no_keystrokes():
    stats = compute_stats(0, 0, 60)
    assert stats.wpm == 0
    assert stats.accuracy == 100
    assert stats.total_chars == 0


def test_perfect_minute():
    stats = compute_stats(250, 0, 60)
    assert (stats.wpm, stats.accuracy) == (50, 100)


def test_mixed_minute():
    stats = compute_stats(180, 20, 60)
    assert stats.wpm == 36
    assert stats.accuracy == 90
    assert stats.total_chars == 200
    assert stats.as_dict() == {
        "wpm": 36,
        "accuracy": 90,
        "correctChars": 180,
        "incorrectChars": 20,
        "totalChars": 200,
    }


def test_zero_time_base():
    assert compute_stats(100, 0, 0).wpm == 0
    assert live_wpm(100, 0) == 0


def test_rounds_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(0.49) == 0
    # 1 correct of 8 total -> 12.5% -> 13
    assert live_accuracy(1, 7) == 13
    # 15 chars in 40s -> 4.5 wpm -> 5
    assert live_wpm(15, 40) == 5


def test_short_session():
    # 50 correct in 15s -> 40 wpm
    stats = compute_stats(50, 10, 15)
    assert stats.wpm == 40
    assert stats.accuracy == 83
    assert stats.elapsed_seconds == 15
