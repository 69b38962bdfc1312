"""Unit tests: streak counting, active streak detection, streak analytics."""
from datetime import date

import pytest

W, L, B = "Win", "Loss", "Break-even"


def test_count_streaks():
    from src.journal.analytics.streaks import count_streaks
    c = count_streaks([W, W, L, W, W, W, B, L, L])
    assert c.max_winning == 3
    assert c.total_winning == 2
    assert c.max_losing == 2
    assert c.total_losing == 1


def test_single_results_are_not_streaks():
    from src.journal.analytics.streaks import count_streaks
    c = count_streaks([W, L, W, L])
    assert (c.total_winning, c.total_losing) == (0, 0)
    assert (c.max_winning, c.max_losing) == (1, 1)


def test_empty():
    from src.journal.analytics.streaks import StreakCounts, count_streaks
    assert count_streaks([]) == StreakCounts()


def _trades(settings, make_raw, results):
    from src.journal.execution.ledger import recalculate_trades
    pips = {W: 10, L: -10, B: 0}
    return recalculate_trades([make_raw(pips[r]) for r in results], settings)


def test_detect_active_losing_streak(settings, make_raw):
    from src.journal.analytics.streaks import detect_streaks
    s = detect_streaks(_trades(settings, make_raw, [W, W, L, L, L]))
    assert s is not None
    assert (s.type, s.count, s.is_active) == ("losing", 3, True)


def test_detect_streak_capped_at_window(settings, make_raw):
    from src.journal.analytics.streaks import detect_streaks
    s = detect_streaks(_trades(settings, make_raw, [W] * 12))
    assert s.type == "winning"
    assert s.count == 10


def test_no_active_streak(settings, make_raw):
    from src.journal.analytics.streaks import detect_streaks
    assert detect_streaks(_trades(settings, make_raw, [W, W])) is None
    assert detect_streaks(_trades(settings, make_raw, [L, W, W])) is None
    assert detect_streaks(_trades(settings, make_raw, [W, W, W, B])) is None
    assert detect_streaks(_trades(settings, make_raw, [L, L, L, B, B, B])) is None


def test_streak_analytics_timeframe(settings, make_raw):
    from src.journal.analytics.streaks import get_streak_analytics
    from src.journal.execution.ledger import recalculate_trades
    trades = recalculate_trades([
        make_raw(10, date="2024-01-15"),
        make_raw(20, date="2024-01-16"),
        make_raw(-5, date="2024-01-17"),
        make_raw(30, date="2024-02-01"),
    ], settings)
    a = get_streak_analytics(trades, "month", now=date(2024, 1, 20))
    assert a.max_win_streak == 2
    assert a.total_win_streaks == 1
    assert a.avg_win_profit == pytest.approx(150.0)
    assert a.avg_loss_amount == pytest.approx(-50.0)
    assert get_streak_analytics(trades, "day", now=date(2023, 1, 1)) is None
