"""Unit tests: gap-to-outcome correlation and daily performance decay."""
import pytest


def test_gap_buckets(settings, journal):
    from src.journal.analytics.timing import MEDIUM_GAP, gap_correlation
    # Only t2 -> t3 (60 minutes apart) is within the 12h window
    c = gap_correlation(journal)
    assert c.avg_time_between_trades == 60
    assert c.medium_gap.trade_count == 1
    assert c.medium_gap.avg_pnl == pytest.approx(50.0)
    assert c.medium_gap.win_rate == 100.0
    assert c.short_gap.trade_count == 0
    assert c.best_gap_range == c.worst_gap_range == MEDIUM_GAP


def test_gap_bucket_boundaries(settings, make_raw):
    from src.journal.analytics.timing import LONG_GAP, SHORT_GAP, gap_correlation
    from src.journal.execution.ledger import recalculate_trades
    trades = recalculate_trades([
        make_raw(10, entry_time="08:00"),
        make_raw(-5, entry_time="08:29"),
        make_raw(20, entry_time="12:29"),
        make_raw(5, entry_time="08:00", date="2024-01-16"),
    ], settings)
    c = gap_correlation(trades)
    assert c.short_gap.trade_count == 1
    assert c.long_gap.trade_count == 1
    assert c.medium_gap.trade_count == 0
    assert c.best_gap_range == LONG_GAP
    assert c.worst_gap_range == SHORT_GAP
    assert c.avg_time_between_trades == pytest.approx((29 + 240) / 2)


def test_out_of_order_gaps_are_ignored(settings, make_raw):
    from src.journal.analytics.timing import gap_correlation
    from src.journal.execution.ledger import recalculate_trades
    trades = recalculate_trades([make_raw(10, entry_time="12:00"), make_raw(10, entry_time="09:00")], settings)
    c = gap_correlation(trades)
    assert c.avg_time_between_trades == 0
    assert c.best_gap_range == ""


def test_daily_decay_positions(journal):
    from src.journal.analytics.timing import daily_performance_decay
    d = daily_performance_decay(journal)
    assert [p.position for p in d.trades_by_position] == [1, 2]
    first = d.trades_by_position[0]
    assert first.trade_count == 3
    assert first.avg_pnl == pytest.approx(50.0)
    assert d.max_trades_per_day == 2
    assert d.optimal_daily_limit == 2


def test_daily_decay_limit_stops_before_drop(settings, make_raw):
    from src.journal.analytics.timing import daily_performance_decay
    from src.journal.execution.ledger import recalculate_trades
    raws = []
    for day in range(1, 6):
        d = f"2024-02-0{day}"
        raws.append(make_raw(20, date=d, entry_time="09:00"))
        raws.append(make_raw(-10, date=d, entry_time="11:00"))
    raws.append(make_raw(5, date="2024-02-06", entry_time="09:00"))
    d = daily_performance_decay(recalculate_trades(raws, settings))
    assert d.max_trades_per_day == 2
    assert d.trades_by_position[1].trade_count == 5
    assert d.optimal_daily_limit == 1
    assert d.worst_trade_position == 2


def test_daily_decay_needs_enough_samples(settings, make_raw):
    from src.journal.analytics.timing import daily_performance_decay
    from src.journal.execution.ledger import recalculate_trades
    raws = [
        make_raw(20, entry_time="09:00"),
        make_raw(-10, entry_time="10:00"),
        make_raw(-10, entry_time="11:00"),
    ]
    d = daily_performance_decay(recalculate_trades(raws, settings))
    assert d.optimal_daily_limit == 3
