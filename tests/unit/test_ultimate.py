"""Unit tests: ultimate metrics rollup."""
import math

import pytest


def test_empty_journal_is_zeroed(settings):
    from src.journal.analytics.ultimate import compute_ultimate_metrics
    m = compute_ultimate_metrics([], settings)
    assert m.total_net_pnl == 0
    assert m.profit_factor == 0
    assert m.expectancy == 0
    assert m.trades_2r_to_3r.count == 0
    assert m.best_day_of_week.label == ""
    assert m.equity_at_start == m.equity_at_end == 10_000.0
    assert m.time_since_last_trade.best_gap_range == ""


def test_profitability(settings, journal):
    from src.journal.analytics.ultimate import compute_ultimate_metrics
    m = compute_ultimate_metrics(journal, settings)
    assert m.total_net_pnl == pytest.approx(200.0)
    assert m.gross_profit == pytest.approx(300.0)
    assert m.gross_loss == pytest.approx(100.0)
    assert (m.win_rate, m.loss_rate, m.break_even_rate) == pytest.approx((50.0, 25.0, 25.0))
    assert m.profit_factor == pytest.approx(3.0)
    # 0.5 * 2.5R - 0.25 * 1.6R
    assert m.expectancy == pytest.approx(0.85)
    assert m.average_win == pytest.approx(150.0)
    assert m.average_loss == pytest.approx(100.0)
    assert m.largest_win == pytest.approx(250.0)
    assert m.largest_loss == pytest.approx(100.0)
    assert m.roi == pytest.approx(2.0)
    assert m.break_even_point == 0.0


def test_rr_bands_are_exclusive(settings, journal):
    from src.journal.analytics.ultimate import compute_ultimate_metrics
    m = compute_ultimate_metrics(journal, settings)
    bands = [m.trades_below_1r, m.trades_1r_to_2r, m.trades_2r_to_3r, m.trades_above_3r]
    assert [b.count for b in bands] == [0, 1, 1, 0]
    assert sum(b.percentage for b in bands) == pytest.approx(100.0)


@pytest.mark.parametrize("rr, band", [(0.5, "<1R"), (1.0, "1-2R"), (1.99, "1-2R"), (2.0, "2-3R"), (3.0, ">=3R"), (7.2, ">=3R")])
def test_rr_band_edges(rr, band):
    from src.journal.analytics.ultimate import rr_band
    assert rr_band(rr) == band


def test_risk(settings, journal):
    from src.journal.analytics.ultimate import compute_ultimate_metrics
    m = compute_ultimate_metrics(journal, settings)
    assert m.max_drawdown_amount == pytest.approx(100.0)
    assert m.average_risk_per_trade == pytest.approx(50.0)
    assert m.average_rr_overall == pytest.approx(2.05)
    assert m.average_rr_wins == pytest.approx(2.5)
    assert m.average_rr_losses == pytest.approx(1.6)
    assert m.trades_without_sl.count == 2
    assert m.trades_without_sl.percentage == pytest.approx(50.0)
    assert m.trades_without_tp.count == 3
    assert m.average_sl_distance_pips == pytest.approx(10.0)
    assert m.average_tp_distance_pips == pytest.approx(16.0)


def test_time_based(settings, journal):
    from src.journal.analytics.ultimate import compute_ultimate_metrics
    m = compute_ultimate_metrics(journal, settings)
    assert m.best_day_of_week.label == "Monday"
    assert m.worst_day_of_week.label == "Tuesday"
    assert m.worst_day_of_week.value == pytest.approx(-25.0)
    assert m.most_profitable_month.label == "Jan 2024"
    assert m.most_profitable_month.value == pytest.approx(200.0)
    assert m.most_profitable_year.label == "2024"
    # 60, 30, 120 and 15 minutes
    assert m.average_hold_time_overall == pytest.approx(56.25)
    assert m.average_hold_time_wins == pytest.approx(90.0)
    assert m.average_hold_time_losses == pytest.approx(30.0)
    assert m.shortest_hold_time == 15
    assert m.longest_hold_time == 120


def test_instruments_and_strategies(settings, journal):
    from src.journal.analytics.ultimate import compute_ultimate_metrics
    m = compute_ultimate_metrics(journal, settings)
    assert m.most_profitable_pair.label == "EURUSD"
    assert m.least_profitable_pair.label == "GBPUSD"
    assert m.most_traded_pair.label == "EURUSD"
    assert m.most_traded_pair.value == 3
    assert m.least_traded_pair.label == "GBPUSD"
    assert m.highest_win_rate_pair.label == "GBPUSD"
    assert m.most_used_strategy.label == "Breakout"
    assert m.most_profitable_strategy.label == "Breakout"
    assert m.highest_win_rate_strategy.label == "Pullback"
    assert m.most_used_setup_tag.label == "Trend"
    assert m.most_used_setup_tag.value == 2
    assert m.a_plus_setup_win_rate == pytest.approx(100.0)
    assert m.a_plus_setup_total_pnl == pytest.approx(250.0)


def test_ties_go_to_first_group(settings, make_raw):
    from src.journal.analytics.ultimate import compute_ultimate_metrics
    from src.journal.execution.ledger import recalculate_trades
    trades = recalculate_trades([make_raw(10, pair="GBPUSD"), make_raw(10, pair="EURUSD")], settings)
    m = compute_ultimate_metrics(trades, settings)
    assert m.most_profitable_pair.label == "GBPUSD"
    assert m.least_profitable_pair.label == "GBPUSD"


def test_behavioral(settings, journal):
    from src.journal.analytics.ultimate import compute_ultimate_metrics
    m = compute_ultimate_metrics(journal, settings)
    assert m.max_winning_streak == 1
    assert m.max_losing_streak == 1
    assert m.trades_high_emotion.count == 1
    assert m.trades_low_emotion.percentage == pytest.approx(25.0)
    assert m.avg_pnl_high_emotion == pytest.approx(250.0)
    assert m.avg_pnl_low_emotion == pytest.approx(-100.0)


def test_equity_dynamics_and_recovery(settings, make_raw):
    from src.journal.analytics.ultimate import compute_ultimate_metrics
    from src.journal.execution.ledger import recalculate_trades
    trades = recalculate_trades([
        make_raw(10, date="2024-03-01"),
        make_raw(-30, date="2024-03-04"),
        make_raw(50, date="2024-03-08"),
    ], settings)
    m = compute_ultimate_metrics(trades, settings)
    assert m.equity_at_start == 10_000.0
    assert m.equity_at_end == pytest.approx(10_300.0)
    assert m.number_of_drawdowns == 1
    assert m.time_to_recover_max_drawdown == 4
    assert m.break_even_point == 0.0


def test_losing_journal(settings, make_raw):
    from src.journal.analytics.ultimate import compute_ultimate_metrics
    from src.journal.execution.ledger import recalculate_trades
    trades = recalculate_trades([make_raw(-10, sl_pips=10), make_raw(-10, sl_pips=10)], settings)
    m = compute_ultimate_metrics(trades, settings)
    assert m.break_even_point == pytest.approx(200.0)
    assert m.max_losing_streak == 2
    assert m.total_losing_streaks == 1
    assert m.profit_factor == 0.0
    assert m.expectancy == 0.0


def test_profit_factor_is_only_infinite_field(settings, make_raw):
    from dataclasses import fields, is_dataclass
    from src.journal.analytics.ultimate import compute_ultimate_metrics
    from src.journal.execution.ledger import recalculate_trades
    trades = recalculate_trades([make_raw(10), make_raw(20, sl_pips=10)], settings)
    m = compute_ultimate_metrics(trades, settings)
    assert m.profit_factor == math.inf

    def walk(obj, path=""):
        for f in fields(obj):
            v = getattr(obj, f.name)
            if is_dataclass(v):
                yield from walk(v, f"{path}{f.name}.")
            elif isinstance(v, float):
                yield f"{path}{f.name}", v

    bad = [name for name, v in walk(m) if not math.isfinite(v) and name != "profit_factor"]
    assert bad == []


def test_unusable_pip_size_is_skipped_in_distance_averages(settings, make_raw):
    from dataclasses import replace
    from src.journal.analytics.ultimate import compute_ultimate_metrics
    from src.journal.execution.ledger import recalculate_trades
    good = recalculate_trades([make_raw(20, sl_pips=10, tp_pips=20)], settings)[0]
    bad = replace(good, id="bad", pip_size=float("nan"))
    m = compute_ultimate_metrics([good, bad], settings)
    assert m.average_sl_distance_pips == pytest.approx(10.0)
    assert m.average_tp_distance_pips == pytest.approx(20.0)
    assert m.trades_without_sl.count == 0

    zero = replace(good, id="zero", pip_size=0.0)
    m = compute_ultimate_metrics([zero], settings)
    assert m.average_sl_distance_pips == 0.0
    assert m.average_tp_distance_pips == 0.0
    assert m.trades_without_sl.count == 0


def test_missing_emotion_rating_reads_as_neutral(settings, make_raw):
    from dataclasses import replace
    from src.journal.analytics.ultimate import compute_ultimate_metrics
    from src.journal.execution.ledger import recalculate_trades
    trade = replace(recalculate_trades([make_raw(10)], settings)[0], emotion_rating=None)
    m = compute_ultimate_metrics([trade], settings)
    assert m.trades_high_emotion.count == 0
    assert m.trades_low_emotion.count == 0


def test_to_dict_writes_infinite_profit_factor_as_string(settings, make_raw):
    import json
    from src.journal.analytics.ultimate import compute_ultimate_metrics
    from src.journal.execution.ledger import recalculate_trades
    m = compute_ultimate_metrics(recalculate_trades([make_raw(10)], settings), settings)
    d = m.to_dict()
    assert d["profit_factor"] == "inf"
    assert m.profit_factor == math.inf
    json.dumps(d, allow_nan=False)
