"""
Ultimate metrics: the full statistical rollup of a journal.

Profitability, risk, time-based, instrument/strategy, behavioral, equity
dynamics and timing correlations. Built on a safe-coerced trade DataFrame;
an empty list returns a zeroed struct. Argmax/argmin ties go to the group
seen first. Profit factor is the only field that may be infinite.
"""
import logging
from dataclasses import asdict, dataclass, field
from typing import Sequence

import pandas as pd

from src.journal.analytics.drawdown import drawdown_stats
from src.journal.analytics.frame import group_stats, trades_to_frame
from src.journal.analytics.metrics import profit_factor
from src.journal.analytics.streaks import count_streaks
from src.journal.analytics.timing import (
    DailyPerformanceDecay,
    TimingCorrelation,
    daily_performance_decay,
    gap_correlation,
)
from src.journal.data.periods import month_label
from src.journal.data.schema import AppSettings, Trade
from src.journal.utils.formatting import json_safe, safe_number

logger = logging.getLogger(__name__)

HIGH_EMOTION = 8
LOW_EMOTION = 3

# Exclusive R:R bands: [lower, upper)
RR_BANDS = {
    "<1R": (float("-inf"), 1.0),
    "1-2R": (1.0, 2.0),
    "2-3R": (2.0, 3.0),
    ">=3R": (3.0, float("inf")),
}


@dataclass
class CountShare:
    count: int = 0
    percentage: float = 0.0


@dataclass
class Ranked:
    """A winning group label and its value (P&L, win rate, count...)."""
    label: str = ""
    value: float = 0.0


@dataclass
class UltimateMetrics:
    # Profitability & efficiency
    total_net_pnl: float = 0.0
    gross_profit: float = 0.0
    gross_loss: float = 0.0
    win_rate: float = 0.0
    loss_rate: float = 0.0
    break_even_rate: float = 0.0
    profit_factor: float = 0.0
    expectancy: float = 0.0
    average_win: float = 0.0
    average_loss: float = 0.0
    largest_win: float = 0.0
    largest_loss: float = 0.0
    roi: float = 0.0
    trades_below_1r: CountShare = field(default_factory=CountShare)
    trades_1r_to_2r: CountShare = field(default_factory=CountShare)
    trades_2r_to_3r: CountShare = field(default_factory=CountShare)
    trades_above_3r: CountShare = field(default_factory=CountShare)
    break_even_point: float = 0.0

    # Risk management
    max_drawdown_amount: float = 0.0
    max_drawdown_percentage: float = 0.0
    average_risk_per_trade: float = 0.0
    average_rr_overall: float = 0.0
    average_rr_wins: float = 0.0
    average_rr_losses: float = 0.0
    trades_without_sl: CountShare = field(default_factory=CountShare)
    trades_without_tp: CountShare = field(default_factory=CountShare)
    average_sl_distance_pips: float = 0.0
    average_tp_distance_pips: float = 0.0

    # Time-based
    best_day_of_week: Ranked = field(default_factory=Ranked)
    worst_day_of_week: Ranked = field(default_factory=Ranked)
    most_profitable_month: Ranked = field(default_factory=Ranked)
    least_profitable_month: Ranked = field(default_factory=Ranked)
    most_profitable_year: Ranked = field(default_factory=Ranked)
    least_profitable_year: Ranked = field(default_factory=Ranked)
    average_hold_time_overall: float = 0.0
    average_hold_time_wins: float = 0.0
    average_hold_time_losses: float = 0.0
    shortest_hold_time: float = 0.0
    longest_hold_time: float = 0.0

    # Instrument & strategy
    most_profitable_pair: Ranked = field(default_factory=Ranked)
    least_profitable_pair: Ranked = field(default_factory=Ranked)
    highest_win_rate_pair: Ranked = field(default_factory=Ranked)
    lowest_win_rate_pair: Ranked = field(default_factory=Ranked)
    most_traded_pair: Ranked = field(default_factory=Ranked)
    least_traded_pair: Ranked = field(default_factory=Ranked)
    most_profitable_strategy: Ranked = field(default_factory=Ranked)
    most_used_strategy: Ranked = field(default_factory=Ranked)
    highest_win_rate_strategy: Ranked = field(default_factory=Ranked)
    most_used_setup_tag: Ranked = field(default_factory=Ranked)
    most_profitable_setup_tag: Ranked = field(default_factory=Ranked)
    highest_win_rate_setup_tag: Ranked = field(default_factory=Ranked)
    a_plus_setup_win_rate: float = 0.0
    a_plus_setup_total_pnl: float = 0.0

    # Behavioral
    max_winning_streak: int = 0
    max_losing_streak: int = 0
    total_winning_streaks: int = 0
    total_losing_streaks: int = 0
    avg_pnl_high_emotion: float = 0.0
    avg_pnl_low_emotion: float = 0.0
    trades_high_emotion: CountShare = field(default_factory=CountShare)
    trades_low_emotion: CountShare = field(default_factory=CountShare)

    # Equity dynamics
    equity_at_start: float = 0.0
    equity_at_end: float = 0.0
    time_to_recover_max_drawdown: int = 0
    number_of_drawdowns: int = 0

    # Timing correlations
    time_since_last_trade: TimingCorrelation = field(default_factory=TimingCorrelation)
    daily_performance_decay: DailyPerformanceDecay = field(default_factory=DailyPerformanceDecay)

    def to_dict(self) -> dict:
        d = asdict(self)
        d["profit_factor"] = json_safe(d["profit_factor"])
        return d


def rr_band(rr: float) -> str:
    """Name of the single band containing rr."""
    for name, (lo, hi) in RR_BANDS.items():
        if lo <= rr < hi:
            return name
    return ">=3R"


def compute_ultimate_metrics(trades: Sequence[Trade], settings: AppSettings) -> UltimateMetrics:
    capital = safe_number(settings.starting_capital)
    if not trades:
        return UltimateMetrics(equity_at_start=capital, equity_at_end=capital)

    df = trades_to_frame(trades)
    m = UltimateMetrics(equity_at_start=capital)
    _profitability(m, df, capital)
    _risk(m, df)
    _time_based(m, df)
    _instruments(m, df)
    _behavioral(m, df)
    _equity_dynamics(m, trades, capital)
    m.time_since_last_trade = gap_correlation(trades)
    m.daily_performance_decay = daily_performance_decay(trades)
    logger.debug("Ultimate metrics over %d trades: net=%.2f pf=%s", len(trades), m.total_net_pnl, m.profit_factor)
    return m


def _share(count: int, total: int) -> CountShare:
    return CountShare(count=int(count), percentage=(count / total * 100.0) if total else 0.0)


def _mean(series: pd.Series) -> float:
    return safe_number(series.mean()) if len(series) else 0.0


def _top(stats: pd.DataFrame, column: str, largest: bool = True) -> Ranked:
    if stats.empty:
        return Ranked()
    label = stats[column].idxmax() if largest else stats[column].idxmin()
    return Ranked(label=str(label), value=safe_number(stats.loc[label, column]))


def _profitability(m: UltimateMetrics, df: pd.DataFrame, capital: float) -> None:
    n = len(df)
    wins = df[df["is_win"]]
    losses = df[df["is_loss"]]
    valid = df[df["valid_rr"]]

    m.total_net_pnl = safe_number(df["pnl"].sum())
    m.gross_profit = safe_number(wins["pnl"].sum())
    m.gross_loss = abs(safe_number(losses["pnl"].sum()))
    m.win_rate = len(wins) / n * 100.0
    m.loss_rate = len(losses) / n * 100.0
    m.break_even_rate = (n - len(wins) - len(losses)) / n * 100.0
    m.profit_factor = profit_factor(m.gross_profit, m.gross_loss)

    if len(valid):
        avg_win_r = _mean(valid.loc[valid["is_win"], "rr_ratio"])
        avg_loss_r = abs(_mean(valid.loc[valid["is_loss"], "rr_ratio"]))
        m.expectancy = (m.win_rate / 100.0) * avg_win_r - (m.loss_rate / 100.0) * avg_loss_r

    m.average_win = m.gross_profit / len(wins) if len(wins) else 0.0
    m.average_loss = m.gross_loss / len(losses) if len(losses) else 0.0
    m.largest_win = safe_number(wins["pnl"].max()) if len(wins) else 0.0
    m.largest_loss = abs(safe_number(losses["pnl"].min())) if len(losses) else 0.0
    m.roi = m.total_net_pnl / capital * 100.0 if capital > 0 else 0.0

    bands = valid["rr_ratio"].map(rr_band).value_counts()
    total_valid = len(valid)
    m.trades_below_1r = _share(bands.get("<1R", 0), total_valid)
    m.trades_1r_to_2r = _share(bands.get("1-2R", 0), total_valid)
    m.trades_2r_to_3r = _share(bands.get("2-3R", 0), total_valid)
    m.trades_above_3r = _share(bands.get(">=3R", 0), total_valid)

    m.break_even_point = abs(m.total_net_pnl) if m.total_net_pnl < 0 else 0.0


def _risk(m: UltimateMetrics, df: pd.DataFrame) -> None:
    n = len(df)
    valid = df[df["valid_rr"]]
    m.average_risk_per_trade = safe_number(df["risk"].sum() / n)
    m.average_rr_overall = _mean(valid["rr_ratio"])
    m.average_rr_wins = _mean(valid.loc[valid["is_win"], "rr_ratio"])
    m.average_rr_losses = _mean(valid.loc[valid["is_loss"], "rr_ratio"])

    m.trades_without_sl = _share(int((~df["has_sl"]).sum()), n)
    m.trades_without_tp = _share(int((~df["has_tp"]).sum()), n)
    # NaN distances (unusable pip size or price) drop out of the mean
    m.average_sl_distance_pips = _mean(df.loc[df["has_sl"], "sl_distance_pips"])
    m.average_tp_distance_pips = _mean(df.loc[df["has_tp"], "tp_distance_pips"])


def _time_based(m: UltimateMetrics, df: pd.DataFrame) -> None:
    weekdays = group_stats(df, "weekday")
    m.best_day_of_week = _top(weekdays, "avg")
    m.worst_day_of_week = _top(weekdays, "avg", largest=False)

    months = group_stats(df, "month")
    m.most_profitable_month = _month(_top(months, "total"))
    m.least_profitable_month = _month(_top(months, "total", largest=False))

    years = group_stats(df, "year")
    m.most_profitable_year = _top(years, "total")
    m.least_profitable_year = _top(years, "total", largest=False)

    durations = df["duration"]
    m.average_hold_time_overall = _mean(durations)
    m.average_hold_time_wins = _mean(df.loc[df["is_win"], "duration"])
    m.average_hold_time_losses = _mean(df.loc[df["is_loss"], "duration"])
    m.shortest_hold_time = safe_number(durations.min())
    m.longest_hold_time = safe_number(durations.max())


def _month(r: Ranked) -> Ranked:
    """'2024-01' -> 'Jan 2024'."""
    if not r.label:
        return r
    year, month = r.label.split("-")
    return Ranked(label=month_label(int(year), int(month)), value=r.value)


def _instruments(m: UltimateMetrics, df: pd.DataFrame) -> None:
    pairs = group_stats(df, "pair")
    m.most_profitable_pair = _top(pairs, "total")
    m.least_profitable_pair = _top(pairs, "total", largest=False)
    m.highest_win_rate_pair = _top(pairs, "win_rate")
    m.lowest_win_rate_pair = _top(pairs, "win_rate", largest=False)
    m.most_traded_pair = _top(pairs, "count")
    m.least_traded_pair = _top(pairs, "count", largest=False)

    strategies = group_stats(df, "strategy")
    m.most_profitable_strategy = _top(strategies, "total")
    m.most_used_strategy = _top(strategies, "count")
    m.highest_win_rate_strategy = _top(strategies, "win_rate")

    tags = group_stats(df, "setup_tags")
    m.most_used_setup_tag = _top(tags, "count")
    m.most_profitable_setup_tag = _top(tags, "total")
    m.highest_win_rate_setup_tag = _top(tags, "win_rate")

    a_plus = df[df["is_a_plus_setup"]]
    if len(a_plus):
        m.a_plus_setup_win_rate = a_plus["is_win"].sum() / len(a_plus) * 100.0
        m.a_plus_setup_total_pnl = safe_number(a_plus["pnl"].sum())


def _behavioral(m: UltimateMetrics, df: pd.DataFrame) -> None:
    streaks = count_streaks(df["result"])
    m.max_winning_streak = streaks.max_winning
    m.max_losing_streak = streaks.max_losing
    m.total_winning_streaks = streaks.total_winning
    m.total_losing_streaks = streaks.total_losing

    n = len(df)
    high = df[df["emotion_rating"] >= HIGH_EMOTION]
    low = df[df["emotion_rating"] <= LOW_EMOTION]
    m.avg_pnl_high_emotion = _mean(high["pnl"])
    m.avg_pnl_low_emotion = _mean(low["pnl"])
    m.trades_high_emotion = _share(len(high), n)
    m.trades_low_emotion = _share(len(low), n)


def _equity_dynamics(m: UltimateMetrics, trades: Sequence[Trade], capital: float) -> None:
    dd = drawdown_stats((t.pnl for t in trades), capital)
    m.max_drawdown_amount = dd.max_amount
    m.max_drawdown_percentage = dd.max_percentage
    m.number_of_drawdowns = dd.count
    m.equity_at_end = capital + m.total_net_pnl

    if dd.trough_index != -1 and dd.recovery_index != -1:
        trough = trades[dd.trough_index].close_date
        recovered = trades[dd.recovery_index].close_date
        if trough is not None and recovered is not None:
            m.time_to_recover_max_drawdown = (recovered - trough).days
