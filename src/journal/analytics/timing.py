"""
Timing correlations:
  - time since the previous entry vs. outcome (short / medium / long gaps)
  - daily performance decay: how the 1st, 2nd, 3rd... trade of a day performs
"""
import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Sequence

from src.journal.data.schema import WIN, Trade
from src.journal.utils.formatting import safe_number

# Gaps outside [0, MAX_GAP_MINUTES] are out-of-order data or a new session.
MAX_GAP_MINUTES = 720
SHORT_GAP_MINUTES = 30
LONG_GAP_MINUTES = 240

SHORT_GAP = "Short Gap (<30min)"
MEDIUM_GAP = "Medium Gap (30min-4hrs)"
LONG_GAP = "Long Gap (>4hrs)"

# A position whose avg P&L falls below this share of the previous one ends the day.
DECAY_THRESHOLD = 0.8
DECAY_MIN_TRADES = 5


@dataclass
class GapPerformance:
    avg_pnl: float = 0.0
    win_rate: float = 0.0
    trade_count: int = 0


@dataclass
class TimingCorrelation:
    avg_time_between_trades: float = 0.0
    short_gap: GapPerformance = field(default_factory=GapPerformance)
    medium_gap: GapPerformance = field(default_factory=GapPerformance)
    long_gap: GapPerformance = field(default_factory=GapPerformance)
    best_gap_range: str = ""
    worst_gap_range: str = ""


@dataclass
class PositionPerformance:
    position: int
    avg_pnl: float
    win_rate: float
    trade_count: int


@dataclass
class DailyPerformanceDecay:
    trades_by_position: List[PositionPerformance] = field(default_factory=list)
    best_trade_position: int = 0
    worst_trade_position: int = 0
    max_trades_per_day: int = 0
    optimal_daily_limit: int = 0


def _performance(pnls: List[float], wins: int) -> GapPerformance:
    if not pnls:
        return GapPerformance()
    return GapPerformance(
        avg_pnl=safe_number(sum(pnls) / len(pnls)),
        win_rate=safe_number(wins / len(pnls) * 100.0),
        trade_count=len(pnls),
    )


def gap_correlation(trades: Sequence[Trade]) -> TimingCorrelation:
    """Bucket each trade by minutes since the previous trade's entry."""
    buckets: Dict[str, List[float]] = {SHORT_GAP: [], MEDIUM_GAP: [], LONG_GAP: []}
    bucket_wins: Dict[str, int] = defaultdict(int)
    total_gap = 0
    n_gaps = 0

    for prev, cur in zip(trades, trades[1:]):
        a, b = prev.entry_datetime, cur.entry_datetime
        if a is None or b is None:
            continue
        gap = math.trunc((b - a).total_seconds() / 60)
        if gap < 0 or gap > MAX_GAP_MINUTES:
            continue
        if gap < SHORT_GAP_MINUTES:
            name = SHORT_GAP
        elif gap < LONG_GAP_MINUTES:
            name = MEDIUM_GAP
        else:
            name = LONG_GAP
        buckets[name].append(safe_number(cur.pnl))
        if cur.result == WIN:
            bucket_wins[name] += 1
        total_gap += gap
        n_gaps += 1

    if n_gaps == 0:
        return TimingCorrelation()

    perf = {name: _performance(pnls, bucket_wins[name]) for name, pnls in buckets.items()}
    ranked = [(name, p) for name, p in perf.items() if p.trade_count > 0]
    best = max(ranked, key=lambda item: item[1].avg_pnl)[0]
    worst = min(ranked, key=lambda item: item[1].avg_pnl)[0]

    return TimingCorrelation(
        avg_time_between_trades=safe_number(total_gap / n_gaps),
        short_gap=perf[SHORT_GAP],
        medium_gap=perf[MEDIUM_GAP],
        long_gap=perf[LONG_GAP],
        best_gap_range=best,
        worst_gap_range=worst,
    )


def daily_performance_decay(trades: Sequence[Trade]) -> DailyPerformanceDecay:
    """
    Group by booking day, order each day by entry time, and aggregate P&L by
    ordinal position. The optimal daily limit stops before the first position
    whose avg P&L drops below 80% of the previous one, given at least 5 trades
    at that position; otherwise it is the busiest day's count. Heuristic only.
    """
    by_day: Dict[object, List[Trade]] = defaultdict(list)
    for t in trades:
        if t.close_date is not None:
            by_day[t.close_date].append(t)
    if not by_day:
        return DailyPerformanceDecay()

    pnls_at: Dict[int, List[float]] = defaultdict(list)
    wins_at: Dict[int, int] = defaultdict(int)
    max_per_day = 0
    for day_trades in by_day.values():
        ordered = sorted(day_trades, key=lambda t: t.entry_datetime or _day_start(t))
        max_per_day = max(max_per_day, len(ordered))
        for position, t in enumerate(ordered, start=1):
            pnls_at[position].append(safe_number(t.pnl))
            if t.result == WIN:
                wins_at[position] += 1

    positions = []
    for position in sorted(pnls_at):
        p = _performance(pnls_at[position], wins_at[position])
        positions.append(PositionPerformance(position, p.avg_pnl, p.win_rate, p.trade_count))

    limit = max_per_day
    for i in range(1, len(positions)):
        cur, prev = positions[i], positions[i - 1]
        if cur.avg_pnl < prev.avg_pnl * DECAY_THRESHOLD and cur.trade_count >= DECAY_MIN_TRADES:
            limit = i
            break

    return DailyPerformanceDecay(
        trades_by_position=positions,
        best_trade_position=max(positions, key=lambda p: p.avg_pnl).position,
        worst_trade_position=min(positions, key=lambda p: p.avg_pnl).position,
        max_trades_per_day=max_per_day,
        optimal_daily_limit=limit,
    )


def _day_start(t: Trade) -> datetime:
    return datetime.combine(t.date or t.close_date, datetime.min.time())
