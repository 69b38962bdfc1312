"""
Per-period edge breakdown (monthly / weekly / yearly).

Trades are bucketed by booking day (exit date for multi-day trades). Each
period carries its own equity sparkline and drawdown, starting from the
equity before its first trade.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Sequence

from src.journal.analytics.drawdown import drawdown_series
from src.journal.data.periods import DAY_NAMES, parse_date, period_key
from src.journal.data.schema import LOSS, WIN, AppSettings, Trade
from src.journal.execution.calculator import has_valid_rr
from src.journal.utils.formatting import safe_number

VIEWS = ("monthly", "weekly", "yearly")


@dataclass
class PeriodData:
    period_key: str
    period_label: str
    net_pnl: float = 0.0
    win_rate: float = 0.0
    avg_rr: float = 0.0
    expectancy: float = 0.0
    max_drawdown: float = 0.0
    equity_sparkline: List[float] = field(default_factory=list)
    smart_insight: str = "No trades"
    is_best_period: bool = False
    trade_count: int = 0
    starting_equity: float = 0.0
    ending_equity: float = 0.0
    avg_profit: float = 0.0
    avg_loss: float = 0.0
    max_profit: float = 0.0
    max_loss: float = 0.0
    best_day: Optional[str] = None
    underperforming_day: Optional[str] = None


def period_insight(
    net_pnl: float,
    win_rate: float,
    avg_rr: float,
    expectancy: float,
    max_drawdown: float,
    trade_count: int,
) -> str:
    """One-line label for a period; first matching rule wins."""
    if trade_count == 0:
        return "No trades"
    if trade_count == 1:
        return "Single trade"
    if expectancy > 1.5:
        return "Exceptional edge"
    if expectancy > 1.0:
        return "Strong performance"
    if expectancy > 0.5:
        return "Positive edge"
    if net_pnl > 0 and win_rate >= 70:
        return "High accuracy"
    if net_pnl > 0 and avg_rr >= 2.0:
        return "Great R:R"
    if net_pnl > 0:
        return "Profitable period"
    if max_drawdown > 15:
        return "High drawdown"
    if win_rate < 30:
        return "Low win rate"
    if expectancy < -0.5:
        return "Needs review"
    return "Mixed results"


def compute_period_breakdown(
    trades: Sequence[Trade],
    settings: AppSettings,
    view: str = "monthly",
    now: Optional[date] = None,
) -> List[PeriodData]:
    """Periods sorted by key; the one with the highest net P&L is flagged best."""
    if view not in VIEWS:
        raise ValueError(f"Unknown view: {view!r}")
    current_year = (parse_date(now) or date.today()).year

    groups: Dict[str, List[Trade]] = defaultdict(list)
    labels: Dict[str, str] = {}
    for t in trades:
        d = t.close_date
        if d is None:
            continue
        key, label = period_key(d, view, current_year)
        groups[key].append(t)
        labels[key] = label

    periods = [
        _period(key, labels[key], groups[key], settings, view)
        for key in sorted(groups)
    ]
    if periods:
        best = max(periods, key=lambda p: p.net_pnl)
        best.is_best_period = True
    return periods


def _period(key: str, label: str, trades: List[Trade], settings: AppSettings, view: str) -> PeriodData:
    ordered = sorted(trades, key=lambda t: t.close_date)
    n = len(ordered)
    pnls = [safe_number(t.pnl) for t in ordered]
    wins = [p for t, p in zip(ordered, pnls) if t.result == WIN]
    losses = [p for t, p in zip(ordered, pnls) if t.result == LOSS]

    net_pnl = sum(pnls)
    win_rate = len(wins) / n * 100.0

    valid = [t for t in ordered if has_valid_rr(t)]
    avg_rr = _mean([safe_number(t.rr_ratio) for t in valid])
    expectancy = 0.0
    if valid:
        avg_win_r = _mean([safe_number(t.rr_ratio) for t in valid if t.result == WIN])
        avg_loss_r = abs(_mean([safe_number(t.rr_ratio) for t in valid if t.result == LOSS]))
        expectancy = (win_rate / 100.0) * avg_win_r - (1 - win_rate / 100.0) * avg_loss_r

    start = safe_number(ordered[0].equity) - pnls[0] if n else safe_number(settings.starting_capital)
    _, dd_pct = drawdown_series(pnls, start)
    sparkline = [start]
    for p in pnls:
        sparkline.append(sparkline[-1] + p)
    max_dd = float(dd_pct.max(initial=0.0))

    by_weekday: Dict[str, List[float]] = defaultdict(list)
    for t, p in zip(ordered, pnls):
        by_weekday[DAY_NAMES[t.close_date.weekday()]].append(p)
    averages = {day: sum(v) / len(v) for day, v in by_weekday.items()}
    best_day = max(averages, key=averages.get) if averages else None
    under_day = None
    if averages and view in ("monthly", "yearly"):
        under_day = min(averages, key=averages.get)

    return PeriodData(
        period_key=key,
        period_label=label,
        net_pnl=round(net_pnl, 2),
        win_rate=round(win_rate, 1),
        avg_rr=round(avg_rr, 2),
        expectancy=round(expectancy, 2),
        max_drawdown=round(max_dd, 2),
        equity_sparkline=sparkline,
        smart_insight=period_insight(net_pnl, win_rate, avg_rr, expectancy, max_dd, n),
        trade_count=n,
        starting_equity=start,
        ending_equity=sparkline[-1],
        avg_profit=round(_mean(wins), 2),
        avg_loss=round(abs(_mean(losses)), 2),
        max_profit=round(max(wins), 2) if wins else 0.0,
        max_loss=round(abs(min(losses)), 2) if losses else 0.0,
        best_day=best_day,
        underperforming_day=under_day,
    )


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0
