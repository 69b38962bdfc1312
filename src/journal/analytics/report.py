"""
Simple text report from a journal.
"""
from typing import Sequence

from src.journal.analytics.metrics import compute_summary
from src.journal.analytics.ultimate import compute_ultimate_metrics
from src.journal.data.schema import AppSettings, Trade
from src.journal.utils.formatting import (
    NO_VALUE,
    format_currency,
    format_duration,
    format_percentage,
    format_ratio,
)


def report_text(trades: Sequence[Trade], settings: AppSettings, title: str = "Journal Report") -> str:
    s = compute_summary(trades, settings)
    u = compute_ultimate_metrics(trades, settings)
    cur = settings.currency
    pf = "∞" if s.profit_factor == float("inf") else f"{s.profit_factor:.2f}"
    lines = [
        f"=== {title} ===",
        f"Total trades: {s.total_trades}",
        f"Win rate: {format_percentage(s.win_rate)} | Loss rate: {format_percentage(s.loss_rate)}",
        f"Total P&L: {format_currency(s.total_pnl, cur)}",
        f"Profit factor: {pf}",
        f"Avg R:R: {format_ratio(s.avg_rr)}",
        f"Expectancy: {u.expectancy:.2f}R",
        f"Max drawdown: {format_percentage(s.max_drawdown, 2)} ({format_currency(s.max_drawdown_amount, cur)})",
        f"Most profitable pair: {s.most_profitable_pair or NO_VALUE}",
        f"Best day: {s.best_day or NO_VALUE} | Worst day: {s.worst_day or NO_VALUE}",
        f"A+ setups: {s.a_plus_setups}",
        f"Total risk used: {format_currency(s.total_risk_used, cur)}",
        f"Avg hold time: {format_duration(u.average_hold_time_overall)}",
        f"Equity: {format_currency(u.equity_at_start, cur)} -> {format_currency(u.equity_at_end, cur)}",
    ]
    return "\n".join(lines)
