"""
Journal summary: win rate, profit factor, average R:R, max drawdown, best/worst day, etc.
"""
import math
from collections import defaultdict
from dataclasses import asdict, dataclass
from typing import Dict, List, Sequence

from src.journal.analytics.drawdown import drawdown_series
from src.journal.data.schema import LOSS, WIN, AppSettings, Trade
from src.journal.execution.calculator import has_valid_rr
from src.journal.utils.formatting import safe_number


@dataclass
class Summary:
    total_trades: int = 0
    total_pnl: float = 0.0
    avg_rr: float = 0.0
    win_rate: float = 0.0
    loss_rate: float = 0.0
    most_profitable_pair: str = ""
    best_day: str = ""
    worst_day: str = ""
    max_drawdown: float = 0.0
    max_drawdown_amount: float = 0.0
    profit_factor: float = 0.0
    a_plus_setups: int = 0
    total_risk_used: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


def profit_factor(gross_profit: float, gross_loss: float) -> float:
    """gross_loss is a positive amount. inf with no losses but some profit, 0 with neither."""
    if gross_loss > 0:
        return safe_number(gross_profit / gross_loss)
    return math.inf if gross_profit > 0 else 0.0


def average_rr(trades: Sequence[Trade]) -> float:
    """Mean R:R over trades with a valid R:R; 0 when there are none."""
    valid = [safe_number(t.rr_ratio) for t in trades if has_valid_rr(t)]
    return sum(valid) / len(valid) if valid else 0.0


def compute_summary(trades: Sequence[Trade], settings: AppSettings) -> Summary:
    """Headline statistics for a trade list in chronological order."""
    if not trades:
        return Summary()

    n = len(trades)
    wins = [t for t in trades if t.result == WIN]
    losses = [t for t in trades if t.result == LOSS]
    pnls = [safe_number(t.pnl) for t in trades]

    gross_profit = sum(safe_number(t.pnl) for t in wins)
    gross_loss = abs(sum(safe_number(t.pnl) for t in losses))

    pair_pnl: Dict[str, float] = defaultdict(float)
    day_pnl: Dict[str, float] = defaultdict(float)
    for t, pnl in zip(trades, pnls):
        pair_pnl[t.pair] += pnl
        d = t.close_date
        if d is not None:
            day_pnl[d.isoformat()] += pnl

    amount, pct = drawdown_series(pnls, settings.starting_capital)

    return Summary(
        total_trades=n,
        total_pnl=safe_number(sum(pnls)),
        avg_rr=average_rr(trades),
        win_rate=len(wins) / n * 100.0,
        loss_rate=len(losses) / n * 100.0,
        most_profitable_pair=_argmax(pair_pnl),
        best_day=_argmax(day_pnl),
        worst_day=_argmin(day_pnl),
        max_drawdown=safe_number(pct.max(initial=0.0)),
        max_drawdown_amount=safe_number(amount.max(initial=0.0)),
        profit_factor=profit_factor(gross_profit, gross_loss),
        a_plus_setups=sum(1 for t in trades if t.is_a_plus_setup),
        total_risk_used=safe_number(sum(safe_number(t.risk) for t in trades)),
    )


def compute_summary_by_direction(trades: Sequence[Trade], settings: AppSettings) -> Dict[str, Summary]:
    """Summary split by Buy / Sell."""
    by_dir: Dict[str, List[Trade]] = defaultdict(list)
    for t in trades:
        by_dir[t.direction].append(t)
    return {d: compute_summary(by_dir.get(d, []), settings) for d in ("Buy", "Sell")}


def _argmax(values: Dict[str, float]) -> str:
    # max() keeps the first key on ties (insertion order).
    return max(values, key=values.get) if values else ""


def _argmin(values: Dict[str, float]) -> str:
    return min(values, key=values.get) if values else ""
