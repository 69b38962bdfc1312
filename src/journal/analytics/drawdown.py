"""
Equity curve and drawdown from a chronological P&L sequence.
Peak starts at the starting capital; drawdown % is relative to the running peak.
"""
from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np

from src.journal.utils.formatting import safe_number


@dataclass
class DrawdownStats:
    max_amount: float = 0.0
    max_percentage: float = 0.0
    # Drawdowns that ended in a new equity high.
    count: int = 0
    # Index of the trade where the deepest drawdown (by amount) was reached, -1 if none.
    trough_index: int = -1
    # First new-high index after that trough, -1 if equity never recovered.
    recovery_index: int = -1


def _pnl_array(pnls: Iterable[float]) -> np.ndarray:
    return np.array([safe_number(p) for p in pnls], dtype=float)


def equity_curve(pnls: Iterable[float], starting_capital: float) -> np.ndarray:
    """Equity after each trade."""
    return safe_number(starting_capital) + np.cumsum(_pnl_array(pnls))


def drawdown_series(pnls: Iterable[float], starting_capital: float) -> Tuple[np.ndarray, np.ndarray]:
    """(amount, percentage) below the running peak after each trade."""
    start = safe_number(starting_capital)
    equity = equity_curve(pnls, start)
    if equity.size == 0:
        return equity, equity
    peak = np.maximum.accumulate(np.concatenate(([start], equity)))[1:]
    amount = peak - equity
    with np.errstate(divide="ignore", invalid="ignore"):
        pct = np.where(peak > 0, amount / peak * 100.0, 0.0)
    return amount, pct


def max_drawdown_percentage(pnls: Iterable[float], starting_capital: float) -> float:
    _, pct = drawdown_series(pnls, starting_capital)
    return float(pct.max(initial=0.0))


def drawdown_stats(pnls: Iterable[float], starting_capital: float) -> DrawdownStats:
    """Single walk: deepest drawdown, completed drawdowns, and where the deepest one recovered."""
    values = _pnl_array(pnls)
    amount, pct = drawdown_series(values, starting_capital)
    stats = DrawdownStats(
        max_amount=float(amount.max(initial=0.0)),
        max_percentage=float(pct.max(initial=0.0)),
    )

    equity = peak = safe_number(starting_capital)
    deepest = 0.0
    in_drawdown = False
    for i, pnl in enumerate(values):
        equity += pnl
        if equity > peak:
            if in_drawdown:
                stats.count += 1
                in_drawdown = False
            peak = equity
            if stats.trough_index != -1 and stats.recovery_index == -1:
                stats.recovery_index = i
        elif equity < peak:
            in_drawdown = True

        if peak - equity > deepest:
            deepest = peak - equity
            stats.trough_index = i
            stats.recovery_index = -1
    return stats
