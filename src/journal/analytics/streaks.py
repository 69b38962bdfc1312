"""
Winning / losing streaks.
A streak counts toward the totals once it reaches length 2 and is closed by a
different result or the end of the list. Break-evens close both kinds.
"""
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Literal, Optional, Sequence

from src.journal.data.periods import filter_timeframe
from src.journal.data.schema import LOSS, WIN, Trade
from src.journal.utils.formatting import safe_number

ACTIVE_STREAK_WINDOW = 10
ACTIVE_STREAK_MIN = 3


@dataclass
class StreakCounts:
    max_winning: int = 0
    max_losing: int = 0
    total_winning: int = 0
    total_losing: int = 0


@dataclass
class Streak:
    type: Literal["winning", "losing"]
    count: int
    is_active: bool = True


@dataclass
class StreakAnalytics:
    max_win_streak: int = 0
    max_loss_streak: int = 0
    total_win_streaks: int = 0
    total_loss_streaks: int = 0
    avg_win_profit: float = 0.0
    avg_loss_amount: float = 0.0


def count_streaks(results: Iterable[str]) -> StreakCounts:
    counts = StreakCounts()
    wins = losses = 0

    def close_wins():
        nonlocal wins
        if wins >= 2:
            counts.total_winning += 1
        counts.max_winning = max(counts.max_winning, wins)
        wins = 0

    def close_losses():
        nonlocal losses
        if losses >= 2:
            counts.total_losing += 1
        counts.max_losing = max(counts.max_losing, losses)
        losses = 0

    for r in results:
        if r == WIN:
            wins += 1
            close_losses()
        elif r == LOSS:
            losses += 1
            close_wins()
        else:
            close_wins()
            close_losses()
    close_wins()
    close_losses()
    return counts


def detect_streaks(trades: Sequence[Trade]) -> Optional[Streak]:
    """
    Streak of 3+ still running at the end of the last 10 trades, else None.
    A break-even ends a run and never starts one, so a break-even last trade gives None.
    """
    if len(trades) < ACTIVE_STREAK_MIN:
        return None
    recent = trades[-ACTIVE_STREAK_WINDOW:]
    last = recent[-1].result
    if last not in (WIN, LOSS):
        return None
    count = 0
    for t in reversed(recent):
        if t.result != last:
            break
        count += 1
    if count >= ACTIVE_STREAK_MIN:
        return Streak(type="winning" if last == WIN else "losing", count=count)
    return None


def get_streak_analytics(
    trades: Sequence[Trade],
    timeframe: str = "all",
    now: Optional[date] = None,
) -> Optional[StreakAnalytics]:
    """Streak counts plus average win / loss P&L over a timeframe slice; None if the slice is empty."""
    sliced = filter_timeframe(trades, timeframe, now)
    if not sliced:
        return None
    counts = count_streaks(t.result for t in sliced)
    win_pnls = [safe_number(t.pnl) for t in sliced if t.result == WIN]
    loss_pnls = [safe_number(t.pnl) for t in sliced if t.result == LOSS]
    return StreakAnalytics(
        max_win_streak=counts.max_winning,
        max_loss_streak=counts.max_losing,
        total_win_streaks=counts.total_winning,
        total_loss_streaks=counts.total_losing,
        avg_win_profit=round(sum(win_pnls) / len(win_pnls), 2) if win_pnls else 0.0,
        avg_loss_amount=round(sum(loss_pnls) / len(loss_pnls), 2) if loss_pnls else 0.0,
    )
