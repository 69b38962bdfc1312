"""
Heuristic insights over a timeframe slice of the journal.

Each rule is an independent threshold check producing at most one message;
no rule reads another's output. Not used for any calculation.
"""
import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import List, Literal, Optional, Sequence

from src.journal.analytics.frame import emotion
# Streak helpers are part of the insights surface.
from src.journal.analytics.streaks import Streak, detect_streaks, get_streak_analytics  # noqa: F401
from src.journal.analytics.ultimate import HIGH_EMOTION, LOW_EMOTION
from src.journal.data.periods import filter_timeframe
from src.journal.data.schema import LOSS, WIN, Trade
from src.journal.execution.calculator import has_valid_rr
from src.journal.utils.formatting import safe_number

logger = logging.getLogger(__name__)

InsightType = Literal["success", "warning", "error", "info"]

OVERTRADING_PER_DAY = 10
HIGH_WIN_RATE = 70.0
LOW_WIN_RATE = 40.0
RR_WINDOW = 10
RR_WINDOW_MIN = 5
RR_IMPROVEMENT = 1.1
MISSING_RR_SHARE = 0.3
A_PLUS_WIN_RATE = 80.0
LOW_EMOTION_SHARE = 0.3


@dataclass
class SmartInsight:
    type: InsightType
    title: str
    message: str
    icon: str = ""


@dataclass
class TradeFeedback:
    trade_id: str
    feedback: str
    score: int


@dataclass
class PairCount:
    pair: str
    count: int
    percentage: float


@dataclass
class HoldTimeStats:
    average: int
    minimum: float
    maximum: float
    total: int
    min_pairs: List[str] = field(default_factory=list)
    max_pairs: List[str] = field(default_factory=list)


def generate_smart_insights(
    trades: Sequence[Trade],
    timeframe: str = "week",
    now: Optional[date] = None,
) -> List[SmartInsight]:
    sliced = filter_timeframe(trades, timeframe, now)
    if not sliced:
        return []

    insights: List[SmartInsight] = []
    n = len(sliced)

    per_day = Counter(t.date for t in sliced if t.date is not None)
    busiest = max(per_day.values(), default=0)
    if busiest > OVERTRADING_PER_DAY:
        insights.append(SmartInsight(
            "warning", "Overtrading Alert",
            f"You made {busiest} trades in a single day. Consider reducing frequency for better quality.",
            "⚠️",
        ))

    win_rate = sum(1 for t in sliced if t.result == WIN) / n * 100.0
    if win_rate >= HIGH_WIN_RATE:
        insights.append(SmartInsight(
            "success", "Excellent Win Rate",
            f"Your {win_rate:.1f}% win rate is outstanding! Keep following your strategy.",
            "🎯",
        ))
    elif win_rate < LOW_WIN_RATE:
        insights.append(SmartInsight(
            "error", "Low Win Rate",
            f"Your {win_rate:.1f}% win rate needs improvement. Review your entry criteria.",
            "📉",
        ))

    valid = [t for t in sliced if has_valid_rr(t)]
    recent = valid[-RR_WINDOW:]
    older = valid[-2 * RR_WINDOW:-RR_WINDOW]
    if len(recent) >= RR_WINDOW_MIN and len(older) >= RR_WINDOW_MIN:
        recent_rr = _avg_rr(recent)
        if recent_rr > _avg_rr(older) * RR_IMPROVEMENT:
            insights.append(SmartInsight(
                "success", "R:R Improving",
                f"Your recent R:R ratio ({recent_rr:.2f}) is improving! Great progress.",
                "📈",
            ))

    missing = n - len(valid)
    if missing > n * MISSING_RR_SHARE:
        insights.append(SmartInsight(
            "info", "Missing R:R Data",
            f"Add a Stop Loss to unlock accurate R:R tracking for your trades. {missing} trades missing SL data.",
            "📊",
        ))

    a_plus = [t for t in sliced if t.is_a_plus_setup]
    if a_plus:
        a_plus_rate = sum(1 for t in a_plus if t.result == WIN) / len(a_plus) * 100.0
        if a_plus_rate >= A_PLUS_WIN_RATE:
            insights.append(SmartInsight(
                "success", "A+ Setups Performing",
                f"Your A+ setups have {a_plus_rate:.1f}% win rate. Focus on these patterns!",
                "⭐",
            ))

    high = sum(1 for t in sliced if emotion(t) >= HIGH_EMOTION)
    low = sum(1 for t in sliced if emotion(t) <= LOW_EMOTION)
    if high > low:
        insights.append(SmartInsight(
            "info", "Good Emotional Control",
            "You're maintaining good emotional discipline in your trades.",
            "🧠",
        ))
    elif low > n * LOW_EMOTION_SHARE:
        insights.append(SmartInsight(
            "warning", "Emotional Stress Detected",
            "Consider taking a break when emotional ratings are consistently low.",
            "😰",
        ))

    logger.debug("%d insights over %d trades (%s)", len(insights), n, timeframe)
    return insights


def _avg_rr(trades: Sequence[Trade]) -> float:
    return sum(safe_number(t.rr_ratio) for t in trades) / len(trades)


def generate_trade_feedback(trade: Trade) -> TradeFeedback:
    """Plain-language notes on one trade and a 1..10 execution score (base 5)."""
    notes: List[str] = []
    score = 5
    rr = safe_number(trade.rr_ratio)

    if has_valid_rr(trade):
        if rr >= 2:
            notes.append("Excellent R:R ratio achieved")
            score += 2
        elif rr >= 1.5:
            notes.append("Good R:R ratio achieved")
            score += 1
        elif rr < 1:
            notes.append("R:R ratio below 1:1 - consider tighter stops or better exits")
            score -= 2

        if trade.result == WIN and rr >= 2:
            notes.append("Perfect execution with great risk management")
            score += 1
        elif trade.result == LOSS and rr >= 1.5:
            notes.append("Good setup despite the loss - stick to your plan")
        elif trade.result == LOSS and rr < 1:
            notes.append("Poor risk management led to unnecessary loss")
            score -= 1
    else:
        notes.append("Consider adding a Stop Loss for better risk management and R:R tracking")

    if trade.is_a_plus_setup and trade.result == WIN:
        notes.append("A+ setup delivered as expected")
        score += 1
    elif trade.is_a_plus_setup and trade.result == LOSS:
        notes.append("Even A+ setups can fail - review market conditions")

    if emotion(trade) >= HIGH_EMOTION:
        notes.append("Great emotional control during trade")
        score += 1
    elif emotion(trade) <= LOW_EMOTION:
        notes.append("Low emotional state may have affected performance")
        score -= 1

    return TradeFeedback(
        trade_id=trade.id,
        feedback=". ".join(notes) + ".",
        score=max(1, min(10, score)),
    )


def get_best_worst_trades(
    trades: Sequence[Trade],
    timeframe: str = "week",
    now: Optional[date] = None,
) -> dict:
    """Best winning and worst losing trade in the slice; either may be None."""
    sliced = filter_timeframe(trades, timeframe, now)
    wins = [t for t in sliced if t.result == WIN]
    losses = [t for t in sliced if t.result == LOSS]
    return {
        "best": max(wins, key=lambda t: safe_number(t.pnl)) if wins else None,
        "worst": min(losses, key=lambda t: safe_number(t.pnl)) if losses else None,
    }


def get_top_traded_pairs(
    trades: Sequence[Trade],
    timeframe: str = "all",
    now: Optional[date] = None,
) -> dict:
    sliced = filter_timeframe(trades, timeframe, now)
    if not sliced:
        return {"most": None, "least": None}
    counts = Counter(t.pair for t in sliced)
    # Counter keeps first-seen order, so ties go to the pair traded first.
    most = max(counts, key=counts.get)
    least = min(counts, key=counts.get)
    n = len(sliced)
    return {
        "most": PairCount(most, counts[most], counts[most] / n * 100.0),
        "least": PairCount(least, counts[least], counts[least] / n * 100.0),
    }


def get_hold_time_stats(
    trades: Sequence[Trade],
    timeframe: str = "all",
    now: Optional[date] = None,
) -> Optional[HoldTimeStats]:
    sliced = filter_timeframe(trades, timeframe, now)
    if not sliced:
        return None
    durations = [safe_number(t.duration) for t in sliced]
    lo, hi = min(durations), max(durations)
    return HoldTimeStats(
        average=math.floor(sum(durations) / len(durations) + 0.5),
        minimum=lo,
        maximum=hi,
        total=len(durations),
        min_pairs=list(dict.fromkeys(t.pair for t, d in zip(sliced, durations) if d == lo)),
        max_pairs=list(dict.fromkeys(t.pair for t, d in zip(sliced, durations) if d == hi)),
    )
