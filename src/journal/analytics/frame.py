"""
Trade list -> pandas DataFrame with safe-coerced numeric columns, plus
first-seen-order group statistics used by the metrics engines.
"""
import math
from typing import Iterable, List

import pandas as pd

from src.journal.data.periods import DAY_NAMES
from src.journal.data.schema import LOSS, WIN, Trade
from src.journal.execution.calculator import has_valid_rr
from src.journal.utils.formatting import safe_number

COLUMNS = [
    "id", "pair", "direction", "result", "is_win", "is_loss",
    "pnl", "risk", "rr_ratio", "valid_rr", "duration", "emotion_rating",
    "has_sl", "has_tp", "sl_distance_pips", "tp_distance_pips",
    "strategy", "setup_tags", "is_a_plus_setup",
    "close_date", "weekday", "month", "year",
]


def emotion(t: Trade) -> float:
    """Emotion rating with the neutral 5 standing in for a missing or unreadable value."""
    return safe_number(t.emotion_rating) or 5


def distance_pips(a, b, pip_size) -> float:
    """|a - b| in pips; NaN when either price or the pip size is unusable."""
    size = safe_number(pip_size)
    if size <= 0 or not safe_number(a) or not safe_number(b):
        return math.nan
    return abs(safe_number(a) - safe_number(b)) / size


def trades_to_frame(trades: Iterable[Trade]) -> pd.DataFrame:
    rows: List[dict] = []
    for t in trades:
        d = t.close_date
        rows.append({
            "id": t.id,
            "pair": t.pair,
            "direction": t.direction,
            "result": t.result,
            "is_win": t.result == WIN,
            "is_loss": t.result == LOSS,
            "pnl": safe_number(t.pnl),
            "risk": safe_number(t.risk),
            "rr_ratio": safe_number(t.rr_ratio),
            "valid_rr": has_valid_rr(t),
            "duration": safe_number(t.duration),
            "emotion_rating": emotion(t),
            "has_sl": bool(safe_number(t.stop_loss)),
            "has_tp": bool(safe_number(t.take_profit)),
            "sl_distance_pips": distance_pips(t.entry_price, t.stop_loss, t.pip_size),
            "tp_distance_pips": distance_pips(t.take_profit, t.entry_price, t.pip_size),
            "strategy": (t.strategy or "").strip() or None,
            "setup_tags": sorted(tag for tag in t.setup_tags if tag and tag.strip()),
            "is_a_plus_setup": bool(t.is_a_plus_setup),
            "close_date": d,
            "weekday": DAY_NAMES[d.weekday()] if d else None,
            "month": f"{d.year}-{d.month:02d}" if d else None,
            "year": str(d.year) if d else None,
        })
    return pd.DataFrame(rows, columns=COLUMNS)


def group_stats(frame: pd.DataFrame, key: str) -> pd.DataFrame:
    """
    Per-group total/avg P&L, trade count, wins and win rate, indexed by group
    in order of first appearance. Rows with a missing key are left out.
    """
    sub = frame if key != "setup_tags" else frame.explode("setup_tags")
    sub = sub[sub[key].notna()]
    if sub.empty:
        return pd.DataFrame(columns=["total", "count", "wins", "avg", "win_rate"])
    g = sub.groupby(key, sort=False)
    stats = pd.DataFrame({
        "total": g["pnl"].sum(),
        "count": g["pnl"].size(),
        "wins": g["is_win"].sum(),
    })
    stats["avg"] = stats["total"] / stats["count"]
    stats["win_rate"] = stats["wins"] / stats["count"] * 100.0
    return stats
