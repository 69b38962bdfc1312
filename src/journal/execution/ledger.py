"""
Ledger operations over a chronological trade list.
Every edit is a full left fold from the starting capital, so equity stays
consistent: equity[i] = equity[i-1] + pnl[i], equity[-1] = starting capital.
Inputs are never mutated; new lists are returned.
"""
import logging
from dataclasses import asdict
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from src.journal.data.schema import AppSettings, PendingTrade, Trade
from src.journal.execution.calculator import compute_trade

logger = logging.getLogger(__name__)

RawTrade = Union[Mapping[str, Any], Trade]


def previous_equity(trades: Sequence[Trade], settings: AppSettings) -> float:
    """Equity the next trade starts from."""
    return trades[-1].equity if trades else settings.starting_capital


def recalculate_trades(trades: Iterable[RawTrade], settings: AppSettings) -> List[Trade]:
    """Recompute every trade in order, threading equity from the starting capital."""
    out: List[Trade] = []
    for raw in trades:
        out.append(compute_trade(raw, settings, previous_equity(out, settings)))
    return out


def add_trade(trades: Sequence[Trade], raw: RawTrade, settings: AppSettings) -> List[Trade]:
    """Append a new trade on top of the current equity."""
    trade = compute_trade(raw, settings, previous_equity(trades, settings))
    logger.debug("Added trade %s %s pnl=%.2f equity=%.2f", trade.id, trade.pair, trade.pnl, trade.equity)
    return list(trades) + [trade]


def remove_trade(trades: Sequence[Trade], trade_id: str, settings: AppSettings) -> List[Trade]:
    """Drop a trade by id and re-fold the rest."""
    remaining = [t for t in trades if t.id != trade_id]
    if len(remaining) == len(trades):
        logger.warning("Trade %s not found; nothing removed", trade_id)
    return recalculate_trades(remaining, settings)


def replace_trade(trades: Sequence[Trade], raw: RawTrade, settings: AppSettings) -> List[Trade]:
    """Swap in an edited trade (matched on id) and re-fold."""
    data = asdict(raw) if isinstance(raw, Trade) else dict(raw)
    trade_id = data.get("id")
    if not trade_id or all(t.id != trade_id for t in trades):
        raise KeyError(f"Trade {trade_id!r} not found")
    edited: List[RawTrade] = [data if t.id == trade_id else t for t in trades]
    return recalculate_trades(edited, settings)


def complete_pending_trade(
    pending: PendingTrade,
    exit_price: float,
    exit_time: Any,
    settings: AppSettings,
    previous: float,
    exit_date: Optional[Any] = None,
    **overrides: Any,
) -> Trade:
    """
    Close an open position. A distinct exit_date marks the trade multi-day.
    `overrides` may adjust fields at close (e.g. a moved stop_loss, notes).
    """
    data = asdict(pending)
    for key in ("original_stop_loss", "original_take_profit"):
        data.pop(key, None)
    data.update(overrides)
    data["exit_price"] = exit_price
    data["exit_time"] = exit_time
    if exit_date is not None and str(exit_date) != str(data.get("date")):
        data["exit_date"] = exit_date
        data["is_multi_day"] = True
    return compute_trade(data, settings, previous)


def sort_chronologically(trades: Iterable[Trade]) -> List[Trade]:
    """Stable sort by entry timestamp; trades without one keep their place at the end."""
    return sorted(trades, key=_entry_sort_key)


def _entry_sort_key(trade: Trade):
    ts = trade.entry_datetime
    if ts is None and trade.date is not None:
        ts = datetime.combine(trade.date, datetime.min.time())
    return (ts is None, ts or datetime.min)
