"""
Trade calculator: raw trade input + settings + previous equity -> fully derived Trade.

Pip-based risk/reward, P&L with stop-out forcing, result classification,
R:R ratio and running equity. Pure apart from generating an id for new trades.
"""
import logging
import math
import uuid
from dataclasses import asdict, is_dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from src.journal.data.periods import parse_date, parse_time
from src.journal.data.schema import BREAK_EVEN, LOSS, WIN, AppSettings, Trade
from src.journal.data.symbols import (
    FALLBACK_PIP_SIZE,
    FALLBACK_PIP_VALUE,
    resolve_pip_size,
    resolve_pip_value,
)
from src.journal.utils.formatting import safe_number

logger = logging.getLogger(__name__)

# |pnl| at or below this is a break-even.
BREAK_EVEN_BAND = 0.01

REQUIRED_FIELDS = ("pair", "entry_price", "exit_price", "lot_size")


class TradeCalculationError(ValueError):
    """Raised when raw input lacks a field the calculation cannot do without."""


def compute_trade(
    raw: Union[Mapping[str, Any], Trade],
    settings: AppSettings,
    previous_equity: float = 0.0,
) -> Trade:
    """
    Derive a Trade from raw input. `raw` may be a dict of snake_case fields or
    an existing Trade being recalculated (its stored pip size/value are reused).
    """
    data = asdict(raw) if is_dataclass(raw) else dict(raw)

    missing = _missing_fields(data)
    if missing:
        raise TradeCalculationError(f"Missing required trade data for calculation: {', '.join(missing)}")

    pair = str(data["pair"]).strip()
    direction = data.get("direction") or "Buy"
    if direction not in ("Buy", "Sell"):
        raise TradeCalculationError(f"Invalid direction {direction!r}; expected 'Buy' or 'Sell'")

    pip_size, pip_value = _resolve_pip_params(pair, data, settings)

    entry_price = safe_number(data.get("entry_price"))
    exit_price = safe_number(data.get("exit_price"))
    lot_size = safe_number(data.get("lot_size"))
    stop_loss = _positive_or_none(data.get("stop_loss"))
    take_profit = _positive_or_none(data.get("take_profit"))

    risk = 0.0
    risk_pips = 0.0
    if stop_loss is not None:
        risk_pips = abs((entry_price - stop_loss) / pip_size)
        risk = risk_pips * pip_value * lot_size

    if direction == "Buy":
        pips = (exit_price - entry_price) / pip_size
    else:
        pips = (entry_price - exit_price) / pip_size

    if stop_loss is not None and _stopped_out(direction, exit_price, stop_loss):
        # Loss is booked at the stop level, whatever the fill was.
        pnl = -abs(risk)
        if lot_size > 0 and pip_value > 0:
            pips = pnl / (pip_value * lot_size)
    else:
        pnl = pips * pip_value * lot_size

    if pnl > BREAK_EVEN_BAND:
        result = WIN
    elif pnl < -BREAK_EVEN_BAND:
        result = LOSS
    else:
        result = BREAK_EVEN

    rr_ratio = 0.0
    if risk > 0 and risk_pips > 0:
        if result == WIN:
            rr_ratio = abs(pips) / risk_pips
        elif result == LOSS and take_profit is not None:
            rr_ratio = abs((take_profit - entry_price) / pip_size) / risk_pips

    capital = safe_number(settings.starting_capital)
    change_in_capital = (pnl / capital) * 100 if capital > 0 else 0.0

    is_multi_day = bool(data.get("is_multi_day"))
    trade_date = parse_date(data.get("date"))
    exit_date = parse_date(data.get("exit_date")) if is_multi_day else None
    entry_time = parse_time(data.get("entry_time"))
    exit_time = parse_time(data.get("exit_time"))

    return Trade(
        id=str(data.get("id") or uuid.uuid4()),
        pair=pair,
        direction=direction,
        date=trade_date,
        entry_time=entry_time,
        exit_time=exit_time,
        entry_price=entry_price,
        exit_price=exit_price,
        lot_size=lot_size,
        pip_size=pip_size,
        pip_value_per_standard_lot=pip_value,
        duration=_duration_minutes(trade_date, entry_time, exit_date, exit_time),
        risk=risk,
        reward=pnl if pnl > 0 else 0.0,
        rr_ratio=rr_ratio,
        result=result,
        pnl=pnl,
        change_in_capital=change_in_capital,
        equity=safe_number(previous_equity) + pnl,
        stop_loss=stop_loss,
        take_profit=take_profit,
        exit_date=exit_date,
        is_multi_day=is_multi_day,
        strategy=str(data.get("strategy") or ""),
        setup_tags=frozenset(t for t in (data.get("setup_tags") or ()) if t),
        notes=str(data.get("notes") or ""),
        screenshot_link=str(data.get("screenshot_link") or ""),
        emotion_rating=safe_number(data.get("emotion_rating")) or 5,
        is_a_plus_setup=bool(data.get("is_a_plus_setup")),
    )


def has_valid_rr(trade: Trade) -> bool:
    """
    Wins need a stop loss and a positive ratio (measured from the realized exit).
    Losses also need a take profit, since their ratio is measured against the
    intended target. Break-evens never carry a valid ratio.
    """
    rr = safe_number(trade.rr_ratio)
    if trade.result == WIN:
        return rr > 0 and trade.stop_loss is not None
    if trade.result == LOSS:
        return trade.stop_loss is not None and trade.take_profit is not None and rr > 0
    return False


def valid_rr(trade: Trade) -> Optional[float]:
    """The trade's R:R, or None when it has no valid R:R."""
    return safe_number(trade.rr_ratio) if has_valid_rr(trade) else None


def _resolve_pip_params(pair: str, data: Mapping[str, Any], settings: AppSettings) -> tuple:
    override = settings.pair_override(pair)
    pip_size = safe_number(data.get("pip_size")) or resolve_pip_size(pair, override.custom_pip_size)
    pip_value = safe_number(data.get("pip_value_per_standard_lot")) or resolve_pip_value(
        pair, override.custom_pip_value_per_standard_lot
    )
    if pip_size <= 0:
        logger.warning("Invalid pip size for pair %s: %s, using default %s", pair, pip_size, FALLBACK_PIP_SIZE)
        pip_size = FALLBACK_PIP_SIZE
    if pip_value <= 0:
        logger.warning(
            "Invalid pip value per standard lot for pair %s: %s, using default %s", pair, pip_value, FALLBACK_PIP_VALUE
        )
        pip_value = FALLBACK_PIP_VALUE
    return pip_size, pip_value


def _stopped_out(direction: str, exit_price: float, stop_loss: float) -> bool:
    if direction == "Buy":
        return exit_price <= stop_loss
    return exit_price >= stop_loss


def _missing_fields(data: Mapping[str, Any]) -> list:
    """Pair must be a non-blank string; prices and lot size a non-zero number."""
    missing = []
    if not str(data.get("pair") or "").strip():
        missing.append("pair")
    for name in REQUIRED_FIELDS[1:]:
        if safe_number(data.get(name)) == 0:
            missing.append(name)
    return missing


def _positive_or_none(value: Any) -> Optional[float]:
    v = safe_number(value)
    return v if v > 0 else None


def _duration_minutes(trade_date, entry_time, exit_date, exit_time) -> float:
    """Whole minutes from entry to exit, truncated toward zero; 0 when a part is unknown."""
    if trade_date is None or entry_time is None or exit_time is None:
        return 0.0
    start = datetime.combine(trade_date, entry_time)
    end = datetime.combine(exit_date or trade_date, exit_time)
    return float(math.trunc((end - start).total_seconds() / 60))
