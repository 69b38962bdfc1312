"""
Number coercion and display formatting for journal values.
safe_number is applied at the boundary of every aggregation so one malformed
trade cannot turn a sum or mean into NaN.
"""
import math
from typing import Any

NO_VALUE = "—"
INFINITE = "inf"


def safe_number(value: Any) -> float:
    """Coerce to a finite float; None, '', NaN, inf and non-numeric values become 0.0."""
    if value is None or value == "" or isinstance(value, bool):
        return 0.0
    try:
        num = float(value)
    except (TypeError, ValueError):
        return 0.0
    return num if math.isfinite(num) else 0.0


def format_currency(value: Any, currency: str = "USD") -> str:
    """$1,234.56 style; the sign goes before the symbol."""
    v = safe_number(value)
    symbol = {"USD": "$", "EUR": "€", "GBP": "£", "JPY": "¥"}.get(currency.upper(), "$")
    sign = "-" if v < 0 else ""
    return f"{sign}{symbol}{abs(v):,.2f}"


def format_percentage(value: Any, decimals: int = 1) -> str:
    """Value is already in percent units (12.5 -> '12.5%')."""
    return f"{safe_number(value):,.{decimals}f}%"


def format_compact_currency(value: Any, currency: str = "USD") -> str:
    """Full amount below one million, '1.4M' style from one million up."""
    v = safe_number(value)
    if abs(v) >= 1_000_000:
        sign = "-" if v < 0 else ""
        return f"{sign}${abs(v) / 1_000_000:.1f}M"
    return format_currency(v, currency)


def format_compact_number(value: Any) -> str:
    v = safe_number(value)
    if abs(v) >= 1_000_000:
        sign = "-" if v < 0 else ""
        return f"{sign}{abs(v) / 1_000_000:.1f}M"
    if v == int(v):
        return f"{int(v):,}"
    return f"{v:,.3f}".rstrip("0").rstrip(".")


def format_number(value: Any, decimals: int = 2) -> str:
    return f"{safe_number(value):.{decimals}f}"


def json_safe(value: Any) -> Any:
    """Infinity as the string "inf" so payloads stay strict JSON; everything else passes through."""
    if isinstance(value, float) and math.isinf(value):
        return INFINITE if value > 0 else "-" + INFINITE
    return value


def format_ratio(value: Any) -> str:
    """R:R display: non-positive means no valid ratio and renders as an em-dash."""
    v = safe_number(value)
    if v <= 0:
        return NO_VALUE
    return f"{v:.2f}"


def format_duration(minutes: Any) -> str:
    """45.5m, 2h 15m, 3d 4h."""
    m = safe_number(minutes)
    if m < 60:
        return f"{_trim(round(m, 1))}m"
    if m < 1440:
        hours = int(m // 60)
        rest = round(m % 60, 1)
        return f"{hours}h {_trim(rest)}m" if rest > 0 else f"{hours}h"
    days = int(m // 1440)
    hours = int((m % 1440) // 60)
    return f"{days}d {hours}h" if hours > 0 else f"{days}d"


def format_lot_size_rounded_up(value: Any) -> str:
    """Display only: ceil to 2 decimals. Stored lot sizes keep full precision."""
    v = safe_number(value)
    if v == 0:
        return "0.00"
    return f"{math.ceil(round(v * 100, 9)) / 100:.2f}"


def format_lot_size(value: Any) -> str:
    """Round to 2 decimals and drop trailing zeros: 1.8900000132 -> '1.89', 1.0000002 -> '1'."""
    v = safe_number(value)
    if v == 0:
        return "0"
    return _trim(round(v, 2))


def format_clean_number(value: Any) -> str:
    """Up to 3 decimals without float noise: 0.349999999999993 -> '0.35'."""
    v = safe_number(value)
    if v == 0:
        return "0"
    return f"{round(v, 3):.3f}".rstrip("0").rstrip(".")


def _trim(v: float) -> str:
    if v == int(v):
        return str(int(v))
    return f"{v}".rstrip("0").rstrip(".")
