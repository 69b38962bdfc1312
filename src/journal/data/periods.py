"""
Calendar helpers: parsing journal dates/times, timeframe slices (day, week,
month, year, all) relative to a reference day, and period keys for timelines.
Weeks are ISO weeks (Monday start).
"""
from datetime import date, datetime, time
from typing import Iterable, List, Literal, Optional, Tuple

from src.journal.data.schema import Trade

Timeframe = Literal["day", "week", "month", "year", "all"]
TIMEFRAMES = ("day", "week", "month", "year", "all")

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
MONTH_ABBR = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def parse_date(value) -> Optional[date]:
    """Accepts date, datetime or 'YYYY-MM-DD' (a trailing 'T...' part is ignored)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip().split("T")[0])


def parse_time(value) -> Optional[time]:
    """Accepts time, datetime or 'HH:MM[:SS]'."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value
    return time.fromisoformat(str(value).strip())


def in_timeframe(d: Optional[date], timeframe: str, today: date) -> bool:
    """
    Weeks run Monday to Sunday (ISO), so a Sunday trade sits in the same week as
    the Monday before it rather than starting a new one as in Sunday-first calendars.
    """
    if timeframe == "all":
        return True
    if d is None:
        return False
    if timeframe == "day":
        return d == today
    if timeframe == "week":
        return d.isocalendar()[:2] == today.isocalendar()[:2]
    if timeframe == "month":
        return (d.year, d.month) == (today.year, today.month)
    if timeframe == "year":
        return d.year == today.year
    raise ValueError(f"Unknown timeframe: {timeframe!r}")


def filter_timeframe(trades: Iterable[Trade], timeframe: str = "all", now: Optional[date] = None) -> List[Trade]:
    """Trades whose entry date falls in the timeframe containing `now` (default: today)."""
    today = parse_date(now) or date.today()
    return [t for t in trades if in_timeframe(t.date, timeframe, today)]


def month_label(year: int, month: int) -> str:
    return f"{MONTH_ABBR[month - 1]} {year}"


def period_key(d: date, view: str, current_year: int) -> Tuple[str, str]:
    """(sortable key, display label) for monthly / weekly / yearly views."""
    if view == "monthly":
        key = f"{d.year}-{d.month:02d}"
        label = MONTH_ABBR[d.month - 1] if d.year == current_year else month_label(d.year, d.month)
    elif view == "weekly":
        iso_year, week, _ = d.isocalendar()
        key = f"{iso_year}-W{week:02d}"
        label = f"Week {week}" if iso_year == current_year else f"Week {week}, {iso_year}"
    elif view == "yearly":
        key = label = str(d.year)
    else:
        raise ValueError(f"Unknown view: {view!r}")
    return key, label
