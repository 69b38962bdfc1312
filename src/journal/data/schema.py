"""
Data models: Trade, PendingTrade, AppSettings, PairSettings.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Dict, FrozenSet, List, Literal, Optional

Direction = Literal["Buy", "Sell"]
Result = Literal["Win", "Loss", "Break-even"]

WIN = "Win"
LOSS = "Loss"
BREAK_EVEN = "Break-even"


@dataclass(frozen=True)
class Trade:
    """A closed position with every derived field filled in by the calculator."""
    id: str
    pair: str
    direction: Direction
    date: Optional[date]
    entry_time: Optional[time]
    exit_time: Optional[time]
    entry_price: float
    exit_price: float
    lot_size: float
    pip_size: float
    pip_value_per_standard_lot: float
    # Derived
    duration: float
    risk: float
    reward: float
    rr_ratio: float
    result: Result
    pnl: float
    change_in_capital: float
    equity: float
    # Optional market fields
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    exit_date: Optional[date] = None
    is_multi_day: bool = False
    # Metadata
    strategy: str = ""
    setup_tags: FrozenSet[str] = frozenset()
    notes: str = ""
    screenshot_link: str = ""
    emotion_rating: float = 5
    is_a_plus_setup: bool = False

    @property
    def close_date(self) -> Optional[date]:
        """Calendar day the trade is booked on: exit date for multi-day trades."""
        if self.is_multi_day and self.exit_date:
            return self.exit_date
        return self.date

    @property
    def entry_datetime(self) -> Optional[datetime]:
        if self.date is None or self.entry_time is None:
            return None
        return datetime.combine(self.date, self.entry_time)

    @property
    def exit_datetime(self) -> Optional[datetime]:
        if self.close_date is None or self.exit_time is None:
            return None
        return datetime.combine(self.close_date, self.exit_time)


@dataclass
class PendingTrade:
    """Open position awaiting an exit price and time."""
    id: str
    pair: str
    direction: Direction
    date: Optional[date]
    entry_time: Optional[time]
    entry_price: float
    lot_size: float
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    pip_size: Optional[float] = None
    pip_value_per_standard_lot: Optional[float] = None
    strategy: str = ""
    setup_tags: FrozenSet[str] = frozenset()
    notes: str = ""
    screenshot_link: str = ""
    emotion_rating: float = 5
    is_a_plus_setup: bool = False
    # SL/TP as first entered, for tracking later adjustments
    original_stop_loss: Optional[float] = None
    original_take_profit: Optional[float] = None


@dataclass
class PairSettings:
    custom_pip_size: Optional[float] = None
    custom_pip_value_per_standard_lot: Optional[float] = None


@dataclass
class AppSettings:
    starting_capital: float = 10_000.0
    currency: str = "USD"
    timezone: str = "UTC"
    pair_settings: Dict[str, PairSettings] = field(default_factory=dict)
    enable_a_plus_tracking: bool = True
    enable_psychology_tracking: bool = True
    enable_screenshot_upload: bool = False
    data_export_format: Literal["CSV", "Excel"] = "CSV"
    custom_strategies: List[str] = field(default_factory=list)
    custom_setup_tags: List[str] = field(default_factory=list)

    def pair_override(self, pair: str) -> PairSettings:
        return self.pair_settings.get(pair) or PairSettings()
