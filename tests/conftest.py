"""Shared pytest fixtures and config."""
import pytest

EURUSD_PIP = 0.0001
ENTRY = 1.10000


@pytest.fixture
def settings():
    from src.journal.data.schema import AppSettings
    return AppSettings(starting_capital=10_000.0)


@pytest.fixture
def make_raw():
    """
    Raw EURUSD trade (1 lot, $10/pip) described in pips from a 1.10000 entry.
    pips > 0 is in the trade's favour; sl_pips / tp_pips are distances.
    """
    def _make(pips, sl_pips=None, tp_pips=None, direction="Buy", **extra):
        sign = 1 if direction == "Buy" else -1
        raw = {
            "pair": "EURUSD",
            "direction": direction,
            "date": "2024-01-15",
            "entry_time": "09:00",
            "exit_time": "10:00",
            "entry_price": ENTRY,
            "exit_price": ENTRY + sign * pips * EURUSD_PIP,
            "lot_size": 1.0,
        }
        if sl_pips is not None:
            raw["stop_loss"] = ENTRY - sign * sl_pips * EURUSD_PIP
        if tp_pips is not None:
            raw["take_profit"] = ENTRY + sign * tp_pips * EURUSD_PIP
        raw.update(extra)
        return raw
    return _make


@pytest.fixture
def journal(settings, make_raw):
    """
    Four trades over three days:
      Mon  +25 pips, SL 10        -> Win  +250, R:R 2.5, A+, calm
      Tue  stopped out, TP 16     -> Loss -100, R:R 1.6, stressed
      Tue  +5 pips, no SL (GBP)   -> Win  +50,  no valid R:R
      Wed  flat                   -> Break-even
    """
    from src.journal.execution.ledger import recalculate_trades
    raws = [
        make_raw(25, sl_pips=10, id="t1", strategy="Breakout", setup_tags=["London", "Trend"],
                 is_a_plus_setup=True, emotion_rating=9),
        make_raw(-10, sl_pips=10, tp_pips=16, id="t2", date="2024-01-16", entry_time="10:00",
                 exit_time="10:30", strategy="Breakout", emotion_rating=2),
        make_raw(5, id="t3", pair="GBPUSD", date="2024-01-16", entry_time="11:00", exit_time="13:00",
                 strategy="Pullback", setup_tags=["Trend"]),
        make_raw(0, id="t4", date="2024-01-17", entry_time="14:00", exit_time="14:15"),
    ]
    return recalculate_trades(raws, settings)


@pytest.fixture
def root_logger():
    """Root logger with handlers and level restored after the test (setup_logging reconfigures it)."""
    import logging
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    for h in handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(level)
