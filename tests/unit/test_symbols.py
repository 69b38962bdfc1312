"""Unit tests: pip size / pip value resolution."""


def test_table_values():
    from src.journal.data.symbols import resolve_pip_size, resolve_pip_value
    assert resolve_pip_size("EURUSD") == 0.0001
    assert resolve_pip_value("EURUSD") == 10.0
    assert resolve_pip_size("usdjpy") == 0.01
    assert resolve_pip_size("XAUUSD") == 0.1
    assert resolve_pip_size("BTCUSD") == 1.0


def test_override_wins_when_positive():
    from src.journal.data.symbols import resolve_pip_size, resolve_pip_value
    assert resolve_pip_size("XAUUSD", 0.01) == 0.01
    assert resolve_pip_value("XAUUSD", 2.5) == 2.5
    # Non-positive overrides are ignored
    assert resolve_pip_size("XAUUSD", 0) == 0.1
    assert resolve_pip_value("XAUUSD", -1) == 1.0


def test_unlisted_pair_defaults():
    from src.journal.data.symbols import (
        UNLISTED_PIP_SIZE,
        UNLISTED_PIP_VALUE,
        is_supported,
        resolve_pip_size,
        resolve_pip_value,
    )
    assert not is_supported("FOOBAR")
    assert resolve_pip_size("FOOBAR") == UNLISTED_PIP_SIZE
    assert resolve_pip_value("FOOBAR") == UNLISTED_PIP_VALUE
