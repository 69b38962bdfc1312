"""Unit tests: config loading, env overrides, settings and logging setup."""
import logging

import pytest


def test_default_config_has_account():
    from src.journal.config import load_config
    cfg = load_config()
    assert cfg["account"]["starting_capital"] == 10000
    assert "logging" in cfg


def test_override_file_is_deep_merged(tmp_path):
    from src.journal.config import load_config
    override = tmp_path / "journal.yaml"
    override.write_text(
        "account:\n  currency: EUR\npairs:\n  xauusd:\n    pip_size: 0.01\n",
        encoding="utf-8",
    )
    cfg = load_config(override)
    assert cfg["account"]["currency"] == "EUR"
    assert cfg["account"]["starting_capital"] == 10000
    assert cfg["pairs"]["xauusd"]["pip_size"] == 0.01


def test_env_overrides(monkeypatch):
    from src.journal.config import load_config
    monkeypatch.setenv("JOURNAL_STARTING_CAPITAL", "25000")
    monkeypatch.setenv("JOURNAL_CURRENCY", "GBP")
    cfg = load_config()
    assert cfg["account"]["starting_capital"] == 25000.0
    assert cfg["account"]["currency"] == "GBP"


def test_settings_from_config():
    from src.journal.config import settings_from_config
    s = settings_from_config({
        "account": {"starting_capital": 5000, "currency": "EUR"},
        "pairs": {"xauusd": {"pip_size": 0.01, "pip_value": 1}},
        "features": {"screenshot_upload": True},
        "strategies": ["Breakout"],
    })
    assert s.starting_capital == 5000.0
    assert s.currency == "EUR"
    assert s.pair_override("XAUUSD").custom_pip_size == 0.01
    assert s.pair_override("EURUSD").custom_pip_size is None
    assert s.enable_screenshot_upload
    assert s.custom_strategies == ["Breakout"]


def test_non_positive_capital_rejected():
    from src.journal.config import settings_from_config
    with pytest.raises(ValueError):
        settings_from_config({"account": {"starting_capital": 0}})


def test_log_file_gets_timestamp(tmp_path, root_logger):
    from src.journal.logging_config import log_path_with_timestamp, setup_logging
    p = log_path_with_timestamp(str(tmp_path / "journal.log"))
    assert p.parent == tmp_path
    assert p.name.startswith("journal_") and p.suffix == ".log"

    setup_logging({"logging": {"level": "DEBUG", "file_path": str(tmp_path / "logs" / "journal.log")}})
    files = [h for h in root_logger.handlers if isinstance(h, logging.FileHandler)]
    assert len(files) == 1
    assert root_logger.level == logging.DEBUG
    assert (tmp_path / "logs").is_dir()


def test_log_file_env_used_as_is(tmp_path, monkeypatch, root_logger):
    from src.journal.logging_config import setup_logging
    target = tmp_path / "run.log"
    monkeypatch.setenv("JOURNAL_LOG_FILE", str(target))
    setup_logging({})
    logging.getLogger("src.journal.test").warning("hello")
    assert "hello" in target.read_text(encoding="utf-8")


def test_log_stream_level_env_and_per_logger_levels(monkeypatch, capsys, root_logger):
    import sys
    from src.journal.logging_config import setup_logging
    monkeypatch.setenv("JOURNAL_LOG_LEVEL", "warning")
    calc = logging.getLogger("src.journal.execution.calculator")
    calc_level = calc.level
    try:
        setup_logging(
            {"logging": {"level": "DEBUG", "loggers": {"src.journal.execution.calculator": "ERROR"}}},
            stream=sys.stderr,
        )
        assert root_logger.level == logging.WARNING
        assert calc.level == logging.ERROR
        logging.getLogger("src.journal.test").warning("to stderr")
        calc.warning("silenced")
        captured = capsys.readouterr()
        assert "to stderr" in captured.err
        assert "to stderr" not in captured.out
        assert "silenced" not in captured.err
    finally:
        calc.setLevel(calc_level)
