"""
Logging setup from the `logging` config section.

Console output goes to stdout unless the caller passes another stream; commands
that print JSON send log records to stderr so the payload stays parseable.
`logging.loggers` maps logger names to levels (e.g. silence the calculator's
pip fallback warnings during bulk imports). An optional file handler writes to
`logging.file_path` with the run's date and time added to the name.

Env overrides: JOURNAL_LOG_LEVEL replaces the configured level and
JOURNAL_LOG_FILE is used as the file path as-is (no timestamp).
"""
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import IO, Any, Dict, Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def log_path_with_timestamp(file_path: str) -> Path:
    """logs/journal.log -> logs/journal_YYYY-MM-DD_HH-mm-ss.log"""
    path = Path(file_path)
    stamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    base = (path.stem if path.suffix else path.name) or "journal"
    return path.parent / f"{base}_{stamp}.log"


def _level(name: Any, default: int = logging.INFO) -> int:
    if isinstance(name, int):
        return name
    return getattr(logging, str(name).upper(), default)


def _file_handler(log_cfg: Dict[str, Any], level: int, fmt: str) -> Optional[logging.Handler]:
    env_path = os.environ.get("JOURNAL_LOG_FILE")
    file_path = env_path or log_cfg.get("file_path")
    if not file_path:
        return None
    path = Path(file_path) if env_path else log_path_with_timestamp(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        fh = logging.FileHandler(path, mode="a", encoding="utf-8")
    except OSError as e:
        logging.getLogger(__name__).warning("Could not open log file %s: %s", path, e)
        return None
    fh.setLevel(level)
    fh.setFormatter(logging.Formatter(fmt))
    return fh


def setup_logging(cfg: Dict[str, Any] | None = None, stream: Optional[IO[str]] = None) -> None:
    cfg = cfg or {}
    log_cfg = cfg.get("logging") or {}
    fmt = log_cfg.get("format", DEFAULT_FORMAT)
    level = _level(os.environ.get("JOURNAL_LOG_LEVEL") or log_cfg.get("level", "INFO"))

    logging.basicConfig(
        level=level,
        format=fmt,
        stream=stream or sys.stdout,
        force=True,
    )
    for name, name_level in (log_cfg.get("loggers") or {}).items():
        logging.getLogger(name).setLevel(_level(name_level))

    fh = _file_handler(log_cfg, level, fmt)
    if fh is not None:
        logging.getLogger().addHandler(fh)
