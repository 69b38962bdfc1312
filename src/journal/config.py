"""
Configuration loader: YAML + env.
"""
import os
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

from src.journal.data.schema import AppSettings, PairSettings

load_dotenv()

_BASE = Path(__file__).resolve().parents[2]
_DEFAULT_PATH = _BASE / "configs" / "default.yaml"


def load_config(path: str | Path | None = None) -> Dict[str, Any]:
    """Load config from YAML; merge with default; override from env where applicable."""
    default = {}
    if _DEFAULT_PATH.exists():
        with open(_DEFAULT_PATH, "r", encoding="utf-8") as f:
            default = yaml.safe_load(f) or {}

    cfg_path = Path(path or os.getenv("CONFIG_PATH") or _DEFAULT_PATH)
    if not cfg_path.is_absolute():
        cfg_path = _BASE / cfg_path

    merged = dict(default)
    if cfg_path.exists() and cfg_path != _DEFAULT_PATH:
        with open(cfg_path, "r", encoding="utf-8") as f:
            overrides = yaml.safe_load(f) or {}
        _deep_merge(merged, overrides)

    # Env overrides
    if os.getenv("JOURNAL_STARTING_CAPITAL"):
        merged.setdefault("account", {})["starting_capital"] = float(os.getenv("JOURNAL_STARTING_CAPITAL"))
    if os.getenv("JOURNAL_CURRENCY"):
        merged.setdefault("account", {})["currency"] = os.getenv("JOURNAL_CURRENCY")

    return merged


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    for k, v in override.items():
        if k in base and isinstance(base[k], dict) and isinstance(v, dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v


def settings_from_config(cfg: Dict[str, Any]) -> AppSettings:
    """Build AppSettings from the `account`, `pairs` and `features` sections."""
    account = cfg.get("account", {}) or {}
    features = cfg.get("features", {}) or {}
    pairs = {
        str(pair).upper(): PairSettings(
            custom_pip_size=(p or {}).get("pip_size"),
            custom_pip_value_per_standard_lot=(p or {}).get("pip_value"),
        )
        for pair, p in (cfg.get("pairs", {}) or {}).items()
    }
    capital = float(account.get("starting_capital", 10_000.0))
    if capital <= 0:
        raise ValueError(f"starting_capital must be positive, got {capital}")
    return AppSettings(
        starting_capital=capital,
        currency=account.get("currency", "USD"),
        timezone=account.get("timezone", "UTC"),
        pair_settings=pairs,
        enable_a_plus_tracking=bool(features.get("a_plus_tracking", True)),
        enable_psychology_tracking=bool(features.get("psychology_tracking", True)),
        enable_screenshot_upload=bool(features.get("screenshot_upload", False)),
        data_export_format=features.get("export_format", "CSV"),
        custom_strategies=list(cfg.get("strategies", []) or []),
        custom_setup_tags=list(cfg.get("setup_tags", []) or []),
    )
