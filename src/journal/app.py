"""
CLI entrypoint: report, metrics, insights, timeline over a YAML trades file.
"""
import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List

import yaml

from src.journal.config import load_config, settings_from_config
from src.journal.logging_config import setup_logging

logger = logging.getLogger(__name__)


def load_trades(path: str | Path, settings) -> List:
    """Read a YAML list of raw trades (or {'trades': [...]}) and fold them chronologically."""
    from src.journal.execution.ledger import recalculate_trades, sort_chronologically

    with open(path, "r", encoding="utf-8") as f:
        doc = yaml.safe_load(f) or []
    raw: List[Dict[str, Any]] = doc.get("trades", []) if isinstance(doc, dict) else doc
    # Times must be quoted in YAML ("10:30"), otherwise they load as base-60 integers.
    trades = recalculate_trades(sort_chronologically(recalculate_trades(raw, settings)), settings)
    logger.debug("Loaded %d trades from %s", len(trades), path)
    return trades


def _prepare(args: argparse.Namespace, log_stream=None):
    cfg = load_config(args.config)
    setup_logging(cfg, stream=log_stream)
    settings = settings_from_config(cfg)
    return cfg, settings, load_trades(args.trades, settings)


def cmd_report(args: argparse.Namespace) -> int:
    from src.journal.analytics.report import report_text
    _, settings, trades = _prepare(args)
    print(report_text(trades, settings, title=args.title))
    return 0


def cmd_metrics(args: argparse.Namespace) -> int:
    from src.journal.analytics.ultimate import compute_ultimate_metrics
    _, settings, trades = _prepare(args, log_stream=sys.stderr)
    metrics = compute_ultimate_metrics(trades, settings)
    print(json.dumps(metrics.to_dict(), indent=2, default=str, allow_nan=False))
    return 0


def cmd_insights(args: argparse.Namespace) -> int:
    from src.journal.analytics.insights import detect_streaks, generate_smart_insights
    cfg, _, trades = _prepare(args)
    timeframe = args.timeframe or cfg.get("insights", {}).get("timeframe", "week")
    insights = generate_smart_insights(trades, timeframe)
    if not insights:
        print(f"[Insights] No insights for timeframe '{timeframe}'")
    for i in insights:
        print(f"{i.icon} [{i.type}] {i.title}: {i.message}")
    streak = detect_streaks(trades)
    if streak:
        print(f"[Streak] {streak.count} {streak.type} trades in a row")
    return 0


def cmd_timeline(args: argparse.Namespace) -> int:
    from src.journal.analytics.timeline import compute_period_breakdown
    cfg, settings, trades = _prepare(args, log_stream=sys.stderr if args.json else None)
    view = args.view or cfg.get("timeline", {}).get("view", "monthly")
    periods = compute_period_breakdown(trades, settings, view)
    if args.json:
        print(json.dumps([asdict(p) for p in periods], indent=2, default=str, allow_nan=False))
        return 0
    for p in periods:
        best = " *" if p.is_best_period else ""
        print(
            f"{p.period_label:<14} trades={p.trade_count:<4} net={p.net_pnl:>10.2f} "
            f"win={p.win_rate:>5.1f}% E={p.expectancy:>5.2f}R dd={p.max_drawdown:>5.2f}% "
            f"{p.smart_insight}{best}"
        )
    return 0


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="journal", description="Trading journal analytics CLI")
    parser.add_argument("--config", "-c", default=None, help="Path to YAML config")
    sub = parser.add_subparsers(dest="command", required=True)

    report_p = sub.add_parser("report", help="Print summary report")
    report_p.add_argument("trades", help="YAML file with a list of trades")
    report_p.add_argument("--title", default="Journal Report")
    report_p.set_defaults(func=cmd_report)

    metrics_p = sub.add_parser("metrics", help="Print ultimate metrics as JSON")
    metrics_p.add_argument("trades")
    metrics_p.set_defaults(func=cmd_metrics)

    insights_p = sub.add_parser("insights", help="Print smart insights and active streak")
    insights_p.add_argument("trades")
    insights_p.add_argument("--timeframe", "-t", choices=["day", "week", "month", "year", "all"], default=None)
    insights_p.set_defaults(func=cmd_insights)

    timeline_p = sub.add_parser("timeline", help="Per-period edge breakdown")
    timeline_p.add_argument("trades")
    timeline_p.add_argument("--view", "-v", choices=["monthly", "weekly", "yearly"], default=None)
    timeline_p.add_argument("--json", action="store_true")
    timeline_p.set_defaults(func=cmd_timeline)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
