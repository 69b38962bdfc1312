#!/usr/bin/env python3
"""
Journal report generator: fold a trades file, collect KPIs, write REPORT.md and metrics.json.
Usage:
  python scripts/make_report.py trades.yaml                  # write to reports/latest/
  python scripts/make_report.py trades.yaml --baseline       # also save as reports/history/baseline.json
  python scripts/make_report.py trades.yaml --config configs/my_account.yaml --view weekly
"""
import argparse
import json
import sys
from datetime import datetime, timezone
from pathlib import Path


def build_payload(trades, settings, view: str) -> dict:
    from src.journal.analytics.metrics import compute_summary
    from src.journal.analytics.timeline import compute_period_breakdown
    from src.journal.analytics.ultimate import compute_ultimate_metrics
    from src.journal.utils.formatting import json_safe
    s = compute_summary(trades, settings)
    u = compute_ultimate_metrics(trades, settings)
    periods = compute_period_breakdown(trades, settings, view)
    return {
        "kpis": {
            "net_pnl": s.total_pnl,
            "profit_factor": json_safe(s.profit_factor),
            "max_drawdown_pct": s.max_drawdown,
            "win_rate_pct": s.win_rate,
            "expectancy_r": u.expectancy,
            "avg_rr": s.avg_rr,
            "trade_count": s.total_trades,
            "avg_hold_minutes": u.average_hold_time_overall,
        },
        "periods": [
            {"period": p.period_label, "net_pnl": p.net_pnl, "trades": p.trade_count, "insight": p.smart_insight}
            for p in periods
        ],
    }


def render_markdown(payload: dict, run_id: str, currency: str) -> str:
    from src.journal.utils.formatting import INFINITE, format_currency
    k = payload["kpis"]
    pf = "∞" if k["profit_factor"] == INFINITE else f"{k['profit_factor']:.2f}"
    lines = [
        "# Journal Report",
        "",
        f"**Run ID:** {run_id}",
        "",
        "## KPIs",
        "| Metric | Value |",
        "|--------|-------|",
        f"| net_pnl | {format_currency(k['net_pnl'], currency)} |",
        f"| profit_factor | {pf} |",
        f"| max_drawdown | {k['max_drawdown_pct']:.2f}% |",
        f"| winrate | {k['win_rate_pct']:.1f}% |",
        f"| expectancy_r | {k['expectancy_r']:.2f} |",
        f"| avg_rr | {k['avg_rr']:.2f} |",
        f"| trade_count | {k['trade_count']} |",
        f"| avg_hold_minutes | {k['avg_hold_minutes']:.1f} |",
        "",
        "## Periods",
        "| Period | Trades | Net P&L | Insight |",
        "|--------|--------|---------|---------|",
    ]
    for p in payload["periods"]:
        lines.append(f"| {p['period']} | {p['trades']} | {format_currency(p['net_pnl'], currency)} | {p['insight']} |")
    lines.append("")
    return "\n".join(lines)


def main() -> None:
    ap = argparse.ArgumentParser(description="Journal report generator")
    ap.add_argument("trades", help="YAML file with a list of trades")
    ap.add_argument("--baseline", action="store_true", help="Save metrics as baseline.json")
    ap.add_argument("--config", "-c", default=None, help="Config YAML path")
    ap.add_argument("--view", default="monthly", choices=["monthly", "weekly", "yearly"])
    args = ap.parse_args()
    root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(root))
    from src.journal.app import load_trades
    from src.journal.config import load_config, settings_from_config
    from src.journal.logging_config import setup_logging
    cfg = load_config(args.config)
    setup_logging(cfg)
    settings = settings_from_config(cfg)

    latest_dir = root / "reports" / "latest"
    history_dir = root / "reports" / "history"
    latest_dir.mkdir(parents=True, exist_ok=True)
    history_dir.mkdir(parents=True, exist_ok=True)

    run_id = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    trades = load_trades(args.trades, settings)
    payload = {"run_id": run_id, **build_payload(trades, settings, args.view)}

    (latest_dir / "metrics.json").write_text(json.dumps(payload, indent=2, default=str, allow_nan=False), encoding="utf-8")
    if args.baseline:
        (history_dir / "baseline.json").write_text(json.dumps(payload, indent=2, default=str, allow_nan=False), encoding="utf-8")
        print("[make_report] Baseline saved to reports/history/baseline.json")

    (latest_dir / "REPORT.md").write_text(render_markdown(payload, run_id, settings.currency), encoding="utf-8")
    print("[make_report] Wrote reports/latest/REPORT.md and metrics.json")


if __name__ == "__main__":
    main()
