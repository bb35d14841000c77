"""Write the trade report from persisted state without starting the bot.

Run:
  python -m paper_trader.scripts.export_trades --output report.csv
  STATE_BACKEND=database DATABASE_URL=sqlite:///paper_trader.db python -m paper_trader.scripts.export_trades
"""
from __future__ import annotations

import argparse
import logging
import sys

from paper_trader.config import load_settings
from paper_trader.persistence.state_store import build_state_store
from paper_trader.services.trade_export import TradeExporter
from paper_trader.utils.logging_config import configure_logging

logger = logging.getLogger("export_trades")


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Export the paper-trading ledger as a CSV report")
    p.add_argument("--output", help="Report path (defaults to EXPORT_FILE)")
    p.add_argument("--state-file", help="Override STATE_FILE for the file backend")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    overrides = {}
    if args.state_file:
        overrides["STATE_FILE"] = args.state_file
    settings = load_settings(**overrides)
    configure_logging(settings.LOG_LEVEL)
    state = build_state_store(settings).load()
    exporter = TradeExporter(args.output or settings.EXPORT_FILE, settings.DISPLAY_TIMEZONE)
    win_rate = state.win_rate
    logger.info("Trades: %d | Win rate: %s | Balance: %.2f | Total PnL: %.2f%%",
                state.total_trades, "-" if win_rate is None else f"{win_rate:.1f}%",
                state.balance, state.total_pnl_percent)
    return 0 if exporter.export(state.trades) or not state.trades else 1


if __name__ == "__main__":
    sys.exit(main())
