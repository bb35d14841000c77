"""Tabular trade report, rewritten in full after every closed trade."""
import logging
import os
from typing import List, Sequence

import pandas as pd

from paper_trader.models.trade import TradeRecord
from paper_trader.utils.time_utils import format_ts

logger = logging.getLogger("trade_export")

COLUMNS = [
    "ID", "Entry Time", "Exit Time", "Pair", "Side", "Entry Price", "Exit Price", "Quantity",
    "Entry Value", "Exit Value", "Stop Loss", "Take Profit", "PnL %", "PnL", "Fees",
    "Final Balance", "Exit Type", "Entry RSI", "Fast EMA", "Slow EMA",
]


def _fmt(value, digits: int = 2):
    return "-" if value is None else round(value, digits)


def trades_frame(trades: Sequence[TradeRecord], tz_name: str = "UTC") -> pd.DataFrame:
    rows: List[dict] = []
    for t in trades:
        rows.append({
            "ID": t.id,
            "Entry Time": format_ts(t.entry_time, tz_name),
            "Exit Time": format_ts(t.exit_time, tz_name),
            "Pair": t.symbol,
            "Side": t.side,
            "Entry Price": _fmt(t.entry_price),
            "Exit Price": _fmt(t.exit_price),
            "Quantity": _fmt(t.quantity, 6),
            "Entry Value": _fmt(t.entry_value),
            "Exit Value": _fmt(t.exit_value),
            "Stop Loss": _fmt(t.stop_loss),
            "Take Profit": _fmt(t.take_profit),
            "PnL %": _fmt(t.pnl_percent),
            "PnL": _fmt(t.pnl_currency),
            "Fees": _fmt(t.fees),
            "Final Balance": _fmt(t.final_balance),
            "Exit Type": t.exit_type,
            "Entry RSI": _fmt(t.entry_rsi),
            "Fast EMA": _fmt(t.fast_ema),
            "Slow EMA": _fmt(t.slow_ema),
        })
    return pd.DataFrame(rows, columns=COLUMNS)


class TradeExporter:
    def __init__(self, path: str, tz_name: str = "UTC"):
        self.path = path
        self.tz_name = tz_name

    def export(self, trades: Sequence[TradeRecord]) -> bool:
        """Write the full report; failures are logged, never raised."""
        if not trades:
            logger.info("No trades to export")
            return False
        try:
            directory = os.path.dirname(os.path.abspath(self.path))
            os.makedirs(directory, exist_ok=True)
            trades_frame(trades, self.tz_name).to_csv(self.path, index=False)
            logger.info("Exported %d trades to %s", len(trades), self.path)
            return True
        except Exception as e:
            logger.error("Error exporting trades to %s: %s", self.path, e)
            return False
