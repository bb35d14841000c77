"""Versioned JSON snapshot of BotState.

All defaulting happens here, once, at load time:

  key               type          default
  schemaVersion     int           0 (legacy, accepted)
  lastClosedTs      int           0
  totalTrades       int           0
  winningTrades     int           0
  totalPnL          float         0.0 (sum of per-trade net %)
  balance           float         initial balance
  currentPosition   object|null   null
  trades            array         []
  lastSaved         str           written on save, ignored on load

Malformed values raise SnapshotError; the store turns that into defaults.
"""
import logging
from typing import Any, Dict

from paper_trader.errors import SnapshotError
from paper_trader.execution.ledger import counters_from_trades
from paper_trader.models.bot_state import BotState
from paper_trader.models.position import FLAT, Open, Position
from paper_trader.models.trade import TradeRecord
from paper_trader.utils.time_utils import utc_iso_now

logger = logging.getLogger("snapshot")

SCHEMA_VERSION = 1


def state_to_snapshot(state: BotState) -> Dict[str, Any]:
    pos = state.current_position
    return {
        "schemaVersion": SCHEMA_VERSION,
        "lastClosedTs": state.last_closed_ts,
        "totalTrades": state.total_trades,
        "winningTrades": state.winning_trades,
        "totalPnL": state.total_pnl_percent,
        "balance": state.balance,
        "currentPosition": pos.to_dict() if pos else None,
        "trades": [t.to_dict() for t in state.trades],
        "lastSaved": utc_iso_now(),
    }


def _get(data: Dict[str, Any], key: str, cast, default):
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        raise SnapshotError(f"{key} has invalid value {value!r}")
    try:
        return cast(value)
    except (TypeError, ValueError, OverflowError):
        raise SnapshotError(f"{key} has invalid value {value!r}")


def snapshot_to_state(data: Any, initial_balance: float) -> BotState:
    if not isinstance(data, dict):
        raise SnapshotError(f"snapshot must be a JSON object, got {type(data).__name__}")
    version = _get(data, "schemaVersion", int, 0)
    if version > SCHEMA_VERSION:
        raise SnapshotError(f"snapshot schema {version} is newer than supported {SCHEMA_VERSION}")

    raw_trades = data.get("trades") or []
    if not isinstance(raw_trades, list):
        raise SnapshotError("trades must be an array")
    trades = [TradeRecord.from_dict(t) for t in raw_trades]

    state = BotState(
        balance=_get(data, "balance", float, initial_balance),
        last_closed_ts=_get(data, "lastClosedTs", int, 0),
        total_trades=_get(data, "totalTrades", int, 0),
        winning_trades=_get(data, "winningTrades", int, 0),
        total_pnl_percent=_get(data, "totalPnL", float, 0.0),
        trades=trades,
    )

    raw_pos = data.get("currentPosition")
    if raw_pos is not None:
        position = Position.from_dict(raw_pos)
        active = raw_pos.get("isActive", True)
        if not isinstance(active, bool):
            raise SnapshotError(f"isActive must be a boolean, got {active!r}")
        if active:
            state.position = Open(position)
        else:
            logger.warning("Persisted position is marked inactive; starting flat")
            state.position = FLAT

    if state.total_trades != len(trades) or state.winning_trades > state.total_trades:
        logger.warning("Snapshot counters (total=%d wins=%d) disagree with %d stored trades; recomputing",
                       state.total_trades, state.winning_trades, len(trades))
        state.total_trades, state.winning_trades, state.total_pnl_percent = counters_from_trades(trades)
    return state


__all__ = ["SCHEMA_VERSION", "state_to_snapshot", "snapshot_to_state"]
