import logging
from typing import Optional

from paper_trader.config import Settings
from paper_trader.engine.signal_detector import IndicatorSnapshot
from paper_trader.execution.ledger import TradeLedger
from paper_trader.models.bot_state import BotState
from paper_trader.models.position import FLAT, Open, Position, Side
from paper_trader.models.trade import TradeRecord
from paper_trader.risk.position_sizing import compute_entry_size
from paper_trader.utils.time_utils import format_ts, now_ms

logger = logging.getLogger("position_manager")


class PositionManager:
    """FLAT <-> OPEN transitions for the single simulated position.

    Callers evaluate exits before entries on every candle; this class only
    guarantees that an entry is never accepted while a position is open.
    """

    def __init__(self, settings: Settings, ledger: Optional[TradeLedger] = None):
        self.settings = settings
        self.ledger = ledger or TradeLedger(settings.TRADING_FEE_PERCENT)
        self.prefix = settings.LOG_PREFIX

    def open_position(self, state: BotState, side: Side, price: float, timestamp: int,
                      snapshot: Optional[IndicatorSnapshot] = None) -> Optional[Position]:
        if not state.is_flat:
            logger.warning("%s %s entry ignored: a %s position is already open",
                           self.prefix, side.value, state.current_position.side.value)
            return None
        size = compute_entry_size(state.balance, price, self.settings.POSITION_SIZE_PERCENT,
                                  self.settings.MIN_TRADE_NOTIONAL)
        if not size.accepted:
            logger.info("%s Insufficient balance for trade: %.2f available (notional %.2f < %.2f)",
                        self.prefix, state.balance, size.notional, self.settings.MIN_TRADE_NOTIONAL)
            return None
        position = Position.open(
            side=side,
            entry_price=price,
            entry_timestamp=timestamp,
            symbol=self.settings.SYMBOL,
            quantity=size.quantity,
            stop_loss_percent=self.settings.STOP_LOSS_PERCENT,
            take_profit_percent=self.settings.TAKE_PROFIT_PERCENT,
            entry_rsi=snapshot.rsi_now if snapshot else None,
            fast_ema=snapshot.fast_now if snapshot else None,
            slow_ema=snapshot.slow_now if snapshot else None,
        )
        state.position = Open(position)
        logger.info(
            "%s %s %s ENTRY %s at %.2f | Quantity: %.6f | Value: %.2f | SL: %.2f | TP: %.2f",
            self.prefix, format_ts(timestamp, self.settings.DISPLAY_TIMEZONE), side.value, position.symbol,
            price, position.quantity, position.entry_value, position.stop_loss, position.take_profit,
        )
        return position

    def evaluate_exit(self, state: BotState, close: float, high: Optional[float] = None,
                      low: Optional[float] = None, exit_time: Optional[int] = None) -> Optional[TradeRecord]:
        """Close the open position if this candle reached SL/TP. Returns the trade record or None."""
        position = state.current_position
        if position is None:
            return None
        signal = position.check_exit(close, high, low)
        if signal is None:
            return None
        closed = position.close(signal.price, signal.exit_type)
        ts = exit_time if exit_time is not None else now_ms()
        trade = self.ledger.record_close(state, closed, ts)
        state.position = FLAT
        win_rate = state.win_rate or 0.0
        logger.info(
            "%s %s %s %s at %.2f | PnL: %.2f%% (%.2f) | Balance: %.2f | Win Rate: %.1f%%",
            self.prefix, format_ts(ts, self.settings.DISPLAY_TIMEZONE), signal.exit_type.value,
            closed.side.value, signal.price, trade.pnl_percent, trade.pnl_currency, state.balance, win_rate,
        )
        return trade
