import logging
from typing import Iterable, Tuple

from paper_trader.models.bot_state import BotState
from paper_trader.models.position import Position
from paper_trader.models.trade import TradeRecord

logger = logging.getLogger("ledger")


class TradeLedger:
    """Turns closed positions into trade records and keeps the running counters on BotState."""

    def __init__(self, fee_percent: float):
        self.fee_percent = fee_percent

    def record_close(self, state: BotState, position: Position, exit_time: int) -> TradeRecord:
        if position.is_active or position.exit_price is None:
            raise ValueError("only closed positions can be recorded")
        exit_price = position.exit_price
        pnl = position.pnl_percent(exit_price, self.fee_percent)
        pnl_currency = position.pnl_currency(exit_price, self.fee_percent)

        state.balance += pnl_currency
        state.total_trades += 1
        state.total_pnl_percent += pnl
        if pnl > 0:
            state.winning_trades += 1

        trade = TradeRecord(
            id=state.total_trades,
            entry_time=position.entry_timestamp,
            exit_time=exit_time,
            symbol=position.symbol,
            side=position.side.value,
            entry_price=position.entry_price,
            exit_price=exit_price,
            quantity=position.quantity,
            entry_value=position.entry_value,
            exit_value=position.quantity * exit_price,
            stop_loss=position.stop_loss,
            take_profit=position.take_profit,
            pnl_percent=pnl,
            pnl_currency=pnl_currency,
            fees=position.fees(self.fee_percent),
            final_balance=state.balance,
            exit_type=position.exit_type.value,
            entry_rsi=position.entry_rsi,
            fast_ema=position.fast_ema,
            slow_ema=position.slow_ema,
        )
        state.trades.append(trade)
        return trade


def counters_from_trades(trades: Iterable[TradeRecord]) -> Tuple[int, int, float]:
    """(total_trades, winning_trades, total_pnl_percent) recomputed from the trade list."""
    total = 0
    wins = 0
    pnl = 0.0
    for t in trades:
        total += 1
        pnl += t.pnl_percent
        if t.is_win:
            wins += 1
    return total, wins, pnl
