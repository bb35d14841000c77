from dataclasses import dataclass, field
from typing import List, Optional

from paper_trader.models.position import FLAT, Open, Position, PositionState
from paper_trader.models.trade import TradeRecord


@dataclass
class BotState:
    """Aggregate persisted between iterations.

    total_pnl_percent is a plain running sum of per-trade net percentages,
    not a compounded return.
    """
    balance: float
    last_closed_ts: int = 0
    total_trades: int = 0
    winning_trades: int = 0
    total_pnl_percent: float = 0.0
    position: PositionState = FLAT
    trades: List[TradeRecord] = field(default_factory=list)

    @classmethod
    def fresh(cls, initial_balance: float) -> "BotState":
        return cls(balance=initial_balance)

    @property
    def current_position(self) -> Optional[Position]:
        if isinstance(self.position, Open):
            return self.position.position
        return None

    @property
    def is_flat(self) -> bool:
        return not isinstance(self.position, Open)

    @property
    def win_rate(self) -> Optional[float]:
        if self.total_trades == 0:
            return None
        return self.winning_trades / self.total_trades * 100

    def summary(self) -> dict:
        pos = self.current_position
        return {
            "last_closed_ts": self.last_closed_ts,
            "balance": self.balance,
            "total_trades": self.total_trades,
            "winning_trades": self.winning_trades,
            "win_rate": self.win_rate,
            "total_pnl_percent": self.total_pnl_percent,
            "position": pos.to_dict() if pos else None,
        }
