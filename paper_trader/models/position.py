"""Position value object and the FLAT / OPEN position state."""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Union

from paper_trader.errors import SnapshotError


class Side(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"


class ExitType(str, Enum):
    STOP_LOSS = "STOP_LOSS"
    TAKE_PROFIT = "TAKE_PROFIT"


@dataclass(frozen=True)
class ExitSignal:
    exit_type: ExitType
    price: float


@dataclass(frozen=True)
class Position:
    """One simulated trade.

    stop_loss / take_profit are derived once in `open()` and never change.
    The only allowed transition is active -> closed, via `close()`, which
    returns a new value.
    """
    side: Side
    entry_price: float
    entry_timestamp: int
    symbol: str
    quantity: float
    stop_loss: float
    take_profit: float
    entry_rsi: Optional[float] = None
    fast_ema: Optional[float] = None
    slow_ema: Optional[float] = None
    exit_price: Optional[float] = None
    exit_type: Optional[ExitType] = None

    @classmethod
    def open(cls, side: Side, entry_price: float, entry_timestamp: int, symbol: str, quantity: float,
             stop_loss_percent: float, take_profit_percent: float,
             entry_rsi: Optional[float] = None, fast_ema: Optional[float] = None,
             slow_ema: Optional[float] = None) -> "Position":
        if entry_price <= 0:
            raise ValueError(f"entry price must be positive, got {entry_price}")
        sl = stop_loss_percent / 100.0
        tp = take_profit_percent / 100.0
        if side == Side.LONG:
            stop_loss = entry_price * (1 - sl)
            take_profit = entry_price * (1 + tp)
        else:
            stop_loss = entry_price * (1 + sl)
            take_profit = entry_price * (1 - tp)
        return cls(
            side=side,
            entry_price=entry_price,
            entry_timestamp=entry_timestamp,
            symbol=symbol,
            quantity=quantity,
            stop_loss=stop_loss,
            take_profit=take_profit,
            entry_rsi=entry_rsi,
            fast_ema=fast_ema,
            slow_ema=slow_ema,
        )

    @property
    def is_active(self) -> bool:
        return self.exit_type is None

    @property
    def entry_value(self) -> float:
        return self.quantity * self.entry_price

    def check_exit(self, current_price: float, high: Optional[float] = None,
                   low: Optional[float] = None) -> Optional[ExitSignal]:
        """Evaluate stop-loss / take-profit for one candle.

        Intrabar bounds are checked first and fill at the level itself; the
        close is the fallback and fills at the close. Stop-loss always wins
        when both levels were reachable.
        """
        if not self.is_active:
            return None
        if self.side == Side.LONG:
            if low is not None and low <= self.stop_loss:
                return ExitSignal(ExitType.STOP_LOSS, self.stop_loss)
            if high is not None and high >= self.take_profit:
                return ExitSignal(ExitType.TAKE_PROFIT, self.take_profit)
            if current_price <= self.stop_loss:
                return ExitSignal(ExitType.STOP_LOSS, current_price)
            if current_price >= self.take_profit:
                return ExitSignal(ExitType.TAKE_PROFIT, current_price)
        else:
            if high is not None and high >= self.stop_loss:
                return ExitSignal(ExitType.STOP_LOSS, self.stop_loss)
            if low is not None and low <= self.take_profit:
                return ExitSignal(ExitType.TAKE_PROFIT, self.take_profit)
            if current_price >= self.stop_loss:
                return ExitSignal(ExitType.STOP_LOSS, current_price)
            if current_price <= self.take_profit:
                return ExitSignal(ExitType.TAKE_PROFIT, current_price)
        return None

    def pnl_percent(self, price: float, fee_percent: float) -> float:
        """Net PnL in percent: gross move minus the round-trip fee (flat, not compounded)."""
        if self.side == Side.LONG:
            price_diff = price - self.entry_price
        else:
            price_diff = self.entry_price - price
        gross = (price_diff / self.entry_price) * 100
        return gross - fee_percent

    def fees(self, fee_percent: float) -> float:
        return self.entry_value * (fee_percent / 100)

    def pnl_currency(self, price: float, fee_percent: float) -> float:
        entry_value = self.entry_value
        current_value = self.quantity * price
        if self.side == Side.LONG:
            gross = current_value - entry_value
        else:
            gross = entry_value - current_value
        return gross - self.fees(fee_percent)

    def close(self, exit_price: float, exit_type: ExitType) -> "Position":
        if not self.is_active:
            raise ValueError("position already closed")
        return replace(self, exit_price=exit_price, exit_type=exit_type)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.side.value,
            "entryPrice": self.entry_price,
            "timestamp": self.entry_timestamp,
            "symbol": self.symbol,
            "quantity": self.quantity,
            "stopLoss": self.stop_loss,
            "takeProfit": self.take_profit,
            "isActive": self.is_active,
            "entryRSI": self.entry_rsi,
            "fastEMA": self.fast_ema,
            "slowEMA": self.slow_ema,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Position":
        """Hydrate a persisted position, rejecting malformed shapes."""
        if not isinstance(data, dict):
            raise SnapshotError(f"position must be an object, got {type(data).__name__}")
        required = ("type", "entryPrice", "timestamp", "symbol", "quantity", "stopLoss", "takeProfit")
        missing = [k for k in required if data.get(k) is None]
        if missing:
            raise SnapshotError(f"position missing fields: {missing}")
        try:
            side = Side(data["type"])
        except ValueError:
            raise SnapshotError(f"unknown position type {data['type']!r}")
        try:
            pos = cls(
                side=side,
                entry_price=float(data["entryPrice"]),
                entry_timestamp=int(data["timestamp"]),
                symbol=str(data["symbol"]),
                quantity=float(data["quantity"]),
                stop_loss=float(data["stopLoss"]),
                take_profit=float(data["takeProfit"]),
                entry_rsi=_opt_float(data.get("entryRSI")),
                fast_ema=_opt_float(data.get("fastEMA")),
                slow_ema=_opt_float(data.get("slowEMA")),
            )
        except (TypeError, ValueError, OverflowError) as e:
            raise SnapshotError(f"invalid position values: {e}")
        if pos.entry_price <= 0 or pos.quantity <= 0:
            raise SnapshotError("position entryPrice and quantity must be positive")
        return pos


def _opt_float(v) -> Optional[float]:
    return None if v is None else float(v)


@dataclass(frozen=True)
class Flat:
    """No active position."""


@dataclass(frozen=True)
class Open:
    position: Position


PositionState = Union[Flat, Open]
FLAT = Flat()
