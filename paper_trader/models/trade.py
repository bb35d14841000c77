from dataclasses import dataclass
from typing import Any, Dict, Optional

from paper_trader.errors import SnapshotError


@dataclass(frozen=True)
class TradeRecord:
    """Immutable snapshot of a closed position; `id` is the 1-based trade sequence number."""
    id: int
    entry_time: int
    exit_time: int
    symbol: str
    side: str
    entry_price: float
    exit_price: float
    quantity: float
    entry_value: float
    exit_value: float
    stop_loss: float
    take_profit: float
    pnl_percent: float
    pnl_currency: float
    fees: float
    final_balance: float
    exit_type: str
    entry_rsi: Optional[float] = None
    fast_ema: Optional[float] = None
    slow_ema: Optional[float] = None

    @property
    def is_win(self) -> bool:
        return self.pnl_percent > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "entryTime": self.entry_time,
            "exitTime": self.exit_time,
            "symbol": self.symbol,
            "type": self.side,
            "entryPrice": self.entry_price,
            "exitPrice": self.exit_price,
            "quantity": self.quantity,
            "entryValue": self.entry_value,
            "exitValue": self.exit_value,
            "stopLoss": self.stop_loss,
            "takeProfit": self.take_profit,
            "pnlPercent": self.pnl_percent,
            "pnlCurrency": self.pnl_currency,
            "fees": self.fees,
            "finalBalance": self.final_balance,
            "exitType": self.exit_type,
            "entryRSI": self.entry_rsi,
            "fastEMA": self.fast_ema,
            "slowEMA": self.slow_ema,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TradeRecord":
        if not isinstance(data, dict):
            raise SnapshotError(f"trade must be an object, got {type(data).__name__}")
        pnl_currency = data.get("pnlCurrency", data.get("pnlEur"))  # older snapshots
        try:
            return cls(
                id=int(data["id"]),
                entry_time=int(data["entryTime"]),
                exit_time=int(data["exitTime"]),
                symbol=str(data["symbol"]),
                side=str(data["type"]),
                entry_price=float(data["entryPrice"]),
                exit_price=float(data["exitPrice"]),
                quantity=float(data["quantity"]),
                entry_value=float(data["entryValue"]),
                exit_value=float(data["exitValue"]),
                stop_loss=float(data["stopLoss"]),
                take_profit=float(data["takeProfit"]),
                pnl_percent=float(data["pnlPercent"]),
                pnl_currency=float(pnl_currency),
                fees=float(data["fees"]),
                final_balance=float(data["finalBalance"]),
                exit_type=str(data["exitType"]),
                entry_rsi=None if data.get("entryRSI") is None else float(data["entryRSI"]),
                fast_ema=None if data.get("fastEMA") is None else float(data["fastEMA"]),
                slow_ema=None if data.get("slowEMA") is None else float(data["slowEMA"]),
            )
        except KeyError as e:
            raise SnapshotError(f"trade missing field {e}")
        except (TypeError, ValueError, OverflowError) as e:
            raise SnapshotError(f"invalid trade values: {e}")
