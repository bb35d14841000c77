"""
Market data models.
"""
from dataclasses import dataclass
from typing import List, Sequence


@dataclass(frozen=True)
class Candle:
    """One OHLCV bar; timestamp is the bar open time in epoch milliseconds."""
    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    @classmethod
    def from_ohlcv(cls, row: Sequence) -> "Candle":
        """Build from a ccxt-style row [ts, open, high, low, close, volume]."""
        if len(row) < 5:
            raise ValueError(f"OHLCV row too short: {row!r}")
        volume = row[5] if len(row) > 5 and row[5] is not None else 0.0
        return cls(
            timestamp=int(row[0]),
            open=float(row[1]),
            high=float(row[2]),
            low=float(row[3]),
            close=float(row[4]),
            volume=float(volume),
        )


def closes_of(candles: Sequence[Candle]) -> List[float]:
    return [c.close for c in candles]
