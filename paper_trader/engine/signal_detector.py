"""EMA crossover + RSI momentum entry detection on closed candles."""
import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from paper_trader.engine.ema import compute_ema
from paper_trader.engine.rsi import compute_rsi_series
from paper_trader.models.position import Side

logger = logging.getLogger("signal_detector")


def crossover(a_prev: float, a_now: float, b_prev: float, b_now: float) -> bool:
    """a was at or below b and is now strictly above."""
    return a_prev <= b_prev and a_now > b_now


def crossunder(a_prev: float, a_now: float, b_prev: float, b_now: float) -> bool:
    """a was at or above b and is now strictly below."""
    return a_prev >= b_prev and a_now < b_now


@dataclass(frozen=True)
class IndicatorSnapshot:
    """Indicator values at the last closed candle and the one before it."""
    fast_prev: float
    fast_now: float
    slow_prev: float
    slow_now: float
    rsi_now: float

    @classmethod
    def from_closes(cls, closes: Sequence[float], fast_len: int, slow_len: int,
                    rsi_len: int) -> Optional["IndicatorSnapshot"]:
        """Return None while any of the five values is still warming up."""
        if len(closes) < 2:
            return None
        fast = compute_ema(closes, fast_len)
        slow = compute_ema(closes, slow_len)
        rsi = compute_rsi_series(closes, rsi_len)
        i = len(closes) - 1
        values = (fast[i - 1], fast[i], slow[i - 1], slow[i], rsi[i])
        if any(v is None or math.isnan(v) for v in values):
            return None
        return cls(*values)


def detect_entry(snap: IndicatorSnapshot, rsi_long_min: float, rsi_short_max: float) -> Optional[Side]:
    """LONG on a bullish cross with RSI above the floor, SHORT on a bearish cross with RSI below the cap."""
    if crossover(snap.fast_prev, snap.fast_now, snap.slow_prev, snap.slow_now) and snap.rsi_now > rsi_long_min:
        logger.debug("Bullish crossover fast=%.4f slow=%.4f rsi=%.2f", snap.fast_now, snap.slow_now, snap.rsi_now)
        return Side.LONG
    if crossunder(snap.fast_prev, snap.fast_now, snap.slow_prev, snap.slow_now) and snap.rsi_now < rsi_short_max:
        logger.debug("Bearish crossunder fast=%.4f slow=%.4f rsi=%.2f", snap.fast_now, snap.slow_now, snap.rsi_now)
        return Side.SHORT
    return None
