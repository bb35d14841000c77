"""EMA calculation utilities."""
from typing import List, Optional, Sequence


def ema_step(price: float, prev_ema: float, period: int) -> float:
    k = 2.0 / (period + 1)
    return price * k + prev_ema * (1 - k)


def compute_ema(closes: Sequence[float], period: int) -> List[Optional[float]]:
    """Compute an EMA series aligned with `closes`.

    The first `period - 1` entries are None. The value at index `period - 1`
    is seeded with the simple average of the first `period` closes; every
    later value is smoothed with k = 2 / (period + 1).
    """
    if period <= 0:
        raise ValueError(f"EMA period must be positive, got {period}")
    out: List[Optional[float]] = [None] * len(closes)
    if len(closes) < period:
        return out
    prev = sum(closes[:period]) / period
    out[period - 1] = prev
    for i in range(period, len(closes)):
        prev = ema_step(closes[i], prev, period)
        out[i] = prev
    return out
