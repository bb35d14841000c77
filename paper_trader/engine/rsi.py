"""RSI calculation utilities.

Wilder-style RSI over a full close series: the first `period` changes seed
the average gain/loss, later changes are folded in with Wilder smoothing.
"""
from typing import List, Optional, Sequence


def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1 + rs))


def compute_rsi_wilder_stream(prev_avg_gain: float, prev_avg_loss: float, change: float, period: int):
    """Fold one price change into Wilder averages.

    Returns:
        tuple: (new_avg_gain, new_avg_loss, rsi_value)
    """
    gain = max(change, 0.0)
    loss = max(-change, 0.0)
    avg_gain = (prev_avg_gain * (period - 1) + gain) / period
    avg_loss = (prev_avg_loss * (period - 1) + loss) / period
    return avg_gain, avg_loss, _rsi_from_averages(avg_gain, avg_loss)


def compute_rsi_series(closes: Sequence[float], period: int = 14) -> List[Optional[float]]:
    """Compute an RSI series aligned with `closes`.

    Entries with index < period are None (need period + 1 closes for the first value).
    A window with no losses yields 100.
    """
    if period <= 0:
        raise ValueError(f"RSI period must be positive, got {period}")
    out: List[Optional[float]] = [None] * len(closes)
    if len(closes) < period + 1:
        return out
    gains = 0.0
    losses = 0.0
    for i in range(1, period + 1):
        change = closes[i] - closes[i - 1]
        if change >= 0:
            gains += change
        else:
            losses -= change
    avg_gain = gains / period
    avg_loss = losses / period
    out[period] = _rsi_from_averages(avg_gain, avg_loss)
    for i in range(period + 1, len(closes)):
        avg_gain, avg_loss, out[i] = compute_rsi_wilder_stream(
            avg_gain, avg_loss, closes[i] - closes[i - 1], period
        )
    return out


def compute_rsi(closes: Sequence[float], period: int = 14) -> Optional[float]:
    """Latest RSI value, or None if insufficient data."""
    series = compute_rsi_series(closes, period)
    return series[-1] if series else None
