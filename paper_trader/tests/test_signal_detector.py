import itertools

from paper_trader.engine.signal_detector import IndicatorSnapshot, crossover, crossunder, detect_entry
from paper_trader.models.position import Side


def _falling_then_jump(n=60, start=200.0, jump=300.0):
    return [start - i for i in range(n)] + [jump]


def test_crossover_and_crossunder():
    assert crossover(1, 3, 2, 2)
    assert crossover(2, 3, 2, 2)
    assert not crossover(3, 4, 2, 2)
    assert crossunder(3, 1, 2, 2)
    assert crossunder(2, 1, 2, 2)
    assert not crossunder(1, 0, 2, 2)


def test_crossover_and_crossunder_never_both_true():
    values = [0.0, 1.0, 2.0]
    for a_prev, a_now, b_prev, b_now in itertools.product(values, repeat=4):
        assert not (crossover(a_prev, a_now, b_prev, b_now) and crossunder(a_prev, a_now, b_prev, b_now))


def test_detect_entry_rsi_filter():
    bull = dict(fast_prev=9.0, fast_now=11.0, slow_prev=10.0, slow_now=10.0)
    bear = dict(fast_prev=11.0, fast_now=9.0, slow_prev=10.0, slow_now=10.0)
    assert detect_entry(IndicatorSnapshot(rsi_now=60, **bull), 55, 45) == Side.LONG
    assert detect_entry(IndicatorSnapshot(rsi_now=55, **bull), 55, 45) is None
    assert detect_entry(IndicatorSnapshot(rsi_now=40, **bear), 55, 45) == Side.SHORT
    assert detect_entry(IndicatorSnapshot(rsi_now=45, **bear), 55, 45) is None
    flat = IndicatorSnapshot(fast_prev=11.0, fast_now=12.0, slow_prev=10.0, slow_now=10.0, rsi_now=90)
    assert detect_entry(flat, 55, 45) is None


def test_snapshot_is_none_during_warmup():
    assert IndicatorSnapshot.from_closes([100.0], 12, 30, 14) is None
    # slow EMA has a current value but not a previous one yet
    assert IndicatorSnapshot.from_closes([100.0] * 30, 12, 30, 14) is None


def test_snapshot_detects_bullish_cross_after_jump():
    snap = IndicatorSnapshot.from_closes(_falling_then_jump(), 12, 30, 14)
    assert snap is not None
    assert snap.fast_prev < snap.slow_prev
    assert snap.fast_now > snap.slow_now
    assert snap.rsi_now > 55
    assert detect_entry(snap, 55, 45) == Side.LONG
