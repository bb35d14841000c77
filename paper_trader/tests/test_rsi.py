import pytest

from paper_trader.engine.rsi import compute_rsi, compute_rsi_series


def test_rsi_needs_period_plus_one_closes():
    assert compute_rsi_series([1, 2, 3], 3) == [None, None, None]
    assert compute_rsi([1, 2, 3], 3) is None


def test_rsi_hand_computed_wilder_values():
    out = compute_rsi_series([1, 2, 1, 2], 2)
    assert out[:2] == [None, None]
    # seed: avg gain 0.5, avg loss 0.5
    assert out[2] == pytest.approx(50.0)
    # next: gain 0.75, loss 0.25 -> RS 3
    assert out[3] == pytest.approx(75.0)


def test_rsi_no_losses_is_100_and_no_gains_is_0():
    assert compute_rsi(list(range(1, 30)), 14) == 100.0
    assert compute_rsi(list(range(30, 1, -1)), 14) == pytest.approx(0.0)


def test_rsi_stays_within_bounds():
    closes = [100 + ((i * 37) % 11) - 5 + i * 0.1 for i in range(120)]
    series = compute_rsi_series(closes, 14)
    assert all(v is None for v in series[:14])
    for v in series[14:]:
        assert 0.0 <= v <= 100.0
