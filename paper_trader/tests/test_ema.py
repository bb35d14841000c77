import pytest

from paper_trader.engine.ema import compute_ema, ema_step


def test_ema_seeded_with_sma_then_smoothed():
    out = compute_ema([1, 2, 3, 4, 5], 3)
    assert out[:2] == [None, None]
    # seed = (1 + 2 + 3) / 3, then k = 0.5
    assert out[2] == pytest.approx(2.0)
    assert out[3] == pytest.approx(3.0)
    assert out[4] == pytest.approx(4.0)


def test_ema_too_few_closes_is_all_none():
    assert compute_ema([10, 11], 5) == [None, None]
    assert compute_ema([], 3) == []


def test_ema_step_weights_latest_price():
    assert ema_step(110, 100, 9) == pytest.approx(102.0)


def test_ema_rejects_non_positive_period():
    with pytest.raises(ValueError):
        compute_ema([1, 2, 3], 0)
