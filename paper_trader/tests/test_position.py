import pytest

from paper_trader.errors import SnapshotError
from paper_trader.models.position import ExitType, Position, Side

FEE = 0.16


def _open(side, price=100.0, qty=1.0):
    return Position.open(side, price, 1_700_000_000_000, "BTC/USDT", qty, 2.0, 4.0)


def test_stop_and_target_levels():
    long_pos = _open(Side.LONG)
    assert long_pos.stop_loss == pytest.approx(98.0)
    assert long_pos.take_profit == pytest.approx(104.0)
    short_pos = _open(Side.SHORT)
    assert short_pos.stop_loss == pytest.approx(102.0)
    assert short_pos.take_profit == pytest.approx(96.0)


def test_long_stop_loss_scenario():
    pos = _open(Side.LONG)
    signal = pos.check_exit(99.0, high=100.5, low=97.0)
    assert signal.exit_type == ExitType.STOP_LOSS
    assert signal.price == pytest.approx(98.0)
    assert pos.pnl_percent(signal.price, FEE) == pytest.approx(-2.16)


def test_stop_loss_wins_when_both_levels_touched():
    pos = _open(Side.LONG)
    signal = pos.check_exit(100.0, high=105.0, low=97.0)
    assert signal.exit_type == ExitType.STOP_LOSS
    short_pos = _open(Side.SHORT)
    signal = short_pos.check_exit(100.0, high=103.0, low=95.0)
    assert signal.exit_type == ExitType.STOP_LOSS
    assert signal.price == pytest.approx(102.0)


def test_take_profit_fills_at_level():
    signal = _open(Side.SHORT).check_exit(97.0, high=99.0, low=95.5)
    assert signal.exit_type == ExitType.TAKE_PROFIT
    assert signal.price == pytest.approx(96.0)


def test_close_price_fallback_without_bounds():
    signal = _open(Side.LONG).check_exit(105.0)
    assert signal.exit_type == ExitType.TAKE_PROFIT
    assert signal.price == 105.0
    assert _open(Side.LONG).check_exit(100.5, high=101.0, low=99.5) is None


def test_pnl_sign_follows_side():
    long_pos = _open(Side.LONG)
    short_pos = _open(Side.SHORT)
    assert long_pos.pnl_percent(110.0, 0.0) > 0
    assert long_pos.pnl_percent(90.0, 0.0) < 0
    assert short_pos.pnl_percent(90.0, 0.0) > 0
    assert short_pos.pnl_percent(110.0, 0.0) < 0
    # currency PnL subtracts fees on the entry value
    assert _open(Side.LONG, qty=2.0).pnl_currency(104.0, FEE) == pytest.approx(8.0 - 0.32)


def test_close_returns_new_value_once():
    pos = _open(Side.LONG)
    closed = pos.close(104.0, ExitType.TAKE_PROFIT)
    assert pos.is_active
    assert not closed.is_active
    assert closed.check_exit(50.0) is None
    with pytest.raises(ValueError):
        closed.close(104.0, ExitType.TAKE_PROFIT)


def test_from_dict_round_trip_and_rejections():
    pos = Position.open(Side.SHORT, 250.0, 1, "ETH/USDT", 0.4, 2.0, 4.0, entry_rsi=40.0)
    assert Position.from_dict(pos.to_dict()) == pos
    bad = pos.to_dict()
    del bad["stopLoss"]
    with pytest.raises(SnapshotError):
        Position.from_dict(bad)
    with pytest.raises(SnapshotError):
        Position.from_dict(dict(pos.to_dict(), type="SIDEWAYS"))
    with pytest.raises(SnapshotError):
        Position.from_dict(dict(pos.to_dict(), quantity=0))
    with pytest.raises(SnapshotError):
        Position.from_dict(["not", "a", "dict"])
