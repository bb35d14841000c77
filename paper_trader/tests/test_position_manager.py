import pytest

from paper_trader.config import Settings
from paper_trader.execution.position_manager import PositionManager
from paper_trader.models.bot_state import BotState
from paper_trader.models.position import FLAT, Side
from paper_trader.risk.position_sizing import compute_entry_size


def _manager(**overrides):
    return PositionManager(Settings(**overrides))


def test_entry_sizing_accepts_and_rejects():
    size = compute_entry_size(100.0, 50.0, 95.0, 5.0)
    assert size.accepted
    assert size.notional == pytest.approx(95.0)
    assert size.quantity == pytest.approx(1.9)
    small = compute_entry_size(4.0, 50.0, 95.0, 5.0)
    assert not small.accepted
    assert small.notional == pytest.approx(3.8)


def test_open_position_sizes_from_balance():
    state = BotState.fresh(100.0)
    pos = _manager().open_position(state, Side.LONG, 50.0, 1000)
    assert pos is not None
    assert pos.quantity == pytest.approx(1.9)
    assert state.current_position == pos
    assert state.balance == 100.0


def test_insufficient_balance_leaves_state_untouched():
    state = BotState.fresh(4.0)
    assert _manager().open_position(state, Side.LONG, 50.0, 1000) is None
    assert state.position == FLAT
    assert state.balance == 4.0


def test_second_entry_rejected_while_open():
    mgr = _manager()
    state = BotState.fresh(100.0)
    first = mgr.open_position(state, Side.LONG, 50.0, 1000)
    assert mgr.open_position(state, Side.SHORT, 51.0, 2000) is None
    assert state.current_position == first


def test_exit_records_trade_and_goes_flat():
    mgr = _manager()
    state = BotState.fresh(100.0)
    mgr.open_position(state, Side.LONG, 100.0, 1000)
    assert mgr.evaluate_exit(state, 100.5, high=101.0, low=99.0, exit_time=2000) is None
    trade = mgr.evaluate_exit(state, 99.0, high=100.0, low=97.0, exit_time=3000)
    assert trade is not None
    assert trade.exit_type == "STOP_LOSS"
    assert trade.exit_price == pytest.approx(98.0)
    assert trade.pnl_percent == pytest.approx(-2.16)
    assert trade.exit_time == 3000
    assert state.is_flat
    assert state.total_trades == 1
    assert state.winning_trades == 0
    # 0.95 BTC-equivalent: gross -1.9, fee 95 * 0.16%
    assert state.balance == pytest.approx(100.0 - 1.9 - 0.152)
    assert trade.final_balance == pytest.approx(state.balance)


def test_evaluate_exit_when_flat_is_noop():
    state = BotState.fresh(100.0)
    assert _manager().evaluate_exit(state, 100.0) is None
    assert state.total_trades == 0
