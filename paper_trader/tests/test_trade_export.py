import pandas as pd

from paper_trader.execution.ledger import TradeLedger
from paper_trader.models.bot_state import BotState
from paper_trader.models.position import ExitType, Position, Side
from paper_trader.scripts import export_trades
from paper_trader.persistence.state_store import JsonFileStateStore
from paper_trader.services.trade_export import COLUMNS, TradeExporter, trades_frame


def _state_with_trade():
    state = BotState.fresh(100.0)
    pos = Position.open(Side.LONG, 100.0, 1_700_000_000_000, "BTC/USDT", 0.95, 2.0, 4.0, entry_rsi=62.5)
    TradeLedger(0.16).record_close(state, pos.close(104.0, ExitType.TAKE_PROFIT), 1_700_000_600_000)
    return state


def test_trades_frame_columns_and_values():
    frame = trades_frame(_state_with_trade().trades)
    assert list(frame.columns) == COLUMNS
    row = frame.iloc[0]
    assert row["Side"] == "LONG"
    assert row["Exit Type"] == "TAKE_PROFIT"
    assert row["PnL %"] == 3.84
    assert row["Entry Time"] == "14/11/2023, 22:13:20"
    assert row["Fast EMA"] == "-"


def test_exporter_writes_csv(tmp_path):
    path = tmp_path / "reports" / "log.csv"
    assert TradeExporter(str(path)).export(_state_with_trade().trades)
    frame = pd.read_csv(path)
    assert len(frame) == 1
    assert frame["Pair"][0] == "BTC/USDT"


def test_exporter_skips_empty_ledger(tmp_path):
    path = tmp_path / "log.csv"
    assert TradeExporter(str(path)).export([]) is False
    assert not path.exists()


def test_export_script_reads_state_file(tmp_path, monkeypatch):
    monkeypatch.setenv("STATE_BACKEND", "file")
    state_file = tmp_path / "state.json"
    JsonFileStateStore(str(state_file), 100.0).save(_state_with_trade())
    out = tmp_path / "out.csv"
    assert export_trades.main(["--state-file", str(state_file), "--output", str(out)]) == 0
    assert len(pd.read_csv(out)) == 1
