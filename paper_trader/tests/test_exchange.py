import pytest

from paper_trader.errors import ConfigurationError
from paper_trader.providers.exchange import CcxtMarketData


class FakeExchange:
    def __init__(self, markets=None, has_ohlcv=True, rows=None):
        self.markets = markets if markets is not None else {"BTC/USDT": {}}
        self.has = {"fetchOHLCV": has_ohlcv}
        self.timeframes = {"1m": "1min", "5m": "5min"}
        self.rows = rows or []
        self.closed = False
        self.requested = None

    async def load_markets(self):
        return self.markets

    async def fetch_ohlcv(self, symbol, timeframe, limit=None):
        self.requested = (symbol, timeframe, limit)
        return self.rows

    async def close(self):
        self.closed = True


@pytest.mark.asyncio
async def test_initialize_accepts_listed_symbol():
    exchange = FakeExchange()
    md = CcxtMarketData("kucoin", exchange=exchange)
    await md.initialize("BTC/USDT", "1m")
    assert not exchange.closed


@pytest.mark.asyncio
async def test_unknown_symbol_is_configuration_error():
    exchange = FakeExchange(markets={"ETH/USDT": {}})
    md = CcxtMarketData("kucoin", exchange=exchange)
    with pytest.raises(ConfigurationError):
        await md.initialize("BTC/USDT", "1m")
    assert exchange.closed


@pytest.mark.asyncio
async def test_missing_ohlcv_support_is_configuration_error():
    md = CcxtMarketData("kucoin", exchange=FakeExchange(has_ohlcv=False))
    with pytest.raises(ConfigurationError):
        await md.initialize("BTC/USDT", "1m")


@pytest.mark.asyncio
async def test_unknown_exchange_is_configuration_error():
    with pytest.raises(ConfigurationError):
        await CcxtMarketData("not-an-exchange").initialize("BTC/USDT", "1m")


@pytest.mark.asyncio
async def test_fetch_candles_sorted_ascending():
    rows = [
        [120_000, 3, 4, 2, 3.5, 10],
        [60_000, 1, 2, 0.5, 1.5, None],
    ]
    exchange = FakeExchange(rows=rows)
    md = CcxtMarketData("kucoin", exchange=exchange)
    candles = await md.fetch_candles("BTC/USDT", "1m", 505)
    assert [c.timestamp for c in candles] == [60_000, 120_000]
    assert candles[0].volume == 0.0
    assert candles[1].close == 3.5
    assert exchange.requested == ("BTC/USDT", "1m", 505)


@pytest.mark.asyncio
async def test_short_ohlcv_row_is_rejected():
    md = CcxtMarketData("kucoin", exchange=FakeExchange(rows=[[60_000, 1, 2, 0.5]]))
    with pytest.raises(ValueError):
        await md.fetch_candles("BTC/USDT", "1m", 10)
