import logging
from typing import List, Optional

import ccxt.async_support as ccxt

from paper_trader.errors import ConfigurationError
from paper_trader.models.candle_models import Candle

logger = logging.getLogger("exchange")


class CcxtMarketData:
    """Public OHLCV feed from a ccxt exchange (no credentials, no orders)."""

    def __init__(self, exchange_id: str, exchange=None):
        self.exchange_id = exchange_id
        self.exchange = exchange

    async def initialize(self, symbol: str, timeframe: str):
        """Create the client, load markets and validate symbol / OHLCV support.

        Raises ConfigurationError on anything that makes polling pointless.
        """
        if self.exchange is None:
            if self.exchange_id not in ccxt.exchanges:
                raise ConfigurationError(f"Exchange {self.exchange_id} not supported by ccxt")
            exchange_class = getattr(ccxt, self.exchange_id)
            self.exchange = exchange_class({"enableRateLimit": True})
        try:
            logger.info("Loading markets for %s...", self.exchange_id)
            await self.exchange.load_markets()
            if symbol not in (self.exchange.markets or {}):
                raise ConfigurationError(f"Symbol {symbol} not found on {self.exchange_id}")
            if not self.exchange.has.get("fetchOHLCV"):
                raise ConfigurationError(f"Exchange {self.exchange_id} does not support fetchOHLCV")
        except Exception:
            await self.close()
            raise
        timeframes = getattr(self.exchange, "timeframes", None) or {}
        if timeframe not in timeframes:
            logger.warning("Timeframe %s may not be supported. Available: %s", timeframe, ", ".join(timeframes))
        logger.info("Exchange %s initialized successfully", self.exchange_id)

    async def fetch_candles(self, symbol: str, timeframe: str, limit: int) -> List[Candle]:
        """Ascending candles; the last one is still forming."""
        if self.exchange is None:
            raise RuntimeError("exchange not initialized")
        rows = await self.exchange.fetch_ohlcv(symbol, timeframe, limit=limit)
        candles = [Candle.from_ohlcv(r) for r in rows or []]
        candles.sort(key=lambda c: c.timestamp)
        return candles

    async def close(self):
        exchange: Optional[object] = self.exchange
        if exchange is None:
            return
        try:
            await exchange.close()
        except Exception as e:
            logger.warning("Error closing %s client: %s", self.exchange_id, e)
