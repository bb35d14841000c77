import logging
from typing import Any, Dict

import httpx

from paper_trader.models.position import Position
from paper_trader.models.trade import TradeRecord

logger = logging.getLogger("notifier")


class Notifier:
    def __init__(self, webhook_url: str = "", client: httpx.AsyncClient = None):
        self.webhook = webhook_url
        self.client = client or httpx.AsyncClient(timeout=5.0)

    async def _post(self, msg: Dict[str, Any]):
        if not self.webhook:
            logger.info("Event: %s", msg)
            return
        try:
            resp = await self.client.post(self.webhook, json=msg)
            resp.raise_for_status()
        except Exception:
            logger.exception("Notifier failed")

    async def notify_entry(self, position: Position):
        await self._post({
            "event": "entry",
            "symbol": position.symbol,
            "side": position.side.value,
            "price": position.entry_price,
            "quantity": position.quantity,
            "sl": position.stop_loss,
            "tp": position.take_profit,
        })

    async def notify_exit(self, trade: TradeRecord):
        await self._post({
            "event": "exit",
            "id": trade.id,
            "symbol": trade.symbol,
            "side": trade.side,
            "exit_type": trade.exit_type,
            "price": trade.exit_price,
            "pnl_percent": trade.pnl_percent,
            "pnl": trade.pnl_currency,
            "balance": trade.final_balance,
        })

    async def aclose(self):
        await self.client.aclose()
