"""
Polling loop that ties each new closed candle to at most one position transition.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from paper_trader.config import Settings
from paper_trader.engine.signal_detector import IndicatorSnapshot, detect_entry
from paper_trader.execution.position_manager import PositionManager
from paper_trader.models.bot_state import BotState
from paper_trader.models.candle_models import Candle, closes_of
from paper_trader.models.position import Position
from paper_trader.models.trade import TradeRecord
from paper_trader.persistence.state_store import StateStore, build_state_store
from paper_trader.providers.exchange import CcxtMarketData
from paper_trader.services import metrics
from paper_trader.services.backoff import BackoffPolicy
from paper_trader.services.notifier import Notifier
from paper_trader.services.trade_export import TradeExporter
from paper_trader.utils.time_utils import format_ts, now_ms

logger = logging.getLogger("trading_bot")

NOT_READY = "not_ready"
SAME_CANDLE = "same_candle"
WARMUP = "warmup"
EVALUATED = "evaluated"


@dataclass
class IterationResult:
    status: str
    entry: Optional[Position] = None
    exit: Optional[TradeRecord] = None


class TradingBotService:
    """Single cooperative loop: fetch, evaluate exit, then entry, persist, sleep.

    One iteration (including persistence) completes before the next starts,
    so BotState needs no locking.
    """

    def __init__(self, settings: Settings, market_data, store: StateStore,
                 notifier: Optional[Notifier] = None, exporter: Optional[TradeExporter] = None,
                 position_manager: Optional[PositionManager] = None, backoff: Optional[BackoffPolicy] = None,
                 clock: Callable[[], float] = time.monotonic, sleep=asyncio.sleep):
        self.settings = settings
        self.market_data = market_data
        self.store = store
        self.notifier = notifier
        self.exporter = exporter
        self.positions = position_manager or PositionManager(settings)
        self.backoff = backoff or BackoffPolicy.from_settings(settings)
        self._clock = clock
        self._sleep = sleep
        self.prefix = settings.LOG_PREFIX
        self.state: Optional[BotState] = None
        self._running = False
        self._task: Optional[asyncio.Task] = None
        self._last_heartbeat = clock()
        self.last_error: Optional[str] = None

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------
    async def start(self):
        """Validate the venue, load state and launch the loop task.

        ConfigurationError from the market-data adapter propagates: the loop is never entered.
        """
        if self._running:
            logger.info("Trading bot already running")
            return
        s = self.settings
        logger.info("%s Starting on %s %s TF=%s", self.prefix, s.EXCHANGE, s.SYMBOL, s.TIMEFRAME)
        logger.info("%s Risk Management: SL=%s%% TP=%s%% Fees=%s%%", self.prefix,
                    s.STOP_LOSS_PERCENT, s.TAKE_PROFIT_PERCENT, s.TRADING_FEE_PERCENT)
        await self.market_data.initialize(s.SYMBOL, s.TIMEFRAME)
        self.load_state()
        self._running = True
        self._last_heartbeat = self._clock()
        self._task = asyncio.create_task(self.run_forever())
        logger.info("Trading bot started")

    async def stop(self):
        if not self._running and self._task is None:
            return
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        await self.market_data.close()
        if self.notifier:
            await self.notifier.aclose()
        logger.info("Trading bot stopped")

    async def wait(self):
        """Block until the loop task finishes (only on cancellation in practice)."""
        if self._task:
            await self._task

    def load_state(self) -> BotState:
        self.state = self.store.load()
        metrics.balance_gauge.set(self.state.balance)
        logger.info("%s Virtual Trading - Starting Balance: %.2f", self.prefix, self.settings.INITIAL_BALANCE)
        logger.info("%s Loaded state: %d trades, %.2f balance, %.2f%% total PnL", self.prefix,
                    self.state.total_trades, self.state.balance, self.state.total_pnl_percent)
        return self.state

    async def run_forever(self):
        """Never-crash loop: failures are logged and retried after a bounded backoff."""
        while self._running:
            try:
                await self.run_iteration()
                self.backoff.reset()
                self.last_error = None
                delay = self.settings.poll_seconds
            except Exception as e:
                metrics.iteration_errors_counter.inc()
                self.last_error = str(e)
                delay = self.backoff.next_delay()
                logger.exception("%s Error: %s (retry in %.1fs, consecutive failures=%d)",
                                 self.prefix, e, delay, self.backoff.failures)
            await self._sleep(delay)

    # ------------------------------------------------------------------
    # one iteration
    # ------------------------------------------------------------------
    async def run_iteration(self) -> IterationResult:
        if self.state is None:
            self.load_state()
        s = self.settings
        state = self.state
        candles: List[Candle] = await self.market_data.fetch_candles(s.SYMBOL, s.TIMEFRAME, s.fetch_limit)
        if not candles or len(candles) < s.MIN_BARS:
            logger.info("%s Not enough candles yet (%d)", self.prefix, len(candles or []))
            return IterationResult(NOT_READY)
        metrics.iterations_counter.inc()

        closed = candles[:-1]
        current = candles[-1]
        self._maybe_heartbeat(current)

        last_closed = closed[-1]
        if last_closed.timestamp == state.last_closed_ts:
            # Same closed candle as last time: only the forming candle can trigger an exit.
            trade = None
            if not state.is_flat:
                trade = self.positions.evaluate_exit(state, current.close, current.high, current.low)
                if trade:
                    await self._after_exit(trade)
            return IterationResult(SAME_CANDLE, exit=trade)

        metrics.closed_candles_counter.inc()
        snap = IndicatorSnapshot.from_closes(closes_of(closed), s.FAST_LEN, s.SLOW_LEN, s.RSI_LEN)

        trade = None
        if not state.is_flat:
            trade = self.positions.evaluate_exit(state, last_closed.close, last_closed.high, last_closed.low)
            if trade:
                await self._after_exit(trade)

        entry = None
        status = WARMUP if snap is None else EVALUATED
        if snap is not None and state.is_flat:
            side = detect_entry(snap, s.RSI_LONG_MIN, s.RSI_SHORT_MAX)
            if side is not None:
                entry = self.positions.open_position(state, side, last_closed.close, last_closed.timestamp, snap)
                if entry:
                    await self._after_entry(entry)
                else:
                    metrics.rejected_entries_counter.inc()
            elif s.VERBOSE:
                self._log_market(last_closed, snap)
        elif snap is not None and s.VERBOSE:
            self._log_position(last_closed, snap)

        state.last_closed_ts = last_closed.timestamp
        self._persist()
        return IterationResult(status, entry=entry, exit=trade)

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _persist(self):
        if not self.store.save(self.state):
            metrics.persistence_failures_counter.inc()

    async def _after_exit(self, trade: TradeRecord):
        metrics.exits_counter.labels(exit_type=trade.exit_type).inc()
        metrics.balance_gauge.set(self.state.balance)
        self._persist()
        if self.exporter:
            self.exporter.export(self.state.trades)
        if self.notifier:
            await self.notifier.notify_exit(trade)

    async def _after_entry(self, position: Position):
        metrics.entries_counter.labels(side=position.side.value).inc()
        self._persist()
        if self.notifier:
            await self.notifier.notify_entry(position)

    def _maybe_heartbeat(self, current: Candle):
        now = self._clock()
        if now - self._last_heartbeat < self.settings.heartbeat_seconds:
            return
        self._last_heartbeat = now
        state = self.state
        pos = state.current_position
        fee = self.settings.TRADING_FEE_PERCENT
        if pos:
            price = current.close
            position_info = (
                f"| Active {pos.side.value} at {pos.entry_price:.2f} | Current: {price:.2f} | "
                f"PnL: {pos.pnl_percent(price, fee):.2f}% ({pos.pnl_currency(price, fee):.2f}) | "
                f"SL: {pos.stop_loss:.2f} | TP: {pos.take_profit:.2f}"
            )
        else:
            position_info = "| No position"
        logger.info("%s %s Heartbeat - Running %s | Balance: %.2f | Total trades: %d | Win Rate: %.1f%%",
                    self.prefix, format_ts(now_ms(), self.settings.DISPLAY_TIMEZONE), position_info,
                    state.balance, state.total_trades, state.win_rate or 0.0)

    def _log_market(self, candle: Candle, snap: IndicatorSnapshot):
        logger.info("%s %s Monitoring - Price: %.2f | RSI: %.1f | Fast EMA: %.2f | Slow EMA: %.2f | Balance: %.2f",
                    self.prefix, format_ts(candle.timestamp, self.settings.DISPLAY_TIMEZONE), candle.close,
                    snap.rsi_now, snap.fast_now, snap.slow_now, self.state.balance)

    def _log_position(self, candle: Candle, snap: IndicatorSnapshot):
        pos = self.state.current_position
        price = candle.close
        fee = self.settings.TRADING_FEE_PERCENT
        to_sl = abs((price - pos.stop_loss) / pos.stop_loss * 100) if pos.stop_loss else float("inf")
        to_tp = abs((pos.take_profit - price) / price * 100) if price else float("inf")
        logger.info("%s %s Position Monitoring - %s | Entry: %.2f | Current: %.2f | PnL: %.2f%% (%.2f) | "
                    "Distance to SL: %.2f%% | Distance to TP: %.2f%% | RSI: %.1f",
                    self.prefix, format_ts(candle.timestamp, self.settings.DISPLAY_TIMEZONE), pos.side.value,
                    pos.entry_price, price, pos.pnl_percent(price, fee), pos.pnl_currency(price, fee),
                    to_sl, to_tp, snap.rsi_now)

    def status(self) -> Dict[str, Any]:
        out = {
            "running": self._running,
            "exchange": self.settings.EXCHANGE,
            "symbol": self.settings.SYMBOL,
            "timeframe": self.settings.TIMEFRAME,
            "consecutive_failures": self.backoff.failures,
            "last_error": self.last_error,
        }
        if self.state is not None:
            out.update(self.state.summary())
        return out


def build_trading_bot(settings: Settings) -> TradingBotService:
    """Wire the production collaborators from settings."""
    return TradingBotService(
        settings,
        market_data=CcxtMarketData(settings.EXCHANGE),
        store=build_state_store(settings),
        notifier=Notifier(settings.NOTIFIER_WEBHOOK),
        exporter=TradeExporter(settings.EXPORT_FILE, settings.DISPLAY_TIMEZONE),
    )
