import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from paper_trader.api.dependencies.services import service_registry
from paper_trader.api.router import api_router
from paper_trader.config import load_settings
from paper_trader.services.trading_bot import build_trading_bot
from paper_trader.utils.logging_config import configure_logging

logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: build the bot, start its loop, stop it on shutdown."""
    settings = load_settings()
    configure_logging(settings.LOG_LEVEL)
    logger.info("Starting paper trader web interface...")
    bot = build_trading_bot(settings)
    service_registry.register("trading_bot", bot)
    # ConfigurationError propagates and aborts startup: the loop must not run on a bad venue/symbol
    await bot.start()
    yield
    logger.info("Shutting down trading bot...")
    try:
        await bot.stop()
    except Exception as e:
        logger.error(f"Failed to stop trading bot: {e}")


app = FastAPI(
    title="Paper Trader",
    description="EMA/RSI momentum paper-trading bot",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(api_router)
