#!/usr/bin/env python3
"""
Paper Trader - Main Entry Point
Runs the trading loop behind the status API, or headless with --headless.
"""
import argparse
import asyncio
import logging
import sys

import uvicorn

from paper_trader.config import load_settings
from paper_trader.errors import ConfigurationError
from paper_trader.services.trading_bot import build_trading_bot
from paper_trader.utils.logging_config import configure_logging

logger = logging.getLogger("main")


async def run_headless(settings) -> None:
    bot = build_trading_bot(settings)
    await bot.start()
    try:
        # The loop only ends when the process is terminated
        await bot.wait()
    finally:
        await bot.stop()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="EMA/RSI momentum paper trader")
    parser.add_argument("--headless", action="store_true", help="Run the trading loop without the HTTP API")
    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(settings.LOG_LEVEL)

    try:
        if args.headless or not settings.API_ENABLED:
            asyncio.run(run_headless(settings))
        else:
            print("Starting Paper Trader...")
            print(f"Status API: http://localhost:{settings.APP_PORT}/status")
            print("Press Ctrl+C to stop.")
            uvicorn.run("paper_trader.app:app", host="0.0.0.0", port=settings.APP_PORT, reload=False)
    except ConfigurationError as e:
        logger.error("Startup failed: %s", e)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())
