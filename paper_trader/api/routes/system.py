"""System & metadata routes (root, health, status, config, metrics)."""
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from paper_trader.api.dependencies.services import ServiceRegistry, get_service_registry, get_trading_bot
from paper_trader.services import metrics

router = APIRouter()

@router.get("/")
async def root(registry: ServiceRegistry = Depends(get_service_registry)):
    return {
        "name": "Paper Trader",
        "version": "1.0.0",
        "description": "EMA crossover + RSI paper-trading bot",
        "services": registry.names(),
        "endpoints": {
            "health": "/health",
            "status": "/status",
            "trades": "/trades",
            "position": "/position",
            "config": "/config",
            "metrics": "/metrics",
            "docs": "/docs",
        },
    }

@router.get("/health")
async def health():
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

@router.get("/status")
async def status(bot=Depends(get_trading_bot)):
    return bot.status()

@router.get("/config")
async def get_config(bot=Depends(get_trading_bot)):
    s = bot.settings
    return {
        "exchange": s.EXCHANGE,
        "symbol": s.SYMBOL,
        "timeframe": s.TIMEFRAME,
        "fast_len": s.FAST_LEN,
        "slow_len": s.SLOW_LEN,
        "rsi_len": s.RSI_LEN,
        "rsi_long_min": s.RSI_LONG_MIN,
        "rsi_short_max": s.RSI_SHORT_MAX,
        "stop_loss_percent": s.STOP_LOSS_PERCENT,
        "take_profit_percent": s.TAKE_PROFIT_PERCENT,
        "trading_fee_percent": s.TRADING_FEE_PERCENT,
        "position_size_percent": s.POSITION_SIZE_PERCENT,
        "poll_ms": s.POLL_MS,
    }

@router.get("/metrics")
async def prometheus_metrics():
    return Response(content=generate_latest(metrics.registry), media_type=CONTENT_TYPE_LATEST)

__all__ = ["router"]
