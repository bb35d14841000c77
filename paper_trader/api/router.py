"""Unified API router aggregator."""
from fastapi import APIRouter

from paper_trader.api.routes.system import router as system_router
from paper_trader.api.routes.trades import router as trades_router

api_router = APIRouter()
api_router.include_router(system_router)
api_router.include_router(trades_router)

__all__ = ["api_router"]
