"""Read-only views of the ledger and the open position."""
from fastapi import APIRouter, Depends, HTTPException, Query

from paper_trader.api.dependencies.services import get_trading_bot

router = APIRouter(tags=["trades"])

@router.get("/trades")
async def list_trades(limit: int = Query(100, ge=1, le=1000), bot=Depends(get_trading_bot)):
    if bot.state is None:
        raise HTTPException(status_code=503, detail="State not loaded yet")
    trades = bot.state.trades[-limit:]
    return {"total": bot.state.total_trades, "trades": [t.to_dict() for t in trades]}

@router.get("/position")
async def current_position(bot=Depends(get_trading_bot)):
    if bot.state is None:
        raise HTTPException(status_code=503, detail="State not loaded yet")
    pos = bot.state.current_position
    return {"state": "FLAT" if pos is None else "OPEN", "position": pos.to_dict() if pos else None}

__all__ = ["router"]
