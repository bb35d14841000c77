from .system import router as system_router  # noqa: F401
from .trades import router as trades_router  # noqa: F401

__all__ = ["system_router", "trades_router"]
