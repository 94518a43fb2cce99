"""API v1 package."""

from .conversations import router as conversations_router
from .websocket import router as websocket_router

__all__ = ["conversations_router", "websocket_router"]
