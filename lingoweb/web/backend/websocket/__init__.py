"""WebSocket support for real-time updates."""

from .manager import WebSocketManager

__all__ = ["WebSocketManager"]
