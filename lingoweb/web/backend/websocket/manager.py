"""WebSocket connection manager for real-time updates.

Handles client connections and pushes page state and job updates
to clients subscribed to a session.
"""

from typing import TYPE_CHECKING, Any

from fastapi import WebSocket

if TYPE_CHECKING:
    from ....models import PageState
    from ..services.job_manager import Job


class WebSocketManager:
    """Manages WebSocket connections and subscriptions.

    Clients subscribe to a session id to follow its translation cycles.
    """

    def __init__(self):
        """Initialize the WebSocket manager."""
        self._connections: dict[str, WebSocket] = {}
        self._session_subscriptions: dict[str, set[str]] = {}  # session_id -> client_ids

    async def connect(self, websocket: WebSocket, client_id: str) -> None:
        """Accept a new WebSocket connection.

        Args:
            websocket: The WebSocket connection.
            client_id: Unique client identifier.
        """
        await websocket.accept()
        self._connections[client_id] = websocket

    def disconnect(self, client_id: str) -> None:
        """Handle client disconnection.

        Args:
            client_id: The client identifier.
        """
        self._connections.pop(client_id, None)
        # Remove from all subscriptions
        for subscribers in self._session_subscriptions.values():
            subscribers.discard(client_id)

    async def subscribe_to_session(self, client_id: str, session_id: str) -> None:
        """Subscribe a client to a session's updates."""
        self._session_subscriptions.setdefault(session_id, set()).add(client_id)

    async def unsubscribe_from_session(self, client_id: str, session_id: str) -> None:
        """Unsubscribe a client from a session."""
        if session_id in self._session_subscriptions:
            self._session_subscriptions[session_id].discard(client_id)

    async def broadcast_to_session(self, session_id: str, message: dict[str, Any]) -> None:
        """Send a message to every client subscribed to a session.

        Clients that fail to receive it are disconnected.
        """
        subscribers = list(self._session_subscriptions.get(session_id, set()))

        disconnected = []
        for client_id in subscribers:
            websocket = self._connections.get(client_id)
            if websocket:
                try:
                    await websocket.send_json(message)
                except Exception:
                    disconnected.append(client_id)

        # Clean up disconnected clients
        for client_id in disconnected:
            self.disconnect(client_id)

    async def broadcast_job_update(self, job: "Job") -> None:
        """Broadcast a job update to the job's session subscribers."""
        await self.broadcast_to_session(
            job.session_id,
            {"type": "job_update", "job": job.to_dict()},
        )

    async def broadcast_page_update(self, session_id: str, state: "PageState") -> None:
        """Broadcast a new page state to the session's subscribers."""
        await self.broadcast_to_session(
            session_id,
            {
                "type": "page_update",
                "session_id": session_id,
                "page": state.model_dump(mode="json"),
            },
        )

    async def send_to_client(self, client_id: str, message: dict) -> bool:
        """Send a message to a specific client.

        Returns:
            True if sent successfully, False otherwise.
        """
        websocket = self._connections.get(client_id)
        if not websocket:
            return False
        try:
            await websocket.send_json(message)
            return True
        except Exception:
            self.disconnect(client_id)
            return False

    @property
    def connection_count(self) -> int:
        """Get the number of active connections."""
        return len(self._connections)

    def get_subscribed_sessions(self, client_id: str) -> list[str]:
        """Get sessions a client is subscribed to."""
        return [
            session_id
            for session_id, subscribers in self._session_subscriptions.items()
            if client_id in subscribers
        ]
