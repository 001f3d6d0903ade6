"""
Wiring of registry, connections, broadcaster and protocol handler
"""

from typing import Any, Dict

from .constants import EVENT_DISCONNECT
from .models import Session
from .presence import PresenceRegistry
from .connections import Channel, ConnectionHub
from .broadcaster import Broadcaster
from .session_handler import SessionHandler


class ChatHub:
    """One chat hub per process; both transports feed the same instance"""

    def __init__(self):
        self.registry = PresenceRegistry()
        self.connections = ConnectionHub()
        self.broadcaster = Broadcaster(self.connections, self.registry)
        self.handler = SessionHandler(self.registry, self.broadcaster)

    def connect(self, connection_id: str, channel: Channel) -> Session:
        """
        Register an accepted transport connection

        Args:
            connection_id: Identifier unique among live connections
            channel: Outbound channel for this connection

        Returns:
            The new session, in the Unjoined state
        """
        self.connections.attach(connection_id, channel)
        return self.handler.open_session(connection_id, channel.transport)

    async def dispatch(self, connection_id: str, event: str, payload: Any = None):
        await self.handler.handle_event(connection_id, event, payload)

    async def disconnect(self, connection_id: str, reason: str = "transport close"):
        """Run the disconnect transition, then forget the endpoint"""
        try:
            await self.handler.handle_event(connection_id, EVENT_DISCONNECT, reason)
        finally:
            self.connections.detach(connection_id)

    def stats(self) -> Dict[str, Any]:
        transports = self.connections.counts_by_transport()
        return {
            "online": self.registry.size(),
            "connections": len(self.connections),
            "transports": {
                "socketio": transports.get("socketio", 0),
                "websocket": transports.get("websocket", 0),
            },
        }
