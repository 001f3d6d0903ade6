"""
Live transport endpoints and fire-and-forget delivery to them
"""

import json
from typing import Any, Dict, Optional

from .frames import encode_frame
from .logger import get_logger, log_websocket_event

logger = get_logger()


class Channel:
    """Outbound side of one transport connection"""

    transport = "unknown"

    async def send(self, event: str, payload: Any):
        raise NotImplementedError


class SocketIOChannel(Channel):
    """Emits named events to a single Socket.IO client"""

    transport = "socketio"

    def __init__(self, sio, sid: str):
        self.sio = sio
        self.sid = sid

    async def send(self, event: str, payload: Any):
        await self.sio.emit(event, payload, to=self.sid)


class WebSocketChannel(Channel):
    """Sends hub events as JSON frames over a raw WebSocket"""

    transport = "websocket"

    def __init__(self, websocket):
        self.websocket = websocket

    async def send(self, event: str, payload: Any):
        frame = encode_frame(event, payload)
        if frame is None:
            return
        await self.websocket.send_text(json.dumps(frame, ensure_ascii=False))


class ConnectionHub:
    """
    Every connected endpoint, joined or not, across all transports.

    This is the transport capability the Broadcaster is given: it knows
    how to reach a connection id, nothing about participants.
    """

    def __init__(self):
        # connection_id -> Channel
        self._channels: Dict[str, Channel] = {}

    def attach(self, connection_id: str, channel: Channel):
        self._channels[connection_id] = channel
        log_websocket_event("attached", connection_id, f"transport={channel.transport}")

    def detach(self, connection_id: str) -> Optional[Channel]:
        channel = self._channels.pop(connection_id, None)
        if channel is not None:
            log_websocket_event("detached", connection_id, f"transport={channel.transport}")
        return channel

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._channels

    def __len__(self) -> int:
        return len(self._channels)

    def counts_by_transport(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for channel in self._channels.values():
            counts[channel.transport] = counts.get(channel.transport, 0) + 1
        return counts

    async def send_to(self, connection_id: str, event: str, payload: Any) -> bool:
        """
        Deliver one event to one connection

        Args:
            connection_id: Target connection
            event: Outbound event name
            payload: Event payload

        Returns:
            True if the send was handed to the transport, False if the
            connection is gone or the send failed
        """
        channel = self._channels.get(connection_id)
        if channel is None:
            log_websocket_event("send_skipped", connection_id, f"event={event} (not connected)")
            return False
        return await self._deliver(connection_id, channel, event, payload)

    async def send_to_all(self, event: str, payload: Any, exclude: Optional[str] = None) -> int:
        """
        Deliver one event to every connection, optionally skipping one

        Args:
            event: Outbound event name
            payload: Event payload
            exclude: Connection id that must not receive the event

        Returns:
            Number of successful recipients
        """
        successful_sends = 0
        # Snapshot: channels may detach while we await sends
        for connection_id, channel in list(self._channels.items()):
            if connection_id == exclude:
                continue
            if await self._deliver(connection_id, channel, event, payload):
                successful_sends += 1
        return successful_sends

    async def _deliver(self, connection_id: str, channel: Channel, event: str, payload: Any) -> bool:
        try:
            await channel.send(event, payload)
            return True
        except Exception as e:
            # Log send failure but continue with other connections
            logger.error(f"Failed to send {event} to {connection_id}: {e}")
            return False
