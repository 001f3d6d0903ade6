"""
Outbound delivery: to one connection, to all but one, or to all
"""

from typing import Any, Optional

from .constants import (
    EVENT_JOINED,
    EVENT_CHAT_MESSAGE,
    EVENT_TYPING,
    EVENT_SYSTEM_MESSAGE,
    EVENT_ONLINE_COUNT,
    EVENT_ERROR_MESSAGE,
)
from .models import ChatMessage, SystemNotice, TypingState
from .presence import PresenceRegistry
from .logger import get_logger

logger = get_logger()


class Broadcaster:
    """
    Fans hub events out through an injected transport.

    The transport only needs ``send_to(connection_id, event, payload)`` and
    ``send_to_all(event, payload, exclude=None)``; ConnectionHub is the
    production implementation. Delivery is fire-and-forget.
    """

    def __init__(self, transport, registry: PresenceRegistry):
        self.transport = transport
        self.registry = registry

    async def to_all(self, event: str, payload: Any) -> int:
        return await self.transport.send_to_all(event, payload)

    async def to_others(self, connection_id: str, event: str, payload: Any) -> int:
        return await self.transport.send_to_all(event, payload, exclude=connection_id)

    async def to_one(self, connection_id: str, event: str, payload: Any) -> bool:
        return await self.transport.send_to(connection_id, event, payload)

    async def publish_online_count(self) -> int:
        """Send the current registry size to every connection"""
        count = self.registry.size()
        recipients = await self.to_all(EVENT_ONLINE_COUNT, {"count": count})
        logger.debug(f"Online count {count} published to {recipients} connections")
        return count

    async def send_joined(self, connection_id: str, name: str):
        await self.to_one(connection_id, EVENT_JOINED, {"name": name})

    async def send_error(self, connection_id: str, text: str):
        await self.to_one(connection_id, EVENT_ERROR_MESSAGE, text)

    async def broadcast_notice(self, notice: SystemNotice, exclude: Optional[str] = None) -> int:
        if exclude is None:
            return await self.to_all(EVENT_SYSTEM_MESSAGE, notice.to_dict())
        return await self.to_others(exclude, EVENT_SYSTEM_MESSAGE, notice.to_dict())

    async def broadcast_chat(self, message: ChatMessage) -> int:
        # Sender included: clients render their own messages from this broadcast
        return await self.to_all(EVENT_CHAT_MESSAGE, message.to_dict())

    async def broadcast_typing(self, state: TypingState) -> int:
        return await self.to_all(EVENT_TYPING, state.to_dict())
