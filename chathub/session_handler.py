"""
Per-connection protocol state machine: unjoined -> joined -> closed
"""

import asyncio
from typing import Any, Dict, Optional

from .constants import (
    EVENT_JOIN,
    EVENT_CHAT_MESSAGE,
    EVENT_TYPING,
    EVENT_DISCONNECT,
    NOTICE_JOIN,
    NOTICE_LEAVE,
    ERROR_MESSAGES,
    JOIN_NOTICE_TEMPLATE,
    LEAVE_NOTICE_TEMPLATE,
)
from .models import ChatMessage, Session, SystemNotice, TypingState
from .presence import PresenceRegistry
from .broadcaster import Broadcaster
from .validators import validate_name, validate_text, sanitize_system_text
from .logger import get_logger, log_connection_event, log_message_event, log_websocket_event

logger = get_logger()

# Notice sent to the originating connection when a handler fails unexpectedly
FAILURE_NOTICES = {
    EVENT_JOIN: ERROR_MESSAGES["join_failed"],
    EVENT_CHAT_MESSAGE: ERROR_MESSAGES["send_failed"],
}


class SessionHandler:
    """
    Interprets inbound events for every connection.

    Events are processed one at a time: the lock is held across the
    registry mutation and all sends it triggers, so no connection can
    observe an online count that misses the mutation behind it.
    """

    def __init__(self, registry: PresenceRegistry, broadcaster: Broadcaster):
        self.registry = registry
        self.broadcaster = broadcaster
        # connection_id -> Session (open sessions only)
        self._sessions: Dict[str, Session] = {}
        self._lock = asyncio.Lock()

    def open_session(self, connection_id: str, transport: str = "unknown") -> Session:
        """
        Start tracking a freshly accepted connection

        Args:
            connection_id: Transport connection identifier
            transport: Transport name, for diagnostics

        Returns:
            The session in the Unjoined state
        """
        session = self._sessions.get(connection_id)
        if session is None:
            session = Session(connection_id=connection_id, transport=transport)
            self._sessions[connection_id] = session
            log_connection_event(connection_id, "connect", details=f"transport={transport}")
        return session

    def get_session(self, connection_id: str) -> Optional[Session]:
        return self._sessions.get(connection_id)

    async def close_session(self, connection_id: str, reason: str = "removed"):
        """Explicitly remove a connection, exactly as if its transport closed"""
        await self.handle_event(connection_id, EVENT_DISCONNECT, reason)

    async def handle_event(self, connection_id: str, event_name: str, payload: Any = None):
        """
        Single entry point for every inbound event

        Args:
            connection_id: Connection the event arrived on
            event_name: One of join, chat_message, typing, disconnect
            payload: Raw, untrusted event payload
        """
        async with self._lock:
            session = self._sessions.get(connection_id)
            if session is None or session.is_closed:
                log_websocket_event("event_ignored", connection_id, f"event={event_name} (no open session)")
                return

            try:
                if event_name == EVENT_JOIN:
                    await self._on_join(session, payload)
                elif event_name == EVENT_CHAT_MESSAGE:
                    await self._on_chat_message(session, payload)
                elif event_name == EVENT_TYPING:
                    await self._on_typing(session, payload)
                elif event_name == EVENT_DISCONNECT:
                    await self._on_disconnect(session, payload)
                else:
                    logger.warning(f"Unknown event {event_name!r} from {connection_id} dropped")
            except Exception:
                logger.exception(f"Error handling {event_name} from {connection_id}")
                if event_name != EVENT_DISCONNECT:
                    notice = FAILURE_NOTICES.get(event_name, ERROR_MESSAGES["internal"])
                    await self.broadcaster.send_error(connection_id, notice)

    async def _on_join(self, session: Session, raw_name: Any):
        connection_id = session.connection_id
        name = validate_name(raw_name)
        if name is None:
            log_connection_event(connection_id, "join_rejected", details="invalid name")
            await self.broadcaster.send_error(connection_id, ERROR_MESSAGES["invalid_name"])
            return

        # Re-join overwrites the name
        self.registry.add(connection_id, name)
        session.mark_joined()

        notice = SystemNotice(NOTICE_JOIN, sanitize_system_text(JOIN_NOTICE_TEMPLATE.format(name=name)))
        await self.broadcaster.broadcast_notice(notice, exclude=connection_id)
        await self.broadcaster.send_joined(connection_id, name)
        await self.broadcaster.publish_online_count()

    async def _on_chat_message(self, session: Session, payload: Any):
        connection_id = session.connection_id
        participant = self.registry.get(connection_id)
        if not session.is_joined or participant is None:
            await self.broadcaster.send_error(connection_id, ERROR_MESSAGES["join_required"])
            return

        raw_text = payload.get("text") if isinstance(payload, dict) else None
        text = validate_text(raw_text)
        if text is None:
            # Empty messages are dropped without a notice
            return

        message = ChatMessage.create(participant.name, text)
        recipients = await self.broadcaster.broadcast_chat(message)
        log_message_event(message.id, message.author, "broadcast", f"recipients={recipients} | length={len(text)}")

    async def _on_typing(self, session: Session, is_typing: Any):
        participant = self.registry.get(session.connection_id)
        if not session.is_joined or participant is None:
            return

        state = TypingState(session.connection_id, participant.name, bool(is_typing))
        await self.broadcaster.broadcast_typing(state)

    async def _on_disconnect(self, session: Session, reason: Any):
        connection_id = session.connection_id
        # Bookkeeping precedes every send
        session.close()
        self._sessions.pop(connection_id, None)
        participant = self.registry.remove(connection_id)

        if participant is None:
            log_connection_event(connection_id, "disconnect", details=f"unjoined | reason={reason}")
            return

        log_connection_event(connection_id, "disconnect", participant.name, f"reason={reason}")
        notice = SystemNotice(NOTICE_LEAVE, sanitize_system_text(LEAVE_NOTICE_TEMPLATE.format(name=participant.name)))
        await self.broadcaster.broadcast_notice(notice, exclude=connection_id)
        await self.broadcaster.publish_online_count()
