"""
Data models for the chat hub
"""

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

from .constants import NOTICE_JOIN, NOTICE_LEAVE, NOTICE_ERROR


def now_millis() -> int:
    return int(time.time() * 1000)


def generate_message_id(timestamp_millis: int) -> str:
    """Time-based prefix plus random suffix, e.g. "1718000000000-9f3a1c2b" """
    return f"{timestamp_millis}-{uuid.uuid4().hex[:8]}"


class SessionState(str, Enum):
    """Lifecycle of one transport connection"""
    UNJOINED = "unjoined"
    JOINED = "joined"
    CLOSED = "closed"


@dataclass
class Participant:
    """A connection that completed the join step"""
    connection_id: str
    name: str
    joined_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class Session:
    """Per-connection protocol state"""
    connection_id: str
    transport: str = "unknown"
    state: SessionState = SessionState.UNJOINED
    connected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_joined(self) -> bool:
        return self.state is SessionState.JOINED

    @property
    def is_closed(self) -> bool:
        return self.state is SessionState.CLOSED

    def mark_joined(self):
        if self.is_closed:
            raise ValueError(f"Session {self.connection_id} is closed")
        self.state = SessionState.JOINED

    def close(self):
        self.state = SessionState.CLOSED


@dataclass(frozen=True)
class ChatMessage:
    """A chat message; exists only for the duration of delivery"""
    id: str
    author: str
    text: str
    ts: int

    @classmethod
    def create(cls, author: str, text: str) -> "ChatMessage":
        """
        Build a message stamped with the current time and a fresh id

        Args:
            author: Normalized display name of the sender
            text: Normalized message text

        Returns:
            New ChatMessage
        """
        ts = now_millis()
        return cls(id=generate_message_id(ts), author=author, text=text, ts=ts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "id": self.id,
            "author": self.author,
            "text": self.text,
            "ts": self.ts,
        }


@dataclass(frozen=True)
class SystemNotice:
    """Join/leave/error notice"""
    kind: str
    text: str

    def __post_init__(self):
        if self.kind not in (NOTICE_JOIN, NOTICE_LEAVE, NOTICE_ERROR):
            raise ValueError(f"Unknown notice kind: {self.kind}")

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "text": self.text}


@dataclass(frozen=True)
class TypingState:
    connection_id: str
    name: str
    is_typing: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "isTyping": self.is_typing, "id": self.connection_id}
