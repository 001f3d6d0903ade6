"""
JSON frame codec for the raw WebSocket fallback transport

Every frame is an object with a "type" field; the hub events map onto
frame types join/chat/typing/online/system.
"""

import json
from typing import Any, Dict, Optional, Tuple

from .constants import (
    EVENT_JOIN,
    EVENT_JOINED,
    EVENT_CHAT_MESSAGE,
    EVENT_TYPING,
    EVENT_SYSTEM_MESSAGE,
    EVENT_ONLINE_COUNT,
    EVENT_ERROR_MESSAGE,
    FRAME_JOIN,
    FRAME_CHAT,
    FRAME_TYPING,
    FRAME_ONLINE,
    FRAME_SYSTEM,
    NOTICE_ERROR,
)


def decode_frame(raw: str) -> Optional[Tuple[str, Any]]:
    """
    Translate an inbound text frame into a hub event

    Args:
        raw: Frame text as received from the socket

    Returns:
        (event_name, payload), or None for a malformed or unknown frame
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return None

    if not isinstance(data, dict):
        return None

    frame_type = data.get("type")

    if frame_type == FRAME_JOIN:
        return EVENT_JOIN, data.get("name")
    elif frame_type == FRAME_CHAT:
        return EVENT_CHAT_MESSAGE, {"text": data.get("text")}
    elif frame_type == FRAME_TYPING:
        return EVENT_TYPING, data.get("isTyping")

    return None


def encode_frame(event: str, payload: Any) -> Optional[Dict[str, Any]]:
    """
    Translate an outbound hub event into a frame object

    Args:
        event: Outbound event name
        payload: Event payload as emitted over Socket.IO

    Returns:
        Frame dictionary, or None if the event has no frame representation
    """
    if event == EVENT_JOINED:
        return {"type": FRAME_JOIN, **payload}
    elif event == EVENT_CHAT_MESSAGE:
        return {"type": FRAME_CHAT, **payload}
    elif event == EVENT_TYPING:
        return {"type": FRAME_TYPING, **payload}
    elif event == EVENT_ONLINE_COUNT:
        return {"type": FRAME_ONLINE, **payload}
    elif event == EVENT_SYSTEM_MESSAGE:
        return {"type": FRAME_SYSTEM, "kind": payload["type"], "text": payload["text"]}
    elif event == EVENT_ERROR_MESSAGE:
        return {"type": FRAME_SYSTEM, "kind": NOTICE_ERROR, "text": payload}

    return None
