"""
Realtime chat hub
Presence tracking, chat fan-out and typing relay over Socket.IO and raw WebSocket
"""

from .models import Participant, ChatMessage, SystemNotice, TypingState, Session, SessionState
from .validators import normalize_text, validate_name, validate_text, sanitize_system_text
from .presence import PresenceRegistry
from .connections import Channel, ConnectionHub, SocketIOChannel, WebSocketChannel
from .frames import decode_frame, encode_frame
from .broadcaster import Broadcaster
from .session_handler import SessionHandler
from .hub import ChatHub
from .config import Settings, get_settings
from .constants import *
from .logger import (
    get_logger,
    set_log_level,
    log_connection_event,
    log_message_event,
    log_websocket_event,
    log_system_event
)

__all__ = [
    'Participant',
    'ChatMessage',
    'SystemNotice',
    'TypingState',
    'Session',
    'SessionState',
    'normalize_text',
    'validate_name',
    'validate_text',
    'sanitize_system_text',
    'PresenceRegistry',
    'Channel',
    'ConnectionHub',
    'SocketIOChannel',
    'WebSocketChannel',
    'decode_frame',
    'encode_frame',
    'Broadcaster',
    'SessionHandler',
    'ChatHub',
    'Settings',
    'get_settings',
    'get_logger',
    'set_log_level',
    'log_connection_event',
    'log_message_event',
    'log_websocket_event',
    'log_system_event'
]
