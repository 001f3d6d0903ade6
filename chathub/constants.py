"""
Limits, event names and user-facing texts for the chat hub
"""

# Validation limits
MAX_NAME_LENGTH = 40
MAX_TEXT_LENGTH = 1000
MAX_SYSTEM_TEXT_LENGTH = 200

# Inbound events (connection -> hub)
EVENT_JOIN = "join"
EVENT_CHAT_MESSAGE = "chat_message"
EVENT_TYPING = "typing"
EVENT_DISCONNECT = "disconnect"

INBOUND_EVENTS = (EVENT_JOIN, EVENT_CHAT_MESSAGE, EVENT_TYPING, EVENT_DISCONNECT)

# Outbound events (hub -> connections)
EVENT_JOINED = "joined"
EVENT_SYSTEM_MESSAGE = "system_message"
EVENT_ONLINE_COUNT = "online_count"
EVENT_ERROR_MESSAGE = "error_message"

# System notice kinds
NOTICE_JOIN = "join"
NOTICE_LEAVE = "leave"
NOTICE_ERROR = "error"

# Raw WebSocket frame types
FRAME_JOIN = "join"
FRAME_CHAT = "chat"
FRAME_TYPING = "typing"
FRAME_ONLINE = "online"
FRAME_SYSTEM = "system"

# Logging levels
LOG_LEVEL = "INFO"

# Notice texts shown to users
ERROR_MESSAGES = {
    "invalid_name": "Некорректное имя пользователя.",
    "join_required": "Сначала введите имя пользователя.",
    "join_failed": "Ошибка при входе в чат.",
    "send_failed": "Произошла ошибка при отправке сообщения.",
    "internal": "Внутренняя ошибка сервера.",
}

JOIN_NOTICE_TEMPLATE = "{name} присоединился(ась) к чату"
LEAVE_NOTICE_TEMPLATE = "{name} вышел(ла) из чата"
