"""
Logging configuration for the chat hub
"""

import logging
import sys
from typing import Optional

from .constants import LOG_LEVEL


class SafeFormatter(logging.Formatter):
    """Formatter that keeps untrusted text (names, chat text) on a single log line"""

    def format(self, record):
        message = super().format(record)
        if record.exc_info or record.stack_info:
            # Tracebacks are multi-line on purpose
            return message
        return message.replace("\r", "\\r").replace("\n", "\\n")


def get_logger(name: str = "chathub") -> logging.Logger:
    """
    Get a logger instance with the chat hub formatting

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)

        formatter = SafeFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)

        logger.addHandler(handler)
        logger.setLevel(LOG_LEVEL)

        # Prevent propagation to root logger
        logger.propagate = False

    return logger


def set_log_level(level: str, logger: Optional[logging.Logger] = None):
    """Apply a configured level name such as "DEBUG" to the hub logger"""
    if logger is None:
        logger = get_logger()
    logger.setLevel(level.upper())


def log_connection_event(connection_id: str, action: str, name: str = "", details: str = ""):
    """
    Log presence changes for monitoring

    Args:
        connection_id: Transport connection identifier
        action: Action (connect/join/leave/disconnect)
        name: Display name, if the connection has joined
        details: Additional details
    """
    logger = get_logger()
    name_info = f" | name={name}" if name else ""
    log_message = f"CONNECTION_EVENT: {action} | conn={connection_id}{name_info} | {details}"
    logger.info(log_message)


def log_message_event(message_id: str, author: str, action: str, details: str = ""):
    """
    Log chat message events

    Args:
        message_id: Generated message identifier
        author: Sender display name
        action: Action (broadcast/dropped/error)
        details: Additional details
    """
    logger = get_logger()
    log_message = f"MESSAGE_EVENT: {action} | id={message_id} | author={author} | {details}"
    logger.info(log_message)


def log_websocket_event(event_type: str, connection_id: str, details: str = ""):
    """
    Log transport protocol events

    Args:
        event_type: Type of transport event
        connection_id: Connection identifier
        details: Additional details
    """
    logger = get_logger()
    log_message = f"WEBSOCKET_EVENT: {event_type} | conn={connection_id} | {details}"
    logger.debug(log_message)


def log_system_event(event_type: str, details: str, level: str = "info"):
    """
    Log system-level events

    Args:
        event_type: Type of system event
        details: Event details
        level: Log level (info/warning/error)
    """
    logger = get_logger()
    log_message = f"SYSTEM_EVENT: {event_type} | {details}"

    if level == "warning":
        logger.warning(log_message)
    elif level == "error":
        logger.error(log_message)
    else:
        logger.info(log_message)
