"""
Input normalization for untrusted client strings

All functions are pure: rejection is signalled by returning None, never by raising.
"""

import re
from typing import Any, Optional

from .constants import MAX_NAME_LENGTH, MAX_TEXT_LENGTH, MAX_SYSTEM_TEXT_LENGTH

WHITESPACE_RUN = re.compile(r"\s+")


def normalize_text(raw: Any, max_length: int) -> str:
    """
    Collapse whitespace runs, trim and bound a client-supplied string

    Args:
        raw: Untrusted input; anything that is not a str yields ""
        max_length: Maximum number of characters kept

    Returns:
        Normalized text, possibly empty
    """
    if not isinstance(raw, str):
        return ""

    collapsed = WHITESPACE_RUN.sub(" ", raw).strip()
    # Truncation can end on a collapsed space
    return collapsed[:max_length].rstrip()


def validate_name(raw: Any) -> Optional[str]:
    """Normalized display name, or None if nothing is left"""
    name = normalize_text(raw, MAX_NAME_LENGTH)
    return name or None


def validate_text(raw: Any) -> Optional[str]:
    """Normalized chat text, or None if nothing is left"""
    text = normalize_text(raw, MAX_TEXT_LENGTH)
    return text or None


def sanitize_system_text(raw: Any) -> str:
    return normalize_text(raw, MAX_SYSTEM_TEXT_LENGTH)
