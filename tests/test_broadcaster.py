"""Tests for Broadcaster."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from chathub import Broadcaster, ChatMessage, PresenceRegistry, SystemNotice, TypingState


def make_broadcaster(registry=None):
    transport = MagicMock()
    transport.send_to = AsyncMock(return_value=True)
    transport.send_to_all = AsyncMock(return_value=2)
    return Broadcaster(transport, registry or PresenceRegistry()), transport


@pytest.mark.asyncio
async def test_publish_online_count_uses_registry_size() -> None:
    registry = PresenceRegistry()
    registry.add("c1", "Ann")
    registry.add("c2", "Bob")
    broadcaster, transport = make_broadcaster(registry)

    count = await broadcaster.publish_online_count()

    assert count == 2
    transport.send_to_all.assert_awaited_once_with("online_count", {"count": 2})


@pytest.mark.asyncio
async def test_to_others_excludes_actor() -> None:
    broadcaster, transport = make_broadcaster()
    notice = SystemNotice("join", "Ann присоединился(ась) к чату")

    await broadcaster.broadcast_notice(notice, exclude="c1")

    transport.send_to_all.assert_awaited_once_with(
        "system_message", {"type": "join", "text": "Ann присоединился(ась) к чату"}, exclude="c1"
    )


@pytest.mark.asyncio
async def test_chat_goes_to_everyone_including_sender() -> None:
    broadcaster, transport = make_broadcaster()
    message = ChatMessage(id="1-abc", author="Ann", text="hi", ts=1)

    await broadcaster.broadcast_chat(message)

    transport.send_to_all.assert_awaited_once_with(
        "chat_message", {"id": "1-abc", "author": "Ann", "text": "hi", "ts": 1}
    )


@pytest.mark.asyncio
async def test_typing_relayed_to_everyone() -> None:
    broadcaster, transport = make_broadcaster()

    await broadcaster.broadcast_typing(TypingState("c1", "Ann", True))

    transport.send_to_all.assert_awaited_once_with("typing", {"name": "Ann", "isTyping": True, "id": "c1"})


@pytest.mark.asyncio
async def test_errors_and_acknowledgments_are_to_one() -> None:
    broadcaster, transport = make_broadcaster()

    await broadcaster.send_error("c1", "oops")
    await broadcaster.send_joined("c1", "Ann")

    transport.send_to.assert_any_await("c1", "error_message", "oops")
    transport.send_to.assert_any_await("c1", "joined", {"name": "Ann"})
    transport.send_to_all.assert_not_awaited()


def test_system_notice_rejects_unknown_kind() -> None:
    with pytest.raises(ValueError):
        SystemNotice("kick", "bye")
