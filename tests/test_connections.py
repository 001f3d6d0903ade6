"""Tests for ConnectionHub and the transport channels."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from chathub import ConnectionHub, SocketIOChannel, WebSocketChannel
from tests.conftest import BrokenChannel, FakeChannel


@pytest.mark.asyncio
async def test_send_to_all_skips_excluded_connection() -> None:
    connections = ConnectionHub()
    first, second = FakeChannel(), FakeChannel()
    connections.attach("c1", first)
    connections.attach("c2", second)

    recipients = await connections.send_to_all("online_count", {"count": 1}, exclude="c1")

    assert recipients == 1
    assert first.events == []
    assert second.events == [("online_count", {"count": 1})]


@pytest.mark.asyncio
async def test_failed_recipient_does_not_stop_delivery() -> None:
    """Given a broken recipient, when broadcasting, then others still receive the event."""
    connections = ConnectionHub()
    healthy = FakeChannel()
    connections.attach("broken", BrokenChannel())
    connections.attach("healthy", healthy)

    recipients = await connections.send_to_all("online_count", {"count": 0})

    assert recipients == 1
    assert healthy.named("online_count") == [{"count": 0}]


@pytest.mark.asyncio
async def test_send_to_unknown_connection_returns_false() -> None:
    connections = ConnectionHub()

    assert await connections.send_to("ghost", "joined", {"name": "Ann"}) is False


@pytest.mark.asyncio
async def test_detached_connection_receives_nothing() -> None:
    connections = ConnectionHub()
    channel = FakeChannel()
    connections.attach("c1", channel)

    assert connections.detach("c1") is channel
    await connections.send_to_all("online_count", {"count": 0})

    assert channel.events == []
    assert "c1" not in connections
    assert connections.detach("c1") is None


def test_counts_by_transport() -> None:
    connections = ConnectionHub()
    connections.attach("sid1", SocketIOChannel(MagicMock(), "sid1"))
    connections.attach("ws_1", WebSocketChannel(MagicMock()))
    connections.attach("ws_2", WebSocketChannel(MagicMock()))

    assert connections.counts_by_transport() == {"socketio": 1, "websocket": 2}
    assert len(connections) == 3


@pytest.mark.asyncio
async def test_socketio_channel_emits_to_single_sid() -> None:
    sio = MagicMock()
    sio.emit = AsyncMock()

    await SocketIOChannel(sio, "sid1").send("joined", {"name": "Ann"})

    sio.emit.assert_awaited_once_with("joined", {"name": "Ann"}, to="sid1")


@pytest.mark.asyncio
async def test_websocket_channel_sends_json_frame() -> None:
    websocket = MagicMock()
    websocket.send_text = AsyncMock()

    await WebSocketChannel(websocket).send("online_count", {"count": 3})

    sent = json.loads(websocket.send_text.await_args[0][0])
    assert sent == {"type": "online", "count": 3}


@pytest.mark.asyncio
async def test_websocket_channel_skips_events_without_frame() -> None:
    websocket = MagicMock()
    websocket.send_text = AsyncMock()

    await WebSocketChannel(websocket).send("heartbeat", {})

    websocket.send_text.assert_not_awaited()
