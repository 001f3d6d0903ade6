"""Shared fixtures: an isolated hub and recording channels."""

import asyncio
from typing import Any, List, Tuple

import pytest

from chathub import Channel, ChatHub


class FakeChannel(Channel):
    """Records every event delivered to one connection."""

    transport = "fake"

    def __init__(self) -> None:
        self.events: List[Tuple[str, Any]] = []

    async def send(self, event: str, payload: Any) -> None:
        # Yield like a real transport so concurrent handlers could interleave
        await asyncio.sleep(0)
        self.events.append((event, payload))

    def named(self, event: str) -> List[Any]:
        return [payload for name, payload in self.events if name == event]

    def clear(self) -> None:
        self.events.clear()


class BrokenChannel(Channel):
    """A recipient whose transport already went away."""

    transport = "fake"

    async def send(self, event: str, payload: Any) -> None:
        raise ConnectionError("socket closed")


@pytest.fixture
def hub() -> ChatHub:
    return ChatHub()


@pytest.fixture
def connect(hub):
    """Attach a recording channel for a connection id and return it."""

    def _connect(connection_id: str) -> FakeChannel:
        channel = FakeChannel()
        hub.connect(connection_id, channel)
        return channel

    return _connect
