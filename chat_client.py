"""
Console client for the raw WebSocket transport of the chat hub
"""

import asyncio
import json
import time
from typing import Optional, Dict, Any
import argparse
import sys

import websockets

from chathub import (
    FRAME_JOIN,
    FRAME_CHAT,
    FRAME_TYPING,
    FRAME_ONLINE,
    FRAME_SYSTEM,
    NOTICE_ERROR,
    MAX_NAME_LENGTH,
    MAX_TEXT_LENGTH,
    MAX_SYSTEM_TEXT_LENGTH,
    normalize_text,
    validate_name,
    validate_text,
)


def render_frame(frame: Dict[str, Any], own_name: str = "") -> Optional[str]:
    """
    Turn an incoming frame into a printable line

    Args:
        frame: Decoded JSON frame from the server
        own_name: Our display name; our own typing state is not shown

    Returns:
        Line to print, or None if the frame should not be shown
    """
    if not isinstance(frame, dict):
        return None

    frame_type = frame.get("type")

    if frame_type == FRAME_CHAT:
        author = normalize_text(frame.get("author"), MAX_NAME_LENGTH)
        text = normalize_text(frame.get("text"), MAX_TEXT_LENGTH)
        if not author or not text:
            return None
        ts = frame.get("ts")
        if not isinstance(ts, (int, float)) or isinstance(ts, bool) or ts <= 0:
            ts = time.time() * 1000
        return f"[{time.strftime('%H:%M', time.localtime(ts / 1000))}] {author}: {text}"

    elif frame_type == FRAME_SYSTEM:
        text = normalize_text(frame.get("text"), MAX_SYSTEM_TEXT_LENGTH)
        if not text:
            return None
        if frame.get("kind") == NOTICE_ERROR:
            return f"! Ошибка: {text}"
        return f"* {text}"

    elif frame_type == FRAME_ONLINE:
        count = frame.get("count")
        if isinstance(count, int) and not isinstance(count, bool):
            return f"# Онлайн: {count}"
        return None

    elif frame_type == FRAME_TYPING:
        name = frame.get("name")
        if not name or name == own_name:
            return None
        return f"~ {name} печатает…" if frame.get("isTyping") else None

    elif frame_type == FRAME_JOIN:
        return f"* Вы вошли как {frame.get('name')}"

    return None


class ChatClient:
    """Raw WebSocket chat client"""

    def __init__(self, name: str, server_url: str = "ws://localhost:3000/ws"):
        self.name = name
        self.server_url = server_url
        self.websocket = None
        self.running = False

    async def connect(self) -> bool:
        """Connect to the server and send the join frame"""
        try:
            self.websocket = await websockets.connect(self.server_url)
            await self.websocket.send(json.dumps({"type": FRAME_JOIN, "name": self.name}, ensure_ascii=False))
            return True
        except (OSError, websockets.exceptions.WebSocketException) as e:
            print(f"Connection failed: {e}")
            return False

    async def send_message(self, text: str) -> bool:
        safe = validate_text(text)
        if not safe or not self.websocket:
            return False
        await self.websocket.send(json.dumps({"type": FRAME_CHAT, "text": safe}, ensure_ascii=False))
        return True

    async def listen_for_messages(self):
        """Print incoming frames until the connection closes"""
        try:
            async for raw in self.websocket:
                try:
                    frame = json.loads(raw)
                except ValueError:
                    continue
                if not isinstance(frame, dict):
                    continue
                if frame.get("type") == FRAME_JOIN and frame.get("name"):
                    self.name = frame["name"]
                line = render_frame(frame, self.name)
                if line:
                    print(line)
        except websockets.exceptions.ConnectionClosed:
            print("Connection closed by server")
        finally:
            self.running = False

    async def disconnect(self):
        self.running = False
        if self.websocket:
            await self.websocket.close()

    async def run_interactive(self):
        """Run interactive chat session"""
        if not await self.connect():
            return

        self.running = True
        listen_task = asyncio.create_task(self.listen_for_messages())
        loop = asyncio.get_running_loop()

        try:
            print("Type a message and press Enter, /quit to leave")
            while self.running:
                line = await loop.run_in_executor(None, sys.stdin.readline)
                if not line:
                    break
                line = line.strip()
                if line == "/quit":
                    break
                await self.send_message(line)
        finally:
            listen_task.cancel()
            await self.disconnect()


async def main():
    parser = argparse.ArgumentParser(description="Chat hub console client")
    parser.add_argument("--name", required=True, help="Display name")
    parser.add_argument("--server", default="ws://localhost:3000/ws", help="Server URL")

    args = parser.parse_args()

    name = validate_name(args.name)
    if name is None:
        parser.error("name must not be empty")

    client = ChatClient(name, args.server)
    await client.run_interactive()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nBye!")
