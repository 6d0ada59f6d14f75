"""
In-memory connection manager for chat WebSocket: subscribe/unsubscribe/publish by destination.

Destinations:
    /user/{user_id}/queue/chat/{chat_id}/messages   private channel of one participant
    /topic/chat/{chat_id}/messages                  shared chat topic
"""
import asyncio
import json
import logging
import uuid
from typing import Any, Dict, Iterable, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


def user_destination(user_id: uuid.UUID, chat_id: uuid.UUID) -> str:
    return f"/user/{user_id}/queue/chat/{chat_id}/messages"


def topic_destination(chat_id: uuid.UUID) -> str:
    return f"/topic/chat/{chat_id}/messages"


class ConnectionManager:
    """Tracks WebSocket connections per destination and pushes events to them."""

    def __init__(self) -> None:
        self._destinations: Dict[str, Set[WebSocket]] = {}
        self._lock = asyncio.Lock()
        # Fan-out tasks started by publish(), held until done
        self._pending: Set[asyncio.Task] = set()

    async def subscribe(self, websocket: WebSocket, destination: str) -> None:
        async with self._lock:
            self._destinations.setdefault(destination, set()).add(websocket)
        logger.debug("Subscribed ws to %s", destination)

    async def unsubscribe(self, websocket: WebSocket, destination: str) -> None:
        async with self._lock:
            sockets = self._destinations.get(destination)
            if sockets is None:
                return
            sockets.discard(websocket)
            if not sockets:
                del self._destinations[destination]
        logger.debug("Unsubscribed ws from %s", destination)

    async def unsubscribe_all(self, websocket: WebSocket, destinations: Iterable[str]) -> None:
        for destination in list(destinations):
            await self.unsubscribe(websocket, destination)

    def subscriber_count(self, destination: str) -> int:
        return len(self._destinations.get(destination) or ())

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def send_to_destination(self, destination: str, event: str, payload: Any) -> int:
        """
        Push one JSON frame to every socket on `destination`.

        Sockets whose send fails are unsubscribed. Returns the number of
        sockets reached.
        """
        frame = json.dumps({"event": event, "destination": destination, "payload": payload}, default=str)
        async with self._lock:
            sockets = list(self._destinations.get(destination) or ())
        if not sockets:
            return 0
        results = await asyncio.gather(*(ws.send_text(frame) for ws in sockets), return_exceptions=True)
        reached = 0
        for ws, result in zip(sockets, results):
            if isinstance(result, Exception):
                logger.warning("Push to %s failed: %s", destination, result)
                await self.unsubscribe(ws, destination)
            else:
                reached += 1
        return reached

    def publish(self, destination: str, event: str, payload: Any) -> None:
        """Schedule a push from sync code (e.g. after a message commit)."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop, push to %s skipped", destination)
            return
        task = loop.create_task(self.send_to_destination(destination, event, payload))
        self._pending.add(task)
        task.add_done_callback(self._push_done)

    def _push_done(self, task: "asyncio.Task[int]") -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Push task failed: %r", exc)

    async def drain(self) -> None:
        """Wait for scheduled pushes to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


connection_manager = ConnectionManager()
