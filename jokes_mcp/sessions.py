"""
Session transport map.

Each streaming connection gets an opaque session id bound to exactly one
output channel. Inbound messages posted for that id are handled and the
response is pushed back over the bound channel. A session lives as long as
its connection: OPEN once registered, CLOSED (terminal) once unregistered.
"""

from __future__ import annotations

import json
import logging
import secrets
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional, Protocol

import anyio

logger = logging.getLogger(__name__)

MessageHandler = Callable[[Any], Awaitable[Optional[Dict[str, Any]]]]


class SessionNotFound(KeyError):
    """No live channel is registered under the given session id."""

    def __init__(self, session_id: str) -> None:
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self) -> str:
        return f"No transport found for sessionId {self.session_id}"


class ChannelClosed(RuntimeError):
    """The output channel was closed before a message could be written."""


class OutputChannel(Protocol):
    async def open(self, session_id: str) -> None: ...

    async def send(self, message: Dict[str, Any]) -> None: ...

    def close(self) -> None: ...


def new_session_id() -> str:
    return secrets.token_hex(16)


class SessionStore:
    """
    Plain mapping of session id to output channel.

    Owned by one server instance and injected into `SessionTransportMap`;
    there is no process-wide store.
    """

    def __init__(self) -> None:
        self._channels: Dict[str, OutputChannel] = {}

    def add(self, session_id: str, channel: OutputChannel) -> None:
        if session_id in self._channels:
            raise ValueError(f"Session '{session_id}' already registered")
        self._channels[session_id] = channel

    def get(self, session_id: str) -> Optional[OutputChannel]:
        return self._channels.get(session_id)

    def pop(self, session_id: str) -> Optional[OutputChannel]:
        return self._channels.pop(session_id, None)

    def session_ids(self) -> List[str]:
        return list(self._channels)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._channels

    def __len__(self) -> int:
        return len(self._channels)


class SessionTransportMap:
    def __init__(
        self,
        handler: MessageHandler,
        store: Optional[SessionStore] = None,
        id_factory: Callable[[], str] = new_session_id,
    ) -> None:
        self._handler = handler
        self._store = store if store is not None else SessionStore()
        self._id_factory = id_factory

    @property
    def store(self) -> SessionStore:
        return self._store

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._store

    async def register(self, channel: OutputChannel) -> str:
        """Open `channel` under a fresh session id and return the id."""
        # 128-bit random ids; a collision with a closed session is not tracked
        session_id = self._id_factory()
        while session_id in self._store:
            session_id = self._id_factory()

        self._store.add(session_id, channel)
        try:
            await channel.open(session_id)
        except BaseException:
            self._store.pop(session_id)
            raise
        logger.info("Session %s opened (%d live)", session_id, len(self._store))
        return session_id

    async def dispatch(self, session_id: str, message: Any) -> Optional[Dict[str, Any]]:
        """
        Handle `message` for `session_id` and push the response to its channel.

        Raises SessionNotFound when the session is unknown or its channel has
        closed in the meantime.
        """
        if self._store.get(session_id) is None:
            raise SessionNotFound(session_id)

        response = await self._handler(message)
        if response is None:
            return None

        # The session may have closed while the handler was suspended
        channel = self._store.get(session_id)
        if channel is None:
            raise SessionNotFound(session_id)
        try:
            await channel.send(response)
        except ChannelClosed as e:
            self.unregister(session_id)
            raise SessionNotFound(session_id) from e
        return response

    def unregister(self, session_id: str) -> None:
        """Close and forget the session's channel. Unknown ids are ignored."""
        channel = self._store.pop(session_id)
        if channel is None:
            return
        channel.close()
        logger.info("Session %s closed (%d live)", session_id, len(self._store))

    def close_all(self) -> None:
        for session_id in self._store.session_ids():
            self.unregister(session_id)


def format_sse(event: str, data: str) -> str:
    lines = "".join(f"data: {line}\n" for line in data.splitlines() or [""])
    return f"event: {event}\n{lines}\n"


class SseChannel:
    """
    Output channel backed by an in-memory stream drained by an SSE response.

    The first event announces the endpoint the client must POST its messages
    to; every later event carries one JSON-RPC message. A comment line is sent
    after `ping_interval` idle seconds so a vanished client is noticed.
    """

    def __init__(
        self,
        endpoint: str,
        max_buffer_size: int = 32,
        ping_interval: float = 15.0,
    ) -> None:
        self._endpoint = endpoint
        self._ping_interval = ping_interval
        self._send_stream, self._receive_stream = anyio.create_memory_object_stream(
            max_buffer_size
        )

    async def open(self, session_id: str) -> None:
        await self._send_stream.send(("endpoint", f"{self._endpoint}?sessionId={session_id}"))

    async def send(self, message: Dict[str, Any]) -> None:
        try:
            await self._send_stream.send(("message", json.dumps(message)))
        except (anyio.ClosedResourceError, anyio.BrokenResourceError) as e:
            raise ChannelClosed(str(e) or "channel closed") from e

    def close(self) -> None:
        self._send_stream.close()

    async def events(self) -> AsyncIterator[str]:
        """Yield formatted SSE events until the channel is closed."""
        async with self._receive_stream:
            while True:
                item = None
                with anyio.move_on_after(self._ping_interval):
                    try:
                        item = await self._receive_stream.receive()
                    except anyio.EndOfStream:
                        return
                # Yield outside the cancel scope
                yield format_sse(*item) if item is not None else ": ping\n\n"
