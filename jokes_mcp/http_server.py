from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
import uvicorn
from fastapi import FastAPI, Query, Request
from fastapi.responses import PlainTextResponse, StreamingResponse

from . import SERVER_VERSION
from .config import Settings, get_settings
from .dispatcher import ToolDispatcher
from .main import create_http_client, create_registry
from .protocol import handle_mcp_message
from .sessions import SessionNotFound, SessionTransportMap, SseChannel

logger = logging.getLogger(__name__)

SSE_PATH = "/sse"
MESSAGE_PATH = "/jokes"

NO_TRANSPORT = "No transport found for sessionId"


def create_http_app(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """
    Create FastAPI app serving the MCP tools over HTTP/SSE.

    MCP over HTTP/SSE:
    - Client opens `GET /sse`; the first event (`endpoint`) names the URL,
      including the session id, to POST messages to
    - Client POSTs JSON-RPC messages to `/jokes?sessionId=<id>`
    - Responses are pushed on the SSE stream as `message` events
    """
    settings = settings or get_settings()
    owns_client = http_client is None
    client = http_client or create_http_client(settings)

    dispatcher = ToolDispatcher(create_registry(client))

    async def handle(message):
        return await handle_mcp_message(dispatcher, message)

    # Owned by this app instance; tests build as many apps as they like
    transport_map = SessionTransportMap(handle)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            yield
        finally:
            transport_map.close_all()
            if owns_client:
                await client.aclose()

    app = FastAPI(
        title="Jokes MCP",
        version=SERVER_VERSION,
        description="MCP server that provides jokes and lookup tools",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.dispatcher = dispatcher
    app.state.transport_map = transport_map

    @app.get("/")
    async def root() -> PlainTextResponse:
        return PlainTextResponse("The Jokes MCP server is running!")

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok", "service": "jokes-mcp"}

    @app.get(SSE_PATH)
    async def sse() -> StreamingResponse:
        """
        Open a session and stream its responses.

        The session is unregistered as soon as the stream ends, whether the
        client disconnected or the server is shutting down.
        """
        channel = SseChannel(MESSAGE_PATH, ping_interval=settings.sse_ping_interval)
        session_id = await transport_map.register(channel)

        async def stream() -> AsyncIterator[str]:
            try:
                async for event in channel.events():
                    yield event
            finally:
                transport_map.unregister(session_id)

        return StreamingResponse(
            stream(),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no",  # Disable nginx buffering
            },
        )

    @app.post(MESSAGE_PATH)
    async def post_message(
        request: Request,
        session_id: Optional[str] = Query(default=None, alias="sessionId"),
    ) -> PlainTextResponse:
        if not session_id:
            return PlainTextResponse("sessionId query parameter is required", status_code=400)
        if session_id not in transport_map:
            return PlainTextResponse(NO_TRANSPORT, status_code=400)

        body = await request.body()
        try:
            message = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Unparsable message for session %s", session_id)
            return PlainTextResponse("Could not parse message", status_code=400)

        try:
            await transport_map.dispatch(session_id, message)
        except SessionNotFound:
            return PlainTextResponse(NO_TRANSPORT, status_code=400)

        return PlainTextResponse("Accepted", status_code=202)

    return app


class JokesServer(uvicorn.Server):
    """
    Uvicorn server that ends every SSE stream as soon as shutdown begins.

    Uvicorn waits for open connections before running lifespan shutdown, and
    an SSE response never finishes on its own, so the sessions are closed
    first to let those connections drain.
    """

    def __init__(self, config: uvicorn.Config, transport_map: SessionTransportMap) -> None:
        super().__init__(config)
        self._transport_map = transport_map

    async def shutdown(self, sockets=None) -> None:
        self._transport_map.close_all()
        await super().shutdown(sockets=sockets)


def create_uvicorn_server(app: FastAPI, settings: Settings) -> JokesServer:
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
        access_log=True,
        timeout_graceful_shutdown=settings.shutdown_timeout,
    )
    return JokesServer(config, app.state.transport_map)


async def run_http_server(settings: Optional[Settings] = None) -> None:
    """Run the HTTP server using uvicorn."""
    settings = settings or get_settings()
    server = create_uvicorn_server(create_http_app(settings), settings)
    logger.info("Server is running at http://localhost:%d", settings.port)
    await server.serve()
