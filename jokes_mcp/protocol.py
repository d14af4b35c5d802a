"""
JSON-RPC 2.0 handling for a single inbound MCP message.

Only the tool surface of MCP is served: `initialize`, `ping`, `tools/list`
and `tools/call`. Notifications (messages without an `id`) never get a reply.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from mcp import types

from . import SERVER_NAME, SERVER_VERSION
from .dispatcher import ToolDispatcher

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"


def _error(message_id: Any, code: int, message: str) -> Dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": message_id,
        "error": {"code": code, "message": message},
    }


def _result(message_id: Any, result: Dict[str, Any]) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": message_id, "result": result}


async def handle_mcp_message(
    dispatcher: ToolDispatcher,
    message: Any,
) -> Optional[Dict[str, Any]]:
    """
    Handle one JSON-RPC message and return the response to push back, if any.
    """
    if not isinstance(message, dict) or message.get("jsonrpc") != "2.0":
        message_id = message.get("id") if isinstance(message, dict) else None
        return _error(
            message_id,
            types.INVALID_REQUEST,
            "Invalid Request: jsonrpc must be '2.0'",
        )

    method = message.get("method")
    message_id = message.get("id")
    params = message.get("params")
    if not isinstance(params, dict):
        params = {}

    if "id" not in message:
        # Notifications, e.g. notifications/initialized
        logger.debug("Received notification %s", method)
        return None

    if not method:
        return _error(message_id, types.INVALID_REQUEST, "Invalid Request: method is required")

    if method == "initialize":
        return _result(
            message_id,
            {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {"listChanged": False}},
                "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
            },
        )

    if method == "ping":
        return _result(message_id, {})

    if method == "tools/list":
        tools = dispatcher.registry.list_tools()
        return _result(
            message_id,
            {"tools": [tool.model_dump(by_alias=True, exclude_none=True) for tool in tools]},
        )

    if method == "tools/call":
        tool_name = params.get("name")
        if not tool_name:
            return _error(message_id, types.INVALID_PARAMS, "Invalid params: 'name' is required")
        arguments = params.get("arguments") or {}
        if not isinstance(arguments, dict):
            return _error(
                message_id,
                types.INVALID_PARAMS,
                "Invalid params: 'arguments' must be an object",
            )

        result = await dispatcher.call(tool_name, arguments)
        return _result(message_id, result.model_dump(by_alias=True, exclude_none=True))

    return _error(message_id, types.METHOD_NOT_FOUND, f"Method not found: {method}")
