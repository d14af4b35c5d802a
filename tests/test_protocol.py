"""Tests for JSON-RPC message handling."""

from __future__ import annotations

from typing import Any, Dict

import pytest
from mcp import types

from jokes_mcp.dispatcher import ToolDispatcher
from jokes_mcp.protocol import PROTOCOL_VERSION, handle_mcp_message
from jokes_mcp.tools import ToolArgument, ToolRegistry, text_result


@pytest.fixture
def dispatcher() -> ToolDispatcher:
    registry = ToolRegistry()

    @registry.tool("echo", "Echo the text argument", arguments=[ToolArgument("text", "Text to echo")])
    async def echo(arguments: Dict[str, Any]) -> types.CallToolResult:
        return text_result(arguments["text"])

    return ToolDispatcher(registry)


def _request(method: str, params: Any = None, message_id: Any = 1) -> Dict[str, Any]:
    message: Dict[str, Any] = {"jsonrpc": "2.0", "id": message_id, "method": method}
    if params is not None:
        message["params"] = params
    return message


@pytest.mark.asyncio
async def test_initialize(dispatcher) -> None:
    response = await handle_mcp_message(dispatcher, _request("initialize", {"protocolVersion": PROTOCOL_VERSION}))
    result = response["result"]
    assert response["id"] == 1
    assert result["protocolVersion"] == PROTOCOL_VERSION
    assert result["serverInfo"] == {"name": "jokesMCP", "version": "1.0.0"}
    assert result["capabilities"] == {"tools": {"listChanged": False}}


@pytest.mark.asyncio
async def test_ping(dispatcher) -> None:
    response = await handle_mcp_message(dispatcher, _request("ping", message_id="abc"))
    assert response == {"jsonrpc": "2.0", "id": "abc", "result": {}}


@pytest.mark.asyncio
async def test_tools_list(dispatcher) -> None:
    response = await handle_mcp_message(dispatcher, _request("tools/list"))
    tools = response["result"]["tools"]
    assert [tool["name"] for tool in tools] == ["echo"]
    assert tools[0]["inputSchema"]["required"] == ["text"]


@pytest.mark.asyncio
async def test_tools_call(dispatcher) -> None:
    response = await handle_mcp_message(
        dispatcher,
        _request("tools/call", {"name": "echo", "arguments": {"text": "hello"}}),
    )
    assert response["result"]["content"] == [{"type": "text", "text": "hello"}]
    assert response["result"]["isError"] is False


@pytest.mark.asyncio
async def test_tools_call_unknown_tool(dispatcher) -> None:
    response = await handle_mcp_message(dispatcher, _request("tools/call", {"name": "nope"}))
    assert response["result"]["isError"] is True
    assert response["result"]["content"][0]["text"] == "Unknown tool: nope"


@pytest.mark.asyncio
async def test_tools_call_requires_name(dispatcher) -> None:
    response = await handle_mcp_message(dispatcher, _request("tools/call", {"arguments": {}}))
    assert response["error"]["code"] == types.INVALID_PARAMS


@pytest.mark.asyncio
async def test_tools_call_rejects_non_object_arguments(dispatcher) -> None:
    response = await handle_mcp_message(
        dispatcher,
        _request("tools/call", {"name": "echo", "arguments": ["hello"]}),
    )
    assert response["error"]["code"] == types.INVALID_PARAMS


@pytest.mark.asyncio
async def test_notification_gets_no_response(dispatcher) -> None:
    message = {"jsonrpc": "2.0", "method": "notifications/initialized"}
    assert await handle_mcp_message(dispatcher, message) is None


@pytest.mark.asyncio
async def test_unknown_method(dispatcher) -> None:
    response = await handle_mcp_message(dispatcher, _request("resources/list"))
    assert response["error"]["code"] == types.METHOD_NOT_FOUND


@pytest.mark.asyncio
async def test_wrong_jsonrpc_version(dispatcher) -> None:
    response = await handle_mcp_message(dispatcher, {"jsonrpc": "1.0", "id": 3, "method": "ping"})
    assert response["id"] == 3
    assert response["error"]["code"] == types.INVALID_REQUEST


@pytest.mark.asyncio
async def test_non_object_message(dispatcher) -> None:
    response = await handle_mcp_message(dispatcher, ["not", "a", "message"])
    assert response["id"] is None
    assert response["error"]["code"] == types.INVALID_REQUEST
