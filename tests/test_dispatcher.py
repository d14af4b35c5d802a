"""Tests for ToolRegistry and ToolDispatcher.

Covers:
- Duplicate registration rejected
- Unknown tool: UnknownTool from invoke, error result from call
- Handler faults degrade to an error result
- Input schema construction
"""

from __future__ import annotations

from typing import Any, Dict

import pytest
from mcp import types

from jokes_mcp.dispatcher import ToolDispatcher
from jokes_mcp.tools import (
    ToolArgument,
    ToolRegistry,
    UnknownTool,
    input_schema,
    text_result,
)

from .conftest import texts_of


def _registry() -> ToolRegistry:
    registry = ToolRegistry()

    @registry.tool("echo", "Echo the text argument", arguments=[ToolArgument("text", "Text to echo")])
    async def echo(arguments: Dict[str, Any]) -> types.CallToolResult:
        return text_result(arguments.get("text", ""))

    @registry.tool("boom", "Always fails")
    async def boom(arguments: Dict[str, Any]) -> types.CallToolResult:
        raise RuntimeError("kaput")

    return registry


class TestToolRegistry:
    def test_duplicate_name_rejected(self) -> None:
        registry = _registry()
        with pytest.raises(ValueError, match="already registered"):
            registry.add_tool(
                types.Tool(name="echo", description="again", inputSchema={"type": "object"}),
                lambda args: None,
            )

    def test_unknown_handler(self) -> None:
        with pytest.raises(UnknownTool) as exc_info:
            _registry().get_handler("missing")
        assert str(exc_info.value) == "Unknown tool: missing"

    def test_descriptors_and_dispatch_table_agree(self) -> None:
        registry = _registry()
        for tool in registry.list_tools():
            assert tool.name in registry
            assert registry.get_handler(tool.name) is not None
        assert len(registry) == 2

    def test_input_schema(self) -> None:
        schema = input_schema(
            ToolArgument("zip", "US ZIP code"),
            ToolArgument("limit", "Max results", type="integer", required=False),
        )
        assert schema == {
            "type": "object",
            "properties": {
                "zip": {"type": "string", "description": "US ZIP code"},
                "limit": {"type": "integer", "description": "Max results"},
            },
            "required": ["zip"],
        }

    def test_input_schema_without_arguments(self) -> None:
        assert input_schema() == {"type": "object", "properties": {}}


class TestToolDispatcher:
    @pytest.mark.asyncio
    async def test_invoke(self) -> None:
        result = await ToolDispatcher(_registry()).invoke("echo", {"text": "hi"})
        assert texts_of(result) == ["hi"]

    @pytest.mark.asyncio
    async def test_invoke_without_arguments(self) -> None:
        result = await ToolDispatcher(_registry()).invoke("echo")
        assert texts_of(result) == [""]

    @pytest.mark.asyncio
    async def test_invoke_unknown_tool_raises(self) -> None:
        with pytest.raises(UnknownTool):
            await ToolDispatcher(_registry()).invoke("nope", {})

    @pytest.mark.asyncio
    async def test_call_unknown_tool_is_error_result(self) -> None:
        dispatcher = ToolDispatcher(_registry())
        result = await dispatcher.call("nope", {})
        assert result.isError
        assert texts_of(result) == ["Unknown tool: nope"]
        # Dispatcher keeps serving afterwards
        assert texts_of(await dispatcher.call("echo", {"text": "still here"})) == ["still here"]

    @pytest.mark.asyncio
    async def test_handler_fault_is_error_result(self) -> None:
        result = await ToolDispatcher(_registry()).invoke("boom", {})
        assert result.isError
        assert texts_of(result) == ["Error executing tool boom: kaput"]
