"""
Tool registration utilities.

Each module in this package exposes a `register_tools(registry, ...)` function
that adds its tools to the central registry. The registry is the only place
tools are declared: both `tools/list` and `tools/call` read from it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from mcp import types


ToolHandler = Callable[[Dict[str, Any]], Awaitable[types.CallToolResult]]


class UnknownTool(KeyError):
    """Raised when an invocation names a tool that is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown tool: {self.name}"


@dataclass(frozen=True)
class ToolArgument:
    name: str
    description: str
    type: str = "string"
    required: bool = True


@dataclass(frozen=True)
class RegisteredTool:
    spec: types.Tool
    handler: ToolHandler


def input_schema(*arguments: ToolArgument) -> Dict[str, Any]:
    """Build the JSON Schema object advertised for a tool's arguments."""
    schema: Dict[str, Any] = {
        "type": "object",
        "properties": {
            arg.name: {"type": arg.type, "description": arg.description}
            for arg in arguments
        },
    }
    required = [arg.name for arg in arguments if arg.required]
    if required:
        schema["required"] = required
    return schema


def text_result(*texts: str, is_error: bool = False) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text) for text in texts],
        isError=is_error,
    )


class ToolRegistry:
    """
    In-memory registry mapping MCP tool names to their specifications and handlers.
    """

    def __init__(self) -> None:
        self._tools: Dict[str, RegisteredTool] = {}

    def add_tool(self, tool: types.Tool, handler: ToolHandler) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' already registered")
        self._tools[tool.name] = RegisteredTool(spec=tool, handler=handler)

    def tool(
        self,
        name: str,
        description: str,
        arguments: Sequence[ToolArgument] = (),
    ) -> Callable[[ToolHandler], ToolHandler]:
        """Decorator form of `add_tool`."""

        def decorator(handler: ToolHandler) -> ToolHandler:
            self.add_tool(
                types.Tool(
                    name=name,
                    description=description,
                    inputSchema=input_schema(*arguments),
                ),
                handler,
            )
            return handler

        return decorator

    def list_tools(self) -> List[types.Tool]:
        return [rt.spec for rt in self._tools.values()]

    def get_handler(self, name: str) -> ToolHandler:
        if name not in self._tools:
            raise UnknownTool(name)
        return self._tools[name].handler

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


def string_argument(arguments: Dict[str, Any], name: str) -> Optional[str]:
    """Return a non-blank string argument, or None when it is absent."""
    value = arguments.get(name)
    if value is None:
        return None
    value = str(value).strip()
    return value or None
