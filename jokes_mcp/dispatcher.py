from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from mcp import types

from .tools import ToolRegistry, UnknownTool, text_result

logger = logging.getLogger(__name__)


class ToolDispatcher:
    """
    Route a named invocation to its registered handler.

    Handlers convert their own upstream failures into text results; anything
    that still escapes a handler is turned into an error result here so one
    bad call never tears down the session that issued it.
    """

    def __init__(self, registry: ToolRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def invoke(
        self,
        name: str,
        arguments: Optional[Dict[str, Any]] = None,
    ) -> types.CallToolResult:
        # Raises UnknownTool before any handler runs
        handler = self._registry.get_handler(name)
        try:
            return await handler(arguments or {})
        except Exception as e:
            logger.exception("Error executing tool %s", name)
            return text_result(f"Error executing tool {name}: {e}", is_error=True)

    async def call(
        self,
        name: str,
        arguments: Optional[Dict[str, Any]] = None,
    ) -> types.CallToolResult:
        """Like `invoke`, but an unknown tool becomes an error result."""
        try:
            return await self.invoke(name, arguments)
        except UnknownTool as e:
            logger.info("Rejected call to unknown tool %s", name)
            return text_result(str(e), is_error=True)
