from __future__ import annotations

from typing import Any, Dict, List

import httpx
from mcp import types

from ..models import ChuckJoke, DadJoke, YoMamaJoke
from . import ToolRegistry
from .upstream import call_upstream

CHUCK_BASE_URL = "https://api.chucknorris.io/jokes"
DAD_JOKE_URL = "https://icanhazdadjoke.com/"
YO_MAMA_URL = "https://www.yomama-jokes.com/api/v1/jokes/random"


def register_tools(
    registry: ToolRegistry,
    client: httpx.AsyncClient,
) -> None:
    @registry.tool("get-chuck-joke", "Get a random Chuck Norris joke")
    async def get_chuck_joke(arguments: Dict[str, Any]) -> types.CallToolResult:
        return await call_upstream(
            client,
            f"{CHUCK_BASE_URL}/random",
            schema=ChuckJoke,
            render=lambda joke: [joke.value],
            error_prefix="Error fetching Chuck Norris joke",
        )

    @registry.tool(
        "get-chuck-categories",
        "Get all available categories for Chuck Norris jokes",
    )
    async def get_chuck_categories(arguments: Dict[str, Any]) -> types.CallToolResult:
        return await call_upstream(
            client,
            f"{CHUCK_BASE_URL}/categories",
            schema=List[str],
            render=lambda categories: [", ".join(categories)],
            error_prefix="Error fetching Chuck Norris categories",
        )

    @registry.tool("get-dad-joke", "Get a random dad joke")
    async def get_dad_joke(arguments: Dict[str, Any]) -> types.CallToolResult:
        # icanhazdadjoke serves HTML unless JSON is asked for explicitly
        return await call_upstream(
            client,
            DAD_JOKE_URL,
            schema=DadJoke,
            render=lambda joke: [joke.joke],
            error_prefix="Error fetching dad joke",
            headers={"Accept": "application/json"},
        )

    @registry.tool("get-yo-mama-joke", "Get a random Yo Mama joke")
    async def get_yo_mama_joke(arguments: Dict[str, Any]) -> types.CallToolResult:
        return await call_upstream(
            client,
            YO_MAMA_URL,
            schema=YoMamaJoke,
            render=lambda joke: [joke.joke],
            error_prefix="Error fetching Yo Mama joke",
        )
