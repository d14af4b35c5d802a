from __future__ import annotations

from typing import Any, Dict, List
from urllib.parse import quote

import httpx
from mcp import types

from ..models import DictionaryEntry
from . import ToolArgument, ToolRegistry, string_argument, text_result
from .upstream import call_upstream

DICTIONARY_URL = "https://api.dictionaryapi.dev/api/v2/entries/en"


def render_definitions(word: str, entries: List[DictionaryEntry]) -> List[str]:
    """Headline with the phonetic spelling, then the first definition per part of speech."""
    if not entries:
        return [f"No definitions found for {word}"]
    entry = entries[0]
    texts = [f"{entry.word} ({entry.phonetic})" if entry.phonetic else entry.word]
    for meaning in entry.meanings:
        if meaning.definitions:
            texts.append(f"{meaning.part_of_speech}: {meaning.definitions[0].definition}")
    return texts


def register_tools(
    registry: ToolRegistry,
    client: httpx.AsyncClient,
) -> None:
    @registry.tool(
        "get-word-definition",
        "Get the English dictionary definitions of a word",
        arguments=[ToolArgument("word", "English word to define")],
    )
    async def get_word_definition(arguments: Dict[str, Any]) -> types.CallToolResult:
        word = string_argument(arguments, "word")
        if not word:
            return text_result("Please provide a word to define.")

        return await call_upstream(
            client,
            f"{DICTIONARY_URL}/{quote(word, safe='')}",
            schema=List[DictionaryEntry],
            render=lambda entries: render_definitions(word, entries),
            error_prefix=f"Error fetching definition for {word}",
            on_not_found=lambda: [f"No definitions found for {word}"],
        )
