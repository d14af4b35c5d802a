"""
Jokes MCP server package.

This package exposes MCP tools over HTTP/SSE for:
- Random jokes (Chuck Norris, dad jokes, Yo Mama)
- Country, ZIP code and city lookups
- Dictionary definitions

Every tool forwards to a single public REST API and reshapes the JSON
response into text content items.
"""

SERVER_NAME = "jokesMCP"
SERVER_VERSION = "1.0.0"
