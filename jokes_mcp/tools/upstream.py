"""
Outbound-call combinator shared by every tool.

A tool is declared as: endpoint + response schema + renderer + error prefix.
`call_upstream` performs the single GET, validates the payload and turns every
failure into a text result so a bad upstream never escapes the handler.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Type, TypeVar

import httpx
from mcp import types
from pydantic import TypeAdapter, ValidationError

from . import text_result

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UpstreamFailure(RuntimeError):
    """The upstream API answered with an error status or an unexpected payload."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    schema: Type[T],
    *,
    params: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None,
    status_text: Optional[Mapping[int, str]] = None,
) -> T:
    """GET `url` and validate the JSON body against `schema`."""
    try:
        response = await client.get(url, params=params, headers=headers)
    except httpx.HTTPError as e:
        raise UpstreamFailure(f"request to {url} failed: {e}") from e

    if response.is_error:
        message = (status_text or {}).get(
            response.status_code,
            f"upstream returned HTTP {response.status_code}",
        )
        raise UpstreamFailure(message, status_code=response.status_code)

    try:
        return TypeAdapter(schema).validate_json(response.content)
    except ValidationError as e:
        raise UpstreamFailure(
            f"unexpected response shape ({e.error_count()} validation errors)",
            status_code=response.status_code,
        ) from e


async def call_upstream(
    client: httpx.AsyncClient,
    url: str,
    *,
    schema: Type[T],
    render: Callable[[T], List[str]],
    error_prefix: str,
    params: Optional[Mapping[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    status_text: Optional[Mapping[int, str]] = None,
    on_not_found: Optional[Callable[[], List[str]]] = None,
) -> types.CallToolResult:
    try:
        payload = await fetch_json(
            client,
            url,
            schema,
            params=params,
            headers=headers,
            status_text=status_text,
        )
    except UpstreamFailure as e:
        if e.status_code == 404 and on_not_found is not None:
            return text_result(*on_not_found())
        logger.warning("Upstream call to %s failed: %s", url, e)
        return text_result(f"{error_prefix}: {e}", is_error=True)
    return text_result(*render(payload))
