from __future__ import annotations

from typing import Any, Dict, List
from urllib.parse import quote

import httpx
from mcp import types

from ..models import CityLookup, Country, ZipLookup
from . import ToolArgument, ToolRegistry, string_argument, text_result
from .upstream import call_upstream

COUNTRY_URL = "https://restcountries.com/v3.1/name"
ZIP_URL = "http://api.zippopotam.us/us"
GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"


def render_country(name: str, countries: List[Country]) -> List[str]:
    if not countries:
        return [f"No data found for {name}"]
    country = countries[0]
    return [
        (country.name.common if country.name else None) or "No name found",
        country.capital[0] if country.capital else "No capital found",
        country.region or "No region found",
        f"{country.population:,}" if country.population else "No population found",
        (country.flags.png if country.flags else None) or "No flag found",
    ]


def render_zip(zip_code: str, lookup: ZipLookup) -> List[str]:
    place = lookup.places[0]
    return [f"{zip_code}: {place.place_name}, {place.state_abbreviation}"]


def render_city(city: str, lookup: CityLookup) -> List[str]:
    if not lookup.results:
        return [f"No city found matching {city}"]
    match = lookup.results[0]
    label = ", ".join(part for part in (match.name, match.admin1, match.country) if part)
    text = f"{label}: {match.latitude:.4f}, {match.longitude:.4f}"
    details = []
    if match.population:
        details.append(f"population {match.population:,}")
    if match.timezone:
        details.append(f"timezone {match.timezone}")
    if details:
        text += f" ({', '.join(details)})"
    return [text]


def register_tools(
    registry: ToolRegistry,
    client: httpx.AsyncClient,
) -> None:
    @registry.tool(
        "get-country-data",
        "Get a country data by name",
        arguments=[ToolArgument("name", "Get country data by name")],
    )
    async def get_country_data(arguments: Dict[str, Any]) -> types.CallToolResult:
        name = string_argument(arguments, "name")
        if not name:
            return text_result("Please provide a country name.")

        # restcountries answers 404 when nothing matches
        return await call_upstream(
            client,
            f"{COUNTRY_URL}/{quote(name, safe='')}",
            schema=List[Country],
            render=lambda countries: render_country(name, countries),
            error_prefix=f"Error fetching country data for {name}",
            on_not_found=lambda: [f"No data found for {name}"],
        )

    @registry.tool(
        "get-zip-info",
        "Get the city and state for a US ZIP code (example: 90210)",
        arguments=[ToolArgument("zip", "US ZIP code, e.g. 90210")],
    )
    async def get_zip_info(arguments: Dict[str, Any]) -> types.CallToolResult:
        zip_code = string_argument(arguments, "zip")
        if not zip_code:
            return text_result("Please provide a ZIP code.")

        return await call_upstream(
            client,
            f"{ZIP_URL}/{quote(zip_code, safe='')}",
            schema=ZipLookup,
            render=lambda lookup: render_zip(zip_code, lookup),
            error_prefix=f"Error fetching ZIP code info for {zip_code}",
            status_text={404: "ZIP code not found"},
        )

    @registry.tool(
        "get-city-info",
        "Get the location, population and timezone of a city by name",
        arguments=[ToolArgument("city", "City name, e.g. Paris")],
    )
    async def get_city_info(arguments: Dict[str, Any]) -> types.CallToolResult:
        city = string_argument(arguments, "city")
        if not city:
            return text_result("Please provide a city name.")

        return await call_upstream(
            client,
            GEOCODING_URL,
            schema=CityLookup,
            render=lambda lookup: render_city(city, lookup),
            error_prefix=f"Error fetching city info for {city}",
            params={"name": city, "count": 1, "format": "json"},
        )
