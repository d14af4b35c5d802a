"""
Response schemas for the third-party APIs the tools forward to.

Only the fields a tool renders are declared; anything else in the payload is
ignored. A payload missing a required field fails validation, which the
upstream combinator reports as an `UpstreamFailure`.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Upstream(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class ChuckJoke(_Upstream):
    """api.chucknorris.io `/jokes/random`."""

    value: str


class DadJoke(_Upstream):
    """icanhazdadjoke.com with `Accept: application/json`."""

    joke: str


class YoMamaJoke(_Upstream):
    """yomama-jokes.com `/api/v1/jokes/random`."""

    joke: str


class CountryName(_Upstream):
    common: Optional[str] = None
    official: Optional[str] = None


class CountryFlags(_Upstream):
    png: Optional[str] = None
    svg: Optional[str] = None


class Country(_Upstream):
    """One element of the restcountries.com `/v3.1/name/{name}` array."""

    name: Optional[CountryName] = None
    capital: Optional[List[str]] = None
    region: Optional[str] = None
    population: Optional[int] = None
    flags: Optional[CountryFlags] = None


class ZipPlace(_Upstream):
    place_name: str = Field(alias="place name")
    state_abbreviation: str = Field(alias="state abbreviation")


class ZipLookup(_Upstream):
    """api.zippopotam.us `/us/{zip}`."""

    places: List[ZipPlace] = Field(min_length=1)


class CityMatch(_Upstream):
    name: str
    latitude: float
    longitude: float
    country: Optional[str] = None
    admin1: Optional[str] = Field(
        default=None,
        description="First-level administrative area (state, region).",
    )
    population: Optional[int] = None
    timezone: Optional[str] = None


class CityLookup(_Upstream):
    """geocoding-api.open-meteo.com `/v1/search`; `results` is absent when nothing matches."""

    results: List[CityMatch] = Field(default_factory=list)


class Definition(_Upstream):
    definition: str
    example: Optional[str] = None


class Meaning(_Upstream):
    part_of_speech: str = Field(alias="partOfSpeech")
    definitions: List[Definition] = Field(default_factory=list)


class DictionaryEntry(_Upstream):
    """One element of the dictionaryapi.dev `/api/v2/entries/en/{word}` array."""

    word: str
    phonetic: Optional[str] = None
    meanings: List[Meaning] = Field(default_factory=list)
