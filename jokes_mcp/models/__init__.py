from .upstream import (
    ChuckJoke,
    CityLookup,
    Country,
    DadJoke,
    DictionaryEntry,
    YoMamaJoke,
    ZipLookup,
)

__all__ = [
    "ChuckJoke",
    "CityLookup",
    "Country",
    "DadJoke",
    "DictionaryEntry",
    "YoMamaJoke",
    "ZipLookup",
]
