from __future__ import annotations

import logging

import httpx

from ..adapters.weather.openweather import build_url, fetch_raw
from ..adapters.weather.schemas import CitySchema, decode_cities
from ..adapters.weather.status import classify_response
from ..domain.models import City

LOGGER = logging.getLogger(__name__)

OPENWEATHER_GEOCODING_URL = "https://api.openweathermap.org/geo/1.0"
GEOCODING_PATH = "direct"
DEFAULT_CITY_LIMIT = 5


def _to_city(candidate: CitySchema) -> City:
    return City(
        name=candidate.name,
        lat=candidate.lat,
        lon=candidate.lon,
        country=candidate.country,
        state=candidate.state,
    )


def format_city_label(city: City) -> str:
    parts = [city.name, (city.state or "").strip(), (city.country or "").strip()]
    return ", ".join(part for part in parts if part)


class CityResolver:
    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        api_key: str,
        base_url: str = OPENWEATHER_GEOCODING_URL,
        limit: int = DEFAULT_CITY_LIMIT,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._base_url = base_url
        self._limit = min(max(limit, 1), DEFAULT_CITY_LIMIT)

    async def search(self, query: str) -> list[City]:
        text = query.strip()
        url = build_url(
            self._base_url,
            GEOCODING_PATH,
            {"q": text, "limit": self._limit, "appid": self._api_key},
        )
        response = await fetch_raw(self._client, url)
        classify_response(response.status_code, response.content)
        candidates = decode_cities(response.content)
        LOGGER.debug("Geocoding '%s' returned %d candidates", text, len(candidates))
        return [_to_city(candidate) for candidate in candidates[: self._limit]]
