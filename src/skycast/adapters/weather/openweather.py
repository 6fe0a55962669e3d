from __future__ import annotations

import asyncio
import logging
import math
from datetime import timezone, tzinfo
from typing import Any

import httpx

from ...domain.models import UnifiedForecast
from .base import InvalidRequest, TransportFailure
from .projection import DAILY_LIMIT, HOURLY_LIMIT, bucket_daily, project_current, project_hourly
from .schemas import decode_current, decode_forecast
from .status import classify_response

LOGGER = logging.getLogger(__name__)

OPENWEATHER_DATA_URL = "https://api.openweathermap.org/data/2.5"
CURRENT_PATH = "weather"
FORECAST_PATH = "forecast"


def build_url(base_url: str, path: str, params: dict[str, Any]) -> httpx.URL:
    """Join ``path`` onto ``base_url`` and encode ``params`` as the query string."""
    try:
        url = httpx.URL(f"{base_url.rstrip('/')}/{path}", params=params)
    except (httpx.InvalidURL, TypeError, ValueError) as exc:
        raise InvalidRequest(f"Could not build request URL for {path}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidRequest(f"Request URL for {path} must be an absolute http(s) URL")
    return url


def _redacted(url: httpx.URL) -> str:
    return str(url.copy_remove_param("appid"))


async def fetch_raw(client: httpx.AsyncClient, url: httpx.URL) -> httpx.Response:
    """Issue one GET and translate network errors into :class:`TransportFailure`."""
    LOGGER.debug("GET %s", _redacted(url))
    try:
        return await client.get(url)
    except httpx.HTTPError as exc:
        LOGGER.warning("Request to %s failed: %s", _redacted(url), exc)
        raise TransportFailure(exc) from exc


async def gather_all(*coros) -> list[Any]:
    """Run ``coros`` concurrently and return their results in order.

    If any of them fails, or the caller is cancelled, every sibling that is
    still in flight is cancelled and awaited before the error propagates.
    """
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class OpenWeatherAdapter:
    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        api_key: str,
        base_url: str = OPENWEATHER_DATA_URL,
        hourly_limit: int = HOURLY_LIMIT,
        daily_limit: int = DAILY_LIMIT,
        bucket_tz: tzinfo = timezone.utc,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._base_url = base_url
        self._hourly_limit = min(max(hourly_limit, 0), HOURLY_LIMIT)
        self._daily_limit = min(max(daily_limit, 0), DAILY_LIMIT)
        self._bucket_tz = bucket_tz

    def _params(self, lat: float, lon: float) -> dict[str, Any]:
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise InvalidRequest(f"Coordinates must be finite numbers, got ({lat}, {lon})")
        return {"lat": lat, "lon": lon, "appid": self._api_key, "units": "metric"}

    async def fetch(self, lat: float, lon: float) -> UnifiedForecast:
        params = self._params(lat, lon)
        current_url = build_url(self._base_url, CURRENT_PATH, params)
        forecast_url = build_url(self._base_url, FORECAST_PATH, params)

        current_response, forecast_response = await gather_all(
            fetch_raw(self._client, current_url),
            fetch_raw(self._client, forecast_url),
        )

        classify_response(current_response.status_code, current_response.content)
        classify_response(forecast_response.status_code, forecast_response.content)

        current = decode_current(current_response.content)
        forecast = decode_forecast(forecast_response.content)
        LOGGER.debug(
            "Decoded forecast for %s with %d samples",
            current.name,
            len(forecast.samples),
        )

        return UnifiedForecast(
            current=project_current(current),
            hourly=project_hourly(forecast, limit=self._hourly_limit),
            daily=bucket_daily(forecast, tz=self._bucket_tz, limit=self._daily_limit),
            lat=lat,
            lon=lon,
            location_label=current.name,
            timezone_offset=0,
        )
