from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

import httpx
from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from .adapters.weather import (
    ApiRejected,
    DecodingFailure,
    InvalidCredentials,
    InvalidRequest,
    OpenWeatherAdapter,
    TransportFailure,
    WeatherAdapterError,
)
from .domain.models import City
from .location.service import CityResolver, format_city_label
from .settings import AppSettings, load_settings

LOGGER = logging.getLogger(__name__)

USER_AGENT = "skycast/0.1"

# (status code, error kind, alert title) per failure type.
ERROR_RESPONSES: dict[type[WeatherAdapterError], tuple[int, str, str]] = {
    InvalidRequest: (400, "invalid_request", "Invalid Request"),
    InvalidCredentials: (502, "invalid_credentials", "API Key Error"),
    ApiRejected: (502, "api_rejected", "API Error"),
    TransportFailure: (504, "transport_failure", "Network Error"),
    DecodingFailure: (502, "decoding_failure", "Error"),
}


def build_weather_adapter(settings: AppSettings, client: httpx.AsyncClient) -> OpenWeatherAdapter:
    weather = settings.yaml.weather
    return OpenWeatherAdapter(
        client,
        api_key=settings.api_key,
        base_url=weather.base_url,
        hourly_limit=weather.hourly_limit,
        daily_limit=weather.daily_limit,
        bucket_tz=settings.bucket_tz,
    )


def build_city_resolver(settings: AppSettings, client: httpx.AsyncClient) -> CityResolver:
    weather = settings.yaml.weather
    return CityResolver(
        client,
        api_key=settings.api_key,
        base_url=weather.geocoding_url,
        limit=weather.city_limit,
    )


def error_response(exc: WeatherAdapterError) -> JSONResponse:
    status_code, kind, title = ERROR_RESPONSES.get(type(exc), (502, "upstream_error", "Error"))
    if isinstance(exc, ApiRejected) and exc.status_code == 404:
        status_code = 404
    message = str(exc)
    if isinstance(exc, (TransportFailure, DecodingFailure)):
        message = "Failed to fetch weather data. Please try again later."
    return JSONResponse(
        status_code=status_code,
        content={"error": kind, "title": title, "detail": message},
    )


def _city_payload(city: City) -> dict[str, Any]:
    return {**city.model_dump(), "label": format_city_label(city)}


@asynccontextmanager
async def lifespan(application: FastAPI):
    settings = load_settings()
    client = httpx.AsyncClient(
        headers={"User-Agent": USER_AGENT},
        timeout=settings.yaml.weather.timeout_seconds,
    )

    application.state.settings = settings
    application.state.weather = build_weather_adapter(settings, client)
    application.state.cities = build_city_resolver(settings, client)
    application.state.started_at_utc = datetime.now(timezone.utc)
    LOGGER.info("skycast started (env=%s)", settings.env.skycast_env)

    try:
        yield
    finally:
        await client.aclose()


app = FastAPI(title="Skycast", version="0.1.0", lifespan=lifespan)


@app.exception_handler(WeatherAdapterError)
async def weather_error_handler(request: Request, exc: WeatherAdapterError) -> JSONResponse:
    LOGGER.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return error_response(exc)


@app.get("/health", response_class=JSONResponse)
async def health(request: Request) -> JSONResponse:
    settings: AppSettings = request.app.state.settings
    return JSONResponse(
        {
            "status": "ok",
            "service": "skycast",
            "environment": settings.env.skycast_env,
            "bucket_timezone": settings.yaml.weather.bucket_timezone,
            "started_at_utc": request.app.state.started_at_utc.isoformat(),
            "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        }
    )


@app.get("/api/weather")
async def weather(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
) -> JSONResponse:
    forecast = await request.app.state.weather.fetch(lat, lon)
    return JSONResponse(forecast.model_dump(mode="json"))


@app.get("/api/cities")
async def cities(request: Request, q: str = Query(..., min_length=1)) -> JSONResponse:
    results = await request.app.state.cities.search(q)
    return JSONResponse([_city_payload(city) for city in results])


@app.get("/api/weather/by-city")
async def weather_by_city(request: Request, q: str = Query(..., min_length=1)) -> JSONResponse:
    results = await request.app.state.cities.search(q)
    if not results:
        return JSONResponse(
            status_code=404,
            content={"error": "city_not_found", "title": "Error", "detail": f"No city matches '{q}'"},
        )

    city = results[0]
    forecast = await request.app.state.weather.fetch(city.lat, city.lon)
    return JSONResponse({"city": _city_payload(city), "forecast": forecast.model_dump(mode="json")})
