"""Upstream response schemas. Decoders either return a full instance or raise DecodingFailure."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ...domain.models import WeatherCondition
from .base import DecodingFailure

# 9999-12-31T00:00:00Z, leaves room for any UTC offset when converting to dates.
MAX_TIMESTAMP = 253402214400

Timestamp = Annotated[int, Field(ge=0, le=MAX_TIMESTAMP)]


class _UpstreamModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class MainBlock(_UpstreamModel):
    temp: float
    feels_like: float
    temp_min: float
    temp_max: float
    pressure: int
    humidity: int


class WindBlock(_UpstreamModel):
    speed: float
    deg: int
    gust: float | None = None


class CloudsBlock(_UpstreamModel):
    all: int


class SysBlock(_UpstreamModel):
    sunrise: Timestamp | None = None
    sunset: Timestamp | None = None


class CurrentConditionsSchema(_UpstreamModel):
    weather: list[WeatherCondition] = Field(min_length=1)
    main: MainBlock
    wind: WindBlock
    clouds: CloudsBlock
    dt: Timestamp
    sys: SysBlock
    name: str
    visibility: int


class ForecastSample(_UpstreamModel):
    dt: Timestamp
    main: MainBlock
    weather: list[WeatherCondition] = Field(min_length=1)
    clouds: CloudsBlock
    wind: WindBlock
    visibility: int | None = None
    pop: float | None = Field(default=None, ge=0.0, le=1.0)


class ForecastListSchema(_UpstreamModel):
    samples: list[ForecastSample] = Field(alias="list")


class ErrorEnvelope(_UpstreamModel):
    cod: int
    message: str


class CitySchema(_UpstreamModel):
    name: str
    lat: float
    lon: float
    country: str | None = None
    state: str | None = None


_CITY_LIST = TypeAdapter(list[CitySchema])


def decode_current(body: bytes) -> CurrentConditionsSchema:
    try:
        return CurrentConditionsSchema.model_validate_json(body)
    except ValidationError as exc:
        raise DecodingFailure("Current conditions response did not match the expected schema") from exc


def decode_forecast(body: bytes) -> ForecastListSchema:
    try:
        forecast = ForecastListSchema.model_validate_json(body)
    except ValidationError as exc:
        raise DecodingFailure("Forecast list response did not match the expected schema") from exc

    timestamps = [sample.dt for sample in forecast.samples]
    if any(later <= earlier for earlier, later in zip(timestamps, timestamps[1:])):
        raise DecodingFailure("Forecast list samples are not in ascending time order")
    return forecast


def decode_cities(body: bytes) -> list[CitySchema]:
    try:
        return _CITY_LIST.validate_json(body)
    except ValidationError as exc:
        raise DecodingFailure("Geocoding response did not match the expected schema") from exc


def decode_error_envelope(body: bytes) -> ErrorEnvelope | None:
    """Return the upstream error envelope, or None when the body is not one."""
    try:
        return ErrorEnvelope.model_validate_json(body)
    except ValidationError:
        return None
