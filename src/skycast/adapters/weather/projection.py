"""Hourly and daily layers rebuilt from the 3-hourly forecast list."""

from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from typing import Iterable

from ...domain.models import (
    CurrentConditions,
    DailySummary,
    FeelsLikeEnvelope,
    HourlyPoint,
    TemperatureEnvelope,
)
from .schemas import CurrentConditionsSchema, ForecastListSchema, ForecastSample

HOURLY_LIMIT = 24
DAILY_LIMIT = 7


def project_current(schema: CurrentConditionsSchema) -> CurrentConditions:
    return CurrentConditions(
        dt=schema.dt,
        sunrise=schema.sys.sunrise or 0,
        sunset=schema.sys.sunset or 0,
        temp=schema.main.temp,
        feels_like=schema.main.feels_like,
        pressure=schema.main.pressure,
        humidity=schema.main.humidity,
        clouds=schema.clouds.all,
        visibility=schema.visibility,
        wind_speed=schema.wind.speed,
        wind_deg=schema.wind.deg,
        wind_gust=schema.wind.gust,
        weather=tuple(schema.weather),
    )


def _hourly_point(sample: ForecastSample) -> HourlyPoint:
    return HourlyPoint(
        dt=sample.dt,
        temp=sample.main.temp,
        feels_like=sample.main.feels_like,
        pressure=sample.main.pressure,
        humidity=sample.main.humidity,
        clouds=sample.clouds.all,
        visibility=sample.visibility or 0,
        wind_speed=sample.wind.speed,
        wind_deg=sample.wind.deg,
        wind_gust=sample.wind.gust,
        weather=tuple(sample.weather),
        pop=sample.pop or 0.0,
    )


def project_hourly(forecast: ForecastListSchema, *, limit: int = HOURLY_LIMIT) -> tuple[HourlyPoint, ...]:
    return tuple(_hourly_point(sample) for sample in forecast.samples[: max(limit, 0)])


def calendar_day(timestamp: int, tz: tzinfo = timezone.utc) -> date:
    return datetime.fromtimestamp(timestamp, tz=tz).date()


def _start_of_day(day: date, tz: tzinfo) -> int:
    return int(datetime(day.year, day.month, day.day, tzinfo=tz).timestamp())


def group_by_day(
    samples: Iterable[ForecastSample],
    tz: tzinfo = timezone.utc,
) -> dict[date, list[ForecastSample]]:
    """Bucket samples by calendar day in ``tz``, keeping arrival order per bucket."""
    buckets: dict[date, list[ForecastSample]] = {}
    for sample in samples:
        buckets.setdefault(calendar_day(sample.dt, tz), []).append(sample)
    return buckets


def summarize_day(day: date, samples: list[ForecastSample], tz: tzinfo = timezone.utc) -> DailySummary:
    if not samples:
        raise ValueError(f"no samples to summarize for {day.isoformat()}")

    first = samples[0]
    last = samples[-1]
    temps = [sample.main.temp for sample in samples]
    min_temp = min(temps)
    max_temp = max(temps)

    return DailySummary(
        dt=_start_of_day(day, tz),
        temp=TemperatureEnvelope(
            day=sum(temps) / len(temps),
            min=min_temp,
            max=max_temp,
            night=min_temp,
            eve=max_temp,
            morn=min_temp,
        ),
        feels_like=FeelsLikeEnvelope(
            day=first.main.feels_like,
            night=last.main.feels_like,
            eve=last.main.feels_like,
            morn=first.main.feels_like,
        ),
        pressure=first.main.pressure,
        humidity=first.main.humidity,
        wind_speed=first.wind.speed,
        wind_deg=first.wind.deg,
        wind_gust=first.wind.gust,
        weather=tuple(first.weather),
        clouds=first.clouds.all,
        pop=first.pop or 0.0,
    )


def bucket_daily(
    forecast: ForecastListSchema,
    *,
    tz: tzinfo = timezone.utc,
    limit: int = DAILY_LIMIT,
) -> tuple[DailySummary, ...]:
    buckets = group_by_day(forecast.samples, tz)
    days = sorted(buckets)[: max(limit, 0)]
    return tuple(summarize_day(day, buckets[day], tz) for day in days)
