from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class WeatherCondition(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int
    main: str
    description: str
    icon: str


class CurrentConditions(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    dt: int
    sunrise: int = 0
    sunset: int = 0
    temp: float
    feels_like: float
    pressure: int
    humidity: int
    dew_point: float = 0.0
    uvi: float = 0.0
    clouds: int
    visibility: int
    wind_speed: float
    wind_deg: int
    wind_gust: float | None = None
    weather: tuple[WeatherCondition, ...] = Field(min_length=1)


class HourlyPoint(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    dt: int
    temp: float
    feels_like: float
    pressure: int
    humidity: int
    dew_point: float = 0.0
    uvi: float = 0.0
    clouds: int
    visibility: int = 0
    wind_speed: float
    wind_deg: int
    wind_gust: float | None = None
    weather: tuple[WeatherCondition, ...] = Field(min_length=1)
    pop: float = Field(default=0.0, ge=0.0, le=1.0)


class TemperatureEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    day: float
    min: float
    max: float
    night: float
    eve: float
    morn: float

    @model_validator(mode="after")
    def validate_range(self) -> TemperatureEnvelope:
        if self.max < self.min:
            raise ValueError("temperature envelope max must be >= min")
        return self


class FeelsLikeEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    day: float
    night: float
    eve: float
    morn: float


class DailySummary(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    dt: int
    sunrise: int = 0
    sunset: int = 0
    moonrise: int = 0
    moonset: int = 0
    moon_phase: float = 0.0
    temp: TemperatureEnvelope
    feels_like: FeelsLikeEnvelope
    pressure: int
    humidity: int
    dew_point: float = 0.0
    wind_speed: float
    wind_deg: int
    wind_gust: float | None = None
    weather: tuple[WeatherCondition, ...] = Field(min_length=1)
    clouds: int
    pop: float = Field(default=0.0, ge=0.0, le=1.0)
    uvi: float = 0.0
    rain: float | None = None
    snow: float | None = None


class UnifiedForecast(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    current: CurrentConditions
    hourly: tuple[HourlyPoint, ...] = Field(default=(), max_length=24)
    daily: tuple[DailySummary, ...] = Field(default=(), max_length=7)
    lat: float
    lon: float
    location_label: str
    timezone_offset: int = 0

    @field_validator("hourly")
    @classmethod
    def validate_hourly_order(cls, values: tuple[HourlyPoint, ...]) -> tuple[HourlyPoint, ...]:
        timestamps = [point.dt for point in values]
        if timestamps != sorted(timestamps):
            raise ValueError("hourly points must be in ascending order")
        return values

    @field_validator("daily")
    @classmethod
    def validate_daily_order(cls, values: tuple[DailySummary, ...]) -> tuple[DailySummary, ...]:
        for previous, current in zip(values, values[1:]):
            if current.dt <= previous.dt:
                raise ValueError("daily summaries must be strictly ascending, one per day")
        return values


class City(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    lat: float
    lon: float
    country: str | None = None
    state: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("city name must not be empty")
        return text
