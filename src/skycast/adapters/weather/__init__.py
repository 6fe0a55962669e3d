from .base import (
    ApiRejected,
    DecodingFailure,
    InvalidCredentials,
    InvalidRequest,
    TransportFailure,
    WeatherAdapter,
    WeatherAdapterError,
)
from .openweather import OpenWeatherAdapter

__all__ = [
    "ApiRejected",
    "DecodingFailure",
    "InvalidCredentials",
    "InvalidRequest",
    "OpenWeatherAdapter",
    "TransportFailure",
    "WeatherAdapter",
    "WeatherAdapterError",
]
