from __future__ import annotations

from typing import Protocol

from ...domain.models import UnifiedForecast


class WeatherAdapterError(RuntimeError):
    """Raised when a weather provider request cannot be completed."""


class InvalidRequest(WeatherAdapterError):
    """The request URL could not be built from the supplied input."""


class TransportFailure(WeatherAdapterError):
    """The underlying network call failed before a response arrived."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Transport failure: {cause}")
        self.cause = cause


class InvalidCredentials(WeatherAdapterError):
    """Upstream answered 401 without a readable error envelope."""

    def __init__(self) -> None:
        super().__init__("Invalid API key")
        self.status_code = 401


class ApiRejected(WeatherAdapterError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.status_code is not None and 500 <= self.status_code <= 599


class DecodingFailure(WeatherAdapterError):
    """The response body did not match the expected upstream schema."""


class WeatherAdapter(Protocol):
    async def fetch(self, lat: float, lon: float) -> UnifiedForecast:
        """Fetch normalized weather data for the provided coordinates."""
