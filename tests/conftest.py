from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from helpers import DAY_SECONDS, JAN_1, STEP_SECONDS, condition, main_block


@pytest.fixture
def make_sample() -> Callable[..., dict]:
    def wrapper(
        dt: int,
        temp: float = 10.0,
        *,
        feels_like: float | None = None,
        pop: float | None = None,
        pressure: int = 1012,
        humidity: int = 70,
        weather: list[dict] | None = None,
        visibility: int | None = 10000,
    ) -> dict:
        sample: dict[str, Any] = {
            "dt": dt,
            "main": main_block(temp, feels_like, pressure=pressure, humidity=humidity),
            "weather": weather if weather is not None else [condition()],
            "clouds": {"all": 20},
            "wind": {"speed": 3.5, "deg": 180, "gust": 5.1},
            "dt_txt": "ignored",
        }
        if visibility is not None:
            sample["visibility"] = visibility
        if pop is not None:
            sample["pop"] = pop
        return sample

    return wrapper


@pytest.fixture
def make_forecast() -> Callable[[list[dict]], dict]:
    def wrapper(samples: list[dict]) -> dict:
        return {
            "cod": "200",
            "message": 0,
            "cnt": len(samples),
            "list": samples,
            "city": {"name": "Berlin", "timezone": 3600},
        }

    return wrapper


@pytest.fixture
def make_current() -> Callable[..., dict]:
    def wrapper(*, name: str = "Berlin", temp: float = 4.2, sunrise: int | None = JAN_1 + 7 * 3600) -> dict:
        sys_block: dict[str, Any] = {"country": "DE"}
        if sunrise is not None:
            sys_block["sunrise"] = sunrise
            sys_block["sunset"] = sunrise + 8 * 3600
        return {
            "coord": {"lat": 52.52, "lon": 13.41},
            "weather": [condition("Clouds", id=803, description="broken clouds", icon="04d"), condition()],
            "main": main_block(temp, temp - 2.0, pressure=1020, humidity=81),
            "visibility": 9000,
            "wind": {"speed": 4.1, "deg": 250},
            "clouds": {"all": 75},
            "dt": JAN_1 + 12 * 3600,
            "sys": sys_block,
            "name": name,
            "cod": 200,
        }

    return wrapper


@pytest.fixture
def day_samples(make_sample) -> Callable[[list[int]], list[dict]]:
    """Samples at 3-hour steps, ``counts[i]`` of them on the i-th day after Jan 1."""

    def wrapper(counts: list[int]) -> list[dict]:
        samples = []
        for day_index, count in enumerate(counts):
            start = JAN_1 + day_index * DAY_SECONDS
            for step in range(count):
                samples.append(make_sample(start + step * STEP_SECONDS, 5.0 + day_index + step))
        return samples

    return wrapper


class Upstream:
    """Routes requests by their last path segment to canned responses."""

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, bytes] | Exception | Callable] = {}
        self.requests: list[httpx.Request] = []

    def reply(self, path: str, status_code: int = 200, payload: Any = None, *, content: bytes | None = None) -> None:
        body = content if content is not None else json.dumps(payload).encode("utf-8")
        self.routes[path] = (status_code, body)

    def fail(self, path: str, exc: Exception) -> None:
        self.routes[path] = exc

    def respond_with(self, path: str, handler: Callable) -> None:
        self.routes[path] = handler

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes[request.url.path.rsplit("/", 1)[-1]]
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return await route(request)
        status_code, body = route
        return httpx.Response(status_code, content=body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handle))


@pytest.fixture
def upstream() -> Upstream:
    return Upstream()
