from __future__ import annotations

DAY_SECONDS = 24 * 60 * 60
STEP_SECONDS = 3 * 60 * 60
# 2024-01-01T00:00:00Z
JAN_1 = 1704067200


def condition(main: str = "Clear", *, id: int = 800, description: str = "clear sky", icon: str = "01d") -> dict:
    return {"id": id, "main": main, "description": description, "icon": icon}


def main_block(temp: float, feels_like: float | None = None, *, pressure: int = 1012, humidity: int = 70) -> dict:
    return {
        "temp": temp,
        "feels_like": temp if feels_like is None else feels_like,
        "temp_min": temp,
        "temp_max": temp,
        "pressure": pressure,
        "humidity": humidity,
        "sea_level": pressure,
    }
