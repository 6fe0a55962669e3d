from __future__ import annotations

from datetime import tzinfo
from functools import lru_cache
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _validate_http_url(value: str, *, field_name: str) -> str:
    text = value.strip().rstrip("/")
    parsed = urlparse(text)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"{field_name} must be an absolute http(s) URL")
    return text


class WeatherSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    base_url: str = "https://api.openweathermap.org/data/2.5"
    geocoding_url: str = "https://api.openweathermap.org/geo/1.0"
    units: Literal["metric"] = "metric"
    timeout_seconds: float = Field(default=10.0, ge=1, le=60)
    hourly_limit: int = Field(default=24, ge=1, le=24)
    daily_limit: int = Field(default=7, ge=1, le=7)
    city_limit: int = Field(default=5, ge=1, le=5)
    bucket_timezone: str = "UTC"

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        return _validate_http_url(value, field_name="weather.base_url")

    @field_validator("geocoding_url")
    @classmethod
    def validate_geocoding_url(cls, value: str) -> str:
        return _validate_http_url(value, field_name="weather.geocoding_url")

    @field_validator("bucket_timezone")
    @classmethod
    def validate_bucket_timezone(cls, value: str) -> str:
        text = value.strip()
        try:
            ZoneInfo(text)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return text


class SkycastYamlSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    weather: WeatherSettings = Field(default_factory=WeatherSettings)


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    skycast_env: Literal["dev", "test", "prod"] = "dev"
    skycast_api_key: SecretStr
    skycast_config_path: Path = Path("config/skycast.yaml")

    @field_validator("skycast_api_key")
    @classmethod
    def validate_api_key(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("SKYCAST_API_KEY must not be empty")
        return value


class AppSettings(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    env: EnvSettings
    yaml: SkycastYamlSettings
    project_root: Path
    config_path: Path
    bucket_tz: tzinfo

    @property
    def api_key(self) -> str:
        return self.env.skycast_api_key.get_secret_value()


def _resolve_project_path(path: Path) -> Path:
    if path.is_absolute():
        return path
    return (PROJECT_ROOT / path).resolve()


def load_yaml_settings(path: Path) -> SkycastYamlSettings:
    if not path.exists():
        return SkycastYamlSettings()

    raw_config = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ValueError("Skycast config must be a YAML mapping/object at the top level")
    return SkycastYamlSettings.model_validate(raw_config)


def build_settings(env: EnvSettings) -> AppSettings:
    config_path = _resolve_project_path(env.skycast_config_path)
    yaml_settings = load_yaml_settings(config_path)
    return AppSettings(
        env=env,
        yaml=yaml_settings,
        project_root=PROJECT_ROOT,
        config_path=config_path,
        bucket_tz=ZoneInfo(yaml_settings.weather.bucket_timezone),
    )


@lru_cache(maxsize=1)
def load_settings() -> AppSettings:
    return build_settings(EnvSettings())
