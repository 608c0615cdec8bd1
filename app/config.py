"""Application configuration models."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Routes exposed by the companion proxy; it forwards to the upstream API.
PROXY_PATHS: dict[str, str] = {
    "home": "/api/home",
    "search": "/api/search",
    "detail": "/api/detail",
    "video": "/api/video",
}


@dataclass(frozen=True, slots=True)
class EndpointConfig:
    """Resolved origin and path prefixes for the active deployment."""

    origin: str
    home: str
    search: str
    detail: str
    video: str
    proxied: bool

    @property
    def label(self) -> str:
        return "Proxy mode" if self.proxied else "Direct mode"


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="Melulu", alias="APP_NAME")

    proxy_mode: bool = Field(default=True, alias="USE_PROXY")
    proxy_origin: str = Field(default="http://localhost:8787", alias="BACKEND_PROXY")
    direct_origin: str | None = Field(default=None, alias="API_BASE_URL")

    home_path: str = Field(default="/api/v1/home", alias="API_HOME_PATH")
    search_path: str = Field(default="/api/v1/search", alias="API_SEARCH_PATH")
    detail_path: str = Field(default="/api/v1/detail", alias="API_DETAIL_PATH")
    video_path: str = Field(default="/api/v1/video", alias="API_VIDEO_PATH")

    request_timeout_seconds: float = Field(
        default=15.0, alias="REQUEST_TIMEOUT", gt=0, le=120
    )

    share_origin: str = Field(default="http://localhost:8080", alias="SHARE_ORIGIN")
    share_path: str = Field(default="/", alias="SHARE_PATH")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )

    @field_validator("proxy_origin", "direct_origin", "share_origin", mode="before")
    @classmethod
    def _strip_origin(cls, value: object) -> object:
        """Drop surrounding whitespace and trailing slashes from origins."""

        if isinstance(value, str):
            return value.strip().rstrip("/")
        return value

    @field_validator(
        "home_path", "search_path", "detail_path", "video_path", "share_path",
        mode="before",
    )
    @classmethod
    def _ensure_leading_slash(cls, value: object) -> object:
        if isinstance(value, str):
            cleaned = value.strip()
            if not cleaned.startswith("/"):
                cleaned = f"/{cleaned}"
            return cleaned
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def _require_active_origin(self) -> "Settings":
        """Ensure the origin used by the active mode is configured."""

        if self.proxy_mode and not self.proxy_origin:
            raise ValueError("BACKEND_PROXY is required when USE_PROXY is enabled")
        if not self.proxy_mode and not self.direct_origin:
            raise ValueError("API_BASE_URL is required when USE_PROXY is disabled")
        return self

    @property
    def endpoints(self) -> EndpointConfig:
        """Return the origin and paths for the configured deployment."""

        if self.proxy_mode:
            return EndpointConfig(
                origin=self.proxy_origin,
                proxied=True,
                **PROXY_PATHS,
            )
        return EndpointConfig(
            origin=self.direct_origin or "",
            home=self.home_path.rstrip("/"),
            search=self.search_path.rstrip("/"),
            detail=self.detail_path.rstrip("/"),
            video=self.video_path.rstrip("/"),
            proxied=False,
        )

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]
