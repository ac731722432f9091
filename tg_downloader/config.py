"""Configuration management for the Telegram→downloader bridge."""

from __future__ import annotations

from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, HttpUrl, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env early so BaseSettings can pick values up seamlessly.
load_dotenv()


class Settings(BaseSettings):
    """App configuration derived from environment variables."""

    telegram_bot_token: str = Field(..., alias="TELEGRAM_BOT_TOKEN")
    telegram_api_base: HttpUrl = Field("https://api.telegram.org", alias="TELEGRAM_API_BASE")
    telegram_poll_timeout: int = Field(30, alias="TELEGRAM_POLL_TIMEOUT")

    download_backend: Literal["http", "gallery-dl"] = Field("http", alias="DOWNLOAD_BACKEND")
    backend_url: HttpUrl | None = Field(None, alias="BACKEND_URL")
    proxy_url: str | None = Field(None, alias="HTTP_PROXY")
    gallery_dl_binary: str = Field("gallery-dl", alias="GALLERY_DL_BINARY")
    download_timeout: float = Field(600.0, alias="DOWNLOAD_TIMEOUT")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("telegram_bot_token", "backend_url", "proxy_url", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("download_backend", mode="before")
    @classmethod
    def _normalize_backend(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @model_validator(mode="after")
    def _validate_backend(self):
        if self.download_backend == "http":
            if not self.backend_url:
                raise ValueError("BACKEND_URL is required for the http download backend.")
        else:
            if not self.proxy_url:
                raise ValueError("HTTP_PROXY is required for the gallery-dl download backend.")
        return self

    @property
    def bot_api_url(self) -> str:
        """Base URL for Bot API methods, token included."""
        base = str(self.telegram_api_base).rstrip("/")
        return f"{base}/bot{self.telegram_bot_token}"

    @property
    def backend_endpoint(self) -> str:
        return str(self.backend_url) if self.backend_url else ""
