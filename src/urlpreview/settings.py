"""Runtime settings."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EmbedTarget = Literal["origin", "relay"]


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="URLPREVIEW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    probe_timeout: float = Field(default=10.0, gt=0, le=60)
    fetch_timeout: float = Field(default=15.0, gt=0, le=120)
    render_timeout: float = Field(default=30.0, gt=0, le=120)

    browser_headless: bool = True
    render_fallback: bool = True
    min_static_text_chars: int = Field(default=200, ge=0, le=100_000)

    embed_target: EmbedTarget = "origin"
    relay_port: int = Field(default=0, ge=0, le=65535)

    log_level: str = "INFO"
