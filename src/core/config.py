"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) away from the CLI.
- Lets adapters (HTTP clients) and services read config consistently.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

import typer
from dotenv import dotenv_values, set_key
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.modes import EmptyRelatedPolicy, FanOutMode

APP_NAME = "neighbours"


def get_user_env_file() -> Path:
    """`.env` in the per-user config dir (XDG, macOS and Windows aware)."""

    return Path(typer.get_app_dir(APP_NAME)) / ".env"


def read_user_env_vars(env_path: Path | None = None) -> dict[str, str]:
    env_path = env_path or get_user_env_file()
    if not env_path.exists():
        return {}
    return {k: v for k, v in dotenv_values(env_path).items() if v is not None}


def write_user_env_vars(values: Mapping[str, str | None], env_path: Path | None = None) -> Path:
    """Set variables in the user's .env, leaving other lines untouched."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)
    env_path.touch(exist_ok=True)

    for key, value in values.items():
        if value is None:
            continue
        set_key(env_path, key, value, quote_mode="never")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typing + validation at the edge (env vars) without polluting the core.
    - A single configuration contract for CLI and adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="NEIGHBOURS_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    countries_base_url: str = Field(
        default="https://restcountries.com/v2",
        min_length=8,
        description="Base URL of the REST Countries v2 API.",
    )
    geocode_base_url: str = Field(
        default="https://api.bigdatacloud.net/data",
        min_length=8,
        description="Base URL of the reverse-geocoding API.",
    )
    http_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    user_agent: str = Field(
        default="neighbours/0.1 (+https://local)",
        min_length=1,
        description="User-Agent sent with every request.",
    )

    default_mode: FanOutMode = Field(
        default=FanOutMode.SEQUENTIAL,
        description="Fan-out mode used when the CLI does not pass --mode.",
    )
    empty_related_policy: EmptyRelatedPolicy = Field(
        default=EmptyRelatedPolicy.IGNORE,
        description="Whether a country without neighbours is an error.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Root logging level (DEBUG, INFO, WARNING, ERROR).",
    )
