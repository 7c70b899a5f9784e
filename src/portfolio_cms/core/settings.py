"""Settings for the outer layers of portfolio-cms (feed client, CLI).

The parsing core takes plain arguments and never reads configuration;
``PortfolioSettings`` is consumed by :mod:`portfolio_cms.content.feed` and
:mod:`portfolio_cms.cli` only.

All fields can be set via ``PORTFOLIO_*`` environment variables (e.g.
``PORTFOLIO_MAX_TAGS=12``) or a ``.env`` file.

Tags:
    settings, configuration, pydantic, environment, portfolio-cms
"""

from __future__ import annotations

from pathlib import Path

import pydantic
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from portfolio_cms.core.errors import ConfigError

DEFAULT_SHEET_CSV_URL = (
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vTXOM47UPnUjDub8Ev9ClMwivKa8hS4lttp8cR3Tn_P_vlTHXWtiSfncU4XDUu13oL7GCb0UrA0---o"
    "/pub?gid=0&single=true&output=csv"
)


class PortfolioSettings(BaseSettings):
    """Portfolio content configuration.

    Fields
    ──────
    sheet_csv_url     : Published spreadsheet CSV export holding tile rows
    experiences_path  : JSON document with a top-level ``experiences`` array
    max_tags          : Tag cap applied per tile by the normalizer
    http_timeout      : Seconds before a feed fetch is abandoned
    log_level         : Structlog log level
    log_format        : ``json``, ``console`` or ``auto`` (JSON unless on a TTY)
    """

    model_config = SettingsConfigDict(
        env_prefix="PORTFOLIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Feeds ────────────────────────────────────────────────────
    sheet_csv_url: str = Field(default=DEFAULT_SHEET_CSV_URL)
    experiences_path: Path = Field(default=Path("data/experiences.json"))

    # ── Normalization ────────────────────────────────────────────
    max_tags: int = Field(default=8, ge=1, le=50)

    # ── Transport ────────────────────────────────────────────────
    http_timeout: float = Field(default=15.0, gt=0)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="WARNING")
    log_format: str = Field(default="auto")

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("json", "console", "auto"):
            raise ValueError(f"log_format must be json, console or auto, got {value!r}")
        return value

    @property
    def json_logs(self) -> bool | None:
        """Value for ``configure_logging(json_format=...)``."""
        if self.log_format == "auto":
            return None
        return self.log_format == "json"


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, PortfolioSettings] = {}


def get_settings(*, _force_reload: bool = False) -> PortfolioSettings:
    """Load, validate, and cache a :class:`PortfolioSettings` instance.

    Raises:
        ConfigError: A ``PORTFOLIO_*`` variable or ``.env`` entry is invalid
    """
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]
    try:
        settings = PortfolioSettings()
    except pydantic.ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"Invalid PORTFOLIO_* settings: {details}", cause=e) from e
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Drop the cached settings (tests, reloads)."""
    _settings_cache.clear()


__all__ = ["PortfolioSettings", "get_settings", "clear_settings_cache", "DEFAULT_SHEET_CSV_URL"]
