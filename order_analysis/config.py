"""Runtime settings read from ``OA_*`` environment variables.

The CLI loads a ``.env`` from the working directory (via ``python-dotenv``)
before calling :func:`load_settings`; library callers may build
:class:`Settings` directly instead.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .logging_setup import parse_level

DEFAULT_API_BASE_URL = "https://cw-marketplace.ifood.com.br"
ORDERS_PATH = "/v4/customers/me/orders"
PAGE_SIZE = 25
DEFAULT_HTTP_TIMEOUT_SEC = 15.0
DEFAULT_LOCALE = "pt-BR"


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved configuration for one process."""

    api_base_url: str = DEFAULT_API_BASE_URL
    http_timeout: float = DEFAULT_HTTP_TIMEOUT_SEC
    timezone: ZoneInfo | None = None
    locale: str = DEFAULT_LOCALE
    log_level: int = logging.INFO
    bearer_token: str | None = field(default=None, repr=False)

    @property
    def orders_url(self) -> str:
        return self.api_base_url.rstrip("/") + ORDERS_PATH


def _env(name: str) -> str | None:
    val = os.getenv(name)
    if val is None or not val.strip():
        return None
    return val.strip()


def _parse_timeout(raw: str) -> float:
    try:
        timeout = float(raw)
    except ValueError:
        raise ValueError(f"OA_HTTP_TIMEOUT must be a number of seconds, got {raw!r}") from None
    if timeout <= 0:
        raise ValueError(f"OA_HTTP_TIMEOUT must be positive, got {raw!r}")
    return timeout


def _parse_timezone(raw: str) -> ZoneInfo:
    try:
        return ZoneInfo(raw)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"OA_TIMEZONE is not a known IANA zone: {raw!r}") from None


def _parse_log_level(raw: str) -> int:
    try:
        return parse_level(raw)
    except ValueError as e:
        raise ValueError(f"OA_LOG_LEVEL: {e}") from None


def load_settings() -> Settings:
    """Build :class:`Settings` from the environment, applying defaults."""

    timeout_raw = _env("OA_HTTP_TIMEOUT")
    tz_raw = _env("OA_TIMEZONE")
    level_raw = _env("OA_LOG_LEVEL")
    return Settings(
        api_base_url=_env("OA_API_BASE_URL") or DEFAULT_API_BASE_URL,
        http_timeout=_parse_timeout(timeout_raw) if timeout_raw else DEFAULT_HTTP_TIMEOUT_SEC,
        timezone=_parse_timezone(tz_raw) if tz_raw else None,
        locale=_env("OA_LOCALE") or DEFAULT_LOCALE,
        log_level=_parse_log_level(level_raw) if level_raw else logging.INFO,
        bearer_token=_env("OA_BEARER_TOKEN"),
    )


__all__ = ["PAGE_SIZE", "Settings", "load_settings"]
