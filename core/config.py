"""Process-wide configuration for the seller administration functions."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
DEFAULT_HTTP_TIMEOUT = 30.0


def resolve_api_key(explicit_key: str | None, *env_names: str) -> str:
    """Return an explicit key when provided, else first non-empty env var."""
    if explicit_key and explicit_key.strip():
        return explicit_key.strip()

    for env_name in env_names:
        value = os.environ.get(env_name, "").strip()
        if value:
            return value
    return ""


@dataclass(frozen=True)
class Settings:
    """Backend and Gemini settings shared by every handler."""

    supabase_url: str = ""
    service_role_key: str = ""
    gemini_api_key: str = ""
    gemini_model: str = DEFAULT_GEMINI_MODEL
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        load_dotenv()

        raw_timeout = os.environ.get("HTTP_TIMEOUT", "").strip()
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_HTTP_TIMEOUT
        except ValueError:
            logger.warning("Ignoring invalid HTTP_TIMEOUT=%r", raw_timeout)
            timeout = DEFAULT_HTTP_TIMEOUT

        log_level = os.environ.get("LOG_LEVEL", "").strip().upper() or "INFO"
        if not isinstance(logging.getLevelName(log_level), int):
            logger.warning("Ignoring invalid LOG_LEVEL=%r", log_level)
            log_level = "INFO"

        return cls(
            supabase_url=os.environ.get("SUPABASE_URL", "").strip().rstrip("/"),
            service_role_key=resolve_api_key(
                None, "SUPABASE_SERVICE_ROLE_KEY", "SERVICE_ROLE_KEY"
            ),
            gemini_api_key=resolve_api_key(None, "GEMINI_API_KEY", "GOOGLE_API_KEY"),
            gemini_model=os.environ.get("GEMINI_MODEL", "").strip() or DEFAULT_GEMINI_MODEL,
            http_timeout=timeout,
            log_level=log_level,
        )

    @property
    def backend_configured(self) -> bool:
        return bool(self.supabase_url and self.service_role_key)

    @property
    def gemini_configured(self) -> bool:
        return bool(self.gemini_api_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build the settings once per process."""
    return Settings.from_env()
