"""Runtime settings for channels, read from the environment (and .env)."""

import logging
import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, field_validator

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_flag(name: str, default: bool) -> bool:
    raw = (os.environ.get(name) or "").strip().lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    return default


class Settings(BaseModel):
    """Channel settings. Build with Settings.from_env() to honour TXRX_* variables."""

    log_level: str = "INFO"
    threadsafe: bool = True
    metrics: bool = True

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: object) -> str:
        name = str(value or "").strip().upper()
        if not isinstance(logging.getLevelName(name), int):
            return "INFO"
        return name

    @property
    def log_level_no(self) -> int:
        return logging.getLevelName(self.log_level)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        """Load env_file (default: nearest .env from the cwd) then read TXRX_* variables."""
        load_dotenv(env_file or find_dotenv(usecwd=True))
        return cls(
            log_level=os.environ.get("TXRX_LOG_LEVEL", "INFO"),
            threadsafe=_env_flag("TXRX_THREADSAFE", True),
            metrics=_env_flag("TXRX_METRICS", True),
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
