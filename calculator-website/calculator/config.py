"""Calculator runtime configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_HISTORY_KEY = "calc_history_v1"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def env_str(name: str, default: str, *, strip: bool = True) -> str:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip() if strip else value


def env_optional_str(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip() or default


def env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    raw = raw.strip().lower()
    if raw in {"1", "true", "yes", "y", "on"}:
        return True
    if raw in {"0", "false", "no", "n", "off"}:
        return False
    return default


def env_int(name: str, default: int, *, minimum: Optional[int] = None) -> int:
    raw = os.environ.get(name)
    try:
        value = int(raw.strip()) if raw is not None else int(default)
    except ValueError:
        value = int(default)
    if minimum is not None:
        value = max(minimum, value)
    return value


def _site_root() -> str:
    return os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def default_database_url() -> str:
    data_dir = os.path.join(_site_root(), "data")
    os.makedirs(data_dir, exist_ok=True)
    return f"sqlite:///{os.path.join(data_dir, 'calculator.db')}"


@dataclass(frozen=True)
class CalculatorConfig:
    """Settings for the calculator session and its history store.

    Environment variables:
    - CALC_MAX_EXPRESSION_LENGTH: longest expression the keypad accepts (default: 120)
    - CALC_HISTORY_MAX: history entries kept, newest first (default: 50)
    - CALC_FLASH_MS: how long an error message replaces the display (default: 700)
    - CALC_HISTORY_KEY: storage key of the history list (default: calc_history_v1)
    - CALC_DATABASE_URL / PLATFORM_DATABASE_URL / DATABASE_URL: history database,
      falls back to SQLite at data/calculator.db
    - CALC_PERSIST_HISTORY: false keeps history in memory only (default: true)
    - CALC_LOG_LEVEL: logging level name (default: INFO)
    """

    max_expression_length: int = 120
    history_max: int = 50
    flash_ms: int = 700
    history_key: str = DEFAULT_HISTORY_KEY
    database_url: Optional[str] = None
    persist_history: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "CalculatorConfig":
        database_url = (
            env_optional_str("CALC_DATABASE_URL")
            or env_optional_str("PLATFORM_DATABASE_URL")
            or env_optional_str("DATABASE_URL")
        )
        persist = env_bool("CALC_PERSIST_HISTORY", True)
        if persist and not database_url:
            database_url = default_database_url()

        return cls(
            max_expression_length=env_int("CALC_MAX_EXPRESSION_LENGTH", 120, minimum=1),
            history_max=env_int("CALC_HISTORY_MAX", 50, minimum=1),
            flash_ms=env_int("CALC_FLASH_MS", 700, minimum=0),
            history_key=env_str("CALC_HISTORY_KEY", DEFAULT_HISTORY_KEY) or DEFAULT_HISTORY_KEY,
            database_url=database_url,
            persist_history=persist,
            log_level=env_str("CALC_LOG_LEVEL", "INFO").upper(),
        )


_config: Optional[CalculatorConfig] = None


def get_config() -> CalculatorConfig:
    """Get the calculator configuration (cached)."""
    global _config
    if _config is None:
        _config = CalculatorConfig.from_env()
    return _config


def reset_config() -> None:
    global _config
    _config = None


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
