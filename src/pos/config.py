"""Runtime settings for the POS core, read from the environment."""

import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}


def current_env() -> str:
    """Name of the active environment (development, test, staging, production)."""
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


@dataclass(frozen=True)
class Settings:
    env: str
    log_level: str
    log_dir: str | None
    seed_catalog: bool


def get_log_level(env: str | None = None) -> str:
    """Get log level based on environment, unless LOG_LEVEL overrides it."""
    level_map = {
        "production": "INFO",
        "staging": "INFO",
        "development": "DEBUG",
        "test": "WARNING",
    }
    return os.getenv("LOG_LEVEL", level_map.get(env or current_env(), "INFO")).upper()


def load_settings() -> Settings:
    env = current_env()
    return Settings(
        env=env,
        log_level=get_log_level(env),
        log_dir=os.getenv("POS_LOG_DIR") or None,
        seed_catalog=os.getenv("POS_SEED_CATALOG", "true").lower() in _TRUTHY,
    )
