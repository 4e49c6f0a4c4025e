from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    # Parsing defaults (seed for the process-wide registry)
    ABORT_EARLY: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)
    TRACE_PARSES: bool = False  # Emit a debug event for every top-level parse call

    model_config = SettingsConfigDict(env_prefix="SHAPEGUARD_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
