"""
Centralised settings (environment variables / .env) for sessions, waits and logging.
"""
# @file purpose: Centralized settings using Pydantic Settings.

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PK_", env_file=".env", extra="ignore")

    base_url: str = "https://example.com/"
    headless: bool = True
    default_timeout_ms: int = Field(default=5_000, gt=0, le=120_000)
    poll_interval_ms: int = Field(default=100, gt=0, le=5_000)
    navigation_timeout_ms: int = Field(default=30_000, gt=0)
    window_width: int = 1024
    window_height: int = 768
    artifacts_dir: Path = Path("test-report")
    screenshot_on_failure: bool = True
    log_level: str = "INFO"
    debug: bool = False


settings = Settings()
