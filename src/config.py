from __future__ import annotations

from functools import cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    default_exchange: str = "coinbase"
    output_path: Path = Path("output.json")
    db_file: str = "coin_tax.db"
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="COIN_TAX_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


@cache
def config() -> AppSettings:
    return AppSettings()
