from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Wordstat Access"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    yandex_wordstat_token: str | None = Field(default=None)
    wordstat_base_url: str = Field(default="https://api.wordstat.yandex.net")
    rate_limit_per_second: int = Field(default=10, ge=1)
    request_timeout_seconds: float = 30.0
    regions_tree_default_depth: int = Field(default=3, ge=1, le=5)
    region_children_default_depth: int = Field(default=2, ge=1, le=3)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
