from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "PointHub API"
    app_env: str = "dev"
    app_version: str = "0.1.0"
    api_v1_prefix: str = ""

    database_url: str = "sqlite+pysqlite:///./pointhub.db"

    lock_timeout_seconds: float = 5.0
    default_page_size: int = 10

    log_level: str = "INFO"
    seed_demo_data: bool = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def clear_settings_cache() -> None:
    get_settings.cache_clear()
