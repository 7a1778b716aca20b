# flightlog/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "flightdb"

    session_cookie_name: str = "flightlog_session"
    session_max_age: int = 60 * 60 * 24  # seconds
    session_cookie_secure: bool = False

    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 3000

    # values in .env fill anything the environment leaves unset
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # .env may hold keys for other tools
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
