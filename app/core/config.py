from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite:///./smart_cart.db"
    allowed_origins: list[str] = ["*"]
    allowed_methods: list[str] = ["GET", "POST", "PUT", "PATCH", "DELETE"]
    allow_credentials: bool = True
    heartbeat_interval: float = 30.0
    seed_products: bool = True
    log_file: Optional[str] = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env")


@lru_cache
def get_settings() -> Settings:
    """Get the settings instance"""
    return Settings()


settings = get_settings()
