# product_api/config.py
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    #App
    app_name: str = "Product API"
    app_version: str = "1.0.0"
    node_env: str = "production"
    log_level: str = "INFO"

    #Server
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: List[str] = ["*"]

    #Database
    store_backend: Literal["mongo", "memory"] = "mongo"
    mongodb_uri: str = "mongodb://localhost:27017/product-db"
    mongodb_database: Optional[str] = None
    mongodb_collection: str = "products"

    @property
    def debug(self) -> bool:
        # raw error text is only exposed to clients in development
        return self.node_env == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()
