"""
Application configuration using Pydantic settings
"""

from functools import lru_cache
from pathlib import Path
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Shop Feed"
    version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    api_v1_prefix: str = "/api/v1"
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS
    cors_origins: List[str] = ["*"]

    # Logging
    log_level: str = "INFO"

    # Snapshot written by `shopfeed fetch` and read at build time
    snapshot_path: Path = Path("data/square-inventory.json")

    # Feed
    default_brand: Optional[str] = "MDGC"
    default_currency: str = "AUD"
    brands_category_name: str = "BRANDS"
    eligible_product_type: str = "REGULAR"
    require_sales_channel: bool = False
    exclude_unavailable_visibility: bool = False

    # Square API
    square_access_token: Optional[str] = None
    square_environment: Literal["production", "sandbox"] = "production"
    square_api_version: str = "2024-01-18"
    square_timeout: float = 30.0


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
