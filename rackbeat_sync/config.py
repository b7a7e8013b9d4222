"""
Configuration management.
Simple .env based config, built once at startup and passed to each client.
"""

from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict


class SyncMode(str, Enum):
    """How the sync treats products that already exist in Shopify."""
    SKIP_EXISTING = "skip_existing"
    OVERWRITE_EXISTING = "overwrite_existing"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )
    
    # Rackbeat (source)
    rackbeat_api_url: str = "http://localhost:5000/Arch/"
    rackbeat_api_key: str = ""
    rackbeat_products_path: str = "products"
    
    # Shopify (destination)
    shopify_shop_name: str = ""  # e.g., "mystore" or "mystore.myshopify.com"
    shopify_access_token: str = ""  # Admin API token (shpat_...)
    shopify_api_version: str = "2024-01"
    
    # Sync behaviour
    sync_mode: SyncMode = SyncMode.SKIP_EXISTING
    publish_to_channels: bool = False
    
    # Shopify REST bucket: 2 requests/second leak, 40 request capacity
    shopify_rate_limit_per_second: float = 2.0
    shopify_rate_limit_burst: int = 40
    
    http_timeout_seconds: float = 60.0
    
    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    
    # Security
    session_secret: str = "change-me-in-production-use-random-string"
    admin_password_hash: str = ""  # bcrypt hash
    
    # Database
    database_path: str = "./data/app.db"
    
    # Logging
    log_level: str = "INFO"


def load_settings(**overrides) -> Settings:
    """Build settings from the environment, with explicit overrides on top."""
    return Settings(**overrides)
