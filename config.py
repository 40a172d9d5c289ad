"""
Application configuration for Bistro Boss API.

Settings are read from environment variables (or a local .env file)
with Pydantic Settings and cached for the lifetime of the process.
"""

import logging
import sys
from functools import lru_cache
from typing import Optional
from urllib.parse import quote_plus

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings loaded from environment variables.

    Attributes:
        port: Port for the API server (PORT)
        db_user / db_pass: MongoDB Atlas credentials (DB_USER, DB_PASS)
        db_host: Atlas cluster host used to build the SRV connection string
        mongodb_uri: Full connection string, overrides the Atlas credentials
        database_name: Database holding the users/menu/reviews/carts collections
        access_token_secret: Signing key for bearer tokens (ACCESS_TOKEN_SECRET)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="Bistro Boss API", description="Application display name")
    debug: bool = Field(default=False, description="Enable debug logging")
    api_host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(default=5000, description="API server port")

    # Database
    db_user: Optional[str] = Field(default=None, description="MongoDB user")
    db_pass: Optional[str] = Field(default=None, description="MongoDB password")
    db_host: str = Field(default="cluster0.h73vuqp.mongodb.net", description="Atlas cluster host")
    mongodb_uri: Optional[str] = Field(default=None, description="Full MongoDB connection string")
    database_name: str = Field(default="bistroDb", description="Database name")
    server_selection_timeout_ms: int = Field(default=5000, description="Server selection timeout")
    connect_timeout_ms: int = Field(default=10000, description="Connect timeout")
    socket_timeout_ms: int = Field(default=20000, description="Socket timeout")

    # Tokens
    access_token_secret: str = Field(default="supersecretkeychange", description="JWT signing key")
    access_token_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    access_token_expire_minutes: int = Field(default=60, description="Token lifetime in minutes")

    @property
    def mongodb_url(self) -> str:
        """Connection string: MONGODB_URI if set, else the Atlas SRV URI."""
        if self.mongodb_uri:
            return self.mongodb_uri
        user = quote_plus(self.db_user or "")
        password = quote_plus(self.db_pass or "")
        return (
            f"mongodb+srv://{user}:{password}@{self.db_host}/"
            "?retryWrites=true&w=majority"
        )


@lru_cache()
def get_settings() -> Settings:
    """Return the cached application settings."""
    return Settings()


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure application-wide logging.

    Args:
        level: Logging level used unless DEBUG is enabled

    Returns:
        The application logger
    """
    settings = get_settings()
    if settings.debug:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(asctime)s │ %(levelname)-8s │ %(name)-20s │ %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from the driver
    logging.getLogger("pymongo").setLevel(logging.WARNING)

    return logging.getLogger("bistro")
