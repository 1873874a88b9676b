"""
Configuration settings for the Car Rental Service.

This module handles application configuration using Pydantic settings.
"""

from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = "Car Rental Service"
    debug: bool = False
    log_level: str = "INFO"
    port: int = 3000

    # Database Configuration
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "password"
    db_name: str = "car_rental_db"
    database_url: Optional[str] = None  # Overrides the db_* parts when set
    db_echo: bool = False
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_connect_timeout_seconds: float = 5.0

    # Upper bound for a single store operation issued by an endpoint
    request_timeout_seconds: float = 10.0

    @property
    def sqlalchemy_url(self) -> str:
        """Effective SQLAlchemy URL for the durable store."""
        if self.database_url:
            return self.database_url
        # URL.create quotes credentials containing '@', ':' or '/'
        return URL.create(
            "postgresql+asyncpg",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        ).render_as_string(hide_password=False)

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
