"""Application settings using Pydantic Settings for configuration management."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Application
    app_name: str = "mailvault"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # AWS
    aws_region: str = "us-east-1"
    aws_endpoint_url: str | None = None  # LocalStack / MinIO override

    # Queue
    sqs_queue_url: str = ""

    # Object store
    s3_bucket_name: str = ""
    s3_force_path_style: bool = False

    # Secret store
    ssm_parameter_name: str = "/mailvault/api-token"
    admin_refresh_secret: SecretStr | None = None

    # Poller
    poll_interval_seconds: float = 30.0
    poll_max_messages: int = 10
    poll_wait_time_seconds: int = 20


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
