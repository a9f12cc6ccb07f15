"""Application configuration from environment variables."""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.enums import ReportFormat


class Settings(BaseSettings):
    """Settings loaded from environment (and .env file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Body Metrics Report API"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # API
    api_v1_prefix: str = "/api/v1"

    # CORS: comma-separated list of allowed origins in production
    cors_origins: str = ""

    # Static frontend served at "/" when the directory exists
    static_dir: str = "public"

    # Report persistence
    data_dir: str = "data"
    report_format: ReportFormat = ReportFormat.JSON

    # Deployment variant: collect (and require) an email address on submit
    require_email: bool = False

    # Outbound mail (SMTP)
    mail_enabled: bool = False
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None  # Set in .env - never commit
    smtp_starttls: bool = True
    smtp_timeout_seconds: float = Field(default=10.0, gt=0)
    mail_sender: str = "reports@localhost"
    mail_subject: str = "Your Body Measurement Report"

    # Rate limiting on POST /submit (per client host)
    rate_limit_enabled: bool = True
    rate_limit_max_requests: int = Field(default=5, ge=1)
    rate_limit_window_seconds: float = Field(default=60.0, gt=0)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
