"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database (persisted key-value store)
    database_url: str = "sqlite:///./finhealth.db"

    # External Services
    report_api_base: str = "http://localhost:8000"
    report_insights_path: str = "/v1/reports/insights"
    widget_bridge_url: str = "http://localhost:8003/widget"

    # Service
    service_name: str = "finhealth-gateway"
    log_level: str = "INFO"
    default_language: str = "en"

    # Report cache
    cache_key_prefix: str = "report"

    # HTTP Client
    http_timeout_seconds: float = 10.0


settings = Settings()
