"""Application settings and configuration."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def get_default_data_dir() -> Path:
    """Return the default data directory."""
    return Path.cwd() / "data"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "User Profile Service"
    app_version: str = "0.1.0"
    environment: str = "development"

    # Data directory (SQLite file lives here unless DATABASE_URL is set)
    data_dir: Optional[Path] = None
    database_url: Optional[str] = None

    # Storage operations fail after this many seconds
    db_timeout_seconds: float = 5.0

    log_level: str = "INFO"

    # Event sink (Dapr pub/sub over HTTP)
    events_enabled: bool = True
    dapr_host: str = "localhost"
    dapr_http_port: int = 3500
    pubsub_name: str = "pubsub"
    event_timeout_seconds: float = 2.0

    # Card expiry years accepted beyond the current year
    expiry_horizon_years: int = 20

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        """Get database URL, deriving from data_dir if not set."""
        if self.database_url:
            return self.database_url
        db_path = self.get_data_dir() / "users.db"
        return f"sqlite:///{db_path}"

    def get_pubsub_url(self, topic: str) -> str:
        """Dapr publish endpoint for a topic."""
        return f"http://{self.dapr_host}:{self.dapr_http_port}/v1.0/publish/{self.pubsub_name}/{topic}"


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
