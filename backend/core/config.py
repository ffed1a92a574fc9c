"""
Configuration Management

Centralized configuration using Pydantic Settings.
All settings loaded from environment variables with sensible defaults.
"""
from typing import Optional, List, Literal
from pydantic_settings import BaseSettings
from pydantic import Field, ConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Ignore extra environment variables that aren't defined in the model
    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    environment: Literal["development", "production", "test"] = Field(
        "development", description="Runtime environment"
    )

    # ============================================================
    # Database Configuration
    # ============================================================
    database_url: str = Field(..., description="Database connection URL (PostgreSQL or SQLite)")
    database_pool_size: int = Field(5, description="Database connection pool size")
    database_max_overflow: int = Field(10, description="Max overflow connections")
    auto_create_tables: bool = Field(True, description="Create missing tables at startup")

    # ============================================================
    # API Configuration
    # ============================================================
    api_port: int = Field(4000, ge=1, le=65535, description="API server port")
    allowed_origins: str = Field(
        "http://localhost:3000,http://localhost:3001",
        description="Comma-separated CORS allowed origins"
    )
    rate_limit_per_minute: int = Field(120, ge=0, description="Requests per minute per IP (0 disables)")

    # ============================================================
    # Export / Statistics
    # ============================================================
    export_filename: str = Field("users.pb", description="Suggested filename for the protobuf export")
    export_max_records: int = Field(10000, ge=1, description="Maximum users included in one export")
    stats_default_days: int = Field(7, ge=1, description="Default window for users-per-day stats")
    stats_max_days: int = Field(365, ge=1, description="Largest allowed users-per-day window")

    # ============================================================
    # Logging Configuration
    # ============================================================
    log_level: str = Field("INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string"
    )

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse allowed origins into list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings (singleton).

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings():
    """Reload settings from environment (useful for testing)."""
    global _settings
    _settings = Settings()
    return _settings
