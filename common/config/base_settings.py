"""
Base settings class for environment configuration.

Uses Pydantic Settings for automatic environment variable loading.
Extend this class for application-specific settings.

Example:
    from common.config import BaseAppSettings

    class Settings(BaseAppSettings):
        # App-specific settings
        AWS_S3_BUCKET: str = ""

    settings = Settings()
    settings.validate_required()
    print(settings.MONGODB_DATABASE)
"""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseAppSettings(BaseSettings):
    """
    Base settings class with common configuration options.

    Automatically loads values from environment variables.
    Extend this class for application-specific settings.
    """

    # ==========================================================================
    # Database Settings
    # ==========================================================================
    MONGODB_URI: Optional[str] = None
    MONGODB_DATABASE: str = "capsule"

    # ==========================================================================
    # Authentication Settings
    # ==========================================================================
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    SESSION_EXPIRE_DAYS: int = 7

    # ==========================================================================
    # Server Settings
    # ==========================================================================
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    ENVIRONMENT: str = "development"  # development, staging, production
    LOG_LEVEL: str = "INFO"

    # CORS Settings
    CORS_ORIGINS: str = "*"  # Comma-separated origins or "*"
    CORS_ALLOW_CREDENTIALS: bool = True

    # ==========================================================================
    # Pydantic Settings Configuration
    # ==========================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",  # Allow app-specific settings
        case_sensitive=True,
    )

    def get_cors_origins(self) -> list:
        """Parse CORS_ORIGINS into a list."""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT.lower() == "development"

    def missing_required(self) -> List[str]:
        """Names of required settings that are unset or empty."""
        missing = []
        if not self.MONGODB_URI:
            missing.append("MONGODB_URI")
        if not self.JWT_SECRET:
            missing.append("JWT_SECRET")
        return missing

    def validate_required(self) -> None:
        """
        Validate that required settings are configured.

        Raises:
            ValueError: If required settings are missing
        """
        missing = self.missing_required()
        if missing:
            raise ValueError(
                "Configuration errors:\n- "
                + "\n- ".join(f"{name} is required" for name in missing)
            )
