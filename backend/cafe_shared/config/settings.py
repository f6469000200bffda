"""
Application settings loaded from environment variables.
Uses pydantic-settings for type-safe configuration.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with defaults for development."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str = "sqlite:///./maid_cafe.db"

    # Shared-secret API keys. Empty means "not configured" and the
    # guarded endpoints answer 500 instead of letting anyone through.
    admin_api_password: str = ""
    maid_api_password: str = ""
    api_key_header: str = "x-api-key"

    # Identity generation for maid and user records
    id_scheme: Literal["uuid", "integer"] = "uuid"

    # Maid list behaviour when ?is_active is omitted (None = no filter)
    maid_list_default_active: Optional[bool] = None

    # Blob storage
    storage_backend: Literal["memory", "filesystem", "http"] = "filesystem"
    storage_root: str = "./storage"
    storage_endpoint: str = ""
    storage_token: str = ""
    storage_timeout: float = 10.0
    public_base_url: str = ""
    max_upload_bytes: int = 10 * 1024 * 1024

    # CORS - comma-separated list, empty allows any origin
    allowed_origins: str = ""

    # Server
    rest_api_port: int = 8000

    # Environment
    environment: str = "development"
    debug: bool = True

    @property
    def cors_origins(self) -> list[str]:
        origins = [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        return origins or ["*"]

    def validate_production_secrets(self) -> list[str]:
        """
        Validate that secrets and storage are properly configured for production.
        Returns a list of validation errors. Empty list means all checks pass.
        """
        errors = []

        weak_secrets = {"", "secret", "password", "changeme", "default"}

        if self.environment == "production":
            if self.admin_api_password in weak_secrets or len(self.admin_api_password) < 16:
                errors.append(
                    "ADMIN_API_PASSWORD must be at least 16 characters and not a default value in production"
                )

            if self.maid_api_password in weak_secrets or len(self.maid_api_password) < 16:
                errors.append(
                    "MAID_API_PASSWORD must be at least 16 characters and not a default value in production"
                )

            if self.admin_api_password and self.admin_api_password == self.maid_api_password:
                errors.append("ADMIN_API_PASSWORD and MAID_API_PASSWORD must differ")

            if self.debug:
                errors.append("DEBUG must be False in production")

            if self.storage_backend == "memory":
                errors.append("STORAGE_BACKEND=memory loses every image on restart")

        if self.storage_backend == "http" and not self.storage_endpoint:
            errors.append("STORAGE_ENDPOINT must be set when STORAGE_BACKEND=http")

        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience exports
settings = get_settings()

DATABASE_URL = settings.database_url
