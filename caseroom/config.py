"""Application configuration using pydantic-settings pattern."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Case Room"
    app_version: str = "0.1.0"
    app_env: str = Field(default="development")
    log_level: str = Field(default="INFO")

    # Database (libSQL / SQLite file)
    database_url: str | None = Field(default=None)
    database_auth_token: str | None = Field(default=None)

    # Document storage
    blob_root: str = Field(default="blobs")
    blob_base_url: str = Field(default="/files")

    # Participant import
    import_batch_size: int = Field(
        default=50,
        ge=1,
        description="Rows inserted per store call during bulk import",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "CASEROOM_",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
