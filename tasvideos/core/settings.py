from __future__ import annotations

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application-level settings for the FastAPI service.

    This is separate from tasvideos.db.config.Settings, which focuses on the database layer.
    """

    # FastAPI metadata
    APP_NAME: str = Field(default="TASVideos API")
    APP_DESCRIPTION: str = Field(
        default=(
            "Public read API for the TASVideos publication catalog. "
            "Publications can be filtered, sorted and paged."
        )
    )
    APP_VERSION: str = Field(default="1.0.0")

    # CORS
    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Comma-separated list or JSON array of allowed origins. Default: *",
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(default=False)
    CORS_ALLOW_METHODS: List[str] = Field(default_factory=lambda: ["GET"])
    CORS_ALLOW_HEADERS: List[str] = Field(default_factory=lambda: ["*"])

    # Startup behavior
    CREATE_SCHEMA_ON_STARTUP: bool = Field(
        default=False,
        description="If true, create missing tables from the ORM metadata at app startup.",
    )
    AUTO_SEED: bool = Field(
        default=False,
        description="If true, insert reference data and default roles after schema creation.",
    )

    # API behavior
    API_FIELD_SELECTION_ENABLED: bool = Field(
        default=False,
        description="Honor the 'fields' query parameter on list endpoints.",
    )
    PERMISSION_CACHE_SECONDS: int = Field(
        default=0,
        ge=0,
        description="How long computed user permissions are cached in memory. 0 disables caching.",
    )

    LOG_LEVEL: str = Field(default="INFO")

    # Environment label
    ENVIRONMENT: Optional[str] = Field(
        default=None, description="Environment label (dev/test/prod)"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        """
        Accept both JSON array format and comma-separated formats for CORS origins.
        """
        if v is None:
            return ["*"]
        if isinstance(v, str):
            parts = [p.strip() for p in v.split(",") if p.strip()]
            return parts or ["*"]
        if isinstance(v, list):
            return v or ["*"]
        return ["*"]


# PUBLIC_INTERFACE
def get_app_settings() -> AppSettings:
    """
    Return a new AppSettings instance populated from environment variables.
    """
    return AppSettings()
