"""Application configuration using pydantic-settings."""

import json
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Row store backend: "memory" (local/dev), "sql" (SQLAlchemy) or "appwrite" (TablesDB REST)
    row_store_backend: Literal["memory", "sql", "appwrite"] = "memory"

    # SQL backend
    database_url: str = "sqlite+aiosqlite:///./truckbill.db"

    # Appwrite backend
    appwrite_endpoint: str = ""  # e.g. "https://cloud.appwrite.io/v1"
    appwrite_project_id: str = ""
    appwrite_database_id: str = ""
    appwrite_api_key: str = ""
    appwrite_timeout: float = 15.0

    # Table and row identifiers shared by every backend
    counter_table_id: str = "counters"
    counter_row_id: str = "invoice_counter"
    entries_table_id: str = "entries"

    # History
    history_limit: int = 500

    # Application
    debug: bool = False
    log_level: str = "info"
    log_json: bool = False  # One JSON object per line instead of coloured console output

    # CORS origins - stored as string to avoid pydantic-settings JSON parsing
    # Supports comma-separated values or JSON array format
    backend_cors_origins_str: str = Field(
        default="http://localhost:5173,capacitor://localhost",
        validation_alias="BACKEND_CORS_ORIGINS",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def backend_cors_origins(self) -> list[str]:
        """Parse CORS origins from string (comma-separated or JSON array)."""
        v = self.backend_cors_origins_str
        if not v:
            return []
        if v.startswith("["):
            result: list[str] = json.loads(v)
            return result
        return [origin.strip() for origin in v.split(",") if origin.strip()]


settings = Settings()
