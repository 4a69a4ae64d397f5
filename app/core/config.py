"""
Application configuration management using Pydantic Settings.
All settings can be overridden via environment variables.
"""

from typing import Any, List

from pydantic import AnyHttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "Quote Builder"
    VERSION: str = "0.1.0"
    API_V1_PREFIX: str = "/api/v1"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"  # Ignored when DEBUG is on

    # Database
    DATABASE_URL: str | None = None  # Optional: Use this if set (e.g., sqlite:///./data/dev.db)
    POSTGRES_SERVER: str | None = None
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str | None = None
    POSTGRES_PASSWORD: str | None = None
    POSTGRES_DB: str | None = None

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Get database URI - supports both SQLite and PostgreSQL."""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        if self.POSTGRES_SERVER and self.POSTGRES_USER and self.POSTGRES_PASSWORD and self.POSTGRES_DB:
            return (
                f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
                f"@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )

        # Default to SQLite for local dev if nothing is configured
        return "sqlite:///./data/quotes.db"

    @property
    def is_sqlite(self) -> bool:
        """Check if using SQLite database."""
        return self.SQLALCHEMY_DATABASE_URI.startswith("sqlite")

    # CORS
    BACKEND_CORS_ORIGINS: List[AnyHttpUrl] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Any) -> List[str] | str:
        """Parse CORS origins from string or list."""
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # Uploads
    MAX_UPLOAD_SIZE_MB: int = 10

    # Spreadsheet ingestion limits
    INGEST_HEADER_SCAN_ROWS: int = 25  # Fallback header search when a BOM sheet has no group banners
    INGEST_GROUP_HEADER_LOOKAHEAD: int = 4  # Rows searched below a group banner for its header
    INGEST_COST_HEADER_SCAN_ROWS: int = 5
    INGEST_LONG_WORD_LENGTH: int = 15

    @field_validator(
        "INGEST_HEADER_SCAN_ROWS",
        "INGEST_GROUP_HEADER_LOOKAHEAD",
        "INGEST_COST_HEADER_SCAN_ROWS",
        "INGEST_LONG_WORD_LENGTH",
        mode="after",
    )
    @classmethod
    def validate_positive_limit(cls, v: int) -> int:
        """Scan limits must be at least one row/character."""
        if v < 1:
            raise ValueError(f"Ingestion limits must be >= 1 (got {v})")
        return v

    # Quote defaults
    DEFAULT_CURRENCY: str = "USD"
    DEFAULT_PAYMENT_TERMS: str = "Current +30"


settings = Settings()  # type: ignore
