# backend/config.py
from pathlib import Path
from typing import List

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"


class Settings(BaseSettings):
    """Process configuration, read once at startup."""

    model_config = SettingsConfigDict(env_file=str(env_path), extra="ignore")

    PORT: int = 4000
    ENVIRONMENT: str = Field(
        "development", validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV")
    )
    DATABASE_URL: str = "sqlite:///./logistics.db"

    # Token signing
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    FILE_LINK_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Comma separated list of allowed frontend origins
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    # Uploads
    MAX_FILE_SIZE: int = Field(10 * 1024 * 1024, gt=0)
    UPLOAD_DIR: str = "./uploads"

    # Base URL used for absolute links in exports
    PUBLIC_BASE_URL: str = "http://localhost:4000"

    # Admin account bootstrapped at startup
    ADMIN_EMAIL: str = "admin@logistics.com"
    ADMIN_PASSWORD: str = "admin123"
    ADMIN_NAME: str = "Admin"

    @field_validator("DATABASE_URL")
    @classmethod
    def _fix_postgres_scheme(cls, value: str) -> str:
        # SQLAlchemy only understands postgresql://
        if value.startswith("postgres://"):
            return value.replace("postgres://", "postgresql://", 1)
        return value

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"
