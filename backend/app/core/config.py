"""
Application configuration and environment settings.
"""
from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Union


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Timesheet"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"  # "production" turns on secure cookies
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./timesheet.db"
    DB_ECHO: bool = False

    # Session cookie signing
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    SESSION_COOKIE_NAME: str = "timesheet_session"
    SESSION_TTL_HOURS: int = 24

    # Password hashing
    BCRYPT_ROUNDS: int = 12

    # Rate limiting
    AUTH_RATE_LIMIT: int = 5  # register / login / change-password
    API_RATE_LIMIT: int = 100  # timesheet read / write
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60

    # CORS
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # Static front-end
    STATIC_DIR: str = "public"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
