from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Pydantic Settings will automatically look for these as environment variables
    # or in a .env file

    # Database Settings
    POSTGRES_USER: str = "user"
    POSTGRES_PASSWORD: str = "password"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "career_canvas"
    # Full SQLAlchemy URL; takes precedence over the POSTGRES_* parts when set
    DATABASE_URL: Optional[str] = None

    # SQLAlchemy Connection Pooling Settings
    # Refer to https://docs.sqlalchemy.org/en/20/core/engines.html#connection-pooling-options
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30 # seconds
    DB_POOL_RECYCLE: int = 1800 # seconds (30 minutes) - recycle connections older than this

    # Session token settings
    JWT_SECRET: str = "career-canvas-secret-key"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7

    # OAuth identity providers
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    MICROSOFT_CLIENT_ID: str = ""
    MICROSOFT_CLIENT_SECRET: str = ""
    OAUTH_HTTP_TIMEOUT: float = 10.0 # seconds

    # Directory and story listing
    MENTOR_LIST_LIMIT: int = 100 # Hard cap, no offset for mentors
    STORY_PAGE_LIMIT: int = 20
    STORY_MAX_PAGE_LIMIT: int = 100

    # Enables POST /api/mentors/seed, which wipes the mentors table
    ALLOW_SEEDING: bool = False

    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore" # Ignore extra env variables not defined here
    )

@lru_cache() # Cache settings to avoid re-reading on every call
def get_settings():
    """Returns a cached instance of the Settings."""
    return Settings()
