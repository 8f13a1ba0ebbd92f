from typing import List, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be configured via .env file or environment variables.
    """

    # =============================================================================
    # APPLICATION
    # =============================================================================
    PROJECT_NAME: str = "Student Records API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    API_V1_PREFIX: str = "/api/v1"

    # =============================================================================
    # SERVER
    # =============================================================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # =============================================================================
    # POSTGRESQL DATABASE - Individual components
    # =============================================================================
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "123456"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: str = "5432"
    POSTGRES_DB: str = "student_records"

    # Database URL - set directly or built from the components above
    DATABASE_URL: Optional[str] = None

    # =============================================================================
    # DATABASE POOL SETTINGS
    # =============================================================================
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600
    DB_ECHO_SQL: bool = False

    # =============================================================================
    # CACHE
    # =============================================================================
    CACHE_MAX_ENTRIES: int = 1024  # per region
    CACHE_TTL_SECONDS: int = 600

    # =============================================================================
    # CORS
    # =============================================================================
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # =============================================================================
    # LOGGING
    # =============================================================================
    LOG_LEVEL: str = "INFO"

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def build_database_url(cls, v: Optional[str], info) -> str:
        """
        Build DATABASE_URL from components if not provided.

        Priority:
        1. Use DATABASE_URL if explicitly set in .env
        2. Build from POSTGRES_* components
        """
        if isinstance(v, str) and v:
            return v

        user = info.data.get("POSTGRES_USER")
        password = info.data.get("POSTGRES_PASSWORD")
        host = info.data.get("POSTGRES_HOST")
        port = info.data.get("POSTGRES_PORT")
        db = info.data.get("POSTGRES_DB")

        return f"postgresql://{user}:{password}@{host}:{port}/{db}"

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            import json
            return json.loads(v)
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow"
    )


# Create global settings instance
settings = Settings()


def print_config():
    """Print current configuration (hide sensitive data)."""
    print("=" * 80)
    print("📋 CURRENT CONFIGURATION")
    print("=" * 80)
    print(f"Project Name: {settings.PROJECT_NAME}")
    print(f"Version: {settings.APP_VERSION}")
    print(f"Debug Mode: {settings.DEBUG}")
    print(f"API Prefix: {settings.API_V1_PREFIX}")
    print("-" * 80)
    print(f"Database URL: {settings.DATABASE_URL.replace(settings.POSTGRES_PASSWORD, '***')}")
    print(f"Pool Size: {settings.DB_POOL_SIZE}")
    print(f"Max Overflow: {settings.DB_MAX_OVERFLOW}")
    print(f"Echo SQL: {settings.DB_ECHO_SQL}")
    print("-" * 80)
    print(f"Cache Entries per Region: {settings.CACHE_MAX_ENTRIES}")
    print(f"Cache TTL (s): {settings.CACHE_TTL_SECONDS}")
    print("=" * 80)


if __name__ == "__main__":
    print_config()
