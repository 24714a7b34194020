import logging
import os
from enum import Enum
from typing import List, Optional

from pydantic_settings import BaseSettings
from starlette.config import Config

logger = logging.getLogger(__name__)

current_file_dir = os.path.dirname(os.path.realpath(__file__))
project_root = os.path.abspath(os.path.join(current_file_dir, "..", "..", "..", "..", ".."))

env_paths = [
    "/code/.env",
    os.path.join(project_root, ".env"),
    "/.env",
]

env_path = next((path for path in env_paths if os.path.isfile(path)), env_paths[0])
logger.info(f"Using environment file at: {env_path}")

config = Config(env_path)


class EnvironmentOption(str, Enum):
    """Environment options for the application."""

    PRODUCTION = "production"
    STAGING = "staging"
    DEVELOPMENT = "development"
    LOCAL = "local"


class EnvironmentSettings(BaseSettings):
    """Environment-related settings."""

    ENVIRONMENT: EnvironmentOption = config("ENVIRONMENT", default=EnvironmentOption.DEVELOPMENT, cast=EnvironmentOption)


class DatabaseSettings(BaseSettings):
    """Database-related settings."""

    POSTGRES_USER: str = config("POSTGRES_USER", default="postgres")
    POSTGRES_PASSWORD: str = config("POSTGRES_PASSWORD", default="postgres")
    POSTGRES_SERVER: str = config("POSTGRES_SERVER", default="localhost")
    POSTGRES_PORT: int = config("POSTGRES_PORT", default=5432, cast=int)
    POSTGRES_DB: str = config("POSTGRES_DB", default="compliance")
    POSTGRES_ASYNC_PREFIX: str = config("POSTGRES_ASYNC_PREFIX", default="postgresql+asyncpg://")
    CREATE_TABLES_ON_STARTUP: bool = config("CREATE_TABLES_ON_STARTUP", default=True, cast=bool)

    POSTGRES_POOL_SIZE: int = config("POSTGRES_POOL_SIZE", default=20, cast=int)
    POSTGRES_MAX_OVERFLOW: int = config("POSTGRES_MAX_OVERFLOW", default=0, cast=int)

    # Full URL override, mainly for SQLite in tests.
    DATABASE_URL_OVERRIDE: Optional[str] = config("DATABASE_URL_OVERRIDE", default=None)

    @property
    def DATABASE_URL(self) -> str:
        """Get the full database URL."""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return (
            f"{self.POSTGRES_ASYNC_PREFIX}{self.POSTGRES_USER}:"
            f"{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:"
            f"{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


class CORSSettings(BaseSettings):
    """CORS-related settings."""

    CORS_ENABLED: bool = config("CORS_ENABLED", default=True, cast=bool)
    CORS_ORIGINS: str = config("CORS_ORIGINS", default="*")
    CORS_ALLOW_CREDENTIALS: bool = config("CORS_ALLOW_CREDENTIALS", default=True, cast=bool)
    CORS_ALLOW_METHODS: str = config("CORS_ALLOW_METHODS", default="*")
    CORS_ALLOW_HEADERS: str = config("CORS_ALLOW_HEADERS", default="*")

    @property
    def CORS_ORIGINS_LIST(self) -> List[str]:
        """Get CORS origins as a list."""
        if not self.CORS_ORIGINS:
            return ["*"]
        return [x.strip() for x in self.CORS_ORIGINS.split(",") if x.strip()]


class CompressionSettings(BaseSettings):
    """Compression-related settings."""

    GZIP_ENABLED: bool = config("GZIP_ENABLED", default=True, cast=bool)
    GZIP_MINIMUM_SIZE: int = config("GZIP_MINIMUM_SIZE", default=1000, cast=int)


class APIDocSettings(BaseSettings):
    """API documentation settings."""

    ENABLE_DOCS_IN_PRODUCTION: bool = config("ENABLE_DOCS_IN_PRODUCTION", default=False, cast=bool)
    DOCS_URL: str = config("DOCS_URL", default="/docs")
    REDOC_URL: str = config("REDOC_URL", default="/redoc")
    OPENAPI_URL: str = config("OPENAPI_URL", default="/openapi.json")


class APISettings(BaseSettings):
    """API-related settings."""

    API_PREFIX: str = "/api"
    DEFAULT_USER_ID: str = config("DEFAULT_USER_ID", default="system")


class AppSettings(BaseSettings):
    """Application-related settings."""

    APP_NAME: str = "Compliance AI API"
    APP_DESCRIPTION: str = "Upload compliance documents and get a structured AI analysis of them"
    DEBUG: bool = config("DEBUG", default=False, cast=bool)
    VERSION: str = "0.1.0"


class StorageSettings(BaseSettings):
    """S3-compatible object storage settings (MinIO in development)."""

    S3_ENDPOINT_URL: Optional[str] = config("S3_ENDPOINT_URL", default="http://localhost:9000")
    S3_ACCESS_KEY_ID: str = config("S3_ACCESS_KEY_ID", default="minioadmin")
    S3_SECRET_ACCESS_KEY: str = config("S3_SECRET_ACCESS_KEY", default="minioadmin")
    S3_REGION: str = config("S3_REGION", default="us-east-1")
    S3_BUCKET_NAME: str = config("S3_BUCKET_NAME", default="documents")
    S3_URL_EXPIRATION: int = config("S3_URL_EXPIRATION", default=86400, cast=int)
    S3_CREATE_BUCKET_ON_STARTUP: bool = config("S3_CREATE_BUCKET_ON_STARTUP", default=True, cast=bool)


class AISettings(BaseSettings):
    """AI provider settings.

    The API keys here only seed the parameter table on first startup; at runtime
    keys and the active provider are read from the database.
    """

    AI_DEFAULT_PROVIDER: str = config("AI_DEFAULT_PROVIDER", default="claude")
    AI_REQUEST_TIMEOUT: float = config("AI_REQUEST_TIMEOUT", default=120.0, cast=float)
    AI_MAX_TOKENS: int = config("AI_MAX_TOKENS", default=4096, cast=int)
    AI_TEMPERATURE: float = config("AI_TEMPERATURE", default=0.7, cast=float)

    CLAUDE_API_KEY: str = config("CLAUDE_API_KEY", default="")
    CLAUDE_MODEL: str = config("CLAUDE_MODEL", default="claude-3-5-sonnet-latest")
    CLAUDE_API_URL: str = config("CLAUDE_API_URL", default="https://api.anthropic.com/v1/messages")
    CLAUDE_API_VERSION: str = config("CLAUDE_API_VERSION", default="2023-06-01")

    GEMINI_API_KEY: str = config("GEMINI_API_KEY", default="")
    GEMINI_MODEL: str = config("GEMINI_MODEL", default="gemini-1.5-pro-latest")
    GEMINI_API_URL: str = config(
        "GEMINI_API_URL", default="https://generativelanguage.googleapis.com/v1beta/models"
    )

    MISTRAL_API_KEY: str = config("MISTRAL_API_KEY", default="")
    MISTRAL_MODEL: str = config("MISTRAL_MODEL", default="mistral-large-latest")
    MISTRAL_API_URL: str = config("MISTRAL_API_URL", default="https://api.mistral.ai/v1/chat/completions")


class LoggingSettings(BaseSettings):
    """Centralized logging configuration settings."""

    LOG_LEVEL: str = config("LOG_LEVEL", default="INFO")

    LOG_CONSOLE_ENABLED: bool = config("LOG_CONSOLE_ENABLED", default=True, cast=bool)
    LOG_FILE_ENABLED: bool = config("LOG_FILE_ENABLED", default=False, cast=bool)
    LOG_FILE_PATH: str = config("LOG_FILE_PATH", default="logs/compliance_ai.log")
    LOG_FILE_MAX_SIZE: int = config("LOG_FILE_MAX_SIZE", default=10485760, cast=int)
    LOG_FILE_BACKUP_COUNT: int = config("LOG_FILE_BACKUP_COUNT", default=5, cast=int)

    LOG_CORRELATION_ID: bool = config("LOG_CORRELATION_ID", default=True, cast=bool)
    LOG_SQL_QUERIES: bool = config("LOG_SQL_QUERIES", default=False, cast=bool)

    LOG_DEVELOPMENT_VERBOSE: bool = config("LOG_DEVELOPMENT_VERBOSE", default=True, cast=bool)
    LOG_PRODUCTION_OPTIMIZE: bool = config("LOG_PRODUCTION_OPTIMIZE", default=True, cast=bool)

    @property
    def LOG_LEVEL_INT(self) -> int:
        """Convert string log level to integer."""
        level_map = {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
            "CRITICAL": logging.CRITICAL,
        }
        return level_map.get(self.LOG_LEVEL.upper(), logging.INFO)


class Settings(
    EnvironmentSettings,
    DatabaseSettings,
    CORSSettings,
    CompressionSettings,
    APIDocSettings,
    APISettings,
    AppSettings,
    StorageSettings,
    AISettings,
    LoggingSettings,
):
    """Main settings class that combines all setting categories."""

    pass


settings = Settings()


def get_settings() -> Settings:
    """Get application settings.

    Returns:
        The application settings.
    """
    return settings
