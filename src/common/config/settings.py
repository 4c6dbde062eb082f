# File: common/config/settings.py

from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Calculate base directory for consistent file paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent
ENV_PATH = PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    ENVIRONMENT: str = "development"

    BASE_DIR: Path = Field(default=PROJECT_ROOT, description="Base directory of the project")

    # Identity tokens
    ACCESS_SECRET: str = Field(..., description="Secret used to verify caller access tokens")
    ALGORITHM: str = Field("HS256", description="JWT signing algorithm")
    TOKEN_AUDIENCE: Optional[str] = Field(None, description="Expected 'aud' claim, skipped when empty")

    # MongoDB
    MONGO_URI: str = Field("mongodb://localhost:27017", description="MongoDB connection URI")
    MONGO_DB: str = Field("civic_reports", description="MongoDB database name")
    MONGO_TIMEOUT: int = Field(5000, description="MongoDB connection timeout in milliseconds")

    # Redis (live broadcast channel)
    REDIS_HOST: str = Field("localhost", description="Redis host")
    REDIS_PORT: int = Field(6379, description="Redis port")
    REDIS_DB: int = Field(0, description="Redis database number")
    REDIS_PASSWORD: str = Field("", description="Redis password")
    REDIS_SSL_CA_CERTS: str = Field("", description="Path to Redis SSL CA certificate")
    REDIS_SSL_CERT: str = Field("", description="Path to Redis SSL certificate")
    REDIS_SSL_KEY: str = Field("", description="Path to Redis SSL key")
    REDIS_USE_SSL: bool = Field(False, description="Use SSL for Redis connection")

    # Broadcast
    BROADCAST_CHANNEL_PREFIX: str = Field("civic", description="Prefix for Redis pub/sub channels")
    BROADCAST_TIMEOUT_SECONDS: float = Field(2.0, description="Upper bound for a single publish call")

    # Sentry
    SENTRY_DSN: Optional[str] = Field(None, description="Sentry DSN, disabled when empty")
    SENTRY_TRACES_SAMPLE_RATE: float = Field(0.0, description="Sentry performance sample rate")
    SENTRY_SEND_PII: bool = Field(False, description="Send personal data to Sentry")

    # HTTP
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["http://localhost:3000"], description="Allowed CORS origins")

    # Uploads
    UPLOAD_DIR: Path = Field(default=PROJECT_ROOT / "uploads", description="Directory for uploaded report images")
    MAX_UPLOAD_BYTES: int = Field(5 * 1024 * 1024, description="Maximum image size in bytes")

    # Intake rules
    DUPLICATE_WINDOW_HOURS: int = Field(24, description="Look-back window for duplicate reports")
    DUPLICATE_RADIUS_DEGREES: float = Field(0.001, description="Half-width of the duplicate bounding box in degrees")
    REPORTING_TIMEZONE: str = Field("UTC", description="Timezone whose midnight starts a reporting day")

    # Administrators flagged at startup
    ADMIN_EMAILS: List[str] = Field(default_factory=list, description="Emails granted admin rights on startup")

    # Logging
    LOG_DIR: Path = Field(default=PROJECT_ROOT / "logs", description="Directory for log files")
    LOG_LEVEL: str = Field("INFO", description="Minimum level written by the 'civic' logger")
    LOG_RETENTION_DAYS: int = Field(14, description="Rotated daily log files kept on disk")

    model_config = SettingsConfigDict(env_file=ENV_PATH, env_file_encoding="utf-8", case_sensitive=True)


# Singleton settings instance
settings = Settings()
