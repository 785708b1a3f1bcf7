"""Application configuration settings"""

import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_JWT_SECRET = "default-secret-key"


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


class Config:
    TESTING = _flag("TESTING", "false")
    DEBUG = _flag("DEBUG", "false")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_PATH = os.getenv("LOG_PATH", "")
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s",
    )

    # Auth - tokens are issued by the identity provider with this secret
    JWT_SECRET = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    AUTH_COOKIE_NAME = os.getenv("AUTH_COOKIE_NAME", "token")

    # Conversation store: "prisma" (PostgreSQL) or "memory"
    STORE_BACKEND = os.getenv("STORE_BACKEND", "prisma")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    STORE_TIMEOUT_SECONDS: float = float(os.getenv("STORE_TIMEOUT_SECONDS", "5"))
    STORE_RETRY_ATTEMPTS: int = int(os.getenv("STORE_RETRY_ATTEMPTS", "3"))
    STORE_RETRY_BASE_DELAY: float = float(os.getenv("STORE_RETRY_BASE_DELAY", "0.1"))
    STORE_RETRY_MAX_DELAY: float = float(os.getenv("STORE_RETRY_MAX_DELAY", "2.0"))

    # Live connections
    OUTBOUND_QUEUE_SIZE: int = int(os.getenv("OUTBOUND_QUEUE_SIZE", "256"))
    REGISTRY_SHARDS: int = int(os.getenv("REGISTRY_SHARDS", "64"))

    # Redis settings (history cache)
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    REDIS_CACHE_ENABLED: bool = _flag("REDIS_CACHE_ENABLED", "false")
    REDIS_CACHE_TTL: int = int(os.getenv("REDIS_CACHE_TTL", "3600"))

    # Media uploads
    MEDIA_BASE = os.getenv("MEDIA_BASE", "uploads/messages")
    MAX_UPLOAD_MB = float(os.getenv("MAX_UPLOAD_MB", "25"))
    MEDIA_MIME_PREFIXES = os.getenv("MEDIA_MIME_PREFIXES", "image/,video/").split(",")

    # Identity directory
    USER_DIRECTORY_FILE = os.getenv("USER_DIRECTORY_FILE", "")
    USER_SEARCH_LIMIT: int = int(os.getenv("USER_SEARCH_LIMIT", "20"))

    # HTTP
    CORS_ORIGINS = os.getenv(
        "CORS_ORIGINS", "http://localhost:5173,http://localhost:3000"
    ).split(",")

    @classmethod
    def validate(cls) -> None:
        """Refuse settings that are only acceptable outside production."""


class DevelopmentConfig(Config):
    """Development configuration"""

    DEBUG = True


class TestingConfig(Config):
    """Testing configuration"""

    TESTING = True
    STORE_BACKEND = "memory"
    REDIS_CACHE_ENABLED = False
    STORE_RETRY_BASE_DELAY = 0.0


class ProductionConfig(Config):
    """Production configuration"""

    @classmethod
    def validate(cls) -> None:
        if not cls.JWT_SECRET or cls.JWT_SECRET == DEFAULT_JWT_SECRET:
            raise RuntimeError("JWT_SECRET must be set in production")


# Configuration dictionary
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env=None):
    """Get configuration based on environment"""
    if env is None:
        env = os.getenv("APP_ENV", "development")
    return config.get(env, config["default"])
