import logging
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

# Set up logging for this module
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Database
    MONGO_URI: str = "mongodb://localhost:27017/coaching_institute"
    MONGO_DB_NAME: Optional[str] = None

    # JWT Authentication
    JWT_SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Blog listing
    BLOG_DEFAULT_PAGE_SIZE: int = 10
    BLOG_MAX_PAGE_SIZE: int = 100

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",  # Next.js frontend
        "http://localhost:5173",  # Vite dev server
    ]

    LOG_LEVEL: str = "INFO"


# Log settings loading (redact sensitive values)
settings = Settings()
logging.getLogger().setLevel(settings.LOG_LEVEL.upper())
logger.info("[CONFIG] Settings loaded successfully")
logger.info(f"[CONFIG] Mongo URI: {settings.MONGO_URI[:10]}**** (redacted)")
logger.info(f"[CONFIG] JWT Secret: {settings.JWT_SECRET_KEY[:4]}**** (redacted)")
logger.info(f"[CONFIG] JWT Algorithm: {settings.JWT_ALGORITHM}")
logger.info(
    f"[CONFIG] Blog page size: default={settings.BLOG_DEFAULT_PAGE_SIZE} "
    f"max={settings.BLOG_MAX_PAGE_SIZE}"
)
