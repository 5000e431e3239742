from typing import List

from pydantic.v1 import BaseSettings


class Settings(BaseSettings):

    DATABASE_URL: str = "sqlite+aiosqlite:///./innermatch.db"
    JWT_SECRET: str = "change-me"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440

    # Daily swipe allotment for users without the unlimited tier
    DAILY_LIKE_LIMIT: int = 10
    DAILY_SUPERLIKE_LIMIT: int = 1
    QUOTA_TIMEZONE: str = "UTC"

    CORS_ORIGINS: List[str] = ["*"]
    DEBUG: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Global settings object imported everywhere
settings = Settings()
