"""Configuration settings for the wine recommendation engine"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings"""

    # API Settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Wine Recommendation Engine"
    VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Catalog Settings
    CATALOG_URL: str = "http://backend:3000/api/wines"
    CATALOG_LIMIT: int = 500
    CATALOG_TIMEOUT: float = 10.0

    # Redis Settings
    REDIS_HOST: str = "redis"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: Optional[str] = None
    STATE_NAMESPACE: str = "cduv"

    @property
    def REDIS_URL(self) -> str:
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    # Recommendation Settings
    INTERACTION_LOG_LIMIT: int = 100
    PREFERRED_TAGS_LIMIT: int = 10
    TRENDING_WINDOW_DAYS: int = 30
    EXPLORATION_JITTER: float = 0.5  # Upper bound of the random discovery term
    DEFAULT_PERSONALIZED_LIMIT: int = 10
    DEFAULT_SIMILAR_LIMIT: int = 4
    DEFAULT_LIST_LIMIT: int = 6
    MAX_SESSIONS: int = 1000  # Engines kept in memory per process

    # Default Preference Filters
    DEFAULT_MIN_QUALITY: float = 85
    DEFAULT_PRICE_MIN: float = 0
    DEFAULT_PRICE_MAX: float = 500

    # Rate Limit Settings
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    INTERACTION_RATE_LIMIT: str = "120/minute"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
