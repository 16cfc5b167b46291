from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./plumelet.db"
    DB_CREATE_TABLES: bool = True

    APP_DEBUG: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)
    LOG_SQL: bool = False   # Enable SQLAlchemy query logging

    # Listing
    DEFAULT_PAGE_SIZE: int = 20
    SEARCH_PAGE_SIZE: int = 5

    # bcrypt work factor
    PASSWORD_HASH_ROUNDS: int = 12

    @property
    def is_production(self) -> bool:
        return not self.APP_DEBUG

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
