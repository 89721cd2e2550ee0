from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PATH = Path(__file__).resolve().parent.parent / ".env.local"


class Settings(BaseSettings):
    # Environment settings
    environment: str = "development"
    debug: bool = False

    LOG_LEVEL: str = "INFO"

    # Durable local storage (SQLite locally, any SQLAlchemy URL in production)
    LOCAL_STORAGE_URL: str = "sqlite:///./local_storage.db"
    SESSION_STORAGE_KEY: str = "user"

    # Domain store
    SYSTEM_LOG_CAPACITY: int = 100
    SEED_MOCK_DATA: bool = True

    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
