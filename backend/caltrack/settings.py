from functools import lru_cache
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    ENV: str = "local"
    DB_PATH: Path = Path("data/calisthenics.db")
    EXPORT_DIR: Path = Path("data/exports")
    SQL_ECHO: bool = False
    LOG_LEVEL: str = "INFO"

    # Populate the built-in exercise catalog on startup
    SEED_BUILTINS: bool = True
    API_VERSION: str = "dev"
    # Comma-separated origins allowed to call the API (the UI shell)
    ALLOW_ORIGINS: str = "*"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
