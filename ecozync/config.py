# ecozync/config.py
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="ECOZYNC_", extra="ignore")

    database_url: str = f"sqlite:///{BASE_DIR / 'data' / 'ecozync.db'}"
    data_dir: Path = BASE_DIR / "data"  # device-local cache for anonymous users
    api_base: str = "http://localhost:8000"
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"
    anonymous_history_limit: int = 5
    pending_calculation_ttl_minutes: int = 60


settings = Settings()
