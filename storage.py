from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List

from core.state_store import StateStore
from core.room_manager import DEFAULT_USERNAME, MAX_PUSH_SUBSCRIPTIONS
from services.log_service import DEFAULT_TIMESTAMP_FORMAT, MAX_LOG_ENTRIES
from services.rate_limit_service import RATE_LIMIT_MS


class Settings(BaseSettings):
    data_dir: str = "./data"
    rate_limit_ms: int = RATE_LIMIT_MS
    max_log_entries: int = MAX_LOG_ENTRIES
    max_push_subscriptions: int = MAX_PUSH_SUBSCRIPTIONS
    default_username: str = DEFAULT_USERNAME
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT
    vapid_public_key: str = "BDefault_Public_Key_For_Development"
    cors_origins: List[str] = ["*"]
    host: str = "0.0.0.0"
    port: int = 3000

    model_config = SettingsConfigDict(env_file=".env", env_prefix="COUNTER_")


@lru_cache()
def get_settings():
    return Settings()


def get_store():
    """
    FastAPI dependency: provide the State Store

    Every request gets a store rooted at the configured data directory.
    Tests swap it via app.dependency_overrides.
    """
    return StateStore(get_settings().data_dir)
